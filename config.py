"""Configuration for the career recommender service."""
import os
from dotenv import load_dotenv

load_dotenv()

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

# Groq (OpenAI-compatible chat completions)
GROQ_API_URL = os.getenv("GROQ_API_URL", "https://api.groq.com/openai/v1/chat/completions")
MODEL_NAME = os.getenv("MODEL_NAME", "llama-3.3-70b-versatile")
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
LLM_MAX_TOKENS = int(os.getenv("LLM_MAX_TOKENS", "2048"))

# Retry policy for every outbound AI call
LLM_MAX_RETRIES = 3
LLM_BACKOFF_BASE_SECONDS = 1.0
LLM_BACKOFF_CAP_SECONDS = 8.0
LLM_TIMEOUT_SECONDS = 20

# Ranking
TOP_K_ROLES = 3
MAX_PROFILE_SKILLS = 20
MAX_PROFILE_INTERESTS = 10
MAX_SKILL_LENGTH = 50

# Storage
IS_HF = os.environ.get("SPACE_ID") is not None
BASE_DIR = os.getenv("BASE_DIR", "/tmp/data" if IS_HF else "data")
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{os.path.join(BASE_DIR, 'app.db')}")

# Static data shipped with the package
ROLES_PATH = os.getenv("ROLES_PATH", os.path.join(PACKAGE_DIR, "matching", "data", "roles.json"))
SKILL_ALIASES_PATH = os.getenv(
    "SKILL_ALIASES_PATH", os.path.join(PACKAGE_DIR, "matching", "data", "skill_aliases.json")
)

# CORS: hosting-platform suffixes and local dev hosts (host:port)
CORS_ALLOWED_SUFFIXES = tuple(
    s.strip() for s in os.getenv("CORS_ALLOWED_SUFFIXES", ".web.app,.firebaseapp.com").split(",") if s.strip()
)
CORS_DEV_HOSTS = tuple(
    h.strip() for h in os.getenv("CORS_DEV_HOSTS", "localhost:5000,127.0.0.1:5000").split(",") if h.strip()
)

SERVICE_NAME = "Career Advisor API"
SERVICE_VERSION = "1.0.0"


def get_api_key():
    """Read the Groq key at call time so a key added to the env is picked up."""
    return os.getenv("GROQ_API_KEY") or None
