from __future__ import annotations
import logging
import math
import re
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Iterator, List, Optional
from urllib.parse import urlsplit

from fastapi import BackgroundTasks, Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from schemas import (
    ExtractSkillsResponse,
    HealthResponse,
    Profile,
    RecommendResponse,
    Role,
    SuggestSkillsIn,
)
from store import DocumentStore
from matching.errors import ConfigurationError, SkillExtractionError, classify_error
from matching.llm_groq import GroqClient, client_from_env
from matching.profile import LANGUAGES, normalize_profile, validate_and_clean_profile, validate_request
from matching.ranker import load_roles, suggest_skills_to_learn
from matching.recommender import compute_demand_score, extract_skills, generate_recommendations
from matching.skills import canonicalize_skill_name

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("career_api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store and load the role catalog once per process."""
    logger.info(f"Database: {config.DATABASE_URL}")
    app.state.store = DocumentStore(config.DATABASE_URL)
    app.state.roles = load_roles(config.ROLES_PATH)
    yield
    app.state.store.engine.dispose()
    logger.info("Application shutting down.")


app = FastAPI(title=config.SERVICE_NAME, version=config.SERVICE_VERSION, lifespan=lifespan)


# -------------------------------------------------------------------
# CORS: hosting-platform origins and local dev only
# -------------------------------------------------------------------
def origin_allowed(origin: str) -> bool:
    try:
        parts = urlsplit(origin)
        host, hostname = parts.netloc, parts.hostname or ""
    except ValueError:
        return False
    if host in config.CORS_DEV_HOSTS:
        return True
    return bool(hostname) and hostname.endswith(config.CORS_ALLOWED_SUFFIXES)


def _origin_regex() -> str:
    hosts = "|".join(re.escape(h) for h in config.CORS_DEV_HOSTS) or "(?!)"
    suffixes = "|".join(re.escape(s) for s in config.CORS_ALLOWED_SUFFIXES) or "(?!)"
    return rf"https?://(?:(?:{hosts})|[^/:]+(?:{suffixes})(?::\d+)?)"


app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=_origin_regex(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def reject_foreign_origins(request: Request, call_next):
    origin = request.headers.get("origin")
    if origin and not origin_allowed(origin):
        logger.warning(f"Rejected request from origin {origin}")
        return JSONResponse(
            status_code=403,
            content={"error": "CORS error", "message": "Request not allowed from this origin"},
        )
    return await call_next(request)


# -------------------------------------------------------------------
# Error handlers
# -------------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def on_request_validation_error(request: Request, exc: RequestValidationError):
    details = [f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in exc.errors()]
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


@app.exception_handler(StarletteHTTPException)
async def on_http_error(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "Not found", "message": "Endpoint not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def on_unhandled_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Internal server error", "message": "Something went wrong"})


# -------------------------------------------------------------------
# Dependencies
# -------------------------------------------------------------------
def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_roles(request: Request) -> List[Role]:
    return request.app.state.roles


def get_llm_client() -> Iterator[Optional[GroqClient]]:
    """One client per request; its HTTP session is closed once the request is done."""
    try:
        client = client_from_env()
    except ConfigurationError:
        logger.error("Groq API key not configured")
        yield None
        return
    try:
        yield client
    finally:
        client.close()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _ai_not_configured() -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": "AI service not configured", "message": "Please contact support"},
    )


def _error_response(exc: Exception) -> JSONResponse:
    status, message = classify_error(exc)
    return JSONResponse(status_code=status, content={"error": message, "message": "Please try again later"})


def save_results(store: DocumentStore, uid: str, profile: Profile, recommendations: list) -> None:
    """Best-effort persistence; runs after the response has been sent.

    The profile and history writes fail independently.
    """
    try:
        store.save_profile(uid, profile.model_dump(by_alias=True))
    except Exception as e:
        logger.error(f"Error saving profile for user {uid}: {e}")
    try:
        store.add_recommendations(uid, recommendations)
        logger.info(f"Saved {len(recommendations)} recommendations for user {uid}")
    except Exception as e:
        logger.error(f"Error saving recommendations for user {uid}: {e}")


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------
@app.get("/api/health", response_model=HealthResponse)
def health():
    return HealthResponse(
        status="healthy",
        timestamp=_now_iso(),
        service=config.SERVICE_NAME,
        version=config.SERVICE_VERSION,
    )


@app.post("/api/recommend", response_model=RecommendResponse)
def recommend(
    background_tasks: BackgroundTasks,
    payload: Any = Body(None),
    store: DocumentStore = Depends(get_store),
    roles: List[Role] = Depends(get_roles),
    client: Optional[GroqClient] = Depends(get_llm_client),
):
    """Rank the catalog for a profile and explain/plan the best matches."""
    errors = validate_request(payload)
    if errors:
        logger.warning(f"Invalid request: {errors}")
        return JSONResponse(status_code=400, content={"error": "Invalid request", "details": errors})

    uid = payload["uid"]
    logger.info(f"Received recommendation request for user {uid}")
    profile = normalize_profile(payload["profile"])

    if client is None:
        return _ai_not_configured()

    try:
        recommendations = generate_recommendations(
            profile, roles, client, trend_lookup=store.get_trend, top_k=config.TOP_K_ROLES
        )
    except Exception as e:
        logger.error(f"Error in /api/recommend: {e}")
        return _error_response(e)

    if not recommendations:
        logger.error(f"Failed to generate recommendations for user {uid}")
        return JSONResponse(
            status_code=500,
            content={"error": "Failed to generate recommendations", "message": "Please try again later"},
        )

    background_tasks.add_task(save_results, store, uid, profile, recommendations)
    logger.info(f"Generated {len(recommendations)} recommendations for user {uid}")
    return RecommendResponse(recommendations=recommendations, generatedAt=_now_iso())


@app.post("/api/extract_skills", response_model=ExtractSkillsResponse)
def extract_skills_route(
    payload: Any = Body(None),
    client: Optional[GroqClient] = Depends(get_llm_client),
):
    body = payload if isinstance(payload, dict) else {}
    text = body.get("text")
    if not isinstance(text, str) or len(text.strip()) < 10:
        return JSONResponse(status_code=400, content={"error": "Invalid text input"})
    language = body.get("language") if body.get("language") in LANGUAGES else "en"

    if client is None:
        return _ai_not_configured()

    try:
        return extract_skills(text, language, client)
    except SkillExtractionError:
        return JSONResponse(status_code=500, content={"error": "Failed to parse AI response"})
    except Exception as e:
        logger.error(f"extract_skills error: {e}")
        return _error_response(e)


@app.get("/api/trends")
def trends(skill: Optional[str] = None, role: Optional[str] = None, store: DocumentStore = Depends(get_store)):
    """Precomputed demand snapshot for exactly one skill or role."""
    if bool(skill) == bool(role):
        return JSONResponse(status_code=400, content={"error": "Exactly one of skill or role query is required"})
    doc_id = f"skill_{canonicalize_skill_name(skill)}" if skill else f"role_{role}"
    data = store.get_trend(doc_id)
    if data is None:
        return JSONResponse(status_code=404, content={"error": "Not found"})
    # JSON has no Infinity or NaN
    fields = {k: None if isinstance(v, float) and not math.isfinite(v) else v for k, v in data.items()}
    return {**fields, "demandScore": compute_demand_score(data)}


@app.post("/api/suggest_skills")
def suggest_skills(body: SuggestSkillsIn, roles: List[Role] = Depends(get_roles)):
    return {"skills": suggest_skills_to_learn(body.skills, roles, limit=body.limit)}


@app.put("/api/profile/{uid}")
def save_profile(uid: str, profile: dict = Body(...), store: DocumentStore = Depends(get_store)):
    cleaned = validate_and_clean_profile(profile)
    store.save_profile(uid, cleaned)
    return {"success": True, "profile": cleaned}


@app.get("/api/profile/{uid}")
def read_profile(uid: str, store: DocumentStore = Depends(get_store)):
    profile = store.get_profile(uid)
    if profile is None:
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return {"uid": uid, "profile": profile}


@app.get("/api/recommendations/{uid}/latest")
def latest_recommendations(uid: str, store: DocumentStore = Depends(get_store)):
    run = store.latest_recommendations(uid)
    if run is None:
        return JSONResponse(status_code=404, content={"error": "Not found"})
    return run


@app.delete("/api/users/{uid}")
def delete_user_data(uid: str, store: DocumentStore = Depends(get_store)):
    return {"success": True, "deleted": store.delete_user(uid)}
