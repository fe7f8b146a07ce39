from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, TypeDecorator
from sqlalchemy.orm import declarative_base
import json

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


class JSONType(TypeDecorator):
    """Custom JSON type that works reliably with SQLite."""
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        """Convert Python object to JSON string for storage."""
        if value is None:
            return None
        return json.dumps(value, ensure_ascii=False)

    def process_result_value(self, value, dialect):
        """Convert JSON string back to Python object."""
        if value is None:
            return None
        return json.loads(value)


class UserProfile(Base):
    """One profile document per user."""
    __tablename__ = "user_profiles"
    uid = Column(String, primary_key=True)
    profile = Column(JSONType, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)


class RecommendationRun(Base):
    """Append-only recommendation history; the newest row is the "latest" run."""
    __tablename__ = "recommendation_runs"
    id = Column(Integer, primary_key=True)
    uid = Column(String, index=True, nullable=False)
    recommendations = Column(JSONType, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, index=True)


class TrendSnapshot(Base):
    """Precomputed market trend, keyed skill_<canonical> or role_<roleId>."""
    __tablename__ = "trend_snapshots"
    doc_id = Column(String, primary_key=True)
    data = Column(JSONType, nullable=False)
