"""Document-style persistence for profiles, recommendation history and trends."""
import logging
import os
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from models import Base, RecommendationRun, TrendSnapshot, UserProfile

logger = logging.getLogger(__name__)


class DocumentStore:
    """
    Thin document-store facade over SQLAlchemy.
    Each method opens its own short session; callers never span a transaction
    across methods.
    """

    def __init__(self, database_url: str):
        if database_url.startswith("sqlite:///"):
            db_dir = os.path.dirname(database_url[len("sqlite:///"):])
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)
        self.engine = create_engine(database_url, future=True)
        self.Session = sessionmaker(bind=self.engine, autoflush=False, future=True)
        Base.metadata.create_all(self.engine)

    # ---- profiles ----
    def save_profile(self, uid: str, profile: Dict[str, Any]) -> None:
        with self.Session() as s:
            row = s.get(UserProfile, uid)
            if row is None:
                s.add(UserProfile(uid=uid, profile=profile))
            else:
                row.profile = profile
            s.commit()

    def get_profile(self, uid: str) -> Optional[Dict[str, Any]]:
        with self.Session() as s:
            row = s.get(UserProfile, uid)
            return row.profile if row else None

    # ---- recommendation history ----
    def add_recommendations(self, uid: str, recommendations: List[Dict[str, Any]]) -> int:
        with self.Session() as s:
            run = RecommendationRun(uid=uid, recommendations=recommendations)
            s.add(run)
            s.commit()
            return run.id

    def latest_recommendations(self, uid: str) -> Optional[Dict[str, Any]]:
        with self.Session() as s:
            run = (
                s.query(RecommendationRun)
                .filter(RecommendationRun.uid == uid)
                .order_by(RecommendationRun.created_at.desc(), RecommendationRun.id.desc())
                .first()
            )
            if run is None:
                return None
            return {
                "id": run.id,
                "userId": run.uid,
                "recommendations": run.recommendations,
                "createdAt": run.created_at.isoformat() if run.created_at else None,
            }

    # ---- trends (read-mostly snapshots) ----
    def get_trend(self, doc_id: str) -> Optional[Dict[str, Any]]:
        with self.Session() as s:
            row = s.get(TrendSnapshot, doc_id)
            return dict(row.data) if row else None

    def put_trend(self, doc_id: str, data: Dict[str, Any]) -> None:
        with self.Session() as s:
            s.merge(TrendSnapshot(doc_id=doc_id, data=data))
            s.commit()

    def delete_user(self, uid: str) -> int:
        """Remove a user's profile and all history; returns rows deleted."""
        with self.Session() as s:
            deleted = s.query(RecommendationRun).filter(RecommendationRun.uid == uid).delete()
            profile = s.get(UserProfile, uid)
            if profile is not None:
                s.delete(profile)
                deleted += 1
            s.commit()
        logger.info(f"Deleted {deleted} records for user {uid}")
        return deleted
