import secrets
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session as DBSession

from forum.models import Session, User


class SessionManager:
    """Issues and resolves the bearer tokens that identify the acting user."""

    def __init__(self, db: DBSession):
        self.db = db

    def start(self, user: User) -> Session:
        now = datetime.now(timezone.utc)
        session = Session(
            token=secrets.token_urlsafe(32),
            user_id=user.id,
            started_at=now,
            updated_at=now,
        )
        self.db.add(session)
        user.last_seen_at = now
        self.db.commit()
        return session

    def resolve(self, token: Optional[str]) -> Optional[User]:
        """Return the user behind ``token``, or None if it is unknown."""
        if not token:
            return None
        session = self.db.query(Session).filter_by(token=token).first()
        if not session:
            return None
        now = datetime.now(timezone.utc)
        session.updated_at = now
        session.user.last_seen_at = now
        self.db.commit()
        return session.user

    def end(self, token: str) -> bool:
        deleted = self.db.query(Session).filter_by(token=token).delete()
        self.db.commit()
        return bool(deleted)
