import logging
from typing import Any, Dict, Mapping

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession
from sqlalchemy.orm.attributes import flag_modified

from forum.errors import UserNotFoundError
from forum.models import User

logger = logging.getLogger(__name__)


class UserAttributeStore:
    """Reads and writes the per-user ``attributes`` bag.

    With ``lock_rows`` the first read in a transaction loads the user row with
    ``SELECT ... FOR UPDATE``, so a read followed by :meth:`set` is serialised
    against other requests for the same user until the commit. Backends
    without row locks (SQLite) ignore the clause.
    """

    def __init__(self, db: DBSession, lock_rows: bool = True):
        self.db = db
        self.lock_rows = lock_rows

    def _load_user(self, user_id: int) -> User:
        stmt = select(User).where(User.id == user_id)
        if self.lock_rows:
            stmt = stmt.with_for_update()
        user = self.db.execute(stmt).scalar_one_or_none()
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def get(self, user_id: int, key: str, default: Any = None) -> Any:
        user = self._load_user(user_id)
        return (user.attributes or {}).get(key, default)

    def get_many(self, user_id: int, defaults: Mapping[str, Any]) -> Dict[str, Any]:
        user = self._load_user(user_id)
        attributes = user.attributes or {}
        return {key: attributes.get(key, default) for key, default in defaults.items()}

    def set(self, user_id: int, values: Mapping[str, Any]) -> None:
        """Upsert ``values`` into the user's attributes and commit."""
        user = self._load_user(user_id)
        attributes = dict(user.attributes or {})
        attributes.update(values)
        user.attributes = attributes
        flag_modified(user, "attributes")
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.error(f"Failed to save attributes {sorted(values)} for user {user_id}")
            raise
