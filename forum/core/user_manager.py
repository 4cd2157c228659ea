from forum.models import User


class UserManager:
    """Handles user-related operations."""

    def __init__(self, db):
        self.db = db

    def get_or_create_user(self, name: str) -> User:
        """Get existing user or create a new one."""
        user = self.db.query(User).filter_by(name=name).first()
        if not user:
            user = User(name=name, attributes={})
            self.db.add(user)
            self.db.commit()
        return user

    def is_user_banned(self, user: User) -> bool:
        """Check if user is banned."""
        return user.is_banned
