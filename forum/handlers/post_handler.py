import logging
from fastapi import HTTPException
from forum.core.posting import CommentModel, DiscussionModel
from forum.errors import DiscussionNotFoundError, ValidationFailed
from forum.models import Comment, Discussion, User

logger = logging.getLogger(__name__)


class PostHandler:
    """Turns posting requests into model saves and model errors into HTTP errors."""

    def __init__(self, db, config, locale=None):
        self.db = db
        self.config = config
        self.locale = locale

    def create_discussion(self, user: User, name: str, body: str, format: str = "Html") -> Discussion:
        model = DiscussionModel(self.db, self.config, self.locale)
        try:
            return model.save(user, name, body, format=format)
        except ValidationFailed as e:
            logger.info(f"Discussion from user {user.id} refused: {e}")
            raise HTTPException(status_code=422, detail=e.results)

    def create_comment(self, user: User, discussion_id: int, body: str, format: str = "Html") -> Comment:
        model = CommentModel(self.db, self.config, self.locale)
        try:
            return model.save(user, discussion_id, body, format=format)
        except DiscussionNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        except ValidationFailed as e:
            logger.info(f"Comment from user {user.id} refused: {e}")
            raise HTTPException(status_code=422, detail=e.results)

    def get_discussion(self, discussion_id: int) -> Discussion:
        discussion = self.db.get(Discussion, discussion_id)
        if discussion is None:
            raise HTTPException(status_code=404, detail=f"Discussion {discussion_id} does not exist")
        return discussion
