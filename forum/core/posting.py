import logging
from datetime import datetime
from typing import Callable, Optional

from forum.core.attribute_store import UserAttributeStore
from forum.core.spam_guard import ContentType, SpamGuard, utcnow
from forum.core.user_manager import UserManager
from forum.core.validation import Validation
from forum.errors import DiscussionNotFoundError, ValidationFailed
from forum.models import Comment, Discussion, User

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100


class PostingModel:
    """Shared save flow for user-submitted content.

    Field validation runs first; only a submission that passes it is counted
    by the spam guard, and a spam block refuses the save.
    """

    content_type: ContentType

    def __init__(self, db, config, locale=None, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.config = config
        self.locale = locale
        self.clock = clock
        self.validation = Validation()

    def _t(self, code: str) -> str:
        return self.locale.translate(code) if self.locale else code

    def check_for_spam(self, user: User) -> bool:
        guard = SpamGuard(
            UserAttributeStore(self.db),
            self.config,
            self.validation,
            locale=self.locale,
            clock=self.clock,
        )
        return guard.check_for_spam(user.id, self.content_type)

    def _require(self, field_name: str, value: Optional[str]) -> None:
        if not value or not value.strip():
            self.validation.add_result(field_name, self._t(f"{field_name} is required."))

    def _validate_author(self, user: User) -> None:
        if UserManager(self.db).is_user_banned(user):
            self.validation.add_result("InsertUserID", self._t("You are not allowed to post."))

    def _refuse_if_invalid(self) -> None:
        if not self.validation.is_valid():
            raise ValidationFailed(self.validation.results())

    def _run_checks(self, user: User) -> None:
        self._validate_author(user)
        self._refuse_if_invalid()
        if self.check_for_spam(user):
            logger.info(f"Refused {self.content_type.value} from user {user.id}: spam block")
        self._refuse_if_invalid()


class DiscussionModel(PostingModel):
    content_type = ContentType.DISCUSSION

    def save(self, user: User, name: str, body: str, format: str = "Html") -> Discussion:
        self._require("Name", name)
        self._require("Body", body)
        if name and len(name) > MAX_NAME_LENGTH:
            self.validation.add_result(
                "Name", self._t("Name is too long.")
            )
        self._run_checks(user)

        discussion = Discussion(
            insert_user_id=user.id,
            name=name.strip(),
            body=body,
            format=format,
            count_comments=0,
        )
        self.db.add(discussion)
        user.count_discussions = (user.count_discussions or 0) + 1
        self.db.commit()
        logger.info(f"User {user.id} started discussion {discussion.id}")
        return discussion


class CommentModel(PostingModel):
    content_type = ContentType.COMMENT

    def save(self, user: User, discussion_id: int, body: str, format: str = "Html") -> Comment:
        discussion = self.db.get(Discussion, discussion_id)
        if discussion is None:
            raise DiscussionNotFoundError(discussion_id)

        self._require("Body", body)
        self._run_checks(user)

        comment = Comment(
            discussion_id=discussion.id,
            insert_user_id=user.id,
            body=body,
            format=format,
        )
        self.db.add(comment)
        discussion.count_comments = (discussion.count_comments or 0) + 1
        discussion.date_last_comment = self.clock()
        discussion.last_comment_user_id = user.id
        user.count_comments = (user.count_comments or 0) + 1
        self.db.commit()
        logger.info(f"User {user.id} commented on discussion {discussion.id}")
        return comment
