from typing import Dict, List


class ForumError(Exception):
    """Base class for errors raised by the forum package."""


class UnknownContentTypeError(ForumError, ValueError):
    """Raised when a spam check is requested for a content type nobody registered.

    This is a wiring mistake, not a user error, and is never turned into a
    validation message.
    """

    def __init__(self, content_type):
        self.content_type = content_type
        super().__init__(f"Spam check type unknown: {content_type!r}")


class UserNotFoundError(ForumError, LookupError):
    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"User {user_id} does not exist")


class DiscussionNotFoundError(ForumError, LookupError):
    def __init__(self, discussion_id: int):
        self.discussion_id = discussion_id
        super().__init__(f"Discussion {discussion_id} does not exist")


class ValidationFailed(ForumError):
    """Raised by the posting models when a save was refused."""

    def __init__(self, results: Dict[str, List[str]]):
        self.results = results
        super().__init__("; ".join(m for messages in results.values() for m in messages))
