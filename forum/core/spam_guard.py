"""
Per-user posting throttle.

Users cannot post more than ``SpamCount`` items of one type within
``SpamTime`` seconds or their account will be locked for ``SpamLock``
seconds. Every retry made while locked restarts the lock.
"""
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Optional, Union

from forum.errors import UnknownContentTypeError

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SPAM_MESSAGE = (
    "You have posted {0} times within {1} seconds. A spam block is now in effect on your account. "
    "You must wait at least {2} seconds before attempting to post again."
)


class ContentType(str, Enum):
    COMMENT = "Comment"
    DISCUSSION = "Discussion"


# (count attribute, date attribute) stored on the user for each content type
ATTRIBUTE_KEYS = {
    ContentType.COMMENT: ("CountCommentSpamCheck", "DateCommentSpamCheck"),
    ContentType.DISCUSSION: ("CountDiscussionSpamCheck", "DateDiscussionSpamCheck"),
}


@dataclass(frozen=True)
class SpamSettings:
    count: int = 2
    time: int = 30
    lock: int = 30


# Floors below which a configured value is raised
MINIMUMS = SpamSettings(count=2, time=0, lock=30)
DEFAULTS = SpamSettings(count=2, time=30, lock=30)


@dataclass
class SpamCheckState:
    count: int = 0
    date: Optional[datetime] = None

    def seconds_since(self, now: datetime) -> float:
        if self.date is None:
            return math.inf
        return math.floor((now - self.date).total_seconds())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def format_date(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(DATE_FORMAT)


def parse_date(value: Any) -> Optional[datetime]:
    """Turn a stored date attribute back into an aware datetime, or None if unset."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        for parser in (lambda s: datetime.strptime(s, DATE_FORMAT), datetime.fromisoformat):
            try:
                parsed = parser(value)
            except ValueError:
                continue
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    logger.warning(f"Ignoring unparseable spam check date {value!r}")
    return None


def _as_number(value: Any) -> Optional[Union[int, float]]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        try:
            number = float(str(value).strip())
        except ValueError:
            return None
    if isinstance(number, float):
        if not math.isfinite(number):
            return None
        if number.is_integer():
            return int(number)
    return number


def coerce_content_type(content_type: Union[ContentType, str]) -> ContentType:
    if isinstance(content_type, ContentType):
        return content_type
    try:
        return ContentType(content_type)
    except ValueError:
        raise UnknownContentTypeError(content_type) from None


class SpamGuard:
    """Decides whether a user's next post of a given type is spam.

    Collaborators are passed in: ``store`` needs ``get_many(user_id, defaults)``
    and ``set(user_id, values)``, ``config`` needs ``get(path, default)``,
    ``validation`` needs ``add_result(field, message)`` and ``locale`` (optional)
    needs ``translate(code)``.
    """

    def __init__(self, store, config, validation, locale=None, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.config = config
        self.validation = validation
        self.locale = locale
        self.clock = clock

    def settings(self, content_type: Union[ContentType, str]) -> SpamSettings:
        content_type = coerce_content_type(content_type)
        values = {}
        for name, setting in (("count", "SpamCount"), ("time", "SpamTime"), ("lock", "SpamLock")):
            number = _as_number(self.config.get(f"Vanilla.{content_type.value}.{setting}", None))
            if number is None:
                number = getattr(DEFAULTS, name)
            values[name] = max(number, getattr(MINIMUMS, name))
        return SpamSettings(**values)

    def load_state(self, user_id: int, content_type: ContentType) -> SpamCheckState:
        count_key, date_key = ATTRIBUTE_KEYS[content_type]
        stored = self.store.get_many(user_id, {count_key: 0, date_key: None})
        count = _as_number(stored[count_key]) or 0
        return SpamCheckState(count=int(count), date=parse_date(stored[date_key]))

    def save_state(self, user_id: int, content_type: ContentType, state: SpamCheckState) -> None:
        count_key, date_key = ATTRIBUTE_KEYS[content_type]
        self.store.set(user_id, {
            count_key: state.count,
            date_key: format_date(state.date) if state.date else None,
        })

    def check_for_spam(self, user_id: int, content_type: Union[ContentType, str]) -> bool:
        """Return True if the user is spamming; records the attempt either way."""
        content_type = coerce_content_type(content_type)
        settings = self.settings(content_type)
        now = self.clock().replace(microsecond=0)

        state = self.load_state(user_id, content_type)
        elapsed = state.seconds_since(now)

        spam = False
        if elapsed < settings.lock and state.count >= settings.count and state.date is not None:
            spam = True
            self.validation.add_result("Body", self._message(settings))
            # Every retry while locked pushes the waiting period out again
            state.date = now
            logger.info(
                f"Spam block for user {user_id} on {content_type.value}: "
                f"{state.count} posts, locked for {settings.lock}s"
            )
        elif elapsed > settings.time:
            state.count = 1
            state.date = now
        else:
            state.count += 1

        logger.debug(
            f"Spam check user={user_id} type={content_type.value} elapsed={elapsed} "
            f"count={state.count} spam={spam}"
        )
        self.save_state(user_id, content_type, state)
        return spam

    def _message(self, settings: SpamSettings) -> str:
        args = (settings.count, settings.time, settings.lock)
        template = self.locale.translate(SPAM_MESSAGE) if self.locale else SPAM_MESSAGE
        try:
            return template.format(*args)
        except (KeyError, IndexError, ValueError):
            logger.warning(f"Bad translation for spam message {template!r}, using the default")
            return SPAM_MESSAGE.format(*args)
