"""
UserAttributeStore against an in-memory SQLite database.
"""
import pytest

from forum.core.attribute_store import UserAttributeStore
from forum.core.spam_guard import ContentType, SpamGuard
from forum.core.validation import Validation
from forum.errors import UserNotFoundError
from forum.models import User


def test_missing_attribute_returns_default(db, user):
    store = UserAttributeStore(db)
    assert store.get(user.id, "CountCommentSpamCheck", 0) == 0
    assert store.get(user.id, "DateCommentSpamCheck") is None


def test_set_merges_and_persists(db, engine, user):
    store = UserAttributeStore(db)
    store.set(user.id, {"Preference": "dark"})
    store.set(user.id, {"CountCommentSpamCheck": 2})

    db.expire_all()
    assert store.get_many(user.id, {"Preference": None, "CountCommentSpamCheck": 0}) == {
        "Preference": "dark",
        "CountCommentSpamCheck": 2,
    }
    reloaded = db.get(User, user.id)
    assert reloaded.attributes == {"Preference": "dark", "CountCommentSpamCheck": 2}


def test_unknown_user_raises(db):
    store = UserAttributeStore(db)
    with pytest.raises(UserNotFoundError):
        store.get(404, "anything")
    with pytest.raises(UserNotFoundError):
        store.set(404, {"anything": 1})


def test_spam_guard_state_lands_on_the_user(db, user, config, clock):
    guard = SpamGuard(UserAttributeStore(db), config, Validation(), clock=clock)
    guard.check_for_spam(user.id, ContentType.DISCUSSION)
    guard.check_for_spam(user.id, ContentType.DISCUSSION)
    assert guard.check_for_spam(user.id, ContentType.DISCUSSION) is True

    db.expire_all()
    attributes = db.get(User, user.id).attributes
    assert attributes["CountDiscussionSpamCheck"] == 2
    assert attributes["DateDiscussionSpamCheck"] == "2026-10-19 12:00:00"
    assert "CountCommentSpamCheck" not in attributes
