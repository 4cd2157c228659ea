# forum/models.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# BigInteger ids autoincrement on SQLite only when rendered as INTEGER
Id = BigInteger().with_variant(Integer, "sqlite")


# ---------- Base ----------

class Base(DeclarativeBase):
    """Base declarativa (SQLAlchemy 2.x)."""
    pass


# ---------- Mixins ----------

class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


# ---------- Users & Sessions ----------

class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column("user_id", Id, primary_key=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(160), index=True)
    is_banned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    last_seen_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Free-form per-user values that have no column of their own,
    # e.g. CountCommentSpamCheck / DateCommentSpamCheck.
    attributes: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)

    count_discussions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    count_comments: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    sessions: Mapped[list[Session]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    discussions: Mapped[list[Discussion]] = relationship(
        foreign_keys="Discussion.insert_user_id", back_populates="insert_user"
    )

    def __str__(self):
        return self.name


class Session(Base):
    __tablename__ = "sessions"
    __table_args__ = (Index("ix_sessions_user_id", "user_id"),)

    id: Mapped[int] = mapped_column("session_id", Id, primary_key=True)
    token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    user: Mapped[User] = relationship(back_populates="sessions")


# ---------- Discussions & Comments ----------

class Discussion(Base, TimestampMixin):
    __tablename__ = "discussions"
    __table_args__ = (
        Index("ix_discussions_insert_user_id", "insert_user_id"),
        Index("ix_discussions_date_last_comment", "date_last_comment"),
    )

    id: Mapped[int] = mapped_column("discussion_id", Id, primary_key=True)
    insert_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    format: Mapped[str] = mapped_column(String(20), default="Html", nullable=False)
    count_comments: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    date_last_comment: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    last_comment_user_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.user_id", ondelete="SET NULL")
    )

    insert_user: Mapped[User] = relationship(
        foreign_keys=[insert_user_id], back_populates="discussions"
    )
    last_comment_user: Mapped[Optional[User]] = relationship(foreign_keys=[last_comment_user_id])
    comments: Mapped[list[Comment]] = relationship(
        back_populates="discussion",
        cascade="all, delete-orphan",
        order_by="Comment.id",
    )

    def __str__(self):
        return self.name


class Comment(Base, TimestampMixin):
    __tablename__ = "comments"
    __table_args__ = (
        Index("ix_comments_discussion_id", "discussion_id"),
        Index("ix_comments_insert_user_id", "insert_user_id"),
    )

    id: Mapped[int] = mapped_column("comment_id", Id, primary_key=True)
    discussion_id: Mapped[int] = mapped_column(
        ForeignKey("discussions.discussion_id", ondelete="CASCADE"), nullable=False
    )
    insert_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    format: Mapped[str] = mapped_column(String(20), default="Html", nullable=False)

    discussion: Mapped[Discussion] = relationship(back_populates="comments")
    insert_user: Mapped[User] = relationship(foreign_keys=[insert_user_id])
