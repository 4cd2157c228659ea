from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime


class SessionRequest(BaseModel):
    """Sign-in payload; unknown names get an account on first use."""
    name: str = Field(min_length=1, max_length=50)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class SessionResponse(BaseModel):
    token: str
    user_id: int


class DiscussionCreate(BaseModel):
    name: str
    body: str
    format: str = "Html"


class CommentCreate(BaseModel):
    body: str
    format: str = "Html"


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    discussion_id: int
    insert_user_id: int
    body: str
    format: str
    created_at: Optional[datetime] = None


class DiscussionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    insert_user_id: int
    name: str
    body: str
    format: str
    count_comments: int
    date_last_comment: Optional[datetime] = None
    last_comment_user_id: Optional[int] = None
    created_at: Optional[datetime] = None


class DiscussionDetail(DiscussionOut):
    comments: List[CommentOut] = []
