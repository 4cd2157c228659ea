from fastapi import FastAPI, Request, HTTPException, Depends, Response
from forum.config import Configuration, get_config
from forum.core.user_manager import UserManager
from forum.database import get_db
from forum.handlers.post_handler import PostHandler
from forum.locale import Locale
from forum.models import User
from forum.schemas import (
    CommentCreate,
    CommentOut,
    DiscussionCreate,
    DiscussionDetail,
    DiscussionOut,
    SessionRequest,
    SessionResponse,
)
from forum.session_manager import SessionManager
from sqlalchemy.orm import Session as DBSession
from typing import Optional
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

app = FastAPI(title="forum")

AUTH_HEADER = "Authorization"


def get_locale(config: Configuration = Depends(get_config)) -> Locale:
    return Locale(
        config.get("Garden.Locale", "en-CA"),
        config.get("Locale.Definitions", {}),
    )


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get(AUTH_HEADER, "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_user(request: Request, db: DBSession = Depends(get_db)) -> User:
    user = SessionManager(db).resolve(bearer_token(request))
    if user is None:
        raise HTTPException(status_code=401, detail="Sign in to continue")
    return user


@app.post("/sessions", response_model=SessionResponse, status_code=201)
def start_session(payload: SessionRequest, db: DBSession = Depends(get_db)):
    user = UserManager(db).get_or_create_user(payload.name)
    session = SessionManager(db).start(user)
    logger.info(f"Session started for user {user.id}")
    return SessionResponse(token=session.token, user_id=user.id)


@app.delete("/sessions", status_code=204)
def end_session(request: Request, db: DBSession = Depends(get_db)):
    token = bearer_token(request)
    if not token or not SessionManager(db).end(token):
        raise HTTPException(status_code=401, detail="No active session")
    return Response(status_code=204)


@app.post("/discussions", response_model=DiscussionOut, status_code=201)
def create_discussion(
    payload: DiscussionCreate,
    user: User = Depends(current_user),
    db: DBSession = Depends(get_db),
    config: Configuration = Depends(get_config),
    locale: Locale = Depends(get_locale),
):
    handler = PostHandler(db, config, locale)
    return handler.create_discussion(user, payload.name, payload.body, format=payload.format)


@app.post("/discussions/{discussion_id}/comments", response_model=CommentOut, status_code=201)
def create_comment(
    discussion_id: int,
    payload: CommentCreate,
    user: User = Depends(current_user),
    db: DBSession = Depends(get_db),
    config: Configuration = Depends(get_config),
    locale: Locale = Depends(get_locale),
):
    handler = PostHandler(db, config, locale)
    return handler.create_comment(user, discussion_id, payload.body, format=payload.format)


@app.get("/discussions/{discussion_id}", response_model=DiscussionDetail)
def get_discussion(discussion_id: int, db: DBSession = Depends(get_db)):
    return PostHandler(db, None).get_discussion(discussion_id)


@app.get("/healthz")
def healthz():
    return {"status": "ok"}


@app.get("/ping")
def ping():
    """Lightweight ping endpoint for warming up Lambda"""
    return {"status": "warm", "timestamp": datetime.now().isoformat()}
