import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from smarttask.core.config import Settings
from smarttask.core.database import get_session
from smarttask.core.security import decode_session_token
from smarttask.models import User
from smarttask.services import TaskService

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """Who is calling. Produced by identity resolution, consumed by handlers."""
    owner_id: str


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


def _ensure_user(session: Session, owner_id: str) -> None:
    if session.get(User, owner_id) is not None:
        return
    session.add(User(id=owner_id))
    try:
        session.commit()
        logger.info("Registered new user %s", owner_id)
    except IntegrityError:
        # a concurrent first request already created it
        session.rollback()


def get_request_context(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    settings: Settings = Depends(get_settings),
    session: Session = Depends(get_session),
) -> RequestContext:
    if settings.auth_dev_user_id:
        owner_id = settings.auth_dev_user_id
    else:
        token = request.cookies.get(settings.session_cookie_name)
        if not token and creds is not None:
            token = creds.credentials
        if not token:
            logger.info("Rejected request to %s: no session token", request.url.path)
            raise _unauthorized()

        try:
            payload = decode_session_token(token, settings)
            owner_id = payload.get("sub")
            if not owner_id:
                raise ValueError("Missing sub")
        except (JWTError, ValueError) as exc:
            logger.info("Rejected request to %s: %s", request.url.path, exc)
            raise _unauthorized()

    _ensure_user(session, owner_id)
    return RequestContext(owner_id=owner_id)


def get_task_service(session: Session = Depends(get_session)) -> TaskService:
    return TaskService(session)
