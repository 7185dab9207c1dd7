"""Session cookie authentication dependencies."""
import uuid
from typing import Optional
from fastapi import Cookie, Depends, Request, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.constants import SESSION_COOKIE_NAME
from app.database import get_db
from app.services.accounts import get_session
from app.utils.exceptions import SessionExpiredError, UnauthenticatedError
from app.utils.logger import get_logger

logger = get_logger("auth")


def require_auth(
    request: Request,
    session_id: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME),
    db: Session = Depends(get_db),
) -> uuid.UUID:
    """
    Resolve the session cookie to an account id.

    The resolved id is also bound to request.state.user_id.

    Raises:
        UnauthenticatedError: If no session cookie was sent
        SessionExpiredError: If the session is unknown or expired (cookie is cleared)
    """
    if not session_id:
        raise UnauthenticatedError()

    session = get_session(db, session_id)
    if not session:
        raise SessionExpiredError()

    request.state.user_id = session.user_id
    return session.user_id


def optional_auth(
    request: Request,
    session_id: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME),
    db: Session = Depends(get_db),
) -> Optional[uuid.UUID]:
    """
    Resolve the session cookie if present; never fails the request.

    Returns:
        Account id for a live session, otherwise None
    """
    request.state.user_id = None
    if not session_id:
        return None

    try:
        session = get_session(db, session_id)
    except SQLAlchemyError as e:
        logger.warning(f"Optional auth lookup failed, continuing anonymously: {e}")
        return None

    if session:
        request.state.user_id = session.user_id
        return session.user_id
    return None


def set_session_cookie(response: Response, session_id: str) -> None:
    """Attach the HTTP-only session cookie."""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=session_id,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        max_age=settings.session_ttl_days * 24 * 60 * 60,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    """Remove the session cookie from the client."""
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")
