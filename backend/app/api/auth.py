"""Authentication API endpoints."""
import uuid
from typing import Optional
from fastapi import APIRouter, Cookie, Depends, Response
from sqlalchemy.orm import Session

from app.auth.session import clear_session_cookie, optional_auth, require_auth, set_session_cookie
from app.constants import MAX_PASSWORD_BYTES, MIN_PASSWORD_LENGTH, SESSION_COOKIE_NAME
from app.database import get_db
from app.schemas.auth import AccountResponse, AuthResponse, AuthStatusResponse, LoginRequest, SignupRequest
from app.services.accounts import create_account, create_session, delete_session, get_account, verify_login
from app.utils.exceptions import AppException, InvalidInputError, handle_database_error, not_found_error
from app.utils.logger import logger

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup", response_model=AuthResponse)
async def signup(
    request: SignupRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> AuthResponse:
    """
    Create an account and log it in.

    Args:
        request: Signup details
        response: Response used to set the session cookie
        db: Database session

    Returns:
        Signup response with the new account id
    """
    if len(request.password) < MIN_PASSWORD_LENGTH:
        raise InvalidInputError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
            field="password",
        )
    if len(request.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise InvalidInputError(
            f"Password must be at most {MAX_PASSWORD_BYTES} bytes",
            field="password",
        )

    try:
        account = create_account(
            db,
            email=request.email,
            password=request.password,
            full_name=request.full_name,
            company_name=request.company_name,
        )
        session = create_session(db, account.user_id)
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Signup error: {e}", exc_info=True)
        raise handle_database_error(e, "signup")

    set_session_cookie(response, session.session_id)
    return AuthResponse(
        success=True,
        user_id=str(account.user_id),
        message="Account created successfully",
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
) -> AuthResponse:
    """
    Verify credentials and start a new session.

    Args:
        request: Login credentials
        response: Response used to set the session cookie
        db: Database session

    Returns:
        Login response with the account id
    """
    try:
        account = verify_login(db, request.email, request.password)
        session = create_session(db, account.user_id)
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Login error: {e}", exc_info=True)
        raise handle_database_error(e, "login")

    set_session_cookie(response, session.session_id)
    return AuthResponse(
        success=True,
        user_id=str(account.user_id),
        message="Login successful",
    )


@router.post("/logout")
async def logout(
    response: Response,
    session_id: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME),
    db: Session = Depends(get_db),
) -> dict[str, str | bool]:
    """End the current session, if any, and clear the cookie."""
    if session_id:
        delete_session(db, session_id)

    clear_session_cookie(response)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=AccountResponse)
async def get_me(
    user_id: uuid.UUID = Depends(require_auth),
    db: Session = Depends(get_db),
) -> AccountResponse:
    """Account details of the logged-in user."""
    account = get_account(db, user_id)
    if not account:
        raise not_found_error("Account")
    return AccountResponse.from_orm(account)


@router.get("/status", response_model=AuthStatusResponse)
async def auth_status(
    user_id: Optional[uuid.UUID] = Depends(optional_auth),
) -> AuthStatusResponse:
    """Whether the request carries a live session."""
    return AuthStatusResponse(
        authenticated=user_id is not None,
        user_id=str(user_id) if user_id else None,
    )
