"""Account credentials and login sessions."""
import uuid
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session as DBSession

from app.config import settings
from app.models.account import Account
from app.models.session import Session
from app.utils.db import utc_now
from app.utils.exceptions import DuplicateEmailError, InvalidCredentialsError, StorageError
from app.utils.hashing import generate_session_token, hash_password, verify_password
from app.utils.logger import get_logger

logger = get_logger("accounts")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def default_session_ttl() -> timedelta:
    return timedelta(days=settings.session_ttl_days)


def create_account(
    db: DBSession,
    email: str,
    password: str,
    full_name: str,
    company_name: str,
) -> Account:
    """
    Create an account with a bcrypt-hashed password.

    Args:
        db: Database session
        email: Login email, unique across accounts
        password: Raw password (hashed here, never stored or logged)
        full_name: Account holder name
        company_name: Company name

    Returns:
        The created Account

    Raises:
        DuplicateEmailError: If the email is already registered
        StorageError: On any other storage failure
    """
    account = Account(
        user_id=uuid.uuid4(),
        email=normalize_email(email),
        password_hash=hash_password(password),
        full_name=full_name.strip(),
        company_name=company_name.strip(),
    )

    try:
        db.add(account)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info(f"Signup rejected, email already registered: {account.email}")
        raise DuplicateEmailError() from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create account for {account.email}: {e}", exc_info=True)
        raise StorageError("Failed to create account") from e

    db.refresh(account)
    logger.info(f"Created account {account.user_id}")
    return account


def verify_login(db: DBSession, email: str, password: str) -> Account:
    """
    Check credentials and stamp last_login.

    Unknown email and wrong password raise the same error so callers cannot
    tell which one happened.

    Args:
        db: Database session
        email: Login email
        password: Raw password

    Returns:
        The authenticated Account

    Raises:
        InvalidCredentialsError: If the email is unknown or the password is wrong
    """
    account = db.query(Account).filter(Account.email == normalize_email(email)).first()

    if not account or not verify_password(password, account.password_hash):
        raise InvalidCredentialsError()

    # Best-effort; a failed stamp does not fail the login
    try:
        account.last_login = utc_now()
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Could not update last_login for {account.user_id}: {e}")

    return account


def get_account(db: DBSession, user_id: uuid.UUID) -> Optional[Account]:
    """Get an account by id, or None."""
    return db.query(Account).filter(Account.user_id == user_id).first()


def create_session(
    db: DBSession,
    user_id: uuid.UUID,
    ttl: Optional[timedelta] = None,
    now: Optional[datetime] = None,
) -> Session:
    """
    Issue a new login session.

    Accounts may hold any number of concurrent sessions.

    Args:
        db: Database session
        user_id: Owning account
        ttl: Lifetime, defaults to the configured session TTL (30 days)
        now: Issue time, defaults to the current UTC time

    Returns:
        The created Session
    """
    if now is None:
        now = utc_now()
    if ttl is None:
        ttl = default_session_ttl()
    session = Session(
        session_id=generate_session_token(),
        user_id=user_id,
        created_at=now,
        expires_at=now + ttl,
    )

    try:
        db.add(session)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to create session for {user_id}: {e}", exc_info=True)
        raise StorageError("Failed to create session") from e

    return session


def get_session(
    db: DBSession,
    session_id: str,
    now: Optional[datetime] = None,
) -> Optional[Session]:
    """
    Look up a live session.

    The expiry check is part of the query, so an expired row that has not
    been purged yet is never returned.

    Args:
        db: Database session
        session_id: Token from the session cookie
        now: Reference time, defaults to the current UTC time

    Returns:
        Session if it exists and has not expired, otherwise None
    """
    if now is None:
        now = utc_now()
    return db.query(Session).filter(
        Session.session_id == session_id,
        Session.expires_at > now,
    ).first()


def delete_session(db: DBSession, session_id: str) -> None:
    """Delete a session; deleting an unknown session is a no-op."""
    try:
        db.query(Session).filter(Session.session_id == session_id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to delete session: {e}", exc_info=True)
        raise StorageError("Failed to delete session") from e


def purge_expired_sessions(db: DBSession, now: Optional[datetime] = None) -> int:
    """
    Delete every session whose expiry has passed.

    Args:
        db: Database session
        now: Reference time, defaults to the current UTC time

    Returns:
        Number of rows removed
    """
    if now is None:
        now = utc_now()
    try:
        deleted = db.query(Session).filter(Session.expires_at <= now).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to purge expired sessions: {e}", exc_info=True)
        raise StorageError("Failed to purge expired sessions") from e

    if deleted:
        logger.info(f"Purged {deleted} expired sessions")
    return deleted
