"""Hashing utilities for passwords and session tokens."""
import hmac
import secrets
import bcrypt


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.

    A fresh salt is generated for every call.

    Args:
        password: The password to hash

    Returns:
        Bcrypt hash string
    """
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(password.encode('utf-8'), salt).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against a bcrypt hash.

    Args:
        password: The password to verify
        password_hash: The stored bcrypt hash

    Returns:
        True if the password matches, False otherwise
    """
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed stored hash
        return False


def generate_session_token() -> str:
    """Generate an unguessable session token."""
    return secrets.token_urlsafe(32)


def keys_match(provided: str, expected: str) -> bool:
    """Constant-time comparison for shared integration keys."""
    return hmac.compare_digest(provided.encode('utf-8'), expected.encode('utf-8'))
