"""Shared-key authentication for integration and admin endpoints."""
from typing import Optional
from fastapi import Header

from app.config import settings
from app.utils.hashing import keys_match
from app.utils.exceptions import ForbiddenError, MissingKeyError


def _check_key(provided: Optional[str], expected: Optional[str], label: str) -> None:
    # No key configured: endpoint is open (local development)
    if not expected:
        return

    if not provided:
        raise MissingKeyError(f"{label} is required")

    if not keys_match(provided, expected):
        raise ForbiddenError(f"Invalid {label.lower()}")


def verify_webhook_secret(
    webhook_secret: Optional[str] = Header(None, alias="X-Webhook-Secret", description="Shared secret of the automation platform"),
) -> None:
    """
    Verify the automation platform's shared secret.

    Raises:
        MissingKeyError: If the header is missing
        ForbiddenError: If the secret does not match
    """
    _check_key(webhook_secret, settings.inbound_webhook_secret, "Webhook secret")


def verify_admin_key(
    admin_key: Optional[str] = Header(None, alias="X-Admin-Key", description="Admin API key"),
) -> None:
    """
    Verify the admin API key.

    Raises:
        MissingKeyError: If the header is missing
        ForbiddenError: If the key does not match
    """
    _check_key(admin_key, settings.admin_api_key, "Admin key")
