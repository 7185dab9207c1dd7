"""Make.com automation webhook: hands submitted profiles to the monitoring platform."""
import uuid
from typing import Any, Dict, Optional

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings, settings as default_settings
from app.constants import WebhookStatus, WebhookType
from app.models.webhook_log import WebhookLog
from app.utils.exceptions import ExternalServiceError
from app.utils.logger import get_logger
from app.utils.serialization import dump_json

logger = get_logger("automation_webhook")

MAKE_STATUS_SENT = "sent"
MAKE_STATUS_PENDING = "pending"


async def send_profile_to_automation(
    payload: Dict[str, Any],
    settings: Settings = default_settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[str, Any]:
    """
    POST a profile to the automation webhook once.

    Args:
        payload: JSON body
        settings: Settings providing the URL and timeout
        transport: Optional httpx transport (tests)

    Returns:
        {"status": "not_configured"} when no URL is set, otherwise
        {"status": "success", "status_code", "data"}

    Raises:
        ExternalServiceError: On network errors, timeouts or non-2xx replies
    """
    if not settings.make_webhook_url:
        logger.info("Make.com webhook not configured, skipping")
        return {"status": "not_configured", "message": "Webhook URL not set"}

    try:
        async with httpx.AsyncClient(timeout=settings.webhook_timeout, transport=transport) as client:
            response = await client.post(
                settings.make_webhook_url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
    except httpx.HTTPError as e:
        raise ExternalServiceError("Automation webhook request failed", details=str(e)) from e

    if response.status_code < 200 or response.status_code >= 300:
        raise ExternalServiceError(
            "Automation webhook rejected the profile",
            details=f"{response.status_code} - {response.text[:500]}",
        )

    try:
        data = response.json()
    except ValueError:
        data = response.text

    return {"status": "success", "status_code": response.status_code, "data": data}


def log_webhook(
    db: Session,
    user_id: Optional[uuid.UUID],
    webhook_type: str,
    payload: Any,
    response: Any,
    status: str,
) -> None:
    """Append a webhook audit row; failures are logged, not raised."""
    try:
        db.add(WebhookLog(
            user_id=user_id,
            webhook_type=webhook_type,
            payload=dump_json(payload),
            response=dump_json(response),
            status=status,
        ))
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to write {webhook_type} webhook log for {user_id}: {e}", exc_info=True)


async def notify_profile_submission(
    db: Session,
    user_id: uuid.UUID,
    payload: Dict[str, Any],
    settings: Settings = default_settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """
    Send a stored profile to the automation platform and audit the attempt.

    Must be called after the profile transaction has committed. Never raises:
    the profile is already durable whatever happens here.

    Returns:
        "sent" if the webhook accepted the profile, otherwise "pending"
    """
    try:
        result = await send_profile_to_automation(payload, settings=settings, transport=transport)
    except ExternalServiceError as e:
        logger.error(f"Make.com webhook error for {user_id}: {e.message} ({e.details})")
        log_webhook(
            db, user_id, WebhookType.PROFILE_SUBMISSION, payload,
            {"error": e.message, "details": e.details}, WebhookStatus.FAILED,
        )
        return MAKE_STATUS_PENDING

    log_webhook(db, user_id, WebhookType.PROFILE_SUBMISSION, payload, result, WebhookStatus.SUCCESS)
    return MAKE_STATUS_SENT if result["status"] == "success" else MAKE_STATUS_PENDING
