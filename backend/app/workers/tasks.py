"""ARQ background tasks."""
from typing import Any, Dict

from app.database import SessionLocal
from app.services.accounts import purge_expired_sessions
from app.utils.exceptions import StorageError
from app.utils.logger import logger


async def purge_sessions(ctx: Dict[str, Any]) -> Dict[str, Any]:
    """
    Delete expired login sessions.

    Expired sessions are already rejected at request time; this only keeps
    the table small.

    Returns:
        Dict with success status and the number of sessions removed
    """
    db = SessionLocal()

    try:
        deleted = purge_expired_sessions(db)
        return {"success": True, "deleted": deleted}
    except StorageError as e:
        logger.error(f"Session purge failed: {e.message}")
        return {"success": False, "error": e.message}
    finally:
        db.close()
