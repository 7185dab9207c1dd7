"""Integration endpoints used by the automation platform."""
import uuid
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth.api_key import verify_webhook_secret
from app.database import get_db
from app.schemas.updates import (
    MarkDeliveredResponse,
    ReceiveUpdatesRequest,
    ReceiveUpdatesResponse,
    UpdateListResponse,
    UpdateResponse,
)
from app.services.updates import get_user_updates, mark_delivered, receive_updates
from app.utils.exceptions import AppException, handle_database_error, not_found_error
from app.utils.logger import logger

router = APIRouter(prefix="/api", tags=["updates"], dependencies=[Depends(verify_webhook_secret)])


@router.post("/receive-updates", response_model=ReceiveUpdatesResponse)
async def receive_updates_endpoint(
    request: ReceiveUpdatesRequest,
    db: Session = Depends(get_db),
) -> ReceiveUpdatesResponse:
    """
    Ingest a batch of monitoring updates for an account.

    Items scoring below the governing relevance threshold are dropped.

    Args:
        request: Batch of updates
        db: Database session

    Returns:
        Counts of received and saved updates
    """
    try:
        result = receive_updates(
            db,
            request.user_id,
            request.updates,
            profile_id=request.profile_id,
            raw_payload=request.model_dump(mode="json"),
        )
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Receive updates error: {e}", exc_info=True)
        raise handle_database_error(e, "receive updates")

    return ReceiveUpdatesResponse(
        success=True,
        message=f"Saved {result.saved} of {result.received} updates",
        updates_received=result.received,
        updates_saved=result.saved,
        threshold=result.threshold,
    )


@router.get("/updates/{user_id}", response_model=UpdateListResponse)
async def list_updates_for_user(
    user_id: uuid.UUID,
    limit: Optional[int] = Query(50, ge=1, le=500),
    min_relevance: Optional[float] = Query(None, alias="minRelevance", ge=0),
    db: Session = Depends(get_db),
) -> UpdateListResponse:
    """List an account's stored updates, newest first."""
    updates = get_user_updates(db, user_id, limit=limit, min_relevance=min_relevance)
    return UpdateListResponse(
        success=True,
        count=len(updates),
        updates=[UpdateResponse.from_orm(u) for u in updates],
    )


@router.post("/updates/{update_id}/delivered", response_model=MarkDeliveredResponse)
async def mark_update_delivered(
    update_id: int,
    db: Session = Depends(get_db),
) -> MarkDeliveredResponse:
    """Mark an update as delivered; repeating the call changes nothing."""
    try:
        update = mark_delivered(db, update_id)
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Mark delivered error for update {update_id}: {e}", exc_info=True)
        raise handle_database_error(e, "mark update delivered")

    if not update:
        raise not_found_error("Update", str(update_id))
    return MarkDeliveredResponse(success=True, update=UpdateResponse.from_orm(update))
