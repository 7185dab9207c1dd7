"""Ingestion and relevance filtering of updates pushed by the automation platform."""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.constants import DEFAULT_RELEVANCE_THRESHOLD, WebhookStatus, WebhookType
from app.models.preference import Preference
from app.models.profile import Profile
from app.models.update import Update
from app.models.webhook_log import WebhookLog
from app.schemas.updates import IncomingUpdate
from app.services.accounts import get_account
from app.services.profiles import get_preferences, get_profile
from app.utils.db import transaction, utc_now
from app.utils.exceptions import not_found_error
from app.utils.logger import get_logger
from app.utils.serialization import dump_json

logger = get_logger("updates")


@dataclass
class IngestResult:
    """Outcome of one inbound batch."""
    received: int
    saved: int
    threshold: float


def resolve_threshold(
    db: Session,
    user_id: uuid.UUID,
    profile_id: Optional[uuid.UUID] = None,
) -> float:
    """
    Relevance threshold governing an account's inbound updates.

    A batch that names a profile uses that profile's threshold. Otherwise
    the strictest (highest) threshold across the account's profiles applies,
    counting profiles without preferences at the default.

    Raises:
        NotFoundError: If the named profile does not belong to the account
    """
    if profile_id is not None:
        profile = get_profile(db, profile_id)
        if not profile or profile.user_id != user_id:
            raise not_found_error("Profile", str(profile_id))
        preferences = get_preferences(db, profile_id)
        return preferences.relevance_threshold if preferences else DEFAULT_RELEVANCE_THRESHOLD

    effective = func.coalesce(Preference.relevance_threshold, DEFAULT_RELEVANCE_THRESHOLD)
    strictest = db.query(func.max(effective)).select_from(Profile).outerjoin(
        Preference, Preference.profile_id == Profile.id,
    ).filter(Profile.user_id == user_id).scalar()

    return strictest if strictest is not None else DEFAULT_RELEVANCE_THRESHOLD


def receive_updates(
    db: Session,
    user_id: uuid.UUID,
    updates: Sequence[IncomingUpdate],
    profile_id: Optional[uuid.UUID] = None,
    raw_payload: Optional[Dict[str, Any]] = None,
) -> IngestResult:
    """
    Store the updates of a batch that meet the account's relevance threshold.

    Items below the threshold are dropped without a trace. The kept rows and
    one audit log entry for the whole batch are committed together.

    Args:
        db: Database session
        user_id: Account the batch is for
        updates: Validated update items
        profile_id: Optional profile whose threshold governs the batch
        raw_payload: Inbound body as received, for the audit log

    Returns:
        IngestResult with received/saved counts and the threshold applied

    Raises:
        NotFoundError: If the account (or named profile) does not exist
    """
    if not get_account(db, user_id):
        raise not_found_error("User")

    threshold = resolve_threshold(db, user_id, profile_id)
    kept = [u for u in updates if u.relevance_score >= threshold]

    with transaction(db):
        db.add_all([
            Update(
                user_id=user_id,
                title=item.title,
                content=item.content,
                source_url=item.source_url,
                source_name=item.source_name,
                relevance_score=item.relevance_score,
            )
            for item in kept
        ])
        db.add(WebhookLog(
            user_id=user_id,
            webhook_type=WebhookType.RECEIVE_UPDATES,
            payload=dump_json(raw_payload if raw_payload is not None else {}),
            response=dump_json({"saved_count": len(kept), "threshold": threshold}),
            status=WebhookStatus.SUCCESS,
        ))

    logger.info(f"Received {len(updates)} updates for {user_id}, saved {len(kept)} (threshold: {threshold})")
    return IngestResult(received=len(updates), saved=len(kept), threshold=threshold)


def mark_delivered(
    db: Session,
    update_id: int,
    now: Optional[datetime] = None,
) -> Optional[Update]:
    """
    Flag an update as delivered.

    Only the first call stamps delivered_at; repeating it is a no-op.

    Args:
        db: Database session
        update_id: Update to mark
        now: Delivery time, defaults to the current UTC time

    Returns:
        The Update, or None if it does not exist
    """
    with transaction(db):
        db.query(Update).filter(
            Update.id == update_id,
            Update.delivered.is_(False),
        ).update(
            {Update.delivered: True, Update.delivered_at: now or utc_now()},
            synchronize_session=False,
        )

    return db.query(Update).populate_existing().filter(Update.id == update_id).first()


def get_user_updates(
    db: Session,
    user_id: uuid.UUID,
    limit: Optional[int] = None,
    min_relevance: Optional[float] = None,
    delivered: Optional[bool] = None,
    search: Optional[str] = None,
    source: Optional[str] = None,
) -> List[Update]:
    """
    An account's stored updates, newest first.

    Args:
        db: Database session
        user_id: Owning account
        limit: Maximum number of rows
        min_relevance: Only updates scoring at least this much
        delivered: Only delivered (True) or undelivered (False) updates
        search: Case-insensitive match on title or content
        source: Exact source name

    Returns:
        Matching updates
    """
    query = db.query(Update).filter(Update.user_id == user_id)

    if delivered is not None:
        query = query.filter(Update.delivered.is_(delivered))
    if min_relevance is not None:
        query = query.filter(Update.relevance_score >= min_relevance)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Update.title.ilike(pattern), Update.content.ilike(pattern)))
    if source:
        query = query.filter(Update.source_name == source)

    query = query.order_by(Update.created_at.desc(), Update.id.desc())

    if limit:
        query = query.limit(limit)

    return query.all()
