"""Repository for monitoring profiles, their sources and preferences.

Writers flush inside the caller's transaction (see app.utils.db.transaction)
so that a profile, its sources and its preferences land all-or-nothing.
"""
import uuid
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.constants import DEFAULT_RELEVANCE_THRESHOLD
from app.models.preference import Preference
from app.models.profile import Profile, TOPIC_SEPARATOR
from app.models.source import Source
from app.schemas.pricing import Pricing
from app.schemas.profile import SourceIn, SubmitProfileRequest
from app.services.pricing import calculate_price
from app.utils.db import get_by_id, transaction, utc_now
from app.utils.exceptions import ForbiddenError, StorageError
from app.utils.logger import get_logger

logger = get_logger("profiles")

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def create_profile(
    db: Session,
    user_id: uuid.UUID,
    business_description: str,
    topics: Union[Sequence[str], str],
    frequency: str,
    delivery_method: str,
    price: float,
) -> Profile:
    """
    Insert a profile.

    Args:
        db: Database session
        user_id: Owning account
        business_description: Free-text business description
        topics: Topic list (joined with ", ") or an already-joined string
        frequency: daily, weekly or monthly
        delivery_method: email, dashboard or slack
        price: Monthly price snapshot

    Returns:
        The flushed Profile

    Raises:
        StorageError: On constraint violations such as an unknown account
    """
    if not isinstance(topics, str):
        topics = TOPIC_SEPARATOR.join(topics)

    profile = Profile(
        id=uuid.uuid4(),
        user_id=user_id,
        business_description=business_description,
        topics=topics,
        frequency=frequency,
        delivery_method=delivery_method,
        price=price,
    )

    try:
        db.add(profile)
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Failed to create profile for account {user_id}: {e}")
        raise StorageError("Failed to create profile") from e

    return profile


def save_sources(
    db: Session,
    profile_id: uuid.UUID,
    sources: Sequence[Union[SourceIn, Dict[str, Any]]],
) -> List[Source]:
    """
    Insert a profile's sources in order.

    display_order is the position in the given sequence (0-based). Runs
    inside the caller's transaction, so a failure leaves no partial set.

    Args:
        db: Database session
        profile_id: Owning profile
        sources: Sources as submitted

    Returns:
        The flushed Source rows
    """
    rows = []
    for index, source in enumerate(sources):
        data = source.model_dump() if isinstance(source, SourceIn) else dict(source)
        rows.append(Source(
            profile_id=profile_id,
            url=data["url"],
            name=data["name"],
            description=data.get("description") or "",
            approved=data.get("approved") is not False,
            suggested_by_ai=bool(data.get("suggested_by_ai")),
            display_order=index,
        ))

    try:
        db.add_all(rows)
        db.flush()
    except SQLAlchemyError as e:
        logger.error(f"Failed to save {len(rows)} sources for profile {profile_id}: {e}")
        raise StorageError("Failed to save sources") from e

    return rows


def save_preferences(
    db: Session,
    profile_id: uuid.UUID,
    relevance_threshold: int = DEFAULT_RELEVANCE_THRESHOLD,
    competitor_urls: str = "",
    keyword_alerts: str = "",
) -> Preference:
    """
    Create or replace a profile's preferences.

    Uses the database's INSERT ... ON CONFLICT so concurrent saves cannot
    produce two rows; a later save overwrites every field.

    Args:
        db: Database session
        profile_id: Profile the preferences belong to
        relevance_threshold: Minimum relevance score for updates
        competitor_urls: Comma-joined competitor URLs
        keyword_alerts: Free-text keyword alerts

    Returns:
        The stored Preference

    Raises:
        StorageError: If the profile does not exist or the write fails
    """
    now = utc_now()
    values = {
        "profile_id": profile_id,
        "relevance_threshold": relevance_threshold,
        "competitor_urls": competitor_urls,
        "keyword_alerts": keyword_alerts,
        "created_at": now,
        "updated_at": now,
    }

    dialect = db.get_bind().dialect.name
    insert = _UPSERT_DIALECTS.get(dialect)
    if insert is None:
        raise StorageError(f"Preference upsert is not supported on {dialect}")

    stmt = insert(Preference).values(**values)
    stmt = stmt.on_conflict_do_update(
        index_elements=[Preference.profile_id],
        set_={
            "relevance_threshold": stmt.excluded.relevance_threshold,
            "competitor_urls": stmt.excluded.competitor_urls,
            "keyword_alerts": stmt.excluded.keyword_alerts,
            "updated_at": stmt.excluded.updated_at,
        },
    )

    try:
        db.execute(stmt)
    except SQLAlchemyError as e:
        logger.error(f"Failed to save preferences for profile {profile_id}: {e}")
        raise StorageError("Failed to save preferences") from e

    return db.query(Preference).populate_existing().filter(Preference.profile_id == profile_id).one()


def get_profile(db: Session, profile_id: Union[uuid.UUID, str]) -> Optional[Profile]:
    """Get a profile by id, or None."""
    return get_by_id(db, Profile, profile_id)


def get_owned_profile(db: Session, profile_id: Union[uuid.UUID, str], user_id: uuid.UUID) -> Optional[Profile]:
    """
    Get a profile and check it belongs to the account.

    Returns:
        Profile, or None if it does not exist

    Raises:
        ForbiddenError: If the profile belongs to another account
    """
    profile = get_profile(db, profile_id)
    if profile and profile.user_id != user_id:
        raise ForbiddenError("Access denied: You don't have permission to access this profile")
    return profile


def get_preferences(db: Session, profile_id: Union[uuid.UUID, str]) -> Optional[Preference]:
    """Get a profile's preferences, or None."""
    return get_by_id(db, Preference, profile_id, id_field="profile_id")


def get_profile_sources(db: Session, profile_id: uuid.UUID) -> List[Source]:
    """Approved sources of a profile in display order."""
    return db.query(Source).filter(
        Source.profile_id == profile_id,
        Source.approved.is_(True),
    ).order_by(Source.display_order.asc()).all()


def get_user_sources(db: Session, user_id: uuid.UUID) -> List[Source]:
    """Approved sources across an account's profiles (newest profile first, then display order)."""
    return db.query(Source).join(Profile, Source.profile_id == Profile.id).filter(
        Profile.user_id == user_id,
        Source.approved.is_(True),
    ).order_by(Profile.created_at.desc(), Source.display_order.asc()).all()


def get_user_profiles(db: Session, user_id: uuid.UUID) -> List[Profile]:
    """All profiles of an account, newest first."""
    return db.query(Profile).filter(
        Profile.user_id == user_id,
    ).order_by(Profile.created_at.desc()).all()


def submit_profile(
    db: Session,
    user_id: uuid.UUID,
    request: SubmitProfileRequest,
) -> Tuple[Profile, Pricing]:
    """
    Price and store a submitted wizard profile.

    The price is computed before anything is written. Profile, sources and
    preferences are committed in one transaction.

    Args:
        db: Database session
        user_id: Owning account
        request: Validated submission

    Returns:
        (stored Profile, Pricing used for its price)

    Raises:
        InvalidInputError: If frequency or delivery method is invalid
        StorageError: If any write fails (nothing is kept)
    """
    pricing = calculate_price(
        request.frequency,
        len(request.approved_sources),
        request.delivery_method,
    )

    with transaction(db):
        profile = create_profile(
            db,
            user_id=user_id,
            business_description=request.business_description,
            topics=request.topics,
            frequency=request.frequency,
            delivery_method=request.delivery_method,
            price=pricing.total,
        )
        save_sources(db, profile.id, request.approved_sources)
        if request.preferences is not None:
            save_preferences(db, profile.id, **request.preferences.resolved())

    logger.info(
        f"Stored profile {profile.id} for account {user_id} "
        f"({len(request.approved_sources)} sources, ${pricing.total}/month)"
    )
    return profile, pricing


def build_automation_payload(
    profile: Profile,
    sources: Sequence[Union[SourceIn, Source]],
    preferences: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Body sent to the automation platform for a newly submitted profile."""
    return {
        "user_id": str(profile.user_id),
        "profile_id": str(profile.id),
        "business_description": profile.business_description,
        "topics": profile.topic_list,
        "frequency": profile.frequency,
        "delivery_method": profile.delivery_method,
        "price": profile.price,
        "approved_sources": [
            {"name": s.name, "url": s.url, "description": s.description or ""}
            for s in sources
        ],
        "preferences": preferences or {},
        "timestamp": utc_now().isoformat(),
    }
