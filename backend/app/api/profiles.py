"""Profile submission and owner profile endpoints."""
import uuid
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth.session import require_auth
from app.database import get_db
from app.schemas.profile import (
    PreferencesIn,
    PreferencesResponse,
    ProfileDetailResponse,
    ProfileResponse,
    SourceResponse,
    SubmitProfileRequest,
    SubmitProfileResponse,
)
from app.services.automation_webhook import notify_profile_submission
from app.services.profiles import (
    build_automation_payload,
    get_owned_profile,
    get_preferences,
    get_profile_sources,
    save_preferences,
    submit_profile,
)
from app.utils.db import transaction
from app.utils.exceptions import AppException, handle_database_error, not_found_error
from app.utils.logger import logger

router = APIRouter(prefix="/api", tags=["profiles"])


@router.post("/submit-profile", response_model=SubmitProfileResponse)
async def submit_profile_endpoint(
    request: SubmitProfileRequest,
    user_id: uuid.UUID = Depends(require_auth),
    db: Session = Depends(get_db),
) -> SubmitProfileResponse:
    """
    Store a completed wizard profile and hand it to the automation platform.

    The profile, its sources and its preferences are committed first; the
    automation webhook is attempted afterwards and only affects make_status.

    Args:
        request: Wizard submission
        user_id: Authenticated account id
        db: Database session

    Returns:
        Submission response with pricing and webhook status
    """
    try:
        profile, pricing = submit_profile(db, user_id, request)
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Profile submission error: {e}", exc_info=True)
        raise handle_database_error(e, "submit profile")

    preferences = request.preferences.resolved() if request.preferences else {}
    payload = build_automation_payload(profile, request.approved_sources, preferences)
    profile_id = payload["profile_id"]
    # Reading the payload reopened a transaction; end it before the network call
    db.commit()

    make_status = await notify_profile_submission(db, user_id, payload)

    return SubmitProfileResponse(
        success=True,
        user_id=str(user_id),
        profile_id=profile_id,
        pricing=pricing,
        message="Profile created successfully",
        make_status=make_status,
    )


@router.get("/profile/{profile_id}", response_model=ProfileDetailResponse)
async def get_profile_detail(
    profile_id: uuid.UUID,
    user_id: uuid.UUID = Depends(require_auth),
    db: Session = Depends(get_db),
) -> ProfileDetailResponse:
    """
    Get one of the caller's profiles with its approved sources and preferences.

    Raises:
        NotFoundError: If the profile does not exist
        ForbiddenError: If it belongs to another account
    """
    profile = get_owned_profile(db, profile_id, user_id)
    if not profile:
        raise not_found_error("Profile", str(profile_id))

    sources = get_profile_sources(db, profile.id)
    preferences = get_preferences(db, profile.id)

    return ProfileDetailResponse(
        success=True,
        profile=ProfileResponse.from_orm(profile),
        sources=[SourceResponse.from_orm(s) for s in sources],
        preferences=PreferencesResponse.from_orm(preferences) if preferences else None,
    )


@router.put("/profile/{profile_id}/preferences", response_model=PreferencesResponse)
async def update_preferences(
    profile_id: uuid.UUID,
    request: PreferencesIn,
    user_id: uuid.UUID = Depends(require_auth),
    db: Session = Depends(get_db),
) -> PreferencesResponse:
    """Replace the preferences of one of the caller's profiles."""
    profile = get_owned_profile(db, profile_id, user_id)
    if not profile:
        raise not_found_error("Profile", str(profile_id))

    try:
        with transaction(db):
            preferences = save_preferences(db, profile.id, **request.resolved())
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Preferences update error: {e}", exc_info=True)
        raise handle_database_error(e, "update preferences")

    return PreferencesResponse.from_orm(preferences)
