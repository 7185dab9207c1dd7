"""Account-scoped read endpoints for the dashboard."""
import uuid
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth.session import require_auth
from app.database import get_db
from app.schemas.auth import AccountInfoResponse, AccountResponse
from app.schemas.profile import ProfileListResponse, ProfileResponse, SourceListResponse, SourceResponse
from app.schemas.updates import UpdateListResponse, UpdateResponse
from app.services.accounts import get_account
from app.services.profiles import get_user_profiles, get_user_sources
from app.services.updates import get_user_updates
from app.utils.exceptions import not_found_error

router = APIRouter(prefix="/api/user", tags=["user"])


@router.get("/updates", response_model=UpdateListResponse)
async def list_my_updates(
    search: Optional[str] = Query(None, description="Match on title or content"),
    source: Optional[str] = Query(None, description="Exact source name"),
    min_relevance: Optional[float] = Query(None, alias="minRelevance", ge=0),
    limit: Optional[int] = Query(None, ge=1, le=500),
    delivered: Optional[bool] = Query(None),
    user_id: uuid.UUID = Depends(require_auth),
    db: Session = Depends(get_db),
) -> UpdateListResponse:
    """
    List the caller's stored updates, newest first.

    Args:
        search: Case-insensitive text filter
        source: Source name filter
        min_relevance: Minimum relevance score
        limit: Maximum number of updates
        delivered: Delivery state filter
        user_id: Authenticated account id
        db: Database session

    Returns:
        Matching updates with their count
    """
    updates = get_user_updates(
        db,
        user_id,
        limit=limit,
        min_relevance=min_relevance,
        delivered=delivered,
        search=search,
        source=source,
    )
    return UpdateListResponse(
        success=True,
        count=len(updates),
        updates=[UpdateResponse.from_orm(u) for u in updates],
    )


@router.get("/sources", response_model=SourceListResponse)
async def list_my_sources(
    user_id: uuid.UUID = Depends(require_auth),
    db: Session = Depends(get_db),
) -> SourceListResponse:
    """List approved sources across the caller's profiles."""
    sources = get_user_sources(db, user_id)
    return SourceListResponse(
        success=True,
        count=len(sources),
        sources=[SourceResponse.from_orm(s) for s in sources],
    )


@router.get("/profiles", response_model=ProfileListResponse)
async def list_my_profiles(
    user_id: uuid.UUID = Depends(require_auth),
    db: Session = Depends(get_db),
) -> ProfileListResponse:
    """List the caller's profiles, newest first."""
    profiles = get_user_profiles(db, user_id)
    return ProfileListResponse(
        success=True,
        count=len(profiles),
        profiles=[ProfileResponse.from_orm(p) for p in profiles],
    )


@router.get("/account", response_model=AccountInfoResponse)
async def get_my_account(
    user_id: uuid.UUID = Depends(require_auth),
    db: Session = Depends(get_db),
) -> AccountInfoResponse:
    account = get_account(db, user_id)
    if not account:
        raise not_found_error("Account")
    return AccountInfoResponse(success=True, account=AccountResponse.from_orm(account))
