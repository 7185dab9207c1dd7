"""Admin dashboard endpoints."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.auth.api_key import verify_admin_key
from app.constants import POPULAR_TOPICS_LIMIT, RECENT_PROFILES_LIMIT
from app.database import get_db
from app.schemas.admin import AdminStatsResponse
from app.schemas.profile import ProfileResponse
from app.services.admin_stats import get_admin_stats
from app.utils.exceptions import AppException, handle_database_error
from app.utils.logger import logger

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(verify_admin_key)])


@router.get("/stats", response_model=AdminStatsResponse)
async def admin_stats(
    top_n: int = Query(POPULAR_TOPICS_LIMIT, ge=1, le=100),
    recent: int = Query(RECENT_PROFILES_LIMIT, ge=0, le=500),
    db: Session = Depends(get_db),
) -> AdminStatsResponse:
    """
    Totals, revenue, frequency breakdown and popular topics.

    Args:
        top_n: Number of popular topic groups
        recent: Number of newest profiles to include
        db: Database session

    Returns:
        Aggregated stats and the newest profiles
    """
    try:
        stats, profiles = get_admin_stats(db, top_n=top_n, recent=recent)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Admin stats error: {e}", exc_info=True)
        raise handle_database_error(e, "admin stats")

    return AdminStatsResponse(
        success=True,
        stats=stats,
        recent_profiles=[ProfileResponse.from_orm(p) for p in profiles],
    )
