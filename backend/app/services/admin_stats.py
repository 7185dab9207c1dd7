"""Read-only rollups for the admin dashboard."""
from typing import List, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.constants import POPULAR_TOPICS_LIMIT, RECENT_PROFILES_LIMIT
from app.models.account import Account
from app.models.profile import Profile
from app.schemas.admin import AdminStats, FrequencyCount, TopicCount
from app.utils.db import transaction


def get_admin_stats(
    db: Session,
    top_n: int = POPULAR_TOPICS_LIMIT,
    recent: int = RECENT_PROFILES_LIMIT,
) -> Tuple[AdminStats, List[Profile]]:
    """
    Aggregate account and profile counts, revenue and popular topics.

    Topics are grouped by their exact stored string, so differently worded
    but equivalent topic lists are counted separately.

    Args:
        db: Database session
        top_n: Number of topic groups to return
        recent: Number of newest profiles to return

    Returns:
        (AdminStats, newest profiles)
    """
    with transaction(db):
        total_accounts = db.query(func.count(Account.user_id)).scalar() or 0
        total_profiles = db.query(func.count(Profile.id)).scalar() or 0
        total_mrr = db.query(func.sum(Profile.price)).scalar() or 0

        frequency_rows = db.query(
            Profile.frequency, func.count(Profile.id),
        ).group_by(Profile.frequency).order_by(Profile.frequency).all()

        topic_count = func.count(Profile.id).label("count")
        topic_rows = db.query(Profile.topics, topic_count).group_by(
            Profile.topics,
        ).order_by(topic_count.desc(), Profile.topics).limit(top_n).all()

        profiles = db.query(Profile).order_by(Profile.created_at.desc()).limit(recent).all()

    stats = AdminStats(
        total_accounts=total_accounts,
        total_profiles=total_profiles,
        total_mrr=float(total_mrr),
        average_price=float(total_mrr) / total_profiles if total_profiles else 0.0,
        frequency_breakdown=[FrequencyCount(frequency=f, count=c) for f, c in frequency_rows],
        popular_topics=[TopicCount(topics=t, count=c) for t, c in topic_rows],
    )
    return stats, profiles
