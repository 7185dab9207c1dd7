"""Schemas for admin aggregation."""
from pydantic import BaseModel
from typing import List

from app.schemas.profile import ProfileResponse


class FrequencyCount(BaseModel):
    frequency: str
    count: int


class TopicCount(BaseModel):
    topics: str
    count: int


class AdminStats(BaseModel):
    """Rollups across all accounts and profiles."""
    total_accounts: int
    total_profiles: int
    total_mrr: float
    average_price: float
    frequency_breakdown: List[FrequencyCount]
    popular_topics: List[TopicCount]


class AdminStatsResponse(BaseModel):
    """Response schema for /api/admin/stats endpoint."""
    success: bool
    stats: AdminStats
    recent_profiles: List[ProfileResponse]
