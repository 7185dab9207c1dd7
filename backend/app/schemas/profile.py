"""Schemas for monitoring profiles, sources and preferences."""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Union

from app.constants import DEFAULT_RELEVANCE_THRESHOLD
from app.schemas.pricing import Pricing
from app.utils.serialization import serialize_datetime, serialize_uuid


class SourceIn(BaseModel):
    """Source approved in the wizard."""
    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    description: Optional[str] = ""
    suggested_by_ai: bool = False
    approved: bool = True


class PreferencesIn(BaseModel):
    """Preference settings; omitted fields take their defaults on save."""
    relevance_threshold: Optional[int] = Field(None, ge=0)
    competitor_urls: Optional[Union[List[str], str]] = None
    keyword_alerts: Optional[str] = None

    @field_validator("competitor_urls")
    @classmethod
    def join_competitor_urls(cls, value):
        if isinstance(value, list):
            return ",".join(u.strip() for u in value if u and u.strip())
        return value

    def resolved(self) -> dict:
        """Values to store, with defaults for missing fields."""
        return {
            "relevance_threshold": (
                self.relevance_threshold
                if self.relevance_threshold is not None
                else DEFAULT_RELEVANCE_THRESHOLD
            ),
            "competitor_urls": self.competitor_urls or "",
            "keyword_alerts": self.keyword_alerts or "",
        }


class SubmitProfileRequest(BaseModel):
    """Request schema for /api/submit-profile endpoint."""
    business_description: str = Field(..., min_length=1)
    topics: Union[List[str], str]
    frequency: str
    delivery_method: str
    approved_sources: List[SourceIn]
    preferences: Optional[PreferencesIn] = None

    @field_validator("topics")
    @classmethod
    def normalize_topics(cls, value):
        if isinstance(value, str):
            value = value.split(",")
        elif any("," in t for t in value if t):
            # Topics are stored comma-joined
            raise ValueError("topics must not contain commas")
        topics = [t.strip() for t in value if t and t.strip()]
        if not topics:
            raise ValueError("at least one topic is required")
        return topics


class SubmitProfileResponse(BaseModel):
    """Response schema for /api/submit-profile endpoint."""
    success: bool
    user_id: str
    profile_id: str
    pricing: Pricing
    message: str
    make_status: str


class SourceResponse(BaseModel):
    """Source as returned to the owner."""
    id: int
    profile_id: str
    name: str
    url: str
    description: str
    approved: bool
    suggested_by_ai: bool
    display_order: int

    @classmethod
    def from_orm(cls, obj) -> "SourceResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=obj.id,
            profile_id=serialize_uuid(obj.profile_id),
            name=obj.name,
            url=obj.url,
            description=obj.description or "",
            approved=obj.approved,
            suggested_by_ai=obj.suggested_by_ai,
            display_order=obj.display_order,
        )


class PreferencesResponse(BaseModel):
    """Stored preferences for a profile."""
    profile_id: str
    relevance_threshold: int
    competitor_urls: str
    keyword_alerts: str
    updated_at: Optional[str] = None

    @classmethod
    def from_orm(cls, obj) -> "PreferencesResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            profile_id=serialize_uuid(obj.profile_id),
            relevance_threshold=obj.relevance_threshold,
            competitor_urls=obj.competitor_urls or "",
            keyword_alerts=obj.keyword_alerts or "",
            updated_at=serialize_datetime(obj.updated_at),
        )


class ProfileResponse(BaseModel):
    """Profile summary."""
    id: str
    user_id: str
    business_description: str
    topics: List[str]
    frequency: str
    delivery_method: str
    price: float
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_orm(cls, obj) -> "ProfileResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=serialize_uuid(obj.id),
            user_id=serialize_uuid(obj.user_id),
            business_description=obj.business_description,
            topics=obj.topic_list,
            frequency=obj.frequency,
            delivery_method=obj.delivery_method,
            price=obj.price,
            created_at=serialize_datetime(obj.created_at),
            updated_at=serialize_datetime(obj.updated_at),
        )


class ProfileDetailResponse(BaseModel):
    """Profile with its approved sources and preferences."""
    success: bool
    profile: ProfileResponse
    sources: List[SourceResponse]
    preferences: Optional[PreferencesResponse] = None


class ProfileListResponse(BaseModel):
    """Response schema for /api/user/profiles endpoint."""
    success: bool
    count: int
    profiles: List[ProfileResponse]


class SourceListResponse(BaseModel):
    """Response schema for /api/user/sources endpoint."""
    success: bool
    count: int
    sources: List[SourceResponse]
