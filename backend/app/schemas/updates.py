"""Schemas for update ingestion and listing."""
import uuid
from pydantic import BaseModel, Field, model_validator
from typing import List, Optional

from app.constants import DEFAULT_RELEVANCE_SCORE
from app.utils.serialization import serialize_datetime, serialize_uuid


class IncomingUpdate(BaseModel):
    """
    One update item pushed by the automation platform.

    Accepts the alternate field names the platform emits
    (description/url/source) alongside the stored names.
    """
    title: str = Field(..., min_length=1)
    content: str = ""
    source_url: str = ""
    source_name: str = ""
    relevance_score: float = DEFAULT_RELEVANCE_SCORE

    @model_validator(mode="before")
    @classmethod
    def map_alternate_fields(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if not data.get("content"):
            data["content"] = data.get("description") or ""
        if not data.get("source_url"):
            data["source_url"] = data.get("url") or ""
        if not data.get("source_name"):
            data["source_name"] = data.get("source") or ""
        if data.get("relevance_score") is None:
            data["relevance_score"] = DEFAULT_RELEVANCE_SCORE
        return data


class ReceiveUpdatesRequest(BaseModel):
    """Request schema for /api/receive-updates endpoint."""
    user_id: uuid.UUID
    profile_id: Optional[uuid.UUID] = Field(None, description="Profile whose threshold governs this batch")
    updates: List[IncomingUpdate]


class ReceiveUpdatesResponse(BaseModel):
    """Response schema for /api/receive-updates endpoint."""
    success: bool
    message: str
    updates_received: int
    updates_saved: int
    threshold: float


class UpdateResponse(BaseModel):
    """Stored update."""
    id: int
    user_id: str
    title: str
    content: str
    source_url: str
    source_name: str
    relevance_score: float
    delivered: bool
    created_at: Optional[str] = None
    delivered_at: Optional[str] = None

    @classmethod
    def from_orm(cls, obj) -> "UpdateResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=obj.id,
            user_id=serialize_uuid(obj.user_id),
            title=obj.title,
            content=obj.content or "",
            source_url=obj.source_url or "",
            source_name=obj.source_name or "",
            relevance_score=obj.relevance_score,
            delivered=obj.delivered,
            created_at=serialize_datetime(obj.created_at),
            delivered_at=serialize_datetime(obj.delivered_at),
        )


class UpdateListResponse(BaseModel):
    """Response schema for update listings."""
    success: bool
    count: int
    updates: List[UpdateResponse]


class MarkDeliveredResponse(BaseModel):
    """Response schema for /api/updates/{update_id}/delivered endpoint."""
    success: bool
    update: UpdateResponse
