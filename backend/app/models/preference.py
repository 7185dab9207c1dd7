"""Per-profile preference settings."""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from app.database import Base
from app.constants import DEFAULT_RELEVANCE_THRESHOLD
from app.utils.db import utc_now


class Preference(Base):
    """Preferences keyed by profile; the primary key keeps it one row per profile."""
    __tablename__ = "preferences"

    profile_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    relevance_threshold = Column(Integer, nullable=False, default=DEFAULT_RELEVANCE_THRESHOLD)
    competitor_urls = Column(Text, nullable=False, default="")  # Comma-joined
    keyword_alerts = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    # Relationships
    profile = relationship("Profile", back_populates="preference")
