"""Information source attached to a profile."""
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.db import utc_now


class Source(Base):
    """Approved source for a profile, shown in display_order."""
    __tablename__ = "sources"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    url = Column(String, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    approved = Column(Boolean, nullable=False, default=True)
    suggested_by_ai = Column(Boolean, nullable=False, default=False)
    display_order = Column(Integer, nullable=False, default=0)  # Insertion index within the profile
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    # Relationships
    profile = relationship("Profile", back_populates="sources")

    __table_args__ = (
        UniqueConstraint("profile_id", "display_order", name="uq_source_profile_order"),
    )
