"""Monitoring profile model."""
from sqlalchemy import Column, String, Text, Float, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
import uuid
from app.database import Base
from app.utils.db import utc_now

TOPIC_SEPARATOR = ", "


class Profile(Base):
    """Monitoring configuration owned by an account."""
    __tablename__ = "profiles"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("accounts.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    business_description = Column(Text, nullable=False)
    topics = Column(Text, nullable=False)  # Joined with ", "; order is display-only
    frequency = Column(String(20), nullable=False)  # daily|weekly|monthly
    delivery_method = Column(String(20), nullable=False)  # email|dashboard|slack
    price = Column(Float, nullable=False)  # Snapshot at submission, never recomputed
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    # Relationships
    account = relationship("Account", back_populates="profiles")
    sources = relationship(
        "Source",
        back_populates="profile",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Source.display_order",
    )
    preference = relationship(
        "Preference",
        back_populates="profile",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def topic_list(self) -> list[str]:
        return [t.strip() for t in (self.topics or "").split(",") if t.strip()]
