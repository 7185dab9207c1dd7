"""Update model for externally produced news items."""
from sqlalchemy import Column, String, Text, Integer, Float, Boolean, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.db import utc_now


class Update(Base):
    """News/event item that passed an account's relevance threshold."""
    __tablename__ = "updates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("accounts.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False, default="")
    source_url = Column(String, nullable=False, default="")
    source_name = Column(String, nullable=False, default="")
    relevance_score = Column(Float, nullable=False)  # Computed upstream
    delivered = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    delivered_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    account = relationship("Account", back_populates="updates")

    __table_args__ = (
        Index("idx_updates_user_created", "user_id", "created_at"),
    )
