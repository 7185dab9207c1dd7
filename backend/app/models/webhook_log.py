"""Append-only audit log of integration traffic."""
from sqlalchemy import Column, String, Text, Integer, DateTime, Uuid
from app.database import Base
from app.utils.db import utc_now


class WebhookLog(Base):
    """One inbound or outbound webhook event."""
    __tablename__ = "webhook_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), nullable=True, index=True)  # Kept after account deletion
    webhook_type = Column(String(50), nullable=False)  # profile_submission|receive_updates
    payload = Column(Text, nullable=True)  # JSON
    response = Column(Text, nullable=True)  # JSON
    status = Column(String(20), nullable=False)  # success|failed
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
