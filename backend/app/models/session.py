"""Login session model."""
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from app.database import Base
from app.utils.db import utc_now


class Session(Base):
    """
    Login session issued at signup/login.

    A row is only valid while now < expires_at; expired rows linger until
    purged and must be treated as absent by lookups.
    """
    __tablename__ = "auth_sessions"

    session_id = Column(String, primary_key=True)  # Opaque token stored in the cookie
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("accounts.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    # Relationships
    account = relationship("Account", back_populates="sessions")
