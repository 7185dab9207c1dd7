"""Account model for signed-up customers."""
from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.orm import relationship
import uuid
from app.database import Base
from app.utils.db import utc_now


class Account(Base):
    """Customer account; owns sessions, profiles and updates."""
    __tablename__ = "accounts"

    user_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)  # bcrypt, never the raw password
    full_name = Column(String, nullable=False)
    company_name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    sessions = relationship("Session", back_populates="account", cascade="all, delete-orphan", passive_deletes=True)
    profiles = relationship("Profile", back_populates="account", cascade="all, delete-orphan", passive_deletes=True)
    updates = relationship("Update", back_populates="account", cascade="all, delete-orphan", passive_deletes=True)
