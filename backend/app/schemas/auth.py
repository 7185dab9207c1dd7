"""Schemas for signup, login and account info."""
from pydantic import BaseModel, Field
from typing import Optional


class SignupRequest(BaseModel):
    """Request schema for /api/auth/signup endpoint."""
    full_name: str = Field(..., min_length=1)
    company_name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Request schema for /api/auth/login endpoint."""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    """Response schema for signup and login."""
    success: bool
    user_id: str
    message: str


class AuthStatusResponse(BaseModel):
    """Response schema for /api/auth/status endpoint."""
    authenticated: bool
    user_id: Optional[str] = None


class AccountResponse(BaseModel):
    """Account details without credentials."""
    user_id: str
    email: str
    full_name: str
    company_name: str
    created_at: Optional[str] = None
    last_login: Optional[str] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_orm(cls, obj) -> "AccountResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            user_id=str(obj.user_id),
            email=obj.email,
            full_name=obj.full_name,
            company_name=obj.company_name,
            created_at=obj.created_at.isoformat() if obj.created_at else None,
            last_login=obj.last_login.isoformat() if obj.last_login else None,
        )


class AccountInfoResponse(BaseModel):
    """Response schema for /api/user/account endpoint."""
    success: bool
    account: AccountResponse
