"""Pydantic schemas for request/response validation."""
from app.schemas.pricing import Pricing, PriceBreakdown, CalculatePriceRequest
from app.schemas.auth import SignupRequest, LoginRequest, AccountResponse
from app.schemas.profile import SubmitProfileRequest, SourceIn, PreferencesIn
from app.schemas.updates import IncomingUpdate, ReceiveUpdatesRequest
from app.schemas.admin import AdminStats

__all__ = [
    "Pricing",
    "PriceBreakdown",
    "CalculatePriceRequest",
    "SignupRequest",
    "LoginRequest",
    "AccountResponse",
    "SubmitProfileRequest",
    "SourceIn",
    "PreferencesIn",
    "IncomingUpdate",
    "ReceiveUpdatesRequest",
    "AdminStats",
]
