"""Schemas for subscription pricing."""
from pydantic import BaseModel, Field
from typing import Optional


class PriceBreakdown(BaseModel):
    """Every intermediate of the price formula."""
    base_price: int
    frequency: str
    frequency_multiplier: int
    base_with_frequency: int
    sources_count: int
    source_price: int
    sources_cost: int
    delivery_method: str
    delivery_cost: int


class Pricing(BaseModel):
    """Monthly price with its breakdown."""
    breakdown: PriceBreakdown
    total: int
    monthly: int
    annually: int
    total_formatted: str
    annually_formatted: str


class CalculatePriceRequest(BaseModel):
    """Request schema for /api/calculate-price endpoint."""
    frequency: Optional[str] = Field(None, description="daily, weekly or monthly")
    sources_count: Optional[int] = Field(None, description="Number of approved sources")
    delivery_method: Optional[str] = Field(None, description="email, dashboard or slack")


class CalculatePriceResponse(BaseModel):
    """Response schema for /api/calculate-price endpoint."""
    success: bool
    pricing: Pricing
