"""Price preview endpoint."""
from fastapi import APIRouter

from app.schemas.pricing import CalculatePriceRequest, CalculatePriceResponse
from app.services.pricing import calculate_price
from app.utils.exceptions import InvalidInputError

router = APIRouter(prefix="/api", tags=["pricing"])


@router.post("/calculate-price", response_model=CalculatePriceResponse)
async def calculate_price_preview(request: CalculatePriceRequest) -> CalculatePriceResponse:
    """
    Price a configuration without storing anything.

    Uses the same calculation as profile submission.
    """
    if request.frequency is None or request.sources_count is None or request.delivery_method is None:
        raise InvalidInputError("All pricing parameters are required")

    pricing = calculate_price(request.frequency, request.sources_count, request.delivery_method)
    return CalculatePriceResponse(success=True, pricing=pricing)
