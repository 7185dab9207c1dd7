"""Subscription price calculation.

The same function backs the live price preview and the price stamped into a
profile at submission, so the two can never disagree.
"""
from typing import Any

from app.constants import DeliveryMethod, Frequency
from app.schemas.pricing import Pricing, PriceBreakdown
from app.utils.exceptions import InvalidInputError

BASE_PRICE = 10
SOURCE_PRICE = 2

FREQUENCY_MULTIPLIERS = {
    Frequency.DAILY: 3,
    Frequency.WEEKLY: 2,
    Frequency.MONTHLY: 1,
}

DELIVERY_COSTS = {
    DeliveryMethod.EMAIL: 0,
    DeliveryMethod.DASHBOARD: 5,
    DeliveryMethod.SLACK: 10,
}


def calculate_price(frequency: Any, sources_count: Any, delivery_method: Any) -> Pricing:
    """
    Calculate the monthly price for a monitoring configuration.

    total = BASE_PRICE * frequency multiplier + sources_count * SOURCE_PRICE + delivery cost

    Args:
        frequency: daily, weekly or monthly
        sources_count: Number of approved sources (non-negative integer)
        delivery_method: email, dashboard or slack

    Returns:
        Pricing with the full breakdown, monthly total and annual total

    Raises:
        InvalidInputError: If any input is outside its allowed values
    """
    if not isinstance(frequency, str) or frequency not in FREQUENCY_MULTIPLIERS:
        raise InvalidInputError(f"Invalid frequency: {frequency}", field="frequency")

    if isinstance(sources_count, bool) or not isinstance(sources_count, int) or sources_count < 0:
        raise InvalidInputError("Invalid sources count", field="sources_count")

    if not isinstance(delivery_method, str) or delivery_method not in DELIVERY_COSTS:
        raise InvalidInputError(f"Invalid delivery method: {delivery_method}", field="delivery_method")

    frequency_multiplier = FREQUENCY_MULTIPLIERS[frequency]
    base_with_frequency = BASE_PRICE * frequency_multiplier
    sources_cost = sources_count * SOURCE_PRICE
    delivery_cost = DELIVERY_COSTS[delivery_method]

    total = base_with_frequency + sources_cost + delivery_cost
    annually = total * 12

    return Pricing(
        breakdown=PriceBreakdown(
            base_price=BASE_PRICE,
            frequency=frequency,
            frequency_multiplier=frequency_multiplier,
            base_with_frequency=base_with_frequency,
            sources_count=sources_count,
            source_price=SOURCE_PRICE,
            sources_cost=sources_cost,
            delivery_method=delivery_method,
            delivery_cost=delivery_cost,
        ),
        total=total,
        monthly=total,
        annually=annually,
        total_formatted=f"${total:.2f}/month",
        annually_formatted=f"${annually:.2f}/year",
    )
