"""
리스팅 가격 구성 흐름
"""

from .payload import (
    build_calculation_product,
    build_product_payload,
    countries_to_price,
    new_group_code,
)
from .session import CalculationInProgressError, PricingSession, StaleCalculationError

__all__ = [
    "PricingSession",
    "CalculationInProgressError",
    "StaleCalculationError",
    "build_calculation_product",
    "build_product_payload",
    "countries_to_price",
    "new_group_code",
]
