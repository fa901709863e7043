"""
데이터 모델
"""

from .cost import CostField, CostModule, CostType, CostUnit
from .deliverable import CostLine, CountryDeliverable, MarginLine
from .margin import MarginSelection, MarginType
from .product import GROUP_LEVEL_FIELDS, Country, CountryPrice, PriceSlot, ProductVariantRow

__all__ = [
    "Country",
    "CountryPrice",
    "PriceSlot",
    "ProductVariantRow",
    "GROUP_LEVEL_FIELDS",
    "CostType",
    "CostField",
    "CostUnit",
    "CostModule",
    "MarginType",
    "MarginSelection",
    "MarginLine",
    "CostLine",
    "CountryDeliverable",
]
