"""
마진 선택 데이터 모델
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, Set

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from listing_pricing.monitoring import get_logger

logger = get_logger(__name__)


class MarginType(str, Enum):
    """마진 종류"""

    SELLER_CATEGORY = "sellerCategory"  # 판매자 카테고리
    BRAND = "brand"  # 브랜드
    PRODUCT_CATEGORY = "productCategory"  # 상품 카테고리
    CONDITION_CATEGORY = "conditionCategory"  # 상태 카테고리
    CUSTOMER_CATEGORY = "customerCategory"  # 고객 카테고리


# 판매자 카테고리 마진이 선택되어야만 켤 수 있는 마진
DEPENDENT_MARGINS = frozenset(
    {MarginType.BRAND, MarginType.PRODUCT_CATEGORY, MarginType.CONDITION_CATEGORY}
)

_FIELD_BY_TYPE = {
    MarginType.SELLER_CATEGORY: "seller_category",
    MarginType.BRAND: "brand",
    MarginType.PRODUCT_CATEGORY: "product_category",
    MarginType.CONDITION_CATEGORY: "condition_category",
    MarginType.CUSTOMER_CATEGORY: "customer_category",
}


class MarginSelection(BaseModel):
    """적용할 마진 종류 선택"""

    seller_category: bool = Field(default=False)
    brand: bool = Field(default=False)
    product_category: bool = Field(default=False)
    condition_category: bool = Field(default=False)
    customer_category: bool = Field(default=False)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def is_selected(self, margin_type: str) -> bool:
        """마진 종류 선택 여부 (알 수 없는 종류는 False)"""
        try:
            field = _FIELD_BY_TYPE[MarginType(margin_type)]
        except ValueError:
            return False
        return getattr(self, field)

    @property
    def selected_types(self) -> Set[MarginType]:
        return {t for t in MarginType if self.is_selected(t)}

    @property
    def any_selected(self) -> bool:
        return bool(self.selected_types)

    def toggle(self, margin_type: MarginType) -> MarginSelection:
        """
        마진 선택 토글

        판매자 카테고리를 끄면 종속 마진도 함께 꺼진다.
        판매자 카테고리가 꺼진 상태에서 종속 마진을 켜려고 하면 변경하지 않는다.

        Args:
            margin_type: 토글할 마진 종류

        Returns:
            새 MarginSelection
        """
        margin_type = MarginType(margin_type)
        field = _FIELD_BY_TYPE[margin_type]
        turning_on = not getattr(self, field)

        if margin_type in DEPENDENT_MARGINS and turning_on and not self.seller_category:
            logger.warning("Please enable Seller Category margin first", margin_type=margin_type.value)
            return self

        updates = {field: turning_on}
        if margin_type is MarginType.SELLER_CATEGORY and not turning_on:
            for dependent in DEPENDENT_MARGINS:
                updates[_FIELD_BY_TYPE[dependent]] = False
        return self.model_copy(update=updates)

    def as_payload(self) -> Dict[str, bool]:
        """계산 요청용 딕셔너리 (camelCase 키)"""
        return self.model_dump(by_alias=True)

    @classmethod
    def from_margin_lines(cls, margin_types: Iterable[str]) -> MarginSelection:
        """기존 계산 결과의 마진 종류로부터 선택 복원"""
        values: Dict[str, bool] = {}
        for margin_type in margin_types:
            try:
                values[_FIELD_BY_TYPE[MarginType(margin_type)]] = True
            except ValueError:
                logger.debug(f"알 수 없는 마진 종류 무시: {margin_type}")
        return cls(**values)
