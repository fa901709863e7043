"""
비용 모듈 데이터 모델
국가별 배송/핸들링 비용 정의
"""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from listing_pricing.models.types import Amount


class CostType(str, Enum):
    """비용 계산 방식"""

    PERCENTAGE = "Percentage"
    FIXED = "Fixed"


class CostField(str, Enum):
    """비용 적용 대상"""

    PRODUCT = "product"
    DELIVERY = "delivery"


class CostUnit(str, Enum):
    """비용 측정 단위"""

    PC = "pc"
    KG = "kg"
    MOQ = "moq"
    ORDER_AMOUNT = "order amount"
    CART_QUANTITY = "cart quantity"


# 적용 대상별 허용 단위
ALLOWED_UNITS = {
    CostField.PRODUCT: frozenset({CostUnit.PC, CostUnit.KG, CostUnit.MOQ}),
    CostField.DELIVERY: frozenset({CostUnit.ORDER_AMOUNT, CostUnit.CART_QUANTITY}),
}

UNIT_ERRORS = {
    CostField.PRODUCT: "Cost Unit must be pc, kg, or moq for product",
    CostField.DELIVERY: "Cost Unit must be order amount or cart quantity for delivery",
}


class CostModule(BaseModel):
    """비용 모듈 정의"""

    id: str = Field(..., alias="_id", description="비용 모듈 ID")
    name: str = Field(..., description="비용명")
    cost_type: CostType = Field(..., description="Percentage 또는 Fixed")
    cost_field: CostField = Field(..., description="product 또는 delivery")
    cost_unit: Optional[CostUnit] = Field(None, description="측정 단위")
    value: Amount = Field(..., description="비용 값")
    min_value: Optional[Amount] = Field(None, description="최소 금액")
    max_value: Optional[Amount] = Field(None, description="최대 금액")
    group_id: Optional[str] = Field(None, description="묶음 선택 그룹 ID")
    is_express_delivery: bool = Field(default=False, description="특급 배송 비용 여부")
    is_same_location_charge: bool = Field(default=False, description="동일 지역 비용 여부")
    is_deleted: bool = Field(default=False)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    @field_validator("group_id", mode="before")
    @classmethod
    def blank_group_is_standalone(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("value", "min_value", "max_value")
    @classmethod
    def must_not_be_negative(cls, v):
        if v is not None and v < 0:
            raise ValueError("비용 값은 0 이상이어야 합니다")
        return v

    @model_validator(mode="after")
    def unit_matches_field(self) -> CostModule:
        if self.cost_unit is not None and self.cost_unit not in ALLOWED_UNITS[self.cost_field]:
            raise ValueError(UNIT_ERRORS[self.cost_field])
        return self

    @property
    def is_grouped(self) -> bool:
        return self.group_id is not None

    def clamp(self, amount: Decimal) -> Decimal:
        """최소/최대 금액 범위로 제한"""
        if self.min_value is not None and amount < self.min_value:
            return self.min_value
        if self.max_value is not None and amount > self.max_value:
            return self.max_value
        return amount
