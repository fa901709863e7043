"""
국가별 계산 결과 데이터 모델
외부 가격 계산 서비스가 돌려준 마진/비용 라인을 그대로 보존
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from listing_pricing.models.types import Number

_LINE_CONFIG = ConfigDict(
    alias_generator=to_camel, populate_by_name=True, extra="allow", frozen=True
)


class MarginLine(BaseModel):
    """마진 라인"""

    type: str = Field(..., description="마진 종류 (sellerCategory 등)")
    name: Optional[str] = None
    margin_type: Optional[str] = None
    margin_value: Optional[Number] = None
    calculated_amount: Optional[Number] = None

    model_config = _LINE_CONFIG


class CostLine(BaseModel):
    """비용 라인"""

    cost_id: Optional[str] = Field(None, description="비용 모듈 ID")
    line_id: Optional[str] = Field(None, alias="_id", description="레거시 비용 ID")
    name: Optional[str] = None
    cost_type: Optional[str] = None
    cost_field: Optional[str] = None
    cost_unit: Optional[str] = None
    value: Optional[Number] = None
    min_value: Optional[Number] = None
    max_value: Optional[Number] = None
    group_id: Optional[str] = None
    is_express_delivery: Optional[bool] = None
    is_same_location_charge: Optional[bool] = None
    calculated_amount: Optional[Number] = None

    model_config = _LINE_CONFIG

    @property
    def identifiers(self) -> FrozenSet[str]:
        """costId 와 _id 중 존재하는 값"""
        return frozenset(i for i in (self.cost_id, self.line_id) if i)

    @property
    def primary_id(self) -> Optional[str]:
        return self.cost_id or self.line_id


class CountryDeliverable(BaseModel):
    """국가별 계산 결과"""

    country: str = Field(..., description="국가명")
    currency: str = Field(default="USD")
    base_price: Optional[Number] = None
    calculated_price: Optional[Number] = None
    exchange_rate: Optional[Number] = Field(
        None,
        validation_alias=AliasChoices("exchangeRate", "xe", "exchange_rate"),
        serialization_alias="exchangeRate",
    )
    margins: List[MarginLine] = Field(default_factory=list)
    costs: List[CostLine] = Field(default_factory=list)
    charges: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = _LINE_CONFIG

    def to_payload(self) -> Dict[str, Any]:
        """API 전송용 딕셔너리"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
