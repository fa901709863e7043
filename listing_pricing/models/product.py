"""
상품 변형(행) 데이터 모델
하나의 리스팅 그룹을 구성하는 변형 행과 국가별 가격 정보
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from listing_pricing.models.deliverable import CountryDeliverable
from listing_pricing.models.types import Amount


class Country(str, Enum):
    """판매 대상 국가"""

    HONGKONG = "Hongkong"  # 홍콩
    DUBAI = "Dubai"  # 두바이

    @property
    def location_code(self) -> str:
        """행의 currentLocation 코드 (HK, D)"""
        return _LOCATION_CODES[self]

    @property
    def local_currency(self) -> str:
        """현지 통화 코드"""
        return _LOCAL_CURRENCIES[self]

    @classmethod
    def from_location_code(cls, code: str) -> Optional[Country]:
        for country, country_code in _LOCATION_CODES.items():
            if country_code == code:
                return country
        return None


_LOCATION_CODES = {Country.HONGKONG: "HK", Country.DUBAI: "D"}
_LOCAL_CURRENCIES = {Country.HONGKONG: "HKD", Country.DUBAI: "AED"}


class PriceSlot(str, Enum):
    """국가별 가격 삼각형의 구성 값"""

    AMOUNT = "amount"  # USD 금액
    RATE = "rate"  # 환율
    LOCAL = "local"  # 현지 통화 금액


class CountryPrice(BaseModel):
    """국가별 가격 (USD 금액, 환율, 현지 금액)"""

    amount: Optional[Amount] = Field(None, description="USD 금액")
    rate: Optional[Amount] = Field(None, description="USD 대비 환율")
    local: Optional[Amount] = Field(None, description="현지 통화 금액")

    model_config = ConfigDict(frozen=True)

    def get(self, slot: PriceSlot) -> Optional[Amount]:
        return getattr(self, PriceSlot(slot).value)

    @property
    def is_deliverable(self) -> bool:
        """USD 또는 현지 금액이 있으면 해당 국가로 배송 가능"""
        return bool(
            (self.amount is not None and self.amount > 0)
            or (self.local is not None and self.local > 0)
        )


# 그룹 내 모든 행이 공유해야 하는 필드
GROUP_LEVEL_FIELDS = (
    "supplier_id",
    "current_location",
    "payment_term",
    "payment_method",
    "is_negotiable",
    "is_flash_deal",
    "shipping_time",
    "start_time",
    "end_time",
)


class ProductVariantRow(BaseModel):
    """리스팅 그룹의 변형 행"""

    # 기존 상품 (수정 시)
    product_id: Optional[str] = Field(None, alias="_id", description="기존 상품 ID")

    # 변형 식별 정보
    sku_family_id: Optional[str] = Field(None, description="SKU 패밀리 ID")
    sub_model_name: Optional[str] = Field(None, description="서브 모델명")
    grade_id: Optional[str] = Field(None, description="등급 ID")
    storage: Optional[str] = None
    colour: Optional[str] = None
    ram: Optional[str] = None
    sim: Optional[str] = None
    condition: Optional[str] = None
    country: Optional[str] = Field(None, description="사양 국가")
    specification: Optional[str] = None
    packing: Optional[str] = None
    weight: Optional[Amount] = None

    # 수량
    total_qty: int = Field(default=0, description="재고 수량")
    moq_per_variant: int = Field(default=1, description="변형별 최소 주문 수량")
    purchase_type: Literal["full", "partial"] = Field(default="partial")

    # 국가별 가격
    prices: Dict[Country, CountryPrice] = Field(default_factory=dict)

    # 그룹 공유 필드
    supplier_id: Optional[str] = Field(None, description="판매자 ID")
    current_location: Optional[str] = Field(None, description="현재 재고 위치 코드 (HK, D)")
    payment_term: List[str] = Field(default_factory=list)
    payment_method: List[str] = Field(default_factory=list)
    is_negotiable: bool = Field(default=False)
    is_flash_deal: bool = Field(default=False)
    shipping_time: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    # 그룹 메타
    group_code: Optional[str] = None
    sequence: Optional[int] = None

    # 계산 결과
    country_deliverables: List[CountryDeliverable] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @field_validator("current_location", mode="before")
    @classmethod
    def blank_location_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("total_qty", "moq_per_variant")
    @classmethod
    def quantity_not_negative(cls, v):
        if v < 0:
            raise ValueError("수량은 0 이상이어야 합니다")
        return v

    @computed_field
    @property
    def delivery_location(self) -> List[str]:
        """가격이 입력된 국가의 위치 코드 목록"""
        return [
            country.location_code
            for country in Country
            if country in self.prices and self.prices[country].is_deliverable
        ]

    def price_for(self, country: Country) -> CountryPrice:
        return self.prices.get(Country(country), CountryPrice())

    def with_updates(self, **updates: Any) -> ProductVariantRow:
        """필드를 변경한 새 행 반환 (검증 포함)"""
        data = self.model_dump(exclude={"delivery_location"})
        data.update(updates)
        return type(self).model_validate(data)

    def group_fields(self) -> Dict[str, Any]:
        """그룹 공유 필드 값"""
        return {name: getattr(self, name) for name in GROUP_LEVEL_FIELDS}
