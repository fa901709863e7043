"""
통화 삼각형 계산
USD 금액, 환율, 현지 금액 중 두 값이 있으면 나머지 하나를 계산
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional

from listing_pricing.models import Country, CountryPrice, PriceSlot, ProductVariantRow

PRICE_QUANT = Decimal("0.01")
RATE_QUANT = Decimal("0.0001")
_ZERO = Decimal(0)


def parse_amount(value: Any) -> Optional[Decimal]:
    """
    입력값을 Decimal로 변환

    빈 값, 숫자가 아닌 값, NaN/무한대는 None (값 없음)으로 처리한다.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return None
    if not amount.is_finite():
        return None
    return amount


def _positive(value: Optional[Decimal]) -> Decimal:
    return value if value is not None and value > 0 else _ZERO


def solve(price: CountryPrice, edited: PriceSlot) -> CountryPrice:
    """
    수정된 값을 기준으로 나머지 값 재계산

    양수 값이 두 개 미만이면 변경하지 않는다. 규칙은 순서대로 검사하며
    처음 맞는 규칙 하나만 적용한다.

    Args:
        price: 국가별 가격
        edited: 사용자가 마지막으로 수정한 값

    Returns:
        계산된 CountryPrice
    """
    edited = PriceSlot(edited)
    amount = _positive(price.amount)
    rate = _positive(price.rate)
    local = _positive(price.local)

    if sum(1 for v in (amount, rate, local) if v > 0) < 2:
        return price

    if edited is not PriceSlot.LOCAL and amount > 0 and rate > 0:
        return price.model_copy(
            update={"local": (amount * rate).quantize(PRICE_QUANT, rounding=ROUND_HALF_UP)}
        )
    if edited is not PriceSlot.AMOUNT and local > 0 and rate > 0:
        return price.model_copy(
            update={"amount": (local / rate).quantize(PRICE_QUANT, rounding=ROUND_HALF_UP)}
        )
    if edited is not PriceSlot.RATE and amount > 0 and local > 0:
        return price.model_copy(
            update={"rate": (local / amount).quantize(RATE_QUANT, rounding=ROUND_HALF_UP)}
        )
    return price


def apply_edit(price: CountryPrice, slot: PriceSlot, value: Any) -> CountryPrice:
    """값 하나를 수정하고 삼각형 재계산"""
    slot = PriceSlot(slot)
    edited = price.model_copy(update={slot.value: parse_amount(value)})
    return solve(edited, slot)


def edit_price(
    row: ProductVariantRow, country: Country, slot: PriceSlot, value: Any
) -> ProductVariantRow:
    """
    행의 국가별 가격 수정

    Args:
        row: 변형 행
        country: 대상 국가
        slot: 수정할 값 (amount, rate, local)
        value: 입력값

    Returns:
        가격이 갱신된 새 행 (배송 국가는 가격으로부터 다시 계산됨)
    """
    country = Country(country)
    prices = dict(row.prices)
    prices[country] = apply_edit(row.price_for(country), slot, value)
    return row.model_copy(update={"prices": prices})
