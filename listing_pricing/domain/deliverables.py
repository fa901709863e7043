"""
계산 결과 후처리
현지 통화 결과 생성과 미리보기 가격 계산
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional

from listing_pricing.domain.currency import PRICE_QUANT, parse_amount
from listing_pricing.models import Country, CostLine, CountryDeliverable

BASE_CURRENCY = "USD"


def _decimal(value: Any) -> Decimal:
    amount = parse_amount(value)
    return amount if amount is not None else Decimal(0)


def _scaled(value: Any, rate: Decimal) -> Decimal:
    return (_decimal(value) * rate).quantize(PRICE_QUANT, rounding=ROUND_HALF_UP)


def _json_number(value: Any) -> Optional[float]:
    amount = parse_amount(value)
    return float(amount) if amount is not None else None


def _local_currency(country: str) -> Optional[str]:
    try:
        return Country(country).local_currency
    except ValueError:
        return None


def expand_local_currency(deliverable: CountryDeliverable) -> List[CountryDeliverable]:
    """
    USD 결과와 현지 통화 결과 생성

    환율이 있고 국가의 현지 통화를 알 때만 현지 통화 결과를 추가한다.
    현지 결과는 기준가, 계산가, 각 라인의 calculatedAmount에 환율을 곱한 값이다.

    Args:
        deliverable: 재조정된 USD 계산 결과

    Returns:
        [USD 결과] 또는 [USD 결과, 현지 통화 결과]
    """
    data: Dict[str, Any] = deliverable.model_dump(by_alias=True)
    rate = parse_amount(deliverable.exchange_rate)

    usd = CountryDeliverable.model_validate(
        {
            **data,
            "currency": BASE_CURRENCY,
            "exchangeRate": None,
            "charges": [],
            "usd": _json_number(deliverable.calculated_price),
            "xe": _json_number(deliverable.exchange_rate),
            "price": _json_number(deliverable.base_price),
        }
    )
    expanded = [usd]

    currency = _local_currency(deliverable.country)
    if rate is None or rate <= 0 or currency is None:
        return expanded

    local_price = _scaled(deliverable.calculated_price, rate)
    expanded.append(
        CountryDeliverable.model_validate(
            {
                **data,
                "currency": currency,
                "basePrice": _scaled(deliverable.base_price, rate),
                "calculatedPrice": local_price,
                "exchangeRate": deliverable.exchange_rate,
                "margins": [
                    {**m, "calculatedAmount": _scaled(m.get("calculatedAmount"), rate)}
                    for m in data["margins"]
                ],
                "costs": [
                    {**c, "calculatedAmount": _scaled(c.get("calculatedAmount"), rate)}
                    for c in data["costs"]
                ],
                "charges": [],
                currency.lower(): float(local_price),
                "local": float(local_price),
            }
        )
    )
    return expanded


def expand_all(deliverables: Iterable[CountryDeliverable]) -> List[CountryDeliverable]:
    """모든 결과를 확장하고 (국가, 통화) 중복 제거"""
    seen = set()
    result = []
    for deliverable in deliverables:
        for entry in expand_local_currency(deliverable):
            key = (entry.country, entry.currency)
            if key in seen:
                continue
            seen.add(key)
            result.append(entry)
    return result


def deferred_costs(deliverable: CountryDeliverable) -> List[CostLine]:
    """주문 시점에 부과되는 비용 (특급 배송, 동일 지역)"""
    return [c for c in deliverable.costs if c.is_express_delivery or c.is_same_location_charge]


def preview_price(deliverable: CountryDeliverable) -> Decimal:
    """기준가 + 마진 + 비용 (주문 시점 비용 제외)"""
    deferred = {id(c) for c in deferred_costs(deliverable)}
    total = _decimal(deliverable.base_price)
    total += sum((_decimal(m.calculated_amount) for m in deliverable.margins), Decimal(0))
    total += sum(
        (_decimal(c.calculated_amount) for c in deliverable.costs if id(c) not in deferred),
        Decimal(0),
    )
    return total.quantize(PRICE_QUANT, rounding=ROUND_HALF_UP)
