"""
비용 적용 가능 여부 판단
국가와 변형 행의 재고/배송 위치에 따라 제안할 비용 모듈 결정
"""

from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from listing_pricing.models import Country, CostModule, ProductVariantRow


def is_same_location(row: ProductVariantRow, country: Country) -> bool:
    """재고 위치와 배송 위치가 모두 해당 국가인지 여부"""
    code = Country(country).location_code
    return row.current_location == code and code in row.delivery_location


def same_location_applies(country: Country, rows: Sequence[ProductVariantRow]) -> bool:
    return any(is_same_location(row, country) for row in rows)


def is_applicable(cost: CostModule, country: Country, rows: Sequence[ProductVariantRow]) -> bool:
    """
    비용 모듈 적용 가능 여부

    - 특급 배송 비용: 재고 위치가 있고 동일 지역이 아닌 행이 하나라도 있어야 함
    - 동일 지역 비용: 동일 지역 행이 하나라도 있어야 함
    - 그 외: 항상 적용 가능

    Args:
        cost: 비용 모듈
        country: 배송 국가
        rows: 그룹의 변형 행

    Returns:
        적용 가능 여부
    """
    country = Country(country)
    if cost.is_express_delivery:
        return any(
            row.current_location and not is_same_location(row, country) for row in rows
        )
    if cost.is_same_location_charge:
        return same_location_applies(country, rows)
    return True


def suppress(
    costs: Sequence[CostModule], country: Country, rows: Sequence[ProductVariantRow]
) -> List[CostModule]:
    """
    동일 지역 배송일 때 지역 간 비용 제외

    동일 지역 비용 또는 특급 배송 비용이 속한 그룹은 그룹 전체를 제외하고,
    그룹이 없는 특급 배송 비용도 제외한다.
    """
    if not same_location_applies(country, rows):
        return list(costs)

    hidden_groups = {
        c.group_id
        for c in costs
        if c.group_id and (c.is_same_location_charge or c.is_express_delivery)
    }
    return [
        c
        for c in costs
        if c.group_id not in hidden_groups and not (c.group_id is None and c.is_express_delivery)
    ]


def offered_costs(
    costs: Sequence[CostModule], country: Country, rows: Sequence[ProductVariantRow]
) -> List[CostModule]:
    """국가별로 제안할 비용 모듈 (삭제 제외 → 억제 → 적용 가능 여부)"""
    remaining = suppress([c for c in costs if not c.is_deleted], country, rows)
    return [c for c in remaining if is_applicable(c, country, rows)]


def group_offered_costs(costs: Sequence[CostModule]) -> Dict[Optional[str], List[CostModule]]:
    """
    비용 모듈을 그룹 ID별로 묶기

    Returns:
        그룹 ID -> 비용 목록 (단독 비용은 None 키)
    """
    grouped: Dict[Optional[str], List[CostModule]] = OrderedDict()
    for cost in costs:
        grouped.setdefault(cost.group_id, []).append(cost)
    return grouped
