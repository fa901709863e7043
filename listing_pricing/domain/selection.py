"""
국가별 비용 선택 상태
그룹 단위 선택, 특급 배송 단일 선택, 국가 간 ID 중복 방지
"""

from typing import AbstractSet, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from listing_pricing.models import Country, CostModule, CountryDeliverable


class SelectionConflictError(ValueError):
    """동일 비용 ID가 여러 국가에 선택됨"""


def _country_key(country) -> str:
    return country.value if isinstance(country, Country) else str(country)


def toggle_cost(
    selected: AbstractSet[str], cost: CostModule, country_costs: Sequence[CostModule]
) -> FrozenSet[str]:
    """
    비용 선택 토글

    그룹 비용은 그룹 단위로 선택/해제된다 (전부 선택되어 있으면 전부 해제,
    아니면 전부 선택). 특급 배송 비용이 추가되면 같은 국가의 다른 특급 배송
    비용은 해제되어 국가별로 하나만 남는다.

    Args:
        selected: 현재 국가의 선택된 비용 ID
        cost: 토글할 비용
        country_costs: 현재 국가의 전체 비용 모듈 목록 (필터링 전)

    Returns:
        새 선택 ID 집합
    """
    current = frozenset(selected)

    if cost.group_id is None:
        if cost.id in current:
            return current - {cost.id}
        return _exclusive_express(current | {cost.id}, [cost], country_costs)

    members = [c for c in country_costs if c.group_id == cost.group_id] or [cost]
    member_ids = frozenset(c.id for c in members)
    if member_ids <= current:
        return current - member_ids
    return _exclusive_express(current | member_ids, members, country_costs)


def _exclusive_express(
    selected: FrozenSet[str], added: Sequence[CostModule], country_costs: Sequence[CostModule]
) -> FrozenSet[str]:
    """
    추가된 비용에 특급 배송이 있으면 다른 특급 배송 비용 해제

    해제되는 특급 배송 비용이 그룹에 속하면 그룹 전체를 해제한다.
    """
    if not any(c.is_express_delivery for c in added):
        return selected
    keep = {c.id for c in added}
    displaced = [c for c in country_costs if c.is_express_delivery and c.id not in keep]
    displaced_groups = {c.group_id for c in displaced if c.group_id}
    removed = {c.id for c in displaced} | {
        c.id for c in country_costs if c.group_id in displaced_groups
    }
    return selected - (removed - keep)


class CostSelectionState:
    """국가별 선택된 비용 ID (불변)"""

    def __init__(self, selections: Optional[Mapping[str, Iterable[str]]] = None):
        self._selections: Dict[str, FrozenSet[str]] = {}
        for country, cost_ids in (selections or {}).items():
            self._selections = self.with_country(country, cost_ids)._selections

    @classmethod
    def _from_dict(cls, selections: Dict[str, FrozenSet[str]]) -> "CostSelectionState":
        state = cls()
        state._selections = selections
        return state

    def for_country(self, country) -> FrozenSet[str]:
        return self._selections.get(_country_key(country), frozenset())

    def with_country(self, country, cost_ids: Iterable[str]) -> "CostSelectionState":
        """
        국가의 선택을 교체한 새 상태 반환

        Raises:
            SelectionConflictError: 다른 국가에 이미 선택된 ID가 있을 때
        """
        key = _country_key(country)
        cost_ids = frozenset(cost_ids)
        for other, other_ids in self._selections.items():
            if other == key:
                continue
            conflict = cost_ids & other_ids
            if conflict:
                raise SelectionConflictError(
                    f"비용 {sorted(conflict)}이(가) 이미 {other}에 선택되어 있습니다"
                )
        selections = dict(self._selections)
        selections[key] = cost_ids
        return self._from_dict(selections)

    def toggle(
        self, country, cost: CostModule, country_costs: Sequence[CostModule]
    ) -> "CostSelectionState":
        return self.with_country(
            country, toggle_cost(self.for_country(country), cost, country_costs)
        )

    def countries(self) -> List[str]:
        return list(self._selections)

    def all_ids(self) -> FrozenSet[str]:
        return frozenset().union(*self._selections.values())

    def as_payload(self, countries: Optional[Iterable] = None) -> Dict[str, List[str]]:
        """계산 요청용 {국가: [비용 ID]} 딕셔너리"""
        keys = [_country_key(c) for c in countries] if countries is not None else self.countries()
        return {key: sorted(self.for_country(key)) for key in keys}

    @classmethod
    def from_deliverables(cls, deliverables: Iterable[CountryDeliverable]) -> "CostSelectionState":
        """기존 계산 결과의 비용 라인으로부터 선택 복원"""
        selections: Dict[str, set] = {}
        for deliverable in deliverables:
            ids = selections.setdefault(deliverable.country, set())
            for line in deliverable.costs:
                if line.primary_id:
                    ids.add(line.primary_id)
        return cls(selections)

    def __eq__(self, other) -> bool:
        if not isinstance(other, CostSelectionState):
            return NotImplemented
        non_empty = {k: v for k, v in self._selections.items() if v}
        other_non_empty = {k: v for k, v in other._selections.items() if v}
        return non_empty == other_non_empty

    def __repr__(self) -> str:
        return f"CostSelectionState({self.as_payload()})"
