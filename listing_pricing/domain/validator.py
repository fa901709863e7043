"""
선택 검증 모듈
가격 계산 요청 전 마진/비용 선택 상태의 구조적 검증
"""

from collections import Counter
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from listing_pricing.domain.selection import CostSelectionState
from listing_pricing.models import MarginSelection
from listing_pricing.models.margin import DEPENDENT_MARGINS, MarginType

MARGIN_REQUIRED = "Margin selection is required"
DEPENDENT_WITHOUT_SELLER = "Dependent margins selected without seller category"
COSTS_NOT_ARRAYS = "Cost selections must be arrays"
DUPLICATE_COST_IDS = "Duplicate cost IDs detected"

_LIST_TYPES = (list, tuple, set, frozenset)


@dataclass
class SelectionValidationResult:
    """검증 결과"""

    is_valid: bool
    error: Optional[str] = None
    field: Optional[str] = None

    @classmethod
    def ok(cls) -> "SelectionValidationResult":
        return cls(is_valid=True)

    @classmethod
    def fail(cls, field: str, message: str) -> "SelectionValidationResult":
        return cls(is_valid=False, error=message, field=field)

    def __bool__(self) -> bool:
        return self.is_valid


class StructuralValidationError(ValueError):
    """선택 상태가 계산 요청 조건을 만족하지 않음"""

    def __init__(self, result: SelectionValidationResult):
        super().__init__(result.error)
        self.result = result


MarginInput = Union[MarginSelection, Mapping[str, Any], None]
CostInput = Union[CostSelectionState, Mapping[str, Any], None]


class SelectionValidator:
    """마진/비용 선택 검증기"""

    def validate(self, margins: MarginInput, costs: CostInput) -> SelectionValidationResult:
        """
        선택 상태 검증 (첫 번째 실패에서 중단)

        Args:
            margins: 마진 선택 (모델 또는 camelCase 딕셔너리)
            costs: 국가별 비용 선택 (상태 객체 또는 {국가: [ID]} 딕셔너리)

        Returns:
            SelectionValidationResult
        """
        if margins is None:
            return SelectionValidationResult.fail("selectedMargins", MARGIN_REQUIRED)

        if not self._seller_category_satisfied(margins):
            return SelectionValidationResult.fail("selectedMargins", DEPENDENT_WITHOUT_SELLER)

        if isinstance(costs, CostSelectionState):
            costs = costs.as_payload()
        costs = costs or {}

        for country, cost_ids in costs.items():
            if not isinstance(cost_ids, _LIST_TYPES):
                return SelectionValidationResult.fail(f"selectedCosts.{country}", COSTS_NOT_ARRAYS)

        counts = Counter(cost_id for cost_ids in costs.values() for cost_id in cost_ids)
        if any(count > 1 for count in counts.values()):
            return SelectionValidationResult.fail("selectedCosts", DUPLICATE_COST_IDS)

        return SelectionValidationResult.ok()

    def ensure_valid(self, margins: MarginInput, costs: CostInput) -> SelectionValidationResult:
        """검증 실패 시 StructuralValidationError 발생"""
        result = self.validate(margins, costs)
        if not result.is_valid:
            raise StructuralValidationError(result)
        return result

    @staticmethod
    def _seller_category_satisfied(margins) -> bool:
        if isinstance(margins, MarginSelection):
            flags = margins.as_payload()
        else:
            flags = margins
        if flags.get(MarginType.SELLER_CATEGORY.value):
            return True
        return not any(flags.get(t.value) for t in DEPENDENT_MARGINS)


def validate_selection(margins: MarginInput, costs: CostInput) -> SelectionValidationResult:
    """SelectionValidator 단축 함수"""
    return SelectionValidator().validate(margins, costs)
