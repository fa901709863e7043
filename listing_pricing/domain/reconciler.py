"""
계산 결과 재조정
외부 가격 계산 서비스 응답에서 관리자가 선택한 마진/비용만 남김
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from pydantic import ValidationError

from listing_pricing.domain.selection import CostSelectionState
from listing_pricing.models import CountryDeliverable, MarginSelection, ProductVariantRow
from listing_pricing.monitoring import get_logger

logger = get_logger(__name__)

RECONCILIATION_EVENT = "reconciliation_warning"


@dataclass(frozen=True)
class ReconciliationWarning:
    """선택되지 않은 라인이 응답에 포함됨 (진행은 계속)"""

    row_index: int
    country: str
    kind: str  # margin | cost
    line_id: Optional[str]
    message: str


@dataclass
class ReconciliationResult:
    """재조정 결과"""

    deliverables: List[List[CountryDeliverable]] = field(default_factory=list)
    warnings: List[ReconciliationWarning] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def for_row(self, index: int) -> List[CountryDeliverable]:
        return self.deliverables[index]


class CalculationResultReconciler:
    """계산 결과 재조정기"""

    def __init__(self, margin_selection: MarginSelection, cost_selection: CostSelectionState):
        self.margin_selection = margin_selection
        self.cost_selection = cost_selection

    def reconcile(self, products: Sequence[Mapping[str, Any]]) -> ReconciliationResult:
        """
        상품별 계산 결과 재조정

        라인의 값은 변경하지 않고 포함 여부만 결정한다.

        Args:
            products: 계산 서비스 응답 (요청 순서와 동일한 상품 목록)

        Returns:
            ReconciliationResult

        Raises:
            ValueError: 응답 항목이 계산 결과 형식이 아닐 때
        """
        result = ReconciliationResult()
        for row_index, product in enumerate(products):
            raw_deliverables = (product or {}).get("countryDeliverables") or []
            row_deliverables = []
            for raw in raw_deliverables:
                try:
                    deliverable = CountryDeliverable.model_validate(raw)
                except ValidationError as e:
                    raise ValueError(f"계산 결과 형식 오류 (행 {row_index}): {e}") from e
                row_deliverables.append(self._filter(row_index, deliverable, result.warnings))
            result.deliverables.append(row_deliverables)

        if result.has_warnings:
            logger.info(f"재조정 완료: 경고 {len(result.warnings)}건")
        return result

    def _filter(
        self,
        row_index: int,
        deliverable: CountryDeliverable,
        warnings: List[ReconciliationWarning],
    ) -> CountryDeliverable:
        country = deliverable.country

        margins = []
        for line in deliverable.margins:
            if self.margin_selection.is_selected(line.type):
                margins.append(line)
            else:
                warnings.append(
                    self._warn(row_index, country, "margin", line.type,
                               f"선택되지 않은 마진 제외: {line.type}")
                )

        selected_ids = self.cost_selection.for_country(country)
        costs = []
        for line in deliverable.costs:
            if line.identifiers & selected_ids:
                costs.append(line)
            else:
                warnings.append(
                    self._warn(row_index, country, "cost", line.primary_id,
                               f"선택되지 않은 비용 제외: {line.name or line.primary_id}")
                )

        return deliverable.model_copy(update={"margins": margins, "costs": costs})

    @staticmethod
    def _warn(
        row_index: int, country: str, kind: str, line_id: Optional[str], message: str
    ) -> ReconciliationWarning:
        warning = ReconciliationWarning(row_index, country, kind, line_id, message)
        logger.event(
            RECONCILIATION_EVENT,
            message,
            level="WARNING",
            row_index=row_index,
            country=country,
            kind=kind,
            line_id=line_id,
        )
        return warning


def attach_deliverables(
    row: ProductVariantRow, deliverables: Sequence[CountryDeliverable]
) -> ProductVariantRow:
    """행의 기존 계산 결과를 새 결과로 교체 (병합하지 않음)"""
    return row.model_copy(update={"country_deliverables": list(deliverables)})


def reconcile(
    products: Sequence[Mapping[str, Any]],
    margin_selection: MarginSelection,
    cost_selection: CostSelectionState,
) -> ReconciliationResult:
    """CalculationResultReconciler 단축 함수"""
    return CalculationResultReconciler(margin_selection, cost_selection).reconcile(products)
