"""
도메인 로직
통화 계산, 비용 적용/선택, 선택 검증, 결과 재조정, 그룹 동기화
"""

from .applicability import group_offered_costs, is_applicable, offered_costs, suppress
from .currency import apply_edit, edit_price, parse_amount, solve
from .deliverables import deferred_costs, expand_all, expand_local_currency, preview_price
from .group_sync import VariantGroup
from .reconciler import (
    CalculationResultReconciler,
    ReconciliationResult,
    ReconciliationWarning,
    attach_deliverables,
    reconcile,
)
from .selection import CostSelectionState, SelectionConflictError, toggle_cost
from .validator import (
    SelectionValidationResult,
    SelectionValidator,
    StructuralValidationError,
    validate_selection,
)

__all__ = [
    "solve",
    "apply_edit",
    "edit_price",
    "parse_amount",
    "is_applicable",
    "suppress",
    "offered_costs",
    "group_offered_costs",
    "toggle_cost",
    "CostSelectionState",
    "SelectionConflictError",
    "SelectionValidator",
    "SelectionValidationResult",
    "StructuralValidationError",
    "validate_selection",
    "CalculationResultReconciler",
    "ReconciliationResult",
    "ReconciliationWarning",
    "reconcile",
    "attach_deliverables",
    "VariantGroup",
    "expand_local_currency",
    "expand_all",
    "preview_price",
    "deferred_costs",
]
