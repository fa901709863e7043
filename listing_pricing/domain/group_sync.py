"""
다중 변형 그룹 관리
그룹 공유 필드는 그룹에 한 번만 저장하고 모든 행은 그 값으로 구성
"""

from typing import Any, Dict, List, Optional, Sequence

from listing_pricing.domain.currency import edit_price
from listing_pricing.models import GROUP_LEVEL_FIELDS, Country, PriceSlot, ProductVariantRow
from listing_pricing.monitoring import get_logger

logger = get_logger(__name__)


class VariantGroup:
    """
    같은 groupCode를 공유하는 변형 행 묶음

    첫 번째 행이 마스터이며, 공유 필드는 마스터에서만 수정할 수 있다.
    """

    def __init__(self, rows: Sequence[ProductVariantRow], group_code: Optional[str] = None):
        if not rows:
            raise ValueError("변형 그룹에는 최소 한 개의 행이 필요합니다")
        self.group_code = group_code or rows[0].group_code
        self._shared: Dict[str, Any] = rows[0].group_fields()
        self._rows: List[ProductVariantRow] = [self._derive(row) for row in rows]

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def rows(self) -> List[ProductVariantRow]:
        return list(self._rows)

    @property
    def master(self) -> ProductVariantRow:
        return self._rows[0]

    @property
    def is_multi_variant(self) -> bool:
        return len(self._rows) > 1

    @property
    def group_fields(self) -> Dict[str, Any]:
        return dict(self._shared)

    def _derive(self, row: ProductVariantRow) -> ProductVariantRow:
        updates = dict(self._shared)
        if self.group_code:
            updates["group_code"] = self.group_code
        return row.with_updates(**updates)

    def edit(self, index: int, field: str, value: Any) -> bool:
        """
        행 필드 수정

        Args:
            index: 행 번호
            field: 필드명 (snake_case)
            value: 새 값

        Returns:
            수정 여부 (마스터가 아닌 행의 공유 필드 수정은 False)
        """
        if field not in ProductVariantRow.model_fields:
            raise ValueError(f"알 수 없는 필드: {field}")
        row = self._rows[index]

        if field not in GROUP_LEVEL_FIELDS:
            self._rows[index] = row.with_updates(**{field: value})
            return True

        if index != 0:
            logger.debug(f"마스터가 아닌 행({index})의 공유 필드 수정 무시: {field}")
            return False

        updated = row.with_updates(**{field: value})
        self._shared[field] = getattr(updated, field)
        self._rows = [self._derive(r) for r in self._rows]
        return True

    def edit_price(self, index: int, country: Country, slot: PriceSlot, value: Any) -> ProductVariantRow:
        """행의 국가별 가격 수정 (통화 삼각형 재계산)"""
        self._rows[index] = edit_price(self._rows[index], country, slot, value)
        return self._rows[index]

    def append_row(self, **fields: Any) -> ProductVariantRow:
        """마스터의 현재 공유 필드 값을 상속한 새 행 추가"""
        for name in GROUP_LEVEL_FIELDS:
            fields.pop(name, None)
        row = self._derive(ProductVariantRow(**fields))
        self._rows.append(row)
        return row

    def remove_row(self, index: int) -> ProductVariantRow:
        """행 삭제 (마지막 한 행은 삭제 불가)"""
        if len(self._rows) <= 1:
            raise ValueError("마지막 행은 삭제할 수 없습니다")
        removed = self._rows.pop(index)
        if index == 0:
            self._shared = self._rows[0].group_fields()
        return removed

    def replace_row(self, index: int, row: ProductVariantRow) -> ProductVariantRow:
        """행 교체 (공유 필드는 그룹 값으로 덮어씀)"""
        self._rows[index] = self._derive(row)
        return self._rows[index]

    def normalize(self) -> List[ProductVariantRow]:
        """제출 직전 모든 행을 그룹 값으로 다시 구성"""
        self._rows = [self._derive(row) for row in self._rows]
        return self.rows
