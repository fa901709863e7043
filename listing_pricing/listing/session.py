"""
가격 구성 세션
마진 선택 → 국가별 비용 선택 → 계산 → 미리보기 → 저장 흐름 관리
"""

import asyncio
from typing import Any, Dict, FrozenSet, List, Optional, Sequence

from listing_pricing.clients import (
    CalculationClient,
    CatalogClient,
    ExternalServiceError,
    ProductClient,
)
from listing_pricing.domain.applicability import offered_costs
from listing_pricing.domain.group_sync import VariantGroup
from listing_pricing.domain.reconciler import (
    CalculationResultReconciler,
    ReconciliationResult,
    attach_deliverables,
)
from listing_pricing.domain.selection import CostSelectionState
from listing_pricing.domain.validator import SelectionValidator
from listing_pricing.listing.payload import (
    build_calculation_product,
    build_product_payload,
    countries_to_price,
    new_group_code,
)
from listing_pricing.models import Country, CostModule, CountryDeliverable, MarginSelection
from listing_pricing.monitoring import get_logger


class CalculationInProgressError(RuntimeError):
    """이미 가격 계산이 진행 중"""


class StaleCalculationError(RuntimeError):
    """계산 이후 변형 행이 변경됨 (재계산 필요)"""


class PricingSession:
    """
    한 번의 가격 구성 세션

    선택 상태는 세션 안에서만 유지되며 submit 전까지 외부에 저장되지 않는다.
    단일 변형 리스팅은 한 행짜리 그룹으로 다룬다.
    """

    def __init__(
        self,
        group: VariantGroup,
        calculation_client: CalculationClient,
        catalog_client: CatalogClient,
        product_client: Optional[ProductClient] = None,
        total_moq: Optional[int] = None,
    ):
        self.group = group
        self.calculation_client = calculation_client
        self.catalog_client = catalog_client
        self.product_client = product_client
        self.total_moq = total_moq
        self.validator = SelectionValidator()
        self.log = get_logger("pricing_session", group_code=group.group_code)
        self._lock = asyncio.Lock()
        self.discard()

    @property
    def countries(self) -> List[Country]:
        """비용 선택 단계에서 방문할 국가"""
        return countries_to_price(self.group.rows)

    def select_margins(self, selection: MarginSelection):
        self.margin_selection = selection
        self.result = None

    def seed_from_existing(self, deliverables: Sequence[CountryDeliverable]):
        """기존 리스팅 수정 시 저장된 계산 결과로 선택 상태 복원"""
        if deliverables:
            self.margin_selection = MarginSelection.from_margin_lines(
                line.type for line in deliverables[0].margins
            )
        self.cost_selection = CostSelectionState.from_deliverables(deliverables)
        self.log.info(f"기존 선택 복원: {self.cost_selection.as_payload()}")

    async def load_costs(self, country: Country) -> List[CostModule]:
        """국가별 전체 비용 모듈 조회 (세션 내 캐시)"""
        key = Country(country)
        if key not in self._country_costs:
            self._country_costs[key] = await self.catalog_client.get_costs_by_country(key.value)
        return self._country_costs[key]

    def offered_costs(self, country: Country) -> List[CostModule]:
        return offered_costs(self._costs_for(country), country, self.group.rows)

    def toggle_cost(self, country: Country, cost_id: str) -> FrozenSet[str]:
        """
        비용 선택 토글

        Args:
            country: 국가
            cost_id: 비용 모듈 ID

        Returns:
            해당 국가의 새 선택 ID 집합
        """
        country_costs = self._costs_for(country)
        cost = next((c for c in country_costs if c.id == cost_id), None)
        if cost is None:
            raise ValueError(f"{Country(country).value}에 없는 비용 모듈: {cost_id}")
        self.cost_selection = self.cost_selection.toggle(
            Country(country), cost, country_costs
        )
        self.result = None
        return self.cost_selection.for_country(country)

    def _costs_for(self, country: Country) -> List[CostModule]:
        key = Country(country)
        if key not in self._country_costs:
            raise ValueError(f"{key.value} 비용 모듈이 로드되지 않았습니다")
        return self._country_costs[key]

    def selected_costs_payload(self) -> Dict[str, List[str]]:
        return self.cost_selection.as_payload(list(Country))

    async def calculate(self) -> ReconciliationResult:
        """
        가격 계산

        검증 → 메타데이터 조회 → 계산 요청 → 재조정 순서로 진행한다.
        실패하면 이전 결과는 지워지고 선택 상태는 그대로 남는다.

        Returns:
            ReconciliationResult

        Raises:
            CalculationInProgressError: 이미 계산 중일 때
            StructuralValidationError: 선택 상태가 유효하지 않을 때
            ExternalServiceError: 외부 서비스 호출 실패
        """
        if self._lock.locked():
            raise CalculationInProgressError("이미 가격 계산이 진행 중입니다")

        async with self._lock:
            self.result = None
            selected_costs = self.selected_costs_payload()
            self.validator.ensure_valid(self.margin_selection, selected_costs)

            rows = self.group.normalize()
            try:
                sku_families = await self.catalog_client.get_sku_families()
                sellers = await self.catalog_client.get_sellers()
                products = [
                    build_calculation_product(
                        row, sku_families.get(row.sku_family_id), sellers.get(row.supplier_id)
                    )
                    for row in rows
                ]
                response = await self.calculation_client.calculate_prices(
                    products, self.margin_selection.as_payload(), selected_costs
                )
                if len(response) != len(products):
                    raise ExternalServiceError(
                        f"계산 결과 개수 불일치: 요청 {len(products)}개, 응답 {len(response)}개"
                    )
            except ExternalServiceError as e:
                self.log.error(f"가격 계산 실패: {str(e)}")
                raise

            reconciler = CalculationResultReconciler(self.margin_selection, self.cost_selection)
            self.result = reconciler.reconcile(response)
            self._calculated_rows = [row.model_dump() for row in rows]
            self.log.info(f"가격 계산 완료: 상품 {len(rows)}개")
            return self.result

    async def submit(self, product_id: Optional[str] = None) -> List[Any]:
        """
        계산 결과를 연결하여 상품 저장

        Args:
            product_id: 수정할 기존 상품 ID (단일 변형 수정 시)

        Returns:
            저장 서비스 응답 목록

        Raises:
            StaleCalculationError: 계산 이후 행이 추가/삭제/수정되었을 때
        """
        if self.product_client is None:
            raise RuntimeError("상품 저장 클라이언트가 설정되지 않았습니다")
        if self.result is None:
            raise RuntimeError("저장 전에 가격 계산이 필요합니다")

        rows = self.group.normalize()
        if [row.model_dump() for row in rows] != self._calculated_rows:
            raise StaleCalculationError("계산 이후 상품 행이 변경되었습니다. 재계산이 필요합니다")

        group_code = None
        if self.group.is_multi_variant:
            group_code = self.group.group_code or new_group_code()

        requests = []
        for index, row in enumerate(rows):
            row = attach_deliverables(row, self.result.for_row(index))
            payload = build_product_payload(
                row,
                group_code=group_code,
                total_moq=self.total_moq if self.group.is_multi_variant else None,
            )
            target_id = product_id if product_id and len(rows) == 1 else row.product_id
            if target_id:
                requests.append(self.product_client.update_product(target_id, payload))
            else:
                requests.append(self.product_client.create_product(payload))

        responses = await asyncio.gather(*requests)
        self.log.info(f"상품 {len(responses)}개 저장 완료")
        self.discard()
        return list(responses)

    def discard(self):
        """진행 중인 선택 상태 폐기 (외부 저장 없음)"""
        self.margin_selection: Optional[MarginSelection] = None
        self.cost_selection = CostSelectionState()
        self._country_costs: Dict[Country, List[CostModule]] = {}
        self.result: Optional[ReconciliationResult] = None
        self._calculated_rows: Optional[List[Dict[str, Any]]] = None
