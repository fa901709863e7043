"""
가격 계산 서비스 클라이언트
"""

from typing import Any, Dict, List, Mapping, Sequence

from loguru import logger

from listing_pricing.clients.base import BaseApiClient, ExternalServiceError

CALCULATE_PRICES_PATH = "product/calculate-prices"


class CalculationClient(BaseApiClient):
    """외부 가격 계산 서비스"""

    async def calculate_prices(
        self,
        products: Sequence[Dict[str, Any]],
        selected_margins: Mapping[str, bool],
        selected_costs: Mapping[str, List[str]],
    ) -> List[Dict[str, Any]]:
        """
        마진/비용을 적용한 가격 계산 요청

        Args:
            products: 계산용 상품 목록
            selected_margins: 마진 선택 플래그
            selected_costs: 국가별 선택 비용 ID

        Returns:
            요청 순서와 같은 상품별 계산 결과 목록
        """
        logger.info(f"가격 계산 요청: 상품 {len(products)}개")
        data = await self._post(
            CALCULATE_PRICES_PATH,
            {
                "products": list(products),
                "selectedMargins": dict(selected_margins),
                "selectedCosts": {k: list(v) for k, v in selected_costs.items()},
            },
        )

        if isinstance(data, dict):
            data = data.get("products")
        if not isinstance(data, list):
            raise ExternalServiceError(
                "가격 계산 응답 형식 오류", endpoint=CALCULATE_PRICES_PATH
            )
        return data
