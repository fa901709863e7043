"""
카탈로그 조회 클라이언트
SKU 패밀리, 판매자, 국가별 비용 모듈 (읽기 전용)
"""

from typing import Any, Dict, List

from loguru import logger
from pydantic import ValidationError

from listing_pricing.clients.base import BaseApiClient
from listing_pricing.models import CostModule

LOOKUP_LIMIT = 10000


def _docs(data: Any) -> List[Dict[str, Any]]:
    if isinstance(data, dict):
        data = data.get("docs") or []
    return data if isinstance(data, list) else []


def _index_by_id(items: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    return {item["_id"]: item for item in items if item.get("_id")}


class CatalogClient(BaseApiClient):
    """SKU 패밀리/판매자/비용 모듈 조회"""

    async def get_sku_families(self) -> Dict[str, Dict[str, Any]]:
        """SKU 패밀리 ID -> 문서"""
        data = await self._post("skuFamily/list", {"page": 1, "limit": LOOKUP_LIMIT})
        families = _index_by_id(_docs(data))
        logger.debug(f"SKU 패밀리 {len(families)}개 조회")
        return families

    async def get_sellers(self) -> Dict[str, Dict[str, Any]]:
        """판매자 ID -> 문서"""
        data = await self._post("seller/list", {"page": 1, "limit": LOOKUP_LIMIT})
        sellers = _index_by_id(_docs(data))
        logger.debug(f"판매자 {len(sellers)}개 조회")
        return sellers

    async def get_costs_by_country(self, country: str) -> List[CostModule]:
        """
        국가별 비용 모듈 조회

        삭제된 모듈은 제외하고, 형식이 잘못된 모듈은 경고 후 건너뛴다.

        Args:
            country: 국가명 (Hongkong, Dubai)

        Returns:
            CostModule 목록
        """
        data = await self._post("costModule/listByCountry")
        raw_costs = data.get(country) or [] if isinstance(data, dict) else []

        costs = []
        for raw in raw_costs:
            if raw.get("isDeleted"):
                continue
            try:
                costs.append(CostModule.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"비용 모듈 형식 오류로 제외: {raw.get('_id')} - {e.errors()[0]['msg']}")
        logger.info(f"{country} 비용 모듈 {len(costs)}개 조회")
        return costs
