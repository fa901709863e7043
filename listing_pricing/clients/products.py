"""
상품 저장 클라이언트
"""

from typing import Any, Dict

from loguru import logger

from listing_pricing.clients.base import BaseApiClient


class ProductClient(BaseApiClient):
    """상품 생성/수정"""

    async def create_product(self, payload: Dict[str, Any]) -> Any:
        data = await self._post("product/create", payload)
        logger.info(f"상품 생성 완료: {payload.get('skuFamilyId')}")
        return data

    async def update_product(self, product_id: str, payload: Dict[str, Any]) -> Any:
        data = await self._post("product/update", {"id": product_id, **payload})
        logger.info(f"상품 수정 완료: {product_id}")
        return data
