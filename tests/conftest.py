"""
pytest 공통 fixtures 및 설정
"""

import os
import sys
from pathlib import Path

import pytest
from loguru import logger

# 프로젝트 루트를 Python 경로에 추가
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from listing_pricing.config import PricingApiConfig  # noqa: E402
from listing_pricing.models import Country, CostModule, CountryPrice, ProductVariantRow  # noqa: E402

BASE_URL = "http://pricing.test"


@pytest.fixture(scope="session")
def test_env():
    """테스트 환경 설정"""
    os.environ["ENV"] = "test"
    os.environ["DEBUG"] = "true"
    os.environ["DRY_RUN"] = "true"
    os.environ["LOG_LEVEL"] = "DEBUG"
    yield


@pytest.fixture
def api_config():
    """테스트용 API 설정 (재시도 1회)"""
    return PricingApiConfig(base_url=BASE_URL, admin_route="admin", token="test-token", max_retries=1)


@pytest.fixture
def log_records():
    """loguru 레코드 수집"""
    records = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


def make_cost(cost_id, **kwargs) -> CostModule:
    """테스트용 비용 모듈"""
    data = {
        "_id": cost_id,
        "name": kwargs.pop("name", cost_id),
        "costType": kwargs.pop("cost_type", "Fixed"),
        "costField": kwargs.pop("cost_field", "delivery"),
        "costUnit": kwargs.pop("cost_unit", "order amount"),
        "value": kwargs.pop("value", 10),
    }
    data.update(kwargs)
    return CostModule.model_validate(data)


def make_row(current_location=None, hk=None, dubai=None, **kwargs) -> ProductVariantRow:
    """테스트용 변형 행 (hk/dubai: (amount, rate, local))"""
    prices = {}
    for country, triplet in ((Country.HONGKONG, hk), (Country.DUBAI, dubai)):
        if triplet:
            amount, rate, local = triplet
            prices[country] = CountryPrice(amount=amount, rate=rate, local=local)
    return ProductVariantRow(current_location=current_location, prices=prices, **kwargs)


@pytest.fixture
def hk_row():
    """홍콩 재고, 홍콩 배송 행"""
    return make_row(current_location="HK", hk=(100, 7.8, 780), sku_family_id="sku1", supplier_id="seller1")


@pytest.fixture
def dubai_stock_row():
    """두바이 재고, 홍콩/두바이 배송 행"""
    return make_row(
        current_location="D",
        hk=(100, 7.8, 780),
        dubai=(100, 3.67, 367),
        sku_family_id="sku1",
        supplier_id="seller1",
    )


@pytest.fixture
def cost_factory():
    return make_cost


@pytest.fixture
def row_factory():
    return make_row
