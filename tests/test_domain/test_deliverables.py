"""
계산 결과 후처리 테스트
"""

from decimal import Decimal

import pytest

from listing_pricing.domain.deliverables import (
    deferred_costs,
    expand_all,
    expand_local_currency,
    preview_price,
)
from listing_pricing.models import CountryDeliverable


@pytest.fixture
def hongkong_deliverable():
    return CountryDeliverable.model_validate(
        {
            "country": "Hongkong",
            "currency": "USD",
            "basePrice": 100,
            "calculatedPrice": 120,
            "exchangeRate": 7.8,
            "margins": [{"type": "sellerCategory", "calculatedAmount": 10}],
            "costs": [
                {"costId": "ship", "calculatedAmount": 5},
                {"costId": "exp", "calculatedAmount": 3, "isExpressDelivery": True},
                {"costId": "same", "calculatedAmount": 2, "isSameLocationCharge": True},
            ],
        }
    )


class TestExpandLocalCurrency:
    """현지 통화 결과 생성"""

    def test_usd_and_local_entries(self, hongkong_deliverable):
        usd, local = expand_local_currency(hongkong_deliverable)

        assert usd.currency == "USD"
        assert usd.exchange_rate is None
        assert usd.base_price == 100

        assert local.currency == "HKD"
        assert local.exchange_rate == 7.8
        assert local.base_price == Decimal("780.00")
        assert local.calculated_price == Decimal("936.00")
        assert [m.calculated_amount for m in local.margins] == [Decimal("78.00")]
        assert [c.calculated_amount for c in local.costs] == [
            Decimal("39.00"),
            Decimal("23.40"),
            Decimal("15.60"),
        ]

    def test_local_entry_keeps_line_identity(self, hongkong_deliverable):
        _, local = expand_local_currency(hongkong_deliverable)

        assert [c.cost_id for c in local.costs] == ["ship", "exp", "same"]
        assert local.costs[1].is_express_delivery is True
        payload = local.to_payload()
        assert payload["hkd"] == 936.0
        assert payload["local"] == 936.0
        assert payload["costs"][0]["calculatedAmount"] == 39.0

    def test_without_rate_only_usd(self):
        deliverable = CountryDeliverable(country="Dubai", base_price=100)

        entries = expand_local_currency(deliverable)

        assert [e.currency for e in entries] == ["USD"]

    def test_dubai_uses_aed(self):
        deliverable = CountryDeliverable(country="Dubai", base_price=100, exchange_rate=3.67)

        assert [e.currency for e in expand_local_currency(deliverable)] == ["USD", "AED"]

    def test_expand_all_deduplicates(self, hongkong_deliverable):
        entries = expand_all([hongkong_deliverable, hongkong_deliverable])

        assert [(e.country, e.currency) for e in entries] == [("Hongkong", "USD"), ("Hongkong", "HKD")]


class TestPreviewPrice:
    """미리보기 가격"""

    def test_excludes_deferred_costs(self, hongkong_deliverable):
        """특급 배송/동일 지역 비용은 주문 시점 비용이라 제외"""
        assert preview_price(hongkong_deliverable) == Decimal("115.00")
        assert [c.cost_id for c in deferred_costs(hongkong_deliverable)] == ["exp", "same"]

    def test_missing_amounts_count_as_zero(self):
        deliverable = CountryDeliverable.model_validate(
            {"country": "Dubai", "margins": [{"type": "brand"}], "costs": [{"costId": "x"}]}
        )

        assert preview_price(deliverable) == Decimal("0.00")
