"""
계산 결과 재조정 테스트
"""

import pytest

from listing_pricing.domain.reconciler import (
    RECONCILIATION_EVENT,
    CalculationResultReconciler,
    attach_deliverables,
    reconcile,
)
from listing_pricing.domain.selection import CostSelectionState
from listing_pricing.models import CountryDeliverable, MarginSelection, ProductVariantRow


@pytest.fixture
def response():
    """계산 서비스 응답 (상품 1개)"""
    return [
        {
            "countryDeliverables": [
                {
                    "country": "Hongkong",
                    "currency": "USD",
                    "basePrice": 100,
                    "calculatedPrice": 118.37,
                    "xe": 7.8,
                    "margins": [
                        {"type": "sellerCategory", "marginType": "percentage", "marginValue": 5, "calculatedAmount": 5.0},
                        {"type": "brand", "marginType": "fixed", "marginValue": 3, "calculatedAmount": 3},
                    ],
                    "costs": [
                        {"costId": "ship", "name": "Shipping", "value": 7.37, "calculatedAmount": 7.370000000000001, "groupId": "g1"},
                        {"_id": "legacy", "name": "Handling", "calculatedAmount": 1.5},
                        {"costId": "extra", "name": "Insurance", "calculatedAmount": 3},
                    ],
                    "charges": [],
                },
                {
                    "country": "Dubai",
                    "basePrice": 100,
                    "exchangeRate": 3.67,
                    "margins": [],
                    "costs": [{"costId": "ship", "calculatedAmount": 2}],
                },
            ]
        }
    ]


@pytest.fixture
def reconciler():
    margins = MarginSelection(seller_category=True)
    costs = CostSelectionState({"Hongkong": ["ship", "legacy"], "Dubai": []})
    return CalculationResultReconciler(margins, costs)


class TestReconciler:
    """재조정 테스트"""

    def test_unselected_lines_dropped(self, reconciler, response):
        result = reconciler.reconcile(response)
        hongkong, dubai = result.for_row(0)

        assert [m.type for m in hongkong.margins] == ["sellerCategory"]
        assert [c.primary_id for c in hongkong.costs] == ["ship", "legacy"]
        assert dubai.costs == []

    def test_kept_values_unchanged(self, reconciler, response):
        """유지된 라인의 값은 응답과 동일"""
        result = reconciler.reconcile(response)
        ship = result.for_row(0)[0].costs[0]
        payload = result.for_row(0)[0].to_payload()

        assert ship.calculated_amount == 7.370000000000001
        assert type(ship.calculated_amount) is float
        assert payload["costs"][0] == response[0]["countryDeliverables"][0]["costs"][0]
        assert payload["margins"][0] == response[0]["countryDeliverables"][0]["margins"][0]
        assert payload["calculatedPrice"] == 118.37

    def test_string_and_precise_values_preserved(self, reconciler):
        """문자열/고정밀 금액도 응답 그대로 유지"""
        margin = {"type": "sellerCategory", "marginValue": "5.00", "calculatedAmount": "3.10"}
        cost = {"costId": "ship", "value": 0.1234567890123456, "calculatedAmount": "12.50"}
        response = [
            {
                "countryDeliverables": [
                    {"country": "Hongkong", "calculatedPrice": "115.60", "margins": [margin], "costs": [cost]}
                ]
            }
        ]

        deliverable = reconciler.reconcile(response).for_row(0)[0]
        payload = deliverable.to_payload()

        assert deliverable.costs[0].calculated_amount == "12.50"
        assert payload["margins"] == [margin]
        assert payload["costs"] == [cost]
        assert payload["calculatedPrice"] == "115.60"

    def test_exchange_rate_from_either_field(self, reconciler, response):
        hongkong, dubai = reconciler.reconcile(response).for_row(0)

        assert hongkong.exchange_rate == 7.8
        assert dubai.exchange_rate == 3.67

    def test_warnings_recorded(self, reconciler, response, log_records):
        """제외된 라인마다 경고 기록"""
        result = reconciler.reconcile(response)

        assert result.has_warnings
        kinds = sorted((w.country, w.kind, w.line_id) for w in result.warnings)
        assert kinds == [
            ("Dubai", "cost", "ship"),
            ("Hongkong", "cost", "extra"),
            ("Hongkong", "margin", "brand"),
        ]
        events = [r for r in log_records if r["extra"].get("event") == RECONCILIATION_EVENT]
        assert len(events) == 3
        assert all(r["level"].name == "WARNING" for r in events)

    def test_missing_deliverables(self, reconciler):
        result = reconciler.reconcile([{}, {"countryDeliverables": None}])

        assert result.deliverables == [[], []]
        assert not result.has_warnings

    def test_malformed_deliverable_raises(self, reconciler):
        with pytest.raises(ValueError):
            reconciler.reconcile([{"countryDeliverables": [{"currency": "USD"}]}])


def test_attach_replaces_previous_deliverables():
    """기존 계산 결과와 병합하지 않고 교체"""
    old = CountryDeliverable.model_validate(
        {"country": "Hongkong", "margins": [{"type": "brand"}], "costs": [{"costId": "old"}]}
    )
    new = CountryDeliverable.model_validate({"country": "Hongkong", "costs": [{"costId": "new"}]})
    row = ProductVariantRow(country_deliverables=[old])

    row = attach_deliverables(row, [new])

    assert len(row.country_deliverables) == 1
    assert row.country_deliverables[0].margins == []
    assert [c.cost_id for c in row.country_deliverables[0].costs] == ["new"]


def test_reconcile_shortcut(response):
    result = reconcile(response, MarginSelection(), CostSelectionState())

    hongkong = result.for_row(0)[0]
    assert hongkong.margins == []
    assert hongkong.costs == []
    assert len(result.warnings) == 6
