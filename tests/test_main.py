"""
CLI 테스트
"""

import json
import sys

import httpx
import pytest
import respx
from click.testing import CliRunner
from loguru import logger

from listing_pricing.config import get_settings
from listing_pricing.main import cli

API = "http://cli.test/api/admin"

ROWS = [
    {
        "skuFamilyId": "sku1",
        "supplierId": "seller1",
        "currentLocation": "HK",
        "prices": {"Hongkong": {"amount": 100, "rate": 7.8, "local": 780}},
    }
]

COSTS = [
    {"_id": "same", "name": "Local pickup", "costType": "Fixed", "costField": "delivery",
     "value": 2, "groupId": "g1", "isSameLocationCharge": True},
    {"_id": "bundle", "name": "Bundle fee", "costType": "Fixed", "costField": "delivery",
     "value": 1, "groupId": "g1"},
    {"_id": "fee", "name": "Handling", "costType": "Fixed", "costField": "product",
     "costUnit": "pc", "value": 3},
]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_env(monkeypatch):
    """CLI용 설정 (실제 계산 모드)"""
    monkeypatch.setenv("PRICING_API_BASE_URL", "http://cli.test")
    monkeypatch.setenv("PRICING_API_MAX_RETRIES", "1")
    monkeypatch.setenv("DRY_RUN", "false")
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    monkeypatch.setenv("JSON_LOGS", "false")
    monkeypatch.delenv("LOG_FILE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    logger.remove()
    logger.add(sys.stderr)


@pytest.fixture
def files(tmp_path):
    def write(name, data):
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return write


def test_offered_costs_command(runner, files, cli_env):
    result = runner.invoke(
        cli,
        ["offered-costs", "--country", "Hongkong", "--rows", files("rows.json", ROWS),
         "--costs", files("costs.json", COSTS)],
    )

    assert result.exit_code == 0
    output = json.loads(result.output)
    assert list(output) == ["_standalone"]
    assert [c["_id"] for c in output["_standalone"]] == ["fee"]


def test_validate_command(runner, files, cli_env):
    valid = files("valid.json", {"selectedMargins": {"sellerCategory": True}, "selectedCosts": {"Hongkong": []}})
    invalid = files("invalid.json", {"selectedMargins": {"brand": True}, "selectedCosts": {}})

    assert runner.invoke(cli, ["validate", "--selection", valid]).exit_code == 0

    result = runner.invoke(cli, ["validate", "--selection", invalid])
    assert result.exit_code == 1
    assert "Dependent margins selected without seller category" in result.output


def test_calculate_dry_run(runner, files, cli_env):
    selection = files(
        "selection.json",
        {"selectedMargins": {"sellerCategory": True}, "selectedCosts": {"Hongkong": ["fee"]}},
    )

    result = runner.invoke(
        cli, ["calculate", "--rows", files("rows.json", ROWS), "--selection", selection, "--dry-run"]
    )

    assert result.exit_code == 0
    output = json.loads(result.output)
    assert output["selectedCosts"] == {"Hongkong": ["fee"], "Dubai": []}
    assert output["products"][0]["countryDeliverables"][0]["basePrice"] == 100.0


def test_calculate_conflicting_selection(runner, files, cli_env):
    selection = files(
        "selection.json",
        {"selectedMargins": {"sellerCategory": True}, "selectedCosts": {"Hongkong": ["a"], "Dubai": ["a"]}},
    )

    result = runner.invoke(cli, ["calculate", "--rows", files("rows.json", ROWS), "--selection", selection])

    assert result.exit_code == 1


@respx.mock
def test_calculate_calls_service(runner, files, cli_env):
    respx.post(f"{API}/skuFamily/list").mock(
        return_value=httpx.Response(200, json={"status": 200, "data": {"docs": []}})
    )
    respx.post(f"{API}/seller/list").mock(
        return_value=httpx.Response(200, json={"status": 200, "data": {"docs": []}})
    )
    respx.post(f"{API}/product/calculate-prices").mock(
        return_value=httpx.Response(
            200,
            json={
                "status": 200,
                "data": {
                    "products": [
                        {
                            "countryDeliverables": [
                                {
                                    "country": "Hongkong",
                                    "basePrice": 100,
                                    "calculatedPrice": 104,
                                    "margins": [{"type": "sellerCategory", "calculatedAmount": 1}],
                                    "costs": [
                                        {"costId": "fee", "calculatedAmount": 3},
                                        {"costId": "surprise", "calculatedAmount": 9},
                                    ],
                                }
                            ]
                        }
                    ]
                },
            },
        )
    )
    selection = files(
        "selection.json",
        {"selectedMargins": {"sellerCategory": True}, "selectedCosts": {"Hongkong": ["fee"]}},
    )

    result = runner.invoke(cli, ["calculate", "--rows", files("rows.json", ROWS), "--selection", selection])

    assert result.exit_code == 0, result.output
    output = json.loads(result.output)
    deliverable = output["products"][0][0]
    assert [c["costId"] for c in deliverable["costs"]] == ["fee"]
    assert deliverable["previewPrice"] == 104.0
    assert [w["line_id"] for w in output["warnings"]] == ["surprise"]


@respx.mock
def test_calculate_service_failure(runner, files, cli_env):
    respx.post(f"{API}/skuFamily/list").mock(
        return_value=httpx.Response(200, json={"status": 500, "message": "lookup failed"})
    )
    selection = files("selection.json", {"selectedMargins": {"sellerCategory": True}, "selectedCosts": {}})

    result = runner.invoke(cli, ["calculate", "--rows", files("rows.json", ROWS), "--selection", selection])

    assert result.exit_code == 1
    assert "lookup failed" in result.output
