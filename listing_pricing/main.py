#!/usr/bin/env python3
"""
리스팅 가격 구성 시스템 메인 엔트리 포인트
"""

import asyncio
import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, List

import click
from loguru import logger
from pydantic import ValidationError

from listing_pricing.clients import CalculationClient, CatalogClient, ExternalServiceError
from listing_pricing.config import get_settings
from listing_pricing.domain import (
    CostSelectionState,
    SelectionConflictError,
    StructuralValidationError,
    VariantGroup,
    group_offered_costs,
    offered_costs,
    preview_price,
    validate_selection,
)
from listing_pricing.listing import PricingSession, build_calculation_product
from listing_pricing.models import Country, CostModule, MarginSelection, ProductVariantRow
from listing_pricing.monitoring import setup_logging


def _load_json(path: str) -> Any:
    return json.loads(Path(path).read_text(encoding="utf-8"))


def _load_rows(path: str) -> List[ProductVariantRow]:
    data = _load_json(path)
    if isinstance(data, dict):
        data = [data]
    return [ProductVariantRow.model_validate(item) for item in data]


def _echo_json(data: Any):
    click.echo(json.dumps(data, ensure_ascii=False, indent=2, default=str))


@click.group()
@click.option("--log-level", default=None, help="로그 레벨 (기본값: 환경 설정)")
def cli(log_level: str):
    """리스팅 가격 구성 시스템 CLI"""
    settings = get_settings()
    setup_logging(
        log_level=log_level or settings.log_level,
        log_file=settings.log_file,
        json_logs=settings.json_logs,
    )


@cli.command("offered-costs")
@click.option("--country", required=True, type=click.Choice([c.value for c in Country]))
@click.option("--rows", "rows_path", required=True, type=click.Path(exists=True), help="변형 행 JSON")
@click.option("--costs", "costs_path", required=True, type=click.Path(exists=True), help="비용 모듈 JSON")
def offered_costs_command(country: str, rows_path: str, costs_path: str):
    """국가별 제안 비용 모듈 출력"""
    rows = _load_rows(rows_path)
    costs = [CostModule.model_validate(item) for item in _load_json(costs_path)]

    offered = offered_costs(costs, Country(country), rows)
    grouped = group_offered_costs(offered)
    _echo_json(
        {
            (group_id or "_standalone"): [c.model_dump(mode="json", by_alias=True) for c in members]
            for group_id, members in grouped.items()
        }
    )
    logger.info(f"{country} 제안 비용 {len(offered)}개 / 전체 {len(costs)}개")


@cli.command()
@click.option("--selection", "selection_path", required=True, type=click.Path(exists=True))
def validate(selection_path: str):
    """마진/비용 선택 검증"""
    selection = _load_json(selection_path)
    result = validate_selection(selection.get("selectedMargins"), selection.get("selectedCosts"))
    if not result.is_valid:
        click.echo(f"검증 실패: {result.error}", err=True)
        sys.exit(1)
    click.echo("검증 통과")


@cli.command()
@click.option("--rows", "rows_path", required=True, type=click.Path(exists=True), help="변형 행 JSON")
@click.option("--selection", "selection_path", required=True, type=click.Path(exists=True))
@click.option("--dry-run", is_flag=True, help="계산 요청 없이 요청 내용만 출력")
def calculate(rows_path: str, selection_path: str, dry_run: bool):
    """가격 계산 후 재조정 결과 출력"""
    settings = get_settings()
    dry_run = dry_run or settings.dry_run

    rows = _load_rows(rows_path)
    selection = _load_json(selection_path)
    group = VariantGroup(rows)

    try:
        margins = MarginSelection.model_validate(selection.get("selectedMargins") or {})
        costs = CostSelectionState(selection.get("selectedCosts") or {})
    except (ValidationError, SelectionConflictError) as e:
        click.echo(f"선택 형식 오류: {e}", err=True)
        sys.exit(1)

    if dry_run:
        result = validate_selection(margins, costs.as_payload(list(Country)))
        if not result.is_valid:
            click.echo(f"검증 실패: {result.error}", err=True)
            sys.exit(1)
        logger.info("[Dry Run] 계산 요청을 보내지 않습니다")
        _echo_json(
            {
                "products": [build_calculation_product(row) for row in group.normalize()],
                "selectedMargins": margins.as_payload(),
                "selectedCosts": costs.as_payload(list(Country)),
            }
        )
        return

    try:
        result = asyncio.run(_run_calculation(group, margins, costs, settings))
    except StructuralValidationError as e:
        click.echo(f"검증 실패: {e}", err=True)
        sys.exit(1)
    except ExternalServiceError as e:
        click.echo(f"가격 계산 실패: {e}", err=True)
        sys.exit(1)

    _echo_json(
        {
            "products": [
                [
                    {**d.to_payload(), "previewPrice": float(preview_price(d))}
                    for d in deliverables
                ]
                for deliverables in result.deliverables
            ],
            "warnings": [asdict(w) for w in result.warnings],
        }
    )


async def _run_calculation(group, margins, costs, settings):
    async with CalculationClient(settings.api) as calculation_client, CatalogClient(
        settings.api
    ) as catalog_client:
        session = PricingSession(group, calculation_client, catalog_client)
        session.select_margins(margins)
        session.cost_selection = costs
        return await session.calculate()


if __name__ == "__main__":
    cli()
