"""
로깅 시스템 테스트
"""

import json
import sys

import pytest
from loguru import logger

from listing_pricing.monitoring import get_logger, setup_logging


@pytest.fixture
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_logger_adapter_context(log_records):
    log = get_logger("pricing_session", group_code="GROUP-1").bind(country="Hongkong")

    log.info("계산 시작")

    record = log_records[-1]
    assert record["message"] == "계산 시작"
    assert record["extra"]["name"] == "pricing_session"
    assert record["extra"]["group_code"] == "GROUP-1"
    assert record["extra"]["country"] == "Hongkong"


def test_event_log(log_records):
    get_logger("reconciler").event(
        "reconciliation_warning", "응답에만 있는 비용", level="WARNING", line_id="c9"
    )

    record = log_records[-1]
    assert record["level"].name == "WARNING"
    assert record["extra"]["event"] == "reconciliation_warning"
    assert record["extra"]["line_id"] == "c9"


def test_reconciliation_log_file(tmp_path, restore_logger):
    """재조정 경고만 별도 파일에 기록"""
    log_file = tmp_path / "logs" / "pricing.log"
    setup_logging(log_level="DEBUG", log_file=log_file, console_output=False)

    log = get_logger("reconciler")
    log.warning("일반 경고")
    log.event("reconciliation_warning", "요청하지 않은 마진", level="WARNING", kind="margin")
    logger.complete()

    warning_log = tmp_path / "logs" / "pricing_reconciliation.log"
    lines = warning_log.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])["record"]["extra"]["kind"] == "margin"
    assert "일반 경고" in log_file.read_text(encoding="utf-8")
