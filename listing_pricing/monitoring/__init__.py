"""
모니터링 시스템
로깅 기능 제공
"""

from .logger import LoggerAdapter, get_logger, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "LoggerAdapter",
]
