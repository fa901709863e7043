"""
외부 서비스 클라이언트
"""

from .base import BaseApiClient, ExternalServiceError
from .calculation import CalculationClient
from .catalog import CatalogClient
from .products import ProductClient

__all__ = [
    "BaseApiClient",
    "ExternalServiceError",
    "CalculationClient",
    "CatalogClient",
    "ProductClient",
]
