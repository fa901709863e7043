"""
Listing Pricing - 다국가 상품 리스팅 가격 구성 시스템
"""

__version__ = "0.1.0"
