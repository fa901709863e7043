"""
공통 숫자 타입
Decimal 금액은 JSON 직렬화 시 float로 내보냄
"""

from decimal import Decimal
from typing import Annotated, Union

from pydantic import PlainSerializer

Amount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

# 외부 계산 서비스가 준 값을 타입 변환 없이 보존 ("12.50" 같은 문자열도 그대로)
Number = Union[int, float, Amount, str]
