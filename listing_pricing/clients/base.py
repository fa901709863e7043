"""
관리자 API 기본 클라이언트
응답 형식: {"status": 200, "message": "...", "data": ...}
"""

from typing import Any, Dict, Optional

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from listing_pricing.config import PricingApiConfig, get_settings


class ExternalServiceError(Exception):
    """외부 서비스 호출 오류"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.endpoint = endpoint


class BaseApiClient:
    """관리자 API 공통 클라이언트"""

    def __init__(
        self,
        config: Optional[PricingApiConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        초기화

        Args:
            config: API 설정 (없으면 환경 설정 사용)
            client: 공유할 httpx 클라이언트
        """
        self.config = config or get_settings().api
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=self.config.timeout)

    def _url(self, path: str) -> str:
        return f"{self.config.base_url}/api/{self.config.admin_route}/{path.lstrip('/')}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.token:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    async def _post(self, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        """
        POST 요청 후 응답의 data 반환

        연결 오류만 재시도하며, 모든 실패는 ExternalServiceError로 변환한다.
        """
        url = self._url(path)
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.config.max_retries),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type(httpx.TransportError),
                reraise=True,
            ):
                with attempt:
                    response = await self.client.post(
                        url, json=payload or {}, headers=self._headers()
                    )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"API 요청 실패 [{e.response.status_code}]: {path}")
            raise ExternalServiceError(
                _error_message(e.response) or f"HTTP {e.response.status_code}",
                status_code=e.response.status_code,
                endpoint=path,
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"API 연결 오류: {path} - {str(e)}")
            raise ExternalServiceError(f"연결 오류: {str(e)}", endpoint=path) from e
        except ValueError as e:
            raise ExternalServiceError("JSON 응답 파싱 실패", endpoint=path) from e

        if not isinstance(body, dict) or body.get("status") != 200:
            message = body.get("message") if isinstance(body, dict) else None
            status = body.get("status") if isinstance(body, dict) else None
            logger.error(f"API 오류 응답: {path} - {message}")
            raise ExternalServiceError(
                message or "알 수 없는 API 오류", status_code=status, endpoint=path
            )
        return body.get("data")

    async def aclose(self):
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.aclose()


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get("message") if isinstance(body, dict) else None
