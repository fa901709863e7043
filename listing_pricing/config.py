"""
설정 관리 모듈
환경 변수를 읽어 Pydantic 모델로 변환하여 타입 안전성 보장
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, PrivateAttr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env 파일 로드
load_dotenv(dotenv_path=".env", override=False)


class PricingApiConfig(BaseSettings):
    """가격 계산/상품 관리 API 설정"""

    base_url: str = Field(default="http://localhost:3200")
    admin_route: str = Field(default="admin")
    token: Optional[str] = Field(default=None)
    timeout: float = Field(default=30.0)
    max_retries: int = Field(default=3)

    model_config = SettingsConfigDict(env_prefix="PRICING_API_", extra="ignore")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("max_retries")
    @classmethod
    def at_least_one_attempt(cls, v: int) -> int:
        if v < 1:
            raise ValueError("max_retries는 1 이상이어야 합니다")
        return v


class Settings(BaseSettings):
    """전체 애플리케이션 설정"""

    # 환경
    env: Literal["development", "staging", "production", "test"] = Field(default="development")
    debug: bool = Field(default=False)
    dry_run: bool = Field(default=False)

    # 로깅
    log_level: str = Field(default="INFO")
    log_file: Optional[Path] = Field(default=None)
    json_logs: bool = Field(default=False)

    # 하위 설정 (lazy loading)
    _api: Optional[PricingApiConfig] = PrivateAttr(default=None)

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("log_file", mode="before")
    @classmethod
    def create_log_path(cls, v):
        if v:
            path = Path(v)
            path.parent.mkdir(parents=True, exist_ok=True)
            return path
        return v

    @property
    def api(self) -> PricingApiConfig:
        """API 설정 (lazy loading)"""
        if self._api is None:
            try:
                self._api = PricingApiConfig()
            except ValidationError as e:
                raise ValueError(f"가격 API 설정이 올바르지 않습니다: {e}") from e
        return self._api

    def is_production(self) -> bool:
        """프로덕션 환경 여부"""
        return self.env == "production"

    def is_development(self) -> bool:
        """개발 환경 여부"""
        return self.env == "development"


@lru_cache()
def get_settings() -> Settings:
    """설정 싱글톤 인스턴스 반환"""
    return Settings()
