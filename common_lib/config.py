"""공통 설정 모듈(Common configuration module)."""
from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """시스템 환경설정(System environment settings)."""

    model_config = SettingsConfigDict(
        env_prefix="VR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="vulnreport", description="도구 이름(Tool name)")
    environment: str = Field(default="development", description="실행 환경(Runtime environment)")

    reports_dir: str = Field(default="data/reports", description="YAML 리포트 디렉터리(Directory of YAML reports)")
    osv_dir: str = Field(default="data/osv", description="OSV 출력 디렉터리(Directory of generated OSV entries)")

    osv_api_url: str = Field(
        default="https://api.osv.dev/v1",
        description="별칭 조회용 OSV API 주소(OSV API base URL used for alias lookups)",
    )
    http_timeout: float = Field(default=10.0, gt=0, description="HTTP 요청 제한 시간(HTTP timeout in seconds)")
    symbol_timeout: float = Field(
        default=120.0,
        gt=0,
        description="심볼 추출 제한 시간(Symbol exporter timeout in seconds)",
    )
    symbol_exporter_cmd: str = Field(
        default="",
        description="심볼 추출 명령(Command printing exported symbols as a JSON list)",
    )
    go_version: str = Field(
        default="",
        description="Go 툴체인 버전 태그 재정의(Override for the Go toolchain version tag, e.g. go1.21.3)",
    )
    allow_external_calls: bool = Field(
        default=True,
        description="외부 API 호출 허용 여부(Allow outbound API calls in this environment)",
    )
    max_concurrency: int = Field(
        default=4,
        ge=1,
        description="동시 처리 리포트 수(Number of reports processed concurrently)",
    )

    claude_api_key: str = Field(default="", description="Claude API 키(Claude API key)")
    claude_model: str = Field(default="claude-sonnet-4-5", description="Claude 모델 이름(Claude model name)")

    log_level: str = Field(default="INFO", description="로그 레벨(Log level)")
    log_json: bool = Field(default=False, description="JSON 로그 출력 여부(Emit JSON log lines)")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: Any) -> str:
        """Accept lower-case level names from the environment."""
        if v is None:
            return "INFO"
        return str(v).strip().upper() or "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """설정 인스턴스 반환(Return a cached settings instance)."""

    return Settings()


def load_environment() -> None:
    """기본 환경변수를 로드(Load base environment variables)."""

    os.environ.setdefault("TZ", "UTC")
