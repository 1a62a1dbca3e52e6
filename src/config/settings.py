"""통합 Settings 모듈 - 환경변수 기반

이 모듈의 역할:
    1. 코드에 합리적인 기본값 제공
    2. 환경변수로 오버라이드 (우선순위 높음)
    3. 타입 안전성 보장 (Pydantic 자동 검증)

설정 우선순위:
    1. 환경변수 (최우선) - export COINBASE_API_BASE_URL=...
    2. .env 파일 - config/.env
    3. 코드 기본값 (settings.py 내부)

사용 예시:
    # 기본값 (공개 API 엔드포인트) 사용
    python main.py --qty 2.5

    # 샌드박스 엔드포인트로 오버라이드
    export COINBASE_API_BASE_URL=https://api-public.sandbox.exchange.coinbase.com/
    export GEMINI_API_BASE_URL=https://api.sandbox.gemini.com/
    python main.py
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# 설정 파일 경로
config_dir = Path(__file__).parent.parent.parent / "config"


def env_settings(prefix: str) -> SettingsConfigDict:
    """.env + 환경변수 통합 설정

    Args:
        prefix: 환경변수 접두사 (예: COINBASE_, LOG_)

    Returns:
        Pydantic 설정 딕셔너리
    """
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=config_dir / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class AppSettings(BaseSettings):
    """애플리케이션 일반 설정

    환경변수 오버라이드:
        APP_ENVIRONMENT: 실행 환경 (dev, prod, test) (기본: dev)
        APP_DEBUG: 디버그 모드 (기본: false)
    """

    environment: str = "dev"
    debug: bool = False

    model_config = env_settings("APP_")


class CoinbaseSettings(BaseSettings):
    """Coinbase Exchange REST 설정

    환경변수 오버라이드:
        COINBASE_API_BASE_URL: REST 베이스 URL (끝의 / 포함)
        COINBASE_RATE_LIMIT_MAX_REQUESTS: 윈도우당 최대 요청 수 (기본: 1)
        COINBASE_RATE_LIMIT_INTERVAL_SEC: 윈도우 길이 (기본: 2초)
    """

    api_base_url: str = "https://api.exchange.coinbase.com/"
    rate_limit_max_requests: int = Field(default=1, ge=1)
    rate_limit_interval_sec: float = Field(default=2.0, gt=0)

    model_config = env_settings("COINBASE_")


class GeminiSettings(BaseSettings):
    """Gemini REST 설정

    환경변수 오버라이드:
        GEMINI_API_BASE_URL: REST 베이스 URL (끝의 / 포함)
        GEMINI_RATE_LIMIT_MAX_REQUESTS: 윈도우당 최대 요청 수 (기본: 1)
        GEMINI_RATE_LIMIT_INTERVAL_SEC: 윈도우 길이 (기본: 2초)
    """

    api_base_url: str = "https://api.gemini.com/"
    rate_limit_max_requests: int = Field(default=1, ge=1)
    rate_limit_interval_sec: float = Field(default=2.0, gt=0)

    model_config = env_settings("GEMINI_")


class HttpSettings(BaseSettings):
    """HTTP 클라이언트 공통 설정

    환경변수 오버라이드:
        HTTP_TIMEOUT_SEC: 요청 전체 타임아웃 (기본: 10초)
        HTTP_USER_AGENT: User-Agent 헤더
    """

    timeout_sec: float = Field(default=10.0, gt=0)
    user_agent: str = "order-book-aggregator/1.0"

    model_config = env_settings("HTTP_")


class LoggingSettings(BaseSettings):
    """로깅 설정

    환경변수 오버라이드:
        LOG_LEVEL: 로깅 레벨 (기본: INFO)
        LOG_TO_FILE: 파일 로깅 여부 (기본: false)
        LOG_DIR: 로그 디렉토리 (기본: logs)
    """

    level: str = "INFO"
    to_file: bool = False
    dir: str = "logs"

    model_config = env_settings("LOG_")


# ========================================
# 설정 인스턴스 (싱글톤)
# ========================================

app_settings = AppSettings()
coinbase_settings = CoinbaseSettings()
gemini_settings = GeminiSettings()
http_settings = HttpSettings()
logging_settings = LoggingSettings()
