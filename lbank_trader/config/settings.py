"""통합 Settings 모듈 - 환경변수 기반

이 모듈의 역할:
    1. 코드에 합리적인 기본값 제공
    2. 환경변수로 오버라이드 (우선순위 높음)
    3. 타입 안전성 보장 (Pydantic 자동 검증)

설정 우선순위:
    1. 환경변수 (최우선) - export LBANK_API_KEY=...
    2. .env 파일 - lbank_trader/config/.env
    3. 코드 기본값 (settings.py 내부)

사용 예시:
    # 공개 API만 사용 (인증 불필요)
    export LBANK_PUBLIC_ONLY=true
    python main.py CXS/USDT

    # 인증 API 사용 (비밀키는 환경변수로만)
    export LBANK_API_KEY=...
    export LBANK_SECRET_KEY=...
    python main.py CXS/USDT
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# 설정 파일 경로
config_dir = Path(__file__).parent


def env_settings(prefix: str) -> SettingsConfigDict:
    """환경변수 + .env 통합 설정

    Args:
        prefix: 환경변수 접두사 (예: LBANK_, LOG_)

    Returns:
        Pydantic 설정 딕셔너리

    우선순위:
        1. 환경변수 (export LBANK_API_KEY=...)
        2. .env 파일 (lbank_trader/config/.env)
    """
    return SettingsConfigDict(
        env_prefix=prefix,
        env_file=config_dir / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class LbankSettings(BaseSettings):
    """LBank REST API 설정 (환경변수 기반)

    환경변수 오버라이드:
        LBANK_API_BASE_URL: REST API 기본 주소 (기본: https://api.lbkex.com/v2)
        LBANK_API_KEY: API 키
        LBANK_SECRET_KEY: 서명용 비밀키 (보안상 환경변수 권장)
        LBANK_PUBLIC_ONLY: 공개 API만 사용 (자격 증명 미보관, 기본: false)
        LBANK_PRIVATE_TIMEOUT_SEC: 서명 요청 타임아웃 (기본: 10초)
        LBANK_PUBLIC_TIMEOUT_SEC: 공개 요청 타임아웃 (기본: 20초)
        LBANK_LOAD_MARKETS: 시작 시 마켓 정보 선로딩 여부 (기본: true)
        LBANK_NON_RESOLVABLE_ERRORS: 실패로 간주할 에러 코드 부분 문자열 (JSON 배열)
        LBANK_STRICT_CANCEL: 일괄 취소 부분 실패를 False로 보고 (기본: false)
    """

    api_base_url: str = "https://api.lbkex.com/v2"
    api_key: str = ""
    secret_key: str = ""
    public_only: bool = False
    # 서명 요청은 nonce가 오래 머물지 않도록 공개 요청보다 짧게 둡니다.
    private_timeout_sec: float = 10.0
    public_timeout_sec: float = 20.0
    load_markets: bool = True
    non_resolvable_errors: list[str] = ["nonce", "pending"]
    strict_cancel: bool = False

    model_config = env_settings("LBANK_")


class LoggingSettings(BaseSettings):
    """로깅 설정 (환경변수 기반)

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
# 환경변수 로드 (환경변수 없으면 기본값 사용)

lbank_settings = LbankSettings()
logging_settings = LoggingSettings()
