"""트라이/캐치 블록에서 사용할 예외 타입 정의 모듈.

광범위한 Exception 사용을 지양하고, 의도한 예외만 명시적으로 처리하기 위해 사용합니다.
"""

import asyncio
from enum import StrEnum
from typing import Any, Awaitable, Callable, Final, TypeAlias

import aiohttp
import orjson
from pydantic import ValidationError

AsyncWrappedCallable = Callable[..., Awaitable[Any]]


class ErrorDomain(StrEnum):
    """에러 도메인 분류"""

    TRANSPORT = "transport"
    EXCHANGE = "exchange"
    SIGNING = "signing"
    MARKET = "market"
    VALIDATION = "validation"
    PAYLOAD = "payload"
    UNKNOWN = "unknown"


class ErrorCode(StrEnum):
    """에러 코드 분류"""

    NETWORK_FAILURE = "network_failure"
    EXCHANGE_REJECTED = "exchange_rejected"
    SIGNATURE_FAILED = "signature_failed"
    MARKET_DATA_UNAVAILABLE = "market_data_unavailable"
    MALFORMED_PAIR = "malformed_pair"
    INVALID_PAYLOAD = "invalid_payload"
    UNKNOWN_ERROR = "unknown_error"


# 1. 네트워크/연결 관련 예외 (TransportFailure로 변환)
# - aiohttp.ClientError: 연결 실패, 응답 중단 등
# - asyncio.TimeoutError: 요청별 타임아웃
# - OSError: 소켓 레벨 에러
TRANSPORT_EXCEPTIONS: Final[tuple[type[BaseException], ...]] = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
)

# 2. 응답 가공 중 발생하는 예외 (필드 누락, 타입 불일치 등)
DESERIALIZATION_ERRORS: Final[tuple[type[BaseException], ...]] = (
    ValueError,
    TypeError,
    KeyError,
    IndexError,
    AttributeError,
    ValidationError,
    orjson.JSONDecodeError,
)

ErrorCategory: TypeAlias = tuple[ErrorDomain, ErrorCode, bool]
ExceptionGroup: TypeAlias = type[BaseException] | tuple[type[BaseException], ...]
RuleKind: TypeAlias = tuple[str, ...]
