from __future__ import annotations

from typing import TypeAlias

from lbank_trader.common.exceptions.errors import (
    ExchangeHardError,
    MalformedPair,
    MarketDataUnavailable,
    SigningError,
    TransportFailure,
)
from lbank_trader.core.dto.internal.common import RuleDomain
from lbank_trader.core.types import (
    DESERIALIZATION_ERRORS,
    TRANSPORT_EXCEPTIONS,
    ErrorCategory,
    ErrorCode,
    ErrorDomain,
)

# 1) 요청 경로 규칙 (rest)
RULES_REQUEST: list[RuleDomain] = [
    RuleDomain(
        kinds=("rest", "order"),
        exc=SigningError,
        result=(ErrorDomain.SIGNING, ErrorCode.SIGNATURE_FAILED, False),
    ),
    # nonce 재사용, pending 처리 중 등은 잠시 후 재시도하면 해소됩니다.
    RuleDomain(
        kinds=("rest", "order"),
        exc=ExchangeHardError,
        result=(ErrorDomain.EXCHANGE, ErrorCode.EXCHANGE_REJECTED, True),
    ),
    RuleDomain(
        kinds=("rest", "order", "market"),
        exc=(TransportFailure, *TRANSPORT_EXCEPTIONS),
        result=(ErrorDomain.TRANSPORT, ErrorCode.NETWORK_FAILURE, True),
    ),
]

# 2) 마켓/페어 규칙
RULES_MARKET: list[RuleDomain] = [
    RuleDomain(
        kinds=("market", "order"),
        exc=MarketDataUnavailable,
        result=(ErrorDomain.MARKET, ErrorCode.MARKET_DATA_UNAVAILABLE, True),
    ),
    RuleDomain(
        kinds=("market", "order", "rest"),
        exc=MalformedPair,
        result=(ErrorDomain.VALIDATION, ErrorCode.MALFORMED_PAIR, False),
    ),
]

# 3) 응답 가공 규칙 (모든 경계 공통, 가장 포괄적이므로 마지막)
RULES_TYPE: list[RuleDomain] = [
    RuleDomain(
        kinds=("rest", "market", "order"),
        exc=DESERIALIZATION_ERRORS,
        result=(ErrorDomain.PAYLOAD, ErrorCode.INVALID_PAYLOAD, False),
    ),
]

# 주의: MalformedPair는 ValueError 하위이므로 RULES_TYPE보다 먼저 평가되어야 합니다.
RULES_ALL: list[RuleDomain] = [
    *RULES_REQUEST,
    *RULES_MARKET,
    *RULES_TYPE,
]

RuleDict: TypeAlias = dict[str, list[RuleDomain]]
RULES_BY_KIND: RuleDict = {
    kind: [rule for rule in RULES_ALL if kind in rule.kinds]
    for kind in ("rest", "market", "order")
}


def classify_exception(err: BaseException, kind: str = "rest") -> ErrorCategory:
    """예외 → (ErrorDomain, ErrorCode, retryable) 분류기 (규칙 테이블 기반)

    - 규칙은 "구체 → 포괄" 순서로 선언되어 가장 특수한 규칙이 먼저 매칭됩니다.
    - 알 수 없는 kind는 전체 규칙으로 평가합니다.
    """
    rules = RULES_BY_KIND.get(kind, RULES_ALL)
    for rule in rules:
        if isinstance(err, rule.exc):
            return rule.result

    return (ErrorDomain.UNKNOWN, ErrorCode.UNKNOWN_ERROR, False)
