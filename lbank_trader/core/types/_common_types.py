from __future__ import annotations

from typing import Any, Final, Literal, Protocol, TypeAlias

# 공통 타입/별칭을 한곳에 모읍니다.
# - 코어 계층 어디서나 재사용 가능한 최소 단위만 정의합니다.
# - LBank 응답 스키마 세부는 각 모듈에 두고, 여기에는 기반 타입만 둡니다.

EXCHANGE_NAME: Final[str] = "LBANK"

OrderSide: TypeAlias = Literal["buy", "sell"]
OrderType: TypeAlias = Literal["limit", "market"]
OrderStatus: TypeAlias = Literal["new", "part_filled", "filled", "cancelled"]
HttpMethod: TypeAlias = Literal["get", "post", "delete"]

# LBank 원시 응답 (JSON 객체)
RawPayload: TypeAlias = dict[str, Any]

# 서명 관련 상수
SIGNATURE_METHOD: Final[str] = "HmacSHA256"
NONCE_BYTES: Final[int] = 16

# 에러 분류 상수
NO_ERROR_CODE: Final[str] = "0"
SOFT_ERROR_HTTP_STATUSES: Final[frozenset[int]] = frozenset({200, 201})
NOT_FOUND_HTTP_STATUS: Final[int] = 404
# 에러 코드에 아래 문자열이 포함되면 요청을 실패로 간주합니다.
DO_NOT_RESOLVE_ERRORS: Final[tuple[str, ...]] = (
    "nonce",  # ~invalid nonce. last nonce used: 1684169723966
    "pending",  # ~pending process need to finish
)

# 주문 상태 코드 (orders_info_history.do)
# -1: 취소, 0: 거래중, 1: 부분 체결, 2: 전체 체결, 3: 부분 체결 후 취소, 4: 취소중
OPEN_ORDER_STATUS: Final[str] = "0"
PART_FILLED_ORDER_STATUS: Final[str] = "1"


class TraderLogger(Protocol):
    """어댑터가 소비하는 네 가지 로깅 채널."""

    def debug(self, msg: str, **kwargs: Any) -> None: ...

    def info(self, msg: str, **kwargs: Any) -> None: ...

    def warning(self, msg: str, **kwargs: Any) -> None: ...

    def error(self, msg: str, **kwargs: Any) -> None: ...
