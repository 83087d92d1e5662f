from lbank_trader.core.types._common_types import (
    DO_NOT_RESOLVE_ERRORS,
    EXCHANGE_NAME,
    NO_ERROR_CODE,
    NONCE_BYTES,
    NOT_FOUND_HTTP_STATUS,
    OPEN_ORDER_STATUS,
    PART_FILLED_ORDER_STATUS,
    SIGNATURE_METHOD,
    SOFT_ERROR_HTTP_STATUSES,
    HttpMethod,
    OrderSide,
    OrderStatus,
    OrderType,
    RawPayload,
    TraderLogger,
)
from lbank_trader.core.types._exception_types import (
    DESERIALIZATION_ERRORS,
    TRANSPORT_EXCEPTIONS,
    AsyncWrappedCallable,
    ErrorCategory,
    ErrorCode,
    ErrorDomain,
    ExceptionGroup,
    RuleKind,
)

__all__ = [
    # _common_types
    "EXCHANGE_NAME",
    "SIGNATURE_METHOD",
    "NONCE_BYTES",
    "NO_ERROR_CODE",
    "SOFT_ERROR_HTTP_STATUSES",
    "NOT_FOUND_HTTP_STATUS",
    "DO_NOT_RESOLVE_ERRORS",
    "OPEN_ORDER_STATUS",
    "PART_FILLED_ORDER_STATUS",
    "OrderSide",
    "OrderType",
    "OrderStatus",
    "HttpMethod",
    "RawPayload",
    "TraderLogger",
    # _exception_types
    "ErrorDomain",
    "ErrorCode",
    "ErrorCategory",
    "ExceptionGroup",
    "RuleKind",
    "TRANSPORT_EXCEPTIONS",
    "DESERIALIZATION_ERRORS",
    "AsyncWrappedCallable",
]
