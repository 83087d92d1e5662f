"""숫자 포맷 변환 유틸리티 (과학적 표기법 처리, 자릿수 반올림)."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation


def normalize_number_string(value: str | float | int | None) -> str:
    """과학적 표기법을 일반 숫자 형식으로 변환.

    LBank 요청 파라미터는 문자열로 서명되므로 1e-06 같은 표기가 섞이면 안 됩니다.

    Examples:
        >>> normalize_number_string("5.883e-05")
        '0.00005883'
        >>> normalize_number_string(1e-06)
        '0.000001'
        >>> normalize_number_string("123.45")
        '123.45'
        >>> normalize_number_string(None)
        '0'
    """
    if not value or (isinstance(value, str) and value.strip() == ""):
        return "0"

    try:
        normalized = format(Decimal(str(value)), "f")
    except (InvalidOperation, ValueError, TypeError):
        return "0"

    # 불필요한 trailing zeros 제거 (소수점 이하만)
    if "." in normalized:
        normalized = normalized.rstrip("0").rstrip(".")

    return normalized


def get_precision(decimals: int) -> float:
    """소수 자릿수 → 최소 단위 (10^-decimals).

    >>> get_precision(2)
    0.01
    """
    return float(Decimal(1).scaleb(-decimals))


def round_to_decimals(value: float | str, decimals: int) -> float:
    """value를 decimals 자리로 반올림 (half-up).

    >>> round_to_decimals(0.0000012345, 6)
    1e-06
    >>> round_to_decimals(9.999, 2)
    10.0
    """
    quantum = Decimal(1).scaleb(-decimals)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def to_float(value: str | float | int | None) -> float:
    """LBank 숫자 문자열 → float. 비어 있으면 0.0."""
    if value is None or value == "":
        return 0.0
    return float(value)
