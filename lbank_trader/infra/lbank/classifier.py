"""LBank 응답 분류기.

LBank는 전송 성공과 업무 성공을 한 페이로드({result, error_code, ...})에 섞어 보냅니다.
HTTP 결과와 페이로드를 보고 Success / SoftError / HardError 중 하나로 분류합니다.
"""

from __future__ import annotations

from collections.abc import Iterable

from lbank_trader.core.dto.internal.response import (
    ClassifiedResponse,
    HardError,
    SoftError,
    Success,
)
from lbank_trader.core.types import (
    DO_NOT_RESOLVE_ERRORS,
    NO_ERROR_CODE,
    NOT_FOUND_HTTP_STATUS,
    SOFT_ERROR_HTTP_STATUSES,
    RawPayload,
)


def _is_http_success(status: int) -> bool:
    return 200 <= status < 300


def extract_error_code(payload: RawPayload | None) -> str | None:
    """error_code 추출. 없거나 비어 있으면 None"""
    if not payload:
        return None
    code = payload.get("error_code")
    if code is None or code == "":
        return None
    return str(code)


def build_error_message(status: int, reason: str | None, payload: RawPayload | None) -> str:
    """'<status> <reason>, [<error_code>]' 형식의 사람이 읽을 수 있는 메시지"""
    code = extract_error_code(payload)
    succeeded = bool(payload) and payload.get("success", payload.get("result")) in (True, "true")
    error_info = "[No error code]" if succeeded or code is None else f"[{code}]"
    head = f"{status} {reason}" if reason else str(status)
    return f"{head}, {error_info}"


def classify_response(
    status: int,
    reason: str | None,
    payload: RawPayload | None,
    non_resolvable: Iterable[str] = DO_NOT_RESOLVE_ERRORS,
) -> ClassifiedResponse:
    """HTTP 상태 + 페이로드 → 분류 결과.

    1. 404 또는 그 밖의 2xx 아닌 상태 → HardError (페이로드와 무관)
    2. error_code가 없거나 "0" → Success (페이로드 그대로)
    3. 200/201이면서 페이로드가 있으면
       - 에러 코드에 non_resolvable 문자열이 포함되면 HardError
       - 아니면 SoftError (페이로드 보존)
    4. 그 외 → HardError
    """
    message = build_error_message(status, reason, payload)

    if status == NOT_FOUND_HTTP_STATUS:
        return HardError(message=f"{message}. Not found", status=status)

    if not _is_http_success(status):
        return HardError(message=message, status=status)

    code = extract_error_code(payload)
    if code is None or code == NO_ERROR_CODE:
        return Success(payload=payload)

    # 상태 코드 소속 여부는 실제 HTTP 상태로 판단하고, 페이로드가 없으면 SoftError가 될 수 없습니다.
    if status in SOFT_ERROR_HTTP_STATUSES and payload:
        if any(marker in code for marker in non_resolvable):
            return HardError(message=message, status=status)
        return SoftError(payload=payload, message=message)

    return HardError(message=message, status=status)
