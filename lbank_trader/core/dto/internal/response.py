"""응답 분류 결과 (명시적 태그 유니온).

Success / SoftError / HardError 중 하나이며, 호출한 연산이 정확히 한 번 소비합니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias

from lbank_trader.core.types import RawPayload


@dataclass(slots=True, frozen=True, repr=True, match_args=True, kw_only=True)
class Success:
    """에러 코드가 없거나 "0"인 정상 응답"""

    payload: RawPayload | None
    kind: Literal["success"] = "success"


@dataclass(slots=True, frozen=True, repr=True, match_args=True, kw_only=True)
class SoftError:
    """거래소가 처리했지만 업무 오류를 표시한 응답 (페이로드 보존)"""

    payload: RawPayload
    message: str
    kind: Literal["soft_error"] = "soft_error"

    @property
    def error_code(self) -> str:
        return str(self.payload.get("error_code"))


@dataclass(slots=True, frozen=True, repr=True, match_args=True, kw_only=True)
class HardError:
    """HTTP 실패 또는 흡수하면 안 되는 에러 코드"""

    message: str
    status: int | None = None
    kind: Literal["hard_error"] = "hard_error"


ClassifiedResponse: TypeAlias = Success | SoftError | HardError


@dataclass(slots=True, frozen=True, repr=True, match_args=False, kw_only=True)
class CancelBatchResult:
    """일괄 취소 응답 해석 결과.

    LBank는 부분 성공 여부를 모호하게 보고하므로 confirmed는 "실패 보고 없음"만 의미합니다.
    """

    confirmed: bool
    cancelled_ids: tuple[str, ...] = field(default_factory=tuple)
    failed_ids: tuple[str, ...] = field(default_factory=tuple)
