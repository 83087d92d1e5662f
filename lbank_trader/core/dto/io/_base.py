"""I/O 경계 DTO 기반 클래스

호출자에게 반환되는 표준 거래 모델의 공통 설정을 정의합니다.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

OPTIMIZED_CONFIG = ConfigDict(
    # 런타임 검증
    use_enum_values=True,  # Enum → 값 직렬화
    extra="forbid",  # 알 수 없는 필드 금지
    validate_default=True,  # 기본값도 검증
    str_strip_whitespace=True,  # 문자열 자동 트림
    # 불변성 (호출자는 스냅샷만 받음)
    frozen=True,
    arbitrary_types_allowed=False,
)


class BaseIOModelDTO(BaseModel):
    """I/O 경계용 공통 Pydantic v2 베이스 모델.

    특징:
    - 불변 객체 (frozen=True)
    - 알 수 없는 필드 금지 (extra="forbid")
    - 문자열 자동 트림 (str_strip_whitespace=True)
    """

    model_config = OPTIMIZED_CONFIG
