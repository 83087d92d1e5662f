from typing import Any

import orjson


def parse_payload(raw: str | bytes | None) -> dict[str, Any] | None:
    """LBank 응답 본문(JSON)을 dict로 역직렬화.

    - 본문이 비었거나 JSON 객체가 아니면 None (분류기는 이를 '페이로드 없음'으로 취급)
    """
    if not raw:
        return None
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def to_log_string(value: Any) -> str:
    """로그용 JSON 문자열. 직렬화할 수 없으면 str(value)로 폴백."""
    try:
        return orjson.dumps(value).decode()
    except TypeError:
        return str(value)
