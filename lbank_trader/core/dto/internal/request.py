from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True, repr=False, match_args=False, kw_only=True)
class SignedRequest:
    """서명된 요청 (호출마다 생성, 저장하지 않음).

    - params: 주입 필드(api_key, timestamp, signature_method, echostr) 포함, 키 정렬
    - signature: canonical 문자열 전체에 대한 서명 (sign 자체는 서명 대상이 아님)
    """

    path: str
    params: dict[str, str]
    timestamp: int
    nonce: str
    signature: str

    @property
    def canonical(self) -> str:
        return "&".join(f"{key}={value}" for key, value in self.params.items())

    @property
    def query_string(self) -> str:
        return f"{self.canonical}&sign={self.signature}"
