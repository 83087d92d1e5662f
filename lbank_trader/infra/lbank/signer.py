"""
LBank 요청 서명기

- 파라미터를 키 기준으로 정렬해 key=value&... 문자열을 만든 뒤
- MD5 대문자 hex 다이제스트를 HMAC-SHA256(secret)으로 다시 서명합니다.
  (원문 쿼리 문자열이 아니라 MD5 다이제스트에 HMAC을 적용하는 것이 LBank 규격)
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
import time
from typing import Any, Mapping

from lbank_trader.common.exceptions.errors import SigningError
from lbank_trader.core.dto.internal.request import SignedRequest
from lbank_trader.core.types import NONCE_BYTES, SIGNATURE_METHOD
from lbank_trader.core.utils.number_format import normalize_number_string


def stringify_param(value: Any) -> str:
    """서명/전송용 파라미터 값 문자열화 (float은 과학적 표기법 없이)"""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return normalize_number_string(value)
    return str(value)


def canonicalize(params: Mapping[str, Any]) -> str:
    """키 사전순 정렬 후 key=value를 '&'로 연결"""
    return "&".join(f"{key}={stringify_param(params[key])}" for key in sorted(params))


class Signer:
    def __init__(self, api_key: str | None, secret_key: str | None) -> None:
        self._api_key = api_key or ""
        self._secret_key = secret_key or ""

    @property
    def has_credentials(self) -> bool:
        return bool(self._api_key and self._secret_key)

    def sign(self, canonical: str) -> str:
        """canonical 문자열 → 서명 hex.

        Raises:
            SigningError: 비밀키가 없는 경우 (네트워크 호출 전에 실패)
        """
        if not self._secret_key:
            raise SigningError("Secret key is not configured; unable to sign request")

        digest = hashlib.md5(canonical.encode("utf-8")).hexdigest().upper()
        return hmac.new(
            self._secret_key.encode("utf-8"), digest.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    def build_request(
        self,
        path: str,
        params: Mapping[str, Any],
        timestamp: int | None = None,
        nonce: str | None = None,
    ) -> SignedRequest:
        """인증 필드를 주입하고 서명된 요청을 생성합니다.

        api_key, timestamp(ms), signature_method, echostr도 서명 대상에 포함됩니다.
        """
        if not self._api_key:
            raise SigningError("API key is not configured; unable to sign request")

        timestamp = timestamp if timestamp is not None else int(time.time() * 1000)
        nonce = nonce or secrets.token_hex(NONCE_BYTES)

        merged: dict[str, Any] = dict(params)
        merged["api_key"] = self._api_key
        merged["timestamp"] = timestamp
        merged["signature_method"] = SIGNATURE_METHOD
        merged["echostr"] = nonce

        ordered = {key: stringify_param(merged[key]) for key in sorted(merged)}
        signature = self.sign(canonicalize(ordered))

        return SignedRequest(
            path=path,
            params=ordered,
            timestamp=timestamp,
            nonce=nonce,
            signature=signature,
        )
