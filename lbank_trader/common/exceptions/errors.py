"""LBank 어댑터 예외 계층.

- LbankRequestError 하위: 거래소 호출 경로에서 발생 (공개 API는 None으로 흡수)
- MalformedPair / MarketDataUnavailable: 로컬 전처리 단계에서 발생
"""

from __future__ import annotations


class LbankError(Exception):
    """어댑터 최상위 예외"""

    pass


class LbankRequestError(LbankError):
    """거래소 요청이 거부(reject)된 경우의 기본 예외"""

    pass


class TransportFailure(LbankRequestError):
    """네트워크 오류/타임아웃 (HTTP 응답 없음)"""

    def __init__(self, url: str, cause: BaseException) -> None:
        super().__init__(f"Request to {url} failed: {cause!r}")
        self.url = url
        self.cause = cause


class ExchangeHardError(LbankRequestError):
    """HTTP 실패 또는 흡수할 수 없는 거래소 에러 코드"""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class SigningError(LbankRequestError):
    """서명 생성 실패 (자격 증명 누락 등). 네트워크 호출 전에 발생합니다."""

    pass


class MalformedPair(LbankError, ValueError):
    """구분자가 없거나 여러 개인 페어 표기"""

    def __init__(self, pair: object) -> None:
        super().__init__(f"Malformed pair: {pair!r}")
        self.pair = pair


class MarketDataUnavailable(LbankError):
    """마켓 메타데이터를 가져오지 못해 캐시가 비어 있음"""

    pass
