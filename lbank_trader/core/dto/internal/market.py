"""페어/마켓 내부 도메인 모델.

내부 처리용 불변 도메인 객체 (dataclass 기반).
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True, eq=True, repr=True, match_args=False, kw_only=True)
class Pair:
    """거래 페어 (값 객체).

    - plain: LBank 표기 (CXS_USDT)
    - readable: 표준 표기 (CXS/USDT), 항상 f"{base}/{quote}"
    """

    plain: str
    readable: str
    base: str
    quote: str

    @property
    def symbol(self) -> str:
        """요청 파라미터용 소문자 표기 (cxs_usdt)"""
        return self.plain.lower()


@dataclass(slots=True, frozen=True, eq=True, repr=True, match_args=False, kw_only=True)
class MarketInfo:
    """마켓 거래 규칙 스냅샷.

    거래소별 매핑 (accuracy.do):
    - quantityAccuracy → base_decimals
    - priceAccuracy → quote_decimals
    - minTranQua → base_min_amount
    """

    pair: Pair
    base_decimals: int
    quote_decimals: int
    base_precision: float
    quote_precision: float
    base_min_amount: float = 0.0
    quote_min_amount: float = 0.0
