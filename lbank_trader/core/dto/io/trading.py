"""표준 거래 모델 (호출자 반환용 I/O DTO)."""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from lbank_trader.core.dto.io._base import BaseIOModelDTO
from lbank_trader.core.types import OrderSide, OrderStatus, OrderType


class OrderResult(BaseIOModelDTO):
    """주문 요청 결과. order_id가 False이면 주문이 접수되지 않은 것입니다."""

    order_id: str | Literal[False] = Field(..., description="거래소 주문 ID 또는 False")
    message: str = Field(..., description="사람이 읽을 수 있는 결과 메시지")

    @property
    def accepted(self) -> bool:
        return self.order_id is not False


class Balance(BaseIOModelDTO):
    code: str = Field(..., description="자산 코드 (대문자)")
    free: float
    freezed: float
    total: float


class OpenOrder(BaseIOModelDTO):
    order_id: str
    symbol: str = Field(..., description="표준 페어 표기 (BTC/USDT)")
    price: float
    side: OrderSide
    type: OrderType
    timestamp: int | None = None
    amount: float
    amount_executed: float
    amount_left: float
    status: OrderStatus


class DepositAddress(BaseIOModelDTO):
    network: str | None = None
    address: str


class Rates(BaseIOModelDTO):
    ask: float = Field(..., description="최저 매도 호가")
    bid: float = Field(..., description="최고 매수 호가")
    volume: float
    volume_in_quote: float
    high: float
    low: float
    last: float


class OrderBookEntry(BaseIOModelDTO):
    amount: float
    price: float
    count: int = 1
    type: Literal["ask-sell-right", "bid-buy-left"]


class OrderBook(BaseIOModelDTO):
    """asks는 가격 오름차순, bids는 가격 내림차순"""

    asks: list[OrderBookEntry]
    bids: list[OrderBookEntry]


class Trade(BaseIOModelDTO):
    base_amount: float = Field(..., description="체결 수량 (base)")
    price: float
    quote_amount: float = Field(..., description="체결 금액 (quote)")
    date: int = Field(..., description="체결 시각 (ms)")
    type: str = Field(..., description="buy / sell 등 거래소 표기")
    trade_id: str


class ExchangeFeatures(BaseIOModelDTO):
    """거래소가 API로 지원하는 기능 목록"""

    get_markets: bool = True
    get_currencies: bool = False
    place_market_order: bool = False
    get_deposit_address: bool = True
    get_trading_fees: bool = False
    get_account_trade_volume: bool = False
    create_deposit_address_with_website_only: bool = True
    get_fund_history: bool = False
    get_fund_history_implemented: bool = False
    support_coin_networks: bool = False
    allow_amount_for_market_buy: bool = False
    amount_for_market_order_necessary: bool = True
