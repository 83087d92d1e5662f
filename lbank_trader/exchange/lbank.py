"""LBank 거래 어댑터 (표준 거래 인터페이스).

주문 생성/취소를 조정하고 LBank 원시 응답을 표준 모델로 변환합니다.
모든 공개 연산은 비동기이며, 복구 불가능한 실패 시 예외 대신 None을 반환합니다.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lbank_trader.common.exceptions.errors import LbankRequestError, MarketDataUnavailable
from lbank_trader.common.logger import PipelineLogger
from lbank_trader.core.decorators import catch_request_failure
from lbank_trader.core.dto.internal.market import MarketInfo
from lbank_trader.core.dto.internal.response import CancelBatchResult, SoftError, Success
from lbank_trader.core.dto.io.trading import (
    Balance,
    DepositAddress,
    ExchangeFeatures,
    OpenOrder,
    OrderBook,
    OrderBookEntry,
    OrderResult,
    Rates,
    Trade,
)
from lbank_trader.core.market.market_cache import MarketCache
from lbank_trader.core.market.pair_codec import deformat_pair, format_pair
from lbank_trader.core.types import (
    EXCHANGE_NAME,
    NO_ERROR_CODE,
    PART_FILLED_ORDER_STATUS,
    OrderSide,
    RawPayload,
    TraderLogger,
)
from lbank_trader.core.utils.number_format import (
    normalize_number_string,
    round_to_decimals,
    to_float,
)
from lbank_trader.infra.lbank.api_client import LbankApiClient

logger = PipelineLogger.get_logger("lbank_trader", "exchange")


def is_accepted(response: Success | SoftError) -> bool:
    """거래소가 요청을 업무적으로 수락했는지 (result 참 + error_code 0)"""
    if not isinstance(response, Success) or not response.payload:
        return False
    payload = response.payload
    result = payload.get("result", True)
    if result in (False, "false", None):
        return False
    return str(payload.get("error_code", NO_ERROR_CODE)) == NO_ERROR_CODE


def error_code_of(response: Success | SoftError) -> str | None:
    if response.payload is None:
        return None
    code = response.payload.get("error_code")
    return None if code is None else str(code)


def _split_ids(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(item for item in str(value).split(",") if item)


def reconcile_batch_cancel(order_ids: list[str], data: RawPayload | None) -> CancelBatchResult:
    """일괄 취소 응답 해석.

    LBank는 여러 주문을 취소할 때만 success/error에 쉼표 구분 ID 목록을 주고,
    주문이 하나면 order_id 필드 하나만 돌려줍니다. 배치 크기로 응답 형태를 고릅니다.
    """
    data = data or {}
    if len(order_ids) == 1:
        cancelled = data.get("order_id")
        if cancelled:
            return CancelBatchResult(confirmed=True, cancelled_ids=(str(cancelled),))
        return CancelBatchResult(confirmed=False, failed_ids=(order_ids[0],))

    cancelled_ids = _split_ids(data.get("success"))
    failed_ids = _split_ids(data.get("error"))
    return CancelBatchResult(
        confirmed=bool(cancelled_ids) and not failed_ids,
        cancelled_ids=cancelled_ids,
        failed_ids=failed_ids,
    )


class LbankTrader:
    """LBank 거래 어댑터

    책임:
    - 마켓 캐시 소유 및 주입 (인스턴스 간 공유 상태 없음)
    - 주문 파라미터 반올림/최소 수량 검증 후 제출
    - 취소 결과의 모호함을 "성공으로 간주" 정책으로 정리 (strict_cancel로 완화 가능)

    Note:
        취소 연산은 거래소 오류를 True로 접습니다. 페어 상태를 확인하려면
        get_open_orders()로 다시 조회해야 합니다.
    """

    def __init__(
        self,
        api_client: LbankApiClient,
        market_cache: MarketCache | None = None,
        log: TraderLogger | None = None,
        load_markets: bool = True,
        strict_cancel: bool = False,
    ) -> None:
        self._api = api_client
        self._logger = log or logger
        self._market_cache = market_cache or MarketCache(api_client.markets, self._logger)
        self._load_markets = load_markets
        self.strict_cancel = strict_cancel

    async def __aenter__(self) -> LbankTrader:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def start(self) -> None:
        """초기화 시 마켓 정보를 미리 채웁니다 (load_markets=True인 경우)."""
        if self._load_markets:
            await self.get_markets()

    async def close(self) -> None:
        await self._api.close()

    # ----------------------------------------------------------------------
    # 마켓 정보
    # ----------------------------------------------------------------------

    @property
    def markets(self) -> Mapping[str, MarketInfo]:
        """현재 마켓 캐시 스냅샷"""
        return self._market_cache.markets

    def features(self) -> ExchangeFeatures:
        return ExchangeFeatures()

    @catch_request_failure("getMarkets", kind="market")
    async def get_markets(
        self, pair: str | None = None
    ) -> MarketInfo | Mapping[str, MarketInfo] | None:
        """pair(BTC/USDT 형식)가 주어지면 해당 마켓, 아니면 전체 마켓 정보"""
        return await self._market_cache.get_markets(pair)

    async def market_info(self, pair: str) -> MarketInfo | None:
        info = await self.get_markets(pair)
        return info if isinstance(info, MarketInfo) else None

    # ----------------------------------------------------------------------
    # 계정
    # ----------------------------------------------------------------------

    @catch_request_failure("getBalances")
    async def get_balances(self, nonzero: bool = True) -> list[Balance] | None:
        response = await self._api.get_user_data()
        if not is_accepted(response):
            self._logger.warning(
                f"API request getBalances(nonzero: {nonzero}) of lbank module failed. "
                f"{error_code_of(response)}"
            )
            return None

        result = []
        for crypto in response.payload["data"]["balances"]:
            free = to_float(crypto.get("free"))
            freezed = to_float(crypto.get("locked"))
            result.append(
                Balance(
                    code=str(crypto["asset"]).upper(),
                    free=free,
                    freezed=freezed,
                    total=free + freezed,
                )
            )

        if nonzero:
            result = [balance for balance in result if balance.free or balance.freezed]

        return result

    @catch_request_failure("getDepositAddress")
    async def get_deposit_address(self, coin: str) -> list[DepositAddress] | None:
        response = await self._api.get_deposit_address(coin.lower())
        if not is_accepted(response):
            self._logger.warning(
                f"API request getDepositAddress(coin: {coin}) of lbank module failed. "
                f"{error_code_of(response)}"
            )
            return None

        data = response.payload["data"]
        return [DepositAddress(network=data.get("netWork"), address=data["address"])]

    # ----------------------------------------------------------------------
    # 주문
    # ----------------------------------------------------------------------

    @catch_request_failure("getOpenOrders")
    async def get_open_orders(self, pair: str) -> list[OpenOrder] | None:
        pair_ = format_pair(pair)
        response = await self._api.get_orders(pair_.symbol)
        if not is_accepted(response):
            self._logger.warning(
                f"API request getOpenOrders(pair: {pair}) of lbank module failed. "
                f"{error_code_of(response)}"
            )
            return None

        # 미체결 주문이 없으면 orders 필드가 비어 있습니다.
        orders = (response.payload.get("data") or {}).get("orders") or []

        result = []
        for order in orders:
            amount = to_float(order["amount"])
            executed = to_float(order.get("deal_amount"))
            # buy, sell, buy_market, sell_market, buy_maker, sell_maker, buy_ioc, ...
            order_type = str(order["type"])
            result.append(
                OpenOrder(
                    order_id=str(order["order_id"]),
                    symbol=deformat_pair(order["symbol"]).readable,
                    price=to_float(order["price"]),
                    side="buy" if order_type.startswith("buy") else "sell",
                    type="market" if order_type.endswith("market") else "limit",
                    timestamp=order.get("create_time"),
                    amount=amount,
                    amount_executed=executed,
                    amount_left=amount - executed,
                    status=(
                        "part_filled"
                        if str(order.get("status")) == PART_FILLED_ORDER_STATUS
                        else "new"
                    ),
                )
            )

        return result

    async def place_order(
        self,
        side: OrderSide,
        pair: str,
        price: float | None,
        base_amount: float | None = None,
        is_limit: bool = True,
        quote_amount: float | None = None,
    ) -> OrderResult:
        """주문 생성. 실패는 order_id=False로만 표현합니다 (예외 없음).

        Args:
            side: 'buy' 또는 'sell'
            pair: 표준 표기 (BTC/USDT)
            price: 주문 가격
            base_amount: base 수량. base_amount / quote_amount 중 하나만 주면 됩니다.
            is_limit: LBank API는 지정가 주문만 지원합니다.
            quote_amount: quote 금액
        """
        param_string = (
            f"side: {side}, pair: {pair}, price: {price}, base_amount: {base_amount}, "
            f"is_limit: {is_limit}, quote_amount: {quote_amount}"
        )

        if not is_limit:
            return self._reject_order(
                f"Unable to place {side} order on {pair}. "
                f"{EXCHANGE_NAME} doesn't support Market orders."
            )

        try:
            market = await self._market_cache.get_markets(pair)
        except (MarketDataUnavailable, ValueError) as exc:
            market = None
            self._logger.warning(f"Market info for {pair} is unavailable: {exc}")

        if not isinstance(market, MarketInfo):
            return self._reject_order(
                f"Unable to place an order on {EXCHANGE_NAME} exchange. "
                f"I don't have info about market {pair}."
            )

        # 지정가 주문: quote 금액만 주어지면 base 수량을 계산
        if not base_amount and quote_amount and price:
            base_amount = quote_amount / price

        if base_amount:
            base_amount = round_to_decimals(base_amount, market.base_decimals)
        if quote_amount:
            quote_amount = round_to_decimals(quote_amount, market.quote_decimals)
        if price:
            price = round_to_decimals(price, market.quote_decimals)

        base, quote = market.pair.base, market.pair.quote

        if base_amount and base_amount < market.base_min_amount:
            return self._reject_order(
                f"Unable to place an order on {EXCHANGE_NAME} exchange. Order amount "
                f"{base_amount} {base} is less minimum {market.base_min_amount} {base} "
                f"on {market.pair.readable} pair."
            )

        if quote_amount and quote_amount < market.quote_min_amount:
            return self._reject_order(
                f"Unable to place an order on {EXCHANGE_NAME} exchange. Order volume "
                f"{quote_amount} {quote} is less minimum {market.quote_min_amount} {quote} "
                f"on {market.pair.readable} pair."
            )

        if not base_amount or not price:
            return self._reject_order(
                f"Unable to place an order on {EXCHANGE_NAME} exchange. "
                f"Order price and amount are required for limit orders ({param_string})."
            )

        # quote 금액은 로그 메시지용으로만 계산
        quote_calculated = quote_amount or round_to_decimals(
            base_amount * price, market.quote_decimals
        )
        output = (
            f"{side} {normalize_number_string(base_amount)} {base} at "
            f"{normalize_number_string(price)} {quote} "
            f"({normalize_number_string(quote_calculated)} {quote})."
        )

        try:
            response = await self._api.add_order(market.pair.symbol, side, price, base_amount)
        except LbankRequestError as exc:
            return self._reject_order(
                f"API request addOrder({param_string}) of lbank module failed. {exc}."
            )

        if not is_accepted(response):
            return self._reject_order(
                f"API request addOrder({param_string}) of lbank module failed. "
                f"{error_code_of(response)}."
            )

        order_id = (response.payload.get("data") or {}).get("order_id")
        if not order_id:
            return self._reject_order(
                f"Unable to place order to {output} {{ No details }}. "
                "Check parameters and balances."
            )

        message = f"Order placed to {output} Order Id: {order_id}."
        self._logger.info(message)
        return OrderResult(order_id=str(order_id), message=message)

    def _reject_order(self, message: str) -> OrderResult:
        self._logger.warning(message)
        return OrderResult(order_id=False, message=message)

    @catch_request_failure("cancelOrder", kind="order")
    async def cancel_order(self, order_id: str, side: str | None, pair: str) -> bool | None:
        """주문 취소. side는 LBank에서 사용하지 않습니다.

        거래소가 오류를 보고해도 "이미 취소되었거나 존재하지 않음"으로 보고 True를 반환합니다.
        """
        pair_ = format_pair(pair)
        response = await self._api.cancel_order(order_id, pair_.symbol)

        if not is_accepted(response):
            self._logger.debug(
                f"Failed to cancel order {order_id} on {pair_.readable} pair: "
                f"{error_code_of(response)}. Assuming it doesn't exist or already cancelled."
            )
            return True

        cancelled_id = (response.payload.get("data") or {}).get("order_id")
        if str(cancelled_id) == str(order_id):
            self._logger.debug(f"Cancelling order {order_id} on {pair_.readable} pair…")
        else:
            self._logger.debug(
                f"Failed to cancel order {order_id} on {pair_.readable} pair: "
                f"unexpected response order id {cancelled_id}. "
                "Assuming it doesn't exist or already cancelled."
            )
        return True

    @catch_request_failure("cancelAllOrders", kind="order")
    async def cancel_all_orders(self, pair: str, side: str = "") -> bool | None:
        """페어의 모든 미체결 주문 취소 (미체결 조회 + 일괄 취소 1회).

        기본 정책은 어떤 결과든 True이며, 실패한 주문 ID는 로그로만 남깁니다.
        strict_cancel=True이면 실패가 보고된 경우 False를 반환합니다.
        """
        pair_ = format_pair(pair)

        open_orders = await self.get_open_orders(pair)
        if open_orders is None:
            return None

        order_ids = [order.order_id for order in open_orders]
        if not order_ids:
            self._logger.debug(f"No open orders to cancel on {pair_.readable} pair.")
            return True

        response = await self._api.cancel_order(",".join(order_ids), pair_.symbol)

        if not is_accepted(response):
            self._logger.debug(
                f"Failed to cancel all orders on {pair_.readable} pair: {error_code_of(response)}."
            )
            return not self.strict_cancel

        batch = reconcile_batch_cancel(order_ids, response.payload.get("data"))

        if batch.failed_ids:
            self._logger.debug(
                f"Failed to cancel {len(batch.failed_ids)} orders on {pair_.readable}, "
                f"failed order ids: {','.join(batch.failed_ids)}. Assuming they don't exist "
                "or already cancelled."
            )
        elif batch.cancelled_ids:
            self._logger.debug(f"Cancelling all {len(order_ids)} orders on {pair_.readable}…")
        else:
            self._logger.debug(
                f"Cancelling all orders on {pair_.readable}: exchange confirmed none of "
                f"{','.join(order_ids)}."
            )

        if self.strict_cancel:
            return batch.confirmed
        return True

    # ----------------------------------------------------------------------
    # 시세
    # ----------------------------------------------------------------------

    @catch_request_failure("getRates")
    async def get_rates(self, pair: str) -> Rates | None:
        pair_ = format_pair(pair)

        ticker_response = await self._api.ticker(pair_.symbol)
        if not is_accepted(ticker_response):
            self._logger.warning(
                f"API request getRates-ticker(pair: {pair}) of lbank module failed. "
                f"error code: {error_code_of(ticker_response)}"
            )
            return None

        tickers = ticker_response.payload.get("data") or []
        if not tickers:
            self._logger.warning(
                f"API request getRates-ticker(pair: {pair}) of lbank module failed. "
                "ticker list is void"
            )
            return None
        ticker = tickers[0]["ticker"]

        book_response = await self._api.order_book(pair_.symbol)
        if not is_accepted(book_response):
            self._logger.warning(
                f"API request getRates-orderBook(pair: {pair}) of lbank module failed. "
                f"error code: {error_code_of(book_response)}"
            )
            return None
        book = book_response.payload["data"]

        # 정렬 순서를 가정하지 않고 최저 매도가/최고 매수가를 직접 구합니다.
        asks = sorted(to_float(level[0]) for level in book["asks"])
        bids = sorted((to_float(level[0]) for level in book["bids"]), reverse=True)

        return Rates(
            ask=asks[0],
            bid=bids[0],
            volume=to_float(ticker.get("vol")),
            volume_in_quote=to_float(ticker.get("turnover")),
            high=to_float(ticker.get("high")),
            low=to_float(ticker.get("low")),
            last=to_float(ticker.get("latest")),
        )

    @catch_request_failure("getOrderBook")
    async def get_order_book(self, pair: str) -> OrderBook | None:
        pair_ = format_pair(pair)

        response = await self._api.order_book(pair_.symbol)
        if not is_accepted(response):
            self._logger.warning(
                f"API request getOrderBook(pair: {pair}) of lbank module failed. "
                f"error code: {error_code_of(response)}"
            )
            return None
        book = response.payload["data"]

        asks = [
            OrderBookEntry(
                amount=to_float(level[1]), price=to_float(level[0]), type="ask-sell-right"
            )
            for level in book["asks"]
        ]
        bids = [
            OrderBookEntry(
                amount=to_float(level[1]), price=to_float(level[0]), type="bid-buy-left"
            )
            for level in book["bids"]
        ]

        return OrderBook(
            asks=sorted(asks, key=lambda entry: entry.price),
            bids=sorted(bids, key=lambda entry: entry.price, reverse=True),
        )

    @catch_request_failure("getTradesHistory")
    async def get_trades_history(self, pair: str, limit: int | None = None) -> list[Trade] | None:
        pair_ = format_pair(pair)

        if limit is None:
            response = await self._api.get_trades_history(pair_.symbol)
        else:
            response = await self._api.get_trades_history(pair_.symbol, limit)
        if not is_accepted(response):
            self._logger.warning(
                f"API request getTradesHistory(pair: {pair}) of lbank module failed. "
                f"error code: {error_code_of(response)}"
            )
            return None

        result = []
        for trade in response.payload.get("data") or []:
            amount = to_float(trade["amount"])
            price = to_float(trade["price"])
            result.append(
                Trade(
                    base_amount=amount,
                    price=price,
                    quote_amount=amount * price,
                    date=int(trade["date_ms"]),
                    type=str(trade["type"]),
                    trade_id=str(trade["tid"]),
                )
            )

        # 시간 오름차순
        result.sort(key=lambda trade: trade.date)
        return result
