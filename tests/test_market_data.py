from __future__ import annotations

import pytest

from lbank_trader.core.dto.io.trading import ExchangeFeatures
from tests.factory_builders import (
    build_accuracy_payload,
    build_depth_payload,
    build_error_payload,
    build_market_entry,
    build_ok_payload,
    build_open_order,
    build_orders_payload,
    build_ticker_payload,
    build_trade,
    build_trades_payload,
    build_trader,
    build_user_info_payload,
)


@pytest.mark.asyncio
async def test_get_balances_filters_zero_balances() -> None:
    trader, session, _ = build_trader(
        {"/supplement/user_info_account.do": (200, build_user_info_payload())}
    )

    balances = await trader.get_balances()

    assert [balance.code for balance in balances] == ["USDT", "BTC"]
    usdt = balances[0]
    assert usdt.free == 100.5
    assert usdt.freezed == 10.0
    assert usdt.total == 110.5
    assert session.calls[0]["method"] == "POST"


@pytest.mark.asyncio
async def test_get_balances_keeps_zero_balances_when_asked() -> None:
    trader, _, _ = build_trader(
        {"/supplement/user_info_account.do": (200, build_user_info_payload())}
    )

    balances = await trader.get_balances(nonzero=False)

    assert len(balances) == 3


@pytest.mark.asyncio
async def test_get_balances_returns_none_on_soft_error() -> None:
    trader, _, log = build_trader(
        {"/supplement/user_info_account.do": (200, build_error_payload(10005))}
    )

    assert await trader.get_balances() is None
    assert any("getBalances" in msg for msg in log.messages("warning"))


@pytest.mark.asyncio
async def test_get_balances_returns_none_in_public_only_mode() -> None:
    trader, session, _ = build_trader(
        {"/supplement/user_info_account.do": (200, build_user_info_payload())},
        public_only=True,
    )

    assert await trader.get_balances() is None
    assert session.calls == []


@pytest.mark.asyncio
async def test_get_open_orders_maps_exchange_fields() -> None:
    trader, session, _ = build_trader(
        {
            "/orders_info_history.do": (
                200,
                build_orders_payload(
                    build_open_order(order_id="o-1", type="buy", deal_amount="4", status=1),
                    build_open_order(order_id="o-2", type="sell_market"),
                ),
            )
        }
    )

    orders = await trader.get_open_orders("CXS/USDT")

    first, second = orders
    assert first.order_id == "o-1"
    assert first.symbol == "CXS/USDT"
    assert first.side == "buy"
    assert first.type == "limit"
    assert first.amount_executed == 4.0
    assert first.amount_left == 6.0
    assert first.status == "part_filled"
    assert second.side == "sell"
    assert second.type == "market"
    assert second.status == "new"
    params = session.calls[0]["params"]
    assert params["symbol"] == "cxs_usdt"
    assert params["status"] == "0"


@pytest.mark.asyncio
async def test_get_open_orders_handles_empty_orders_field() -> None:
    trader, _, _ = build_trader(
        {"/orders_info_history.do": (200, build_ok_payload({"total": 0, "orders": None}))}
    )

    assert await trader.get_open_orders("CXS/USDT") == []


@pytest.mark.asyncio
async def test_get_deposit_address() -> None:
    trader, session, _ = build_trader(
        {
            "/get_deposit_address.do": (
                200,
                build_ok_payload({"address": "0xabc", "netWork": "erc20", "memo": ""}),
            )
        }
    )

    [address] = await trader.get_deposit_address("USDT")

    assert address.address == "0xabc"
    assert address.network == "erc20"
    assert session.calls[0]["params"]["assetCode"] == "usdt"


@pytest.mark.asyncio
async def test_get_rates_uses_best_levels_regardless_of_order() -> None:
    trader, _, _ = build_trader(
        {
            "/ticker.do": (200, build_ticker_payload()),
            "/depth.do": (
                200,
                build_depth_payload(
                    asks=[["1.09", "1"], ["1.06", "1"], ["1.07", "1"]],
                    bids=[["1.01", "1"], ["1.04", "1"], ["1.03", "1"]],
                ),
            ),
        }
    )

    rates = await trader.get_rates("CXS/USDT")

    assert rates.ask == 1.06
    assert rates.bid == 1.04
    assert rates.volume == 15000.0
    assert rates.volume_in_quote == 16500.5
    assert rates.high == 1.2
    assert rates.low == 0.9
    assert rates.last == 1.05


@pytest.mark.parametrize(
    "routes",
    [
        {"/ticker.do": (200, build_error_payload(10008))},
        {"/ticker.do": (200, build_ok_payload([]))},
        {"/ticker.do": (200, build_ticker_payload()), "/depth.do": (500, "")},
        {"/ticker.do": (200, build_ticker_payload()), "/depth.do": (200, build_depth_payload(asks=[]))},
    ],
)
@pytest.mark.asyncio
async def test_get_rates_returns_none_on_failure(routes: dict) -> None:
    trader, _, _ = build_trader(routes)

    assert await trader.get_rates("CXS/USDT") is None


@pytest.mark.asyncio
async def test_get_order_book_sorts_levels() -> None:
    trader, session, _ = build_trader(
        {
            "/depth.do": (
                200,
                build_depth_payload(
                    asks=[["1.07", "50"], ["1.06", "100"]],
                    bids=[["1.03", "20"], ["1.04", "80"]],
                ),
            )
        }
    )

    book = await trader.get_order_book("CXS/USDT")

    assert [entry.price for entry in book.asks] == [1.06, 1.07]
    assert [entry.price for entry in book.bids] == [1.04, 1.03]
    assert book.asks[0].amount == 100.0
    assert book.asks[0].type == "ask-sell-right"
    assert book.bids[0].type == "bid-buy-left"
    assert session.calls[0]["params"] == {"symbol": "cxs_usdt", "size": "200"}


@pytest.mark.asyncio
async def test_get_trades_history_sorted_by_date() -> None:
    trader, session, _ = build_trader(
        {
            "/trades.do": (
                200,
                build_trades_payload(
                    build_trade(tid="late", date_ms=2000, amount=1.0, price=2.0),
                    build_trade(tid="early", date_ms=1000, amount=3.0, price=1.5),
                ),
            )
        }
    )

    trades = await trader.get_trades_history("CXS/USDT", limit=50)

    assert [trade.trade_id for trade in trades] == ["early", "late"]
    assert trades[0].quote_amount == 4.5
    assert session.calls[0]["params"]["size"] == "50"


@pytest.mark.asyncio
async def test_market_info_and_markets_snapshot() -> None:
    trader, session, _ = build_trader(
        {"/accuracy.do": (200, build_accuracy_payload(build_market_entry()))}
    )

    assert trader.markets == {}
    await trader.start()

    info = await trader.market_info("CXS/USDT")
    assert info is not None
    assert info.base_decimals == 2
    assert set(trader.markets) == {"CXS/USDT"}
    assert len(session.calls_to("/accuracy.do")) == 1


@pytest.mark.asyncio
async def test_get_markets_returns_none_when_unavailable() -> None:
    trader, _, log = build_trader({"/accuracy.do": (500, "")})

    assert await trader.get_markets() is None
    assert await trader.market_info("CXS/USDT") is None
    assert any("getMarkets" in msg for msg in log.messages("warning"))


def test_features_reports_limit_only_trading() -> None:
    trader, _, _ = build_trader()

    features = trader.features()

    assert isinstance(features, ExchangeFeatures)
    assert features.place_market_order is False
    assert features.get_deposit_address is True
