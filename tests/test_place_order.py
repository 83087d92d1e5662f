from __future__ import annotations

import asyncio

import pytest

from tests.factory_builders import (
    build_accuracy_payload,
    build_error_payload,
    build_market_entry,
    build_ok_payload,
    build_trader,
)

ACCURACY = "/accuracy.do"
CREATE_ORDER = "/create_order.do"


def _markets(**overrides: str) -> tuple[int, dict]:
    return (200, build_accuracy_payload(build_market_entry(**overrides)))


@pytest.mark.asyncio
async def test_quote_amount_is_converted_to_base_amount() -> None:
    trader, session, log = build_trader(
        {
            ACCURACY: _markets(symbol="shib_usdt", quantityAccuracy="0", priceAccuracy="8"),
            CREATE_ORDER: (200, build_ok_payload({"order_id": "abc-123"})),
        }
    )

    result = await trader.place_order("buy", "SHIB/USDT", 0.00001, quote_amount=10)

    assert result.accepted is True
    assert result.order_id == "abc-123"
    [call] = session.calls_to(CREATE_ORDER)
    assert call["params"]["symbol"] == "shib_usdt"
    assert call["params"]["type"] == "buy"
    assert call["params"]["amount"] == "1000000"
    assert call["params"]["price"] == "0.00001"
    assert "Order placed to buy 1000000 SHIB at 0.00001 USDT (10 USDT)." in result.message
    assert log.messages("info")[-1] == result.message


@pytest.mark.asyncio
async def test_amount_and_price_are_rounded_to_market_decimals() -> None:
    trader, session, _ = build_trader(
        {
            ACCURACY: _markets(quantityAccuracy="2", priceAccuracy="4"),
            CREATE_ORDER: (200, build_ok_payload({"order_id": "1"})),
        }
    )

    result = await trader.place_order("sell", "cxs-usdt", 1.234567, base_amount=1.23456)

    assert result.accepted is True
    [call] = session.calls_to(CREATE_ORDER)
    assert call["params"]["amount"] == "1.23"
    assert call["params"]["price"] == "1.2346"


@pytest.mark.asyncio
async def test_base_amount_below_minimum_is_rejected_locally() -> None:
    trader, session, log = build_trader({ACCURACY: _markets(minTranQua="1")})

    result = await trader.place_order("sell", "CXS/USDT", 1.5, base_amount=0.5)

    assert result.order_id is False
    assert "less minimum 1.0 CXS" in result.message
    assert session.calls_to(CREATE_ORDER) == []
    assert log.messages("warning") == [result.message]


@pytest.mark.asyncio
async def test_quote_amount_below_minimum_is_rejected_locally() -> None:
    trader, session, _ = build_trader({ACCURACY: _markets(minTranAmount="5")})

    result = await trader.place_order("buy", "CXS/USDT", 1.0, quote_amount=2)

    assert result.order_id is False
    assert "Order volume 2.0 USDT is less minimum 5.0 USDT" in result.message
    assert session.calls_to(CREATE_ORDER) == []


@pytest.mark.asyncio
async def test_market_order_is_rejected_without_any_request() -> None:
    trader, session, _ = build_trader({ACCURACY: _markets()})

    result = await trader.place_order("buy", "CXS/USDT", None, base_amount=1, is_limit=False)

    assert result.order_id is False
    assert "doesn't support Market orders" in result.message
    assert session.calls == []


@pytest.mark.asyncio
async def test_unknown_market_is_rejected() -> None:
    trader, session, _ = build_trader({ACCURACY: _markets()})

    result = await trader.place_order("buy", "ETH/USDT", 1.0, base_amount=1)

    assert result.order_id is False
    assert "I don't have info about market ETH/USDT" in result.message
    assert session.calls_to(CREATE_ORDER) == []


@pytest.mark.asyncio
async def test_unavailable_market_data_is_rejected() -> None:
    trader, session, _ = build_trader({ACCURACY: (500, {"error_code": 10000})})

    result = await trader.place_order("buy", "CXS/USDT", 1.0, base_amount=1)

    assert result.order_id is False
    assert session.calls_to(CREATE_ORDER) == []


@pytest.mark.asyncio
async def test_malformed_pair_is_rejected() -> None:
    trader, session, _ = build_trader({ACCURACY: _markets()})

    result = await trader.place_order("buy", "CXSUSDT", 1.0, base_amount=1)

    assert result.order_id is False
    assert session.calls_to(CREATE_ORDER) == []


@pytest.mark.asyncio
async def test_missing_amount_is_rejected_locally() -> None:
    trader, session, _ = build_trader({ACCURACY: _markets()})

    result = await trader.place_order("buy", "CXS/USDT", 1.0)

    assert result.order_id is False
    assert "amount are required" in result.message
    assert session.calls_to(CREATE_ORDER) == []


@pytest.mark.asyncio
async def test_exchange_soft_error_is_reported_as_false() -> None:
    trader, _, _ = build_trader(
        {ACCURACY: _markets(), CREATE_ORDER: (200, build_error_payload(10016))}
    )

    result = await trader.place_order("buy", "CXS/USDT", 1.0, base_amount=1)

    assert result.order_id is False
    assert "addOrder" in result.message
    assert "10016" in result.message


@pytest.mark.parametrize(
    "reply",
    [
        (200, build_error_payload("invalid nonce. last nonce used: 1")),
        (502, "Bad Gateway"),
        asyncio.TimeoutError(),
    ],
)
@pytest.mark.asyncio
async def test_request_failures_are_reported_as_false(reply: object) -> None:
    trader, _, _ = build_trader({ACCURACY: _markets(), CREATE_ORDER: reply})

    result = await trader.place_order("sell", "CXS/USDT", 1.0, base_amount=1)

    assert result.order_id is False
    assert "addOrder" in result.message


@pytest.mark.asyncio
async def test_missing_order_id_is_reported_as_false() -> None:
    trader, _, _ = build_trader(
        {ACCURACY: _markets(), CREATE_ORDER: (200, build_ok_payload({}))}
    )

    result = await trader.place_order("sell", "CXS/USDT", 1.0, base_amount=1)

    assert result.order_id is False
    assert "No details" in result.message
