from __future__ import annotations

import pytest

from lbank_trader.exchange.lbank import reconcile_batch_cancel
from tests.factory_builders import (
    build_error_payload,
    build_ok_payload,
    build_open_order,
    build_orders_payload,
    build_trader,
)

ORDERS = "/orders_info_history.do"
CANCEL = "/cancel_order.do"


def _open_orders(*order_ids: str) -> tuple[int, dict]:
    return (200, build_orders_payload(*(build_open_order(order_id=oid) for oid in order_ids)))


# ----------------------------------------------------------------------
# 단건 취소
# ----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_cancel_order_confirmed() -> None:
    trader, session, log = build_trader(
        {CANCEL: (200, build_ok_payload({"order_id": "order-1"}))}
    )

    assert await trader.cancel_order("order-1", "sell", "CXS/USDT") is True

    [call] = session.calls
    assert call["params"]["order_id"] == "order-1"
    assert call["params"]["symbol"] == "cxs_usdt"
    assert any("Cancelling order order-1" in msg for msg in log.messages("debug"))


@pytest.mark.asyncio
async def test_cancel_order_treats_exchange_error_as_already_gone() -> None:
    # 이미 체결된 주문도 True로 보고됩니다. 실제 상태는 미체결 조회로 확인해야 합니다.
    trader, _, log = build_trader({CANCEL: (200, build_error_payload(10025))})

    assert await trader.cancel_order("order-1", None, "CXS/USDT") is True
    assert any("Assuming it doesn't exist" in msg for msg in log.messages("debug"))


@pytest.mark.asyncio
async def test_cancel_order_returns_none_on_request_failure() -> None:
    trader, _, log = build_trader({CANCEL: (503, "Service Unavailable")})

    assert await trader.cancel_order("order-1", "buy", "CXS/USDT") is None
    assert any("cancelOrder" in msg for msg in log.messages("warning"))


@pytest.mark.asyncio
async def test_cancel_order_returns_none_on_malformed_pair() -> None:
    trader, session, _ = build_trader({CANCEL: (200, build_ok_payload({"order_id": "x"}))})

    assert await trader.cancel_order("order-1", "buy", "CXSUSDT") is None
    assert session.calls == []


# ----------------------------------------------------------------------
# 일괄 취소
# ----------------------------------------------------------------------


@pytest.mark.asyncio
async def test_cancel_all_without_open_orders_skips_cancel_call() -> None:
    trader, session, _ = build_trader({ORDERS: _open_orders()})

    assert await trader.cancel_all_orders("CXS/USDT") is True
    assert session.calls_to(CANCEL) == []


@pytest.mark.asyncio
async def test_cancel_all_returns_none_when_open_orders_unknown() -> None:
    trader, session, _ = build_trader({ORDERS: (200, build_error_payload(10001))})

    assert await trader.cancel_all_orders("CXS/USDT") is None
    assert session.calls_to(CANCEL) == []


@pytest.mark.asyncio
async def test_cancel_all_single_order_batch() -> None:
    trader, session, _ = build_trader(
        {
            ORDERS: _open_orders("order-1"),
            CANCEL: (200, build_ok_payload({"order_id": "order-1"})),
        },
        strict_cancel=True,
    )

    assert await trader.cancel_all_orders("CXS/USDT") is True
    [call] = session.calls_to(CANCEL)
    assert call["params"]["order_id"] == "order-1"


@pytest.mark.asyncio
async def test_cancel_all_sends_comma_separated_batch() -> None:
    trader, session, log = build_trader(
        {
            ORDERS: _open_orders("a", "b", "c"),
            CANCEL: (200, build_ok_payload({"success": "a,b,c", "error": ""})),
        },
        strict_cancel=True,
    )

    assert await trader.cancel_all_orders("CXS/USDT") is True
    [call] = session.calls_to(CANCEL)
    assert call["params"]["order_id"] == "a,b,c"
    assert any("Cancelling all 3 orders" in msg for msg in log.messages("debug"))


@pytest.mark.parametrize("strict_cancel,expected", [(False, True), (True, False)])
@pytest.mark.asyncio
async def test_cancel_all_partial_failure(strict_cancel: bool, expected: bool) -> None:
    trader, _, log = build_trader(
        {
            ORDERS: _open_orders("a", "b"),
            CANCEL: (200, build_ok_payload({"success": "a", "error": "b"})),
        },
        strict_cancel=strict_cancel,
    )

    assert await trader.cancel_all_orders("CXS/USDT") is expected
    assert any("failed order ids: b" in msg for msg in log.messages("debug"))


@pytest.mark.parametrize("strict_cancel,expected", [(False, True), (True, False)])
@pytest.mark.asyncio
async def test_cancel_all_soft_error(strict_cancel: bool, expected: bool) -> None:
    trader, _, _ = build_trader(
        {ORDERS: _open_orders("a", "b"), CANCEL: (200, build_error_payload(10024))},
        strict_cancel=strict_cancel,
    )

    assert await trader.cancel_all_orders("CXS/USDT") is expected


@pytest.mark.asyncio
async def test_cancel_all_lenient_mode_hides_total_failure() -> None:
    # 기본 정책에서는 거래소가 모든 취소를 실패로 보고해도 True입니다.
    trader, _, _ = build_trader(
        {
            ORDERS: _open_orders("a", "b"),
            CANCEL: (200, build_ok_payload({"success": "", "error": "a,b"})),
        }
    )

    assert await trader.cancel_all_orders("CXS/USDT") is True


@pytest.mark.asyncio
async def test_cancel_all_returns_none_on_hard_error() -> None:
    trader, _, _ = build_trader(
        {ORDERS: _open_orders("a"), CANCEL: (200, build_error_payload("pending process"))}
    )

    assert await trader.cancel_all_orders("CXS/USDT") is None


# ----------------------------------------------------------------------
# 응답 해석
# ----------------------------------------------------------------------


def test_reconcile_singleton_batch_reads_order_id() -> None:
    result = reconcile_batch_cancel(["x"], {"order_id": "x"})
    assert result.confirmed is True
    assert result.cancelled_ids == ("x",)

    missing = reconcile_batch_cancel(["x"], {})
    assert missing.confirmed is False
    assert missing.failed_ids == ("x",)


def test_reconcile_multi_batch_reads_csv_lists() -> None:
    result = reconcile_batch_cancel(["a", "b", "c"], {"success": "a,c", "error": "b"})
    assert result.cancelled_ids == ("a", "c")
    assert result.failed_ids == ("b",)
    assert result.confirmed is False


def test_reconcile_multi_batch_without_data_is_unconfirmed() -> None:
    result = reconcile_batch_cancel(["a", "b"], None)
    assert result.confirmed is False
    assert result.cancelled_ids == ()
