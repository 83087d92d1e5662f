"""페어 표기 변환 (표준 BASE/QUOTE ↔ LBank base_quote)."""

from __future__ import annotations

import re

from lbank_trader.common.exceptions.errors import MalformedPair
from lbank_trader.core.dto.internal.market import Pair

_ANY_SEPARATOR = re.compile(r"[-/_]")


def _build_pair(base: str, quote: str, raw: object) -> Pair:
    if not base or not quote:
        raise MalformedPair(raw)
    return Pair(
        plain=f"{base}_{quote}",
        readable=f"{base}/{quote}",
        base=base,
        quote=quote,
    )


def format_pair(pair: str) -> Pair:
    """임의 표기(BTC/USDT, btc-usdt, BTC_USDT) → LBank 표기 Pair.

    Raises:
        MalformedPair: 구분자가 없거나 둘 이상인 경우
    """
    if not isinstance(pair, str):
        raise MalformedPair(pair)

    parts = _ANY_SEPARATOR.split(pair.strip().upper())
    if len(parts) != 2:
        raise MalformedPair(pair)

    base, quote = parts
    return _build_pair(base, quote, pair)


def deformat_pair(pair: str) -> Pair:
    """LBank 표기(btc_usdt) → Pair. LBank는 항상 '_'로 구분된 페어를 반환합니다.

    Raises:
        MalformedPair: '_' 구분자가 정확히 하나가 아닌 경우
    """
    if not isinstance(pair, str):
        raise MalformedPair(pair)

    parts = pair.strip().upper().split("_")
    if len(parts) != 2:
        raise MalformedPair(pair)

    base, quote = parts
    return _build_pair(base, quote, pair)
