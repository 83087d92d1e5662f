from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType
from typing import Any

from lbank_trader.common.exceptions.errors import LbankRequestError, MarketDataUnavailable
from lbank_trader.common.logger import PipelineLogger
from lbank_trader.core.dto.internal.market import MarketInfo
from lbank_trader.core.dto.internal.response import SoftError, Success
from lbank_trader.core.market.pair_codec import deformat_pair, format_pair
from lbank_trader.core.types import DESERIALIZATION_ERRORS, TraderLogger
from lbank_trader.core.utils.number_format import get_precision, to_float

logger = PipelineLogger.get_logger("market_cache", "core")

MarketsFetcher = Callable[[], Awaitable[Success | SoftError]]


def parse_market(market: dict[str, Any]) -> MarketInfo:
    """accuracy.do 항목 하나를 MarketInfo로 변환"""
    pair = deformat_pair(market["symbol"])
    base_decimals = int(market["quantityAccuracy"])
    quote_decimals = int(market["priceAccuracy"])
    return MarketInfo(
        pair=pair,
        base_decimals=base_decimals,
        quote_decimals=quote_decimals,
        base_precision=get_precision(base_decimals),
        quote_precision=get_precision(quote_decimals),
        base_min_amount=to_float(market.get("minTranQua")),
        quote_min_amount=to_float(market.get("minTranAmount")),
    )


class MarketCache:
    """마켓 거래 규칙(자릿수/최소 수량) 캐시.

    - 어댑터 인스턴스 하나가 소유하며, 프로세스 수명 동안 메모리에서 제공합니다 (TTL 없음).
    - 동시에 여러 호출이 와도 네트워크 조회는 한 번만 수행합니다 (single-flight).
    - 조회 실패 시 캐시는 비어 있는 상태로 남고 MarketDataUnavailable을 발생시킵니다.
    """

    def __init__(self, fetch_markets: MarketsFetcher, log: TraderLogger | None = None) -> None:
        self._fetch_markets = fetch_markets
        self._logger = log or logger
        self._markets: dict[str, MarketInfo] = {}
        self._fetching = False
        self._lock = asyncio.Lock()
        # 완료된 조회 횟수와 마지막 실패 (대기 중이던 호출자가 결과를 공유)
        self._generation = 0
        self._last_error: MarketDataUnavailable | None = None

    @property
    def is_fetching(self) -> bool:
        return self._fetching

    @property
    def is_loaded(self) -> bool:
        return bool(self._markets)

    @property
    def markets(self) -> Mapping[str, MarketInfo]:
        """현재 캐시 스냅샷 (조회를 유발하지 않음)"""
        return MappingProxyType(dict(self._markets))

    async def get_markets(
        self, pair: str | None = None
    ) -> MarketInfo | Mapping[str, MarketInfo] | None:
        """pair가 주어지면 해당 MarketInfo(미상장이면 None), 아니면 전체 매핑을 반환합니다.

        Raises:
            MarketDataUnavailable: 캐시가 비어 있고 조회에도 실패한 경우
            MalformedPair: pair 표기가 잘못된 경우
        """
        if not self._markets:
            await self._load(force=False)

        if pair is None:
            return self.markets
        return self._markets.get(format_pair(pair).readable)

    async def refresh(self) -> Mapping[str, MarketInfo]:
        """명시적 재조회. 실패하면 기존 캐시를 유지한 채 예외를 전파합니다."""
        await self._load(force=True)
        return self.markets

    async def _load(self, force: bool) -> None:
        generation = self._generation
        async with self._lock:
            # 대기하는 동안 다른 조회가 끝났으면 그 결과(성공/실패)를 그대로 사용
            if self._generation != generation:
                if self._last_error is not None:
                    raise self._last_error
                if self._markets:
                    return

            if self._markets and not force:
                return

            self._fetching = True
            try:
                self._markets = await self._fetch()
                self._last_error = None
            except MarketDataUnavailable as exc:
                self._last_error = exc
                raise
            finally:
                self._fetching = False
                self._generation += 1

            self._logger.info(
                f"Received info about {len(self._markets)} markets on LBANK exchange."
            )

    async def _fetch(self) -> dict[str, MarketInfo]:
        try:
            response = await self._fetch_markets()
            if not isinstance(response, Success):
                raise MarketDataUnavailable(
                    f"Markets request was processed with error: {response.message}"
                )
            markets = {
                info.pair.readable: info
                for info in map(parse_market, (response.payload or {})["data"])
            }
        except LbankRequestError as exc:
            self._logger.warning(f"Unable to fetch markets: {exc}")
            raise MarketDataUnavailable(str(exc)) from exc
        except DESERIALIZATION_ERRORS as exc:
            self._logger.warning(f"Error while processing markets response: {exc!r}")
            raise MarketDataUnavailable(str(exc)) from exc

        if not markets:
            raise MarketDataUnavailable("Exchange reported no markets")
        return markets
