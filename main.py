"""애플리케이션 진입점 (DI Container 기반)

LBank 거래 어댑터 점검용 실행기
- 마켓 정보 로드
- 지정한 페어의 시세/호가 조회
- 자격 증명이 있으면 잔고와 미체결 주문 조회

Usage:
    python main.py BTC/USDT                       # 공개 API만 사용
    LBANK_API_KEY=... LBANK_SECRET_KEY=... python main.py BTC/USDT --private
"""

from __future__ import annotations

import argparse
import asyncio

from lbank_trader.common.logger import PipelineLogger
from lbank_trader.config.containers import ApplicationContainer
from lbank_trader.config.settings import lbank_settings
from lbank_trader.exchange.lbank import LbankTrader

logger = PipelineLogger.get_logger("main", "app")


class Application:
    """애플리케이션 메인 클래스

    책임:
    - DI Container 관리
    - 어댑터 초기화 (마켓 정보 선로딩)
    - Graceful Shutdown
    """

    def __init__(self, pair: str, private: bool = False) -> None:
        self.container = ApplicationContainer()
        self.pair = pair
        self.private = private
        self.trader: LbankTrader | None = None

    def _configure_container(self) -> None:
        """공개 모드이면 설정 싱글톤 대신 복사본으로 provider를 override"""
        if not self.private:
            self.container.infra.lbank_config.override(
                lbank_settings.model_copy(update={"public_only": True})
            )

    async def initialize(self) -> None:
        logger.info("LBank 거래 어댑터 시작 (DI 모드)")

        self._configure_container()
        await self.container.init_resources()
        self.trader = await self.container.trader()
        await self.trader.start()
        logger.info(f"✅ 마켓 {len(self.trader.markets)}개 로드 완료")

    async def run(self) -> None:
        if self.trader is None:
            raise RuntimeError("Application is not initialized; call initialize() first")

        market = await self.trader.market_info(self.pair)
        if market is None:
            logger.warning(f"{self.pair} 마켓 정보가 없습니다")
            return
        logger.info(
            f"{market.pair.readable}: base_decimals={market.base_decimals}, "
            f"quote_decimals={market.quote_decimals}, min_amount={market.base_min_amount}"
        )

        rates = await self.trader.get_rates(self.pair)
        if rates is not None:
            logger.info(f"{self.pair} rates: {rates.model_dump()}")

        if self.private:
            balances = await self.trader.get_balances()
            logger.info(f"balances: {[balance.model_dump() for balance in balances or []]}")
            orders = await self.trader.get_open_orders(self.pair)
            logger.info(f"open orders on {self.pair}: {orders}")

    async def shutdown(self) -> None:
        logger.info("모든 Resource 종료 중...")
        await self.container.shutdown_resources()
        logger.info("✅ 프로그램 종료 완료")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="LBank trade adapter smoke run")
    parser.add_argument("pair", help="표준 페어 표기 (예: BTC/USDT)")
    parser.add_argument(
        "--private", action="store_true", help="자격 증명으로 잔고/미체결 주문까지 조회"
    )
    return parser.parse_args()


async def main() -> None:
    """메인 실행 함수"""
    args = parse_args()
    app = Application(args.pair, private=args.private)

    try:
        await app.initialize()
        await app.run()
    finally:
        await app.shutdown()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\n프로그램이 종료되었습니다.")
