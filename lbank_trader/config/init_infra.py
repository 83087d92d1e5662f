from contextlib import asynccontextmanager
from typing import AsyncIterator

from lbank_trader.config.settings import LbankSettings
from lbank_trader.infra.lbank.api_client import LbankApiClient


@asynccontextmanager
async def init_api_client(config: LbankSettings) -> AsyncIterator[LbankApiClient]:
    """LbankApiClient 초기화 및 HTTP 세션 정리"""
    client = LbankApiClient(
        api_server=config.api_base_url,
        api_key=config.api_key,
        secret_key=config.secret_key,
        public_only=config.public_only,
        private_timeout=config.private_timeout_sec,
        public_timeout=config.public_timeout_sec,
        non_resolvable_errors=config.non_resolvable_errors,
    )
    async with client:
        yield client
