"""
LBank REST API 클라이언트 구현

서명/비서명 HTTP 호출을 수행하고, 응답을 Success / SoftError / HardError로 분류합니다.
엔드포인트 래퍼는 HardError를 ExchangeHardError로 올려 보내고(reject),
Success와 SoftError는 그대로 반환합니다(resolve).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Final

import aiohttp

from lbank_trader.common.exceptions.errors import ExchangeHardError, TransportFailure
from lbank_trader.common.logger import PipelineLogger
from lbank_trader.common.serde import parse_payload, to_log_string
from lbank_trader.core.dto.internal.response import (
    ClassifiedResponse,
    HardError,
    SoftError,
    Success,
)
from lbank_trader.core.types import (
    DO_NOT_RESOLVE_ERRORS,
    OPEN_ORDER_STATUS,
    TRANSPORT_EXCEPTIONS,
    HttpMethod,
    OrderSide,
    TraderLogger,
)
from lbank_trader.infra.lbank.classifier import classify_response
from lbank_trader.infra.lbank.signer import Signer, stringify_param

logger = PipelineLogger.get_logger("api_client", "lbank")

DEFAULT_API_SERVER: Final[str] = "https://api.lbkex.com/v2"
FORM_HEADERS: Final[dict[str, str]] = {"Content-Type": "application/x-www-form-urlencoded"}


class LbankApiClient:
    """
    LBank REST API 클라이언트

    - 세션은 인스턴스당 하나이며 첫 요청 시 생성합니다.
    - public_only=True이면 자격 증명을 보관하지 않고, 서명 요청은 네트워크 호출 전에 실패합니다.
    """

    def __init__(
        self,
        api_server: str | None = None,
        api_key: str | None = None,
        secret_key: str | None = None,
        log: TraderLogger | None = None,
        public_only: bool = False,
        private_timeout: float = 10.0,
        public_timeout: float = 20.0,
        non_resolvable_errors: Iterable[str] = DO_NOT_RESOLVE_ERRORS,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.base_url = api_server or DEFAULT_API_SERVER
        self.public_only = public_only
        self._logger = log or logger
        if public_only:
            api_key = secret_key = None
        self._signer = Signer(api_key, secret_key)
        self._private_timeout = private_timeout
        self._public_timeout = public_timeout
        self._non_resolvable = tuple(non_resolvable_errors)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> LbankApiClient:
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """HTTP 세션을 생성하거나 재사용합니다."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """직접 생성한 HTTP 세션을 종료합니다."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def request(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        method: HttpMethod = "get",
        signed: bool = False,
    ) -> ClassifiedResponse:
        """요청을 수행하고 분류 결과를 반환합니다.

        Raises:
            SigningError: 서명 불가 (네트워크 호출 없음)
            TransportFailure: 네트워크 오류/타임아웃
        """
        params = dict(params or {})
        url_base = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        req_parameters = to_log_string(params) if params else "{ No parameters }"

        headers: dict[str, str] | None = None
        if signed:
            # sign은 서명 이후에 붙이므로 서명 대상에 포함되지 않습니다.
            query_string = self._signer.build_request(path, params).query_string
            headers = FORM_HEADERS
            timeout = self._private_timeout
        else:
            query_string = "&".join(f"{key}={stringify_param(value)}" for key, value in params.items())
            timeout = self._public_timeout

        url = url_base
        data: str | None = None
        if method == "post":
            data = query_string
        elif query_string:
            url = f"{url_base}?{query_string}"

        session = await self._ensure_session()
        try:
            async with session.request(
                method.upper(),
                url,
                data=data,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                status = response.status
                reason = response.reason
                body = await response.text()
        except TRANSPORT_EXCEPTIONS as exc:
            self._logger.warning(
                f"Request to {url_base} with data {req_parameters} failed: {exc!r}. Rejecting…"
            )
            raise TransportFailure(url_base, exc) from exc

        classified = classify_response(status, reason, parse_payload(body), self._non_resolvable)

        match classified:
            case HardError(message=message):
                self._logger.warning(
                    f"Request to {url_base} with data {req_parameters} failed: {message}. Rejecting…"
                )
            case SoftError(message=message):
                self._logger.debug(
                    f"LBANK processed a request to {url_base} with data {req_parameters}, "
                    f"but with error: {message}. Resolving…"
                )

        return classified

    async def _call(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        method: HttpMethod = "get",
        signed: bool = False,
    ) -> Success | SoftError:
        classified = await self.request(path, params, method, signed)
        if isinstance(classified, HardError):
            raise ExchangeHardError(classified.message, classified.status)
        return classified

    # ----------------------------------------------------------------------
    # 인증 엔드포인트
    # ----------------------------------------------------------------------

    async def get_user_data(self) -> Success | SoftError:
        """계정 정보 (지갑 잔고 포함)"""
        return await self._call("/supplement/user_info_account.do", {}, "post", signed=True)

    async def get_deposit_address(self, asset: str) -> Success | SoftError:
        return await self._call(
            "/get_deposit_address.do", {"assetCode": asset}, "post", signed=True
        )

    async def get_orders(
        self, symbol: str, limit: int = 100, status: str = OPEN_ORDER_STATUS
    ) -> Success | SoftError:
        """주문 목록 (status: -1 취소, 0 거래중, 1 부분 체결, 2 체결, 3 부분 체결 후 취소, 4 취소중)"""
        data = {
            "symbol": symbol,
            "current_page": 1,
            "page_length": limit,
            "status": status,
        }
        return await self._call("/orders_info_history.do", data, "post", signed=True)

    async def add_order(
        self, symbol: str, side: OrderSide, price: float, amount: float
    ) -> Success | SoftError:
        """지정가 주문 생성"""
        data = {
            "symbol": symbol,
            "type": side,
            "price": price,
            "amount": amount,
        }
        return await self._call("/create_order.do", data, "post", signed=True)

    async def cancel_order(self, order_id: str, symbol: str) -> Success | SoftError:
        """주문 취소. order_id에 쉼표로 구분된 여러 ID를 넘기면 일괄 취소됩니다."""
        data = {
            "order_id": order_id,
            "symbol": symbol,
        }
        return await self._call("/cancel_order.do", data, "post", signed=True)

    # ----------------------------------------------------------------------
    # 공개 엔드포인트
    # ----------------------------------------------------------------------

    async def order_book(self, symbol: str, limit: int = 200) -> Success | SoftError:
        return await self._call("/depth.do", {"symbol": symbol, "size": limit})

    async def get_trades_history(self, symbol: str, size: int = 100) -> Success | SoftError:
        """최근 체결 (size 최대 200)"""
        return await self._call("/trades.do", {"symbol": symbol, "size": size})

    async def markets(self) -> Success | SoftError:
        """전체 마켓 거래 규칙 (자릿수, 최소 수량)"""
        return await self._call("/accuracy.do")

    async def ticker(self, symbol: str) -> Success | SoftError:
        return await self._call("/ticker.do", {"symbol": symbol})
