import functools
import inspect
from typing import Any, Callable, Type

from lbank_trader.common.exceptions.errors import LbankError
from lbank_trader.common.exceptions.exception_rule import classify_exception
from lbank_trader.core.types import DESERIALIZATION_ERRORS, AsyncWrappedCallable

REQUEST_EXCEPTIONS: tuple[Type[BaseException], ...] = (LbankError, *DESERIALIZATION_ERRORS)


def format_call_params(func: Callable[..., Any], args: tuple, kwargs: dict) -> str:
    """로그용 'name: value' 파라미터 문자열 (self 제외)"""
    try:
        bound = inspect.signature(func).bind(*args, **kwargs)
    except TypeError:
        return f"args: {args}, kwargs: {kwargs}"
    bound.apply_defaults()
    return ", ".join(
        f"{name}: {value}" for name, value in bound.arguments.items() if name != "self"
    )


def catch_request_failure(
    operation: str | None = None,
    exceptions: tuple[Type[BaseException], ...] = REQUEST_EXCEPTIONS,
    kind: str = "rest",
    fallback_return: Any = None,
):
    """거래소 요청 실패를 포착해 경고 로그를 남기고 fallback_return을 반환하는 데코레이터.

    호출자는 None을 "결과 불명(재시도 또는 수동 확인 필요)"으로 취급해야 하며,
    "확실히 실패함"으로 해석하면 안 됩니다.

    Args:
        operation: 로그에 표시할 연산 이름 (기본: 함수 이름)
        exceptions: 포착할 예외 클래스 튜플
        kind: 예외 분류 규칙 종류 ("rest", "market", "order")
        fallback_return: 예외 발생 시 반환할 기본값 (기본: None)

    Requirement:
        데코레이터가 적용되는 클래스는 `self._logger`를 가져야 합니다.
    """

    def decorator(func: AsyncWrappedCallable) -> AsyncWrappedCallable:
        name = operation or func.__name__

        @functools.wraps(func)
        async def wrapper(self, *args, **kwargs):
            try:
                return await func(self, *args, **kwargs)
            except exceptions as e:
                domain, code, retryable = classify_exception(e, kind)
                param_string = format_call_params(func, (self, *args), kwargs)
                self._logger.warning(
                    f"API request {name}({param_string}) of lbank module failed. {e}",
                    extra={
                        "phase": name,
                        "error_domain": str(domain),
                        "error_code": str(code),
                        "retryable": retryable,
                    },
                )
                return fallback_return
            # 지정되지 않은 예외는 상위로 전파

        return wrapper

    return decorator
