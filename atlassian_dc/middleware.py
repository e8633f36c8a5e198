"""Request-handler middleware that logs failed and slow method calls."""

from __future__ import annotations

import functools
import inspect
import logging
import time
from typing import Any, Callable

SLOW_THRESHOLD = 0.1  # seconds

logger = logging.getLogger("atlassian_dc.mcp")


def _report(method: str, duration: float, error: BaseException | None) -> None:
    if error is not None:
        logger.error(
            "Method failed: method=%s duration=%.3fs error=%s",
            method,
            duration,
            error,
            extra={"mcp_method": method, "duration": duration},
        )
    elif duration >= SLOW_THRESHOLD:
        logger.info(
            "Method completed slowly: method=%s duration=%.3fs",
            method,
            duration,
            extra={"mcp_method": method, "duration": duration},
        )


def logging_middleware(handler: Callable[..., Any]) -> Callable[..., Any]:
    """Wrap ``handler(method, request)`` so failures and slow calls are logged.

    Works with both plain and ``async`` handlers; results and exceptions
    pass through unchanged.
    """
    if inspect.iscoroutinefunction(handler):

        @functools.wraps(handler)
        async def async_wrapper(method: str, request: Any) -> Any:
            start = time.monotonic()
            try:
                result = await handler(method, request)
            except Exception as exc:
                _report(method, time.monotonic() - start, exc)
                raise
            _report(method, time.monotonic() - start, None)
            return result

        return async_wrapper

    @functools.wraps(handler)
    def wrapper(method: str, request: Any) -> Any:
        start = time.monotonic()
        try:
            result = handler(method, request)
        except Exception as exc:
            _report(method, time.monotonic() - start, exc)
            raise
        _report(method, time.monotonic() - start, None)
        return result

    return wrapper