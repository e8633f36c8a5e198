import asyncio
import logging
import time

import pytest

from atlassian_dc.middleware import logging_middleware


def fast_handler(method, request):
    return {"method": method, "request": request}


def slow_handler(method, request):
    time.sleep(0.12)
    return "done"


def failing_handler(method, request):
    raise RuntimeError("boom")


def test_fast_call_returns_result_without_logging(caplog):
    caplog.set_level(logging.DEBUG, logger="atlassian_dc.mcp")
    wrapped = logging_middleware(fast_handler)
    assert wrapped("tools/list", {"a": 1}) == {"method": "tools/list", "request": {"a": 1}}
    assert caplog.records == []


def test_slow_call_logged_at_info(caplog):
    caplog.set_level(logging.DEBUG, logger="atlassian_dc.mcp")
    wrapped = logging_middleware(slow_handler)
    assert wrapped("tools/call", None) == "done"
    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.levelno == logging.INFO
    assert "Method completed slowly" in record.getMessage()
    assert record.mcp_method == "tools/call"
    assert record.duration >= 0.1


def test_failure_logged_and_reraised(caplog):
    caplog.set_level(logging.DEBUG, logger="atlassian_dc.mcp")
    wrapped = logging_middleware(failing_handler)
    with pytest.raises(RuntimeError, match="boom"):
        wrapped("tools/call", None)
    assert [r.levelno for r in caplog.records] == [logging.ERROR]
    message = caplog.records[0].getMessage()
    assert "Method failed" in message
    assert "boom" in message


def test_wrapper_keeps_handler_name():
    assert logging_middleware(fast_handler).__name__ == "fast_handler"


def test_async_handler_result_and_failure(caplog):
    caplog.set_level(logging.DEBUG, logger="atlassian_dc.mcp")

    async def ok(method, request):
        return request * 2

    async def bad(method, request):
        raise ValueError("nope")

    assert asyncio.run(logging_middleware(ok)("m", 21)) == 42
    assert caplog.records == []
    with pytest.raises(ValueError, match="nope"):
        asyncio.run(logging_middleware(bad)("m", 1))
    assert caplog.records[-1].levelno == logging.ERROR