"""Tests for logging setup and the access log middleware."""

import logging

import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse

import power4.main  # noqa: F401  configures logging on import
from power4.log import log_requests


def make_request(path="/api/move"):
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": path,
            "headers": [(b"x-forwarded-for", b"203.0.113.7")],
            "query_string": b"",
            "client": ("127.0.0.1", 50000),
            "server": ("testserver", 80),
            "scheme": "http",
        }
    )


class TestAccessLog:
    @pytest.mark.asyncio
    async def test_logs_response_status(self, caplog):
        async def call_next(request):
            return PlainTextResponse("ok", status_code=201)

        with caplog.at_level(logging.INFO, logger="power4.access"):
            response = await log_requests(make_request(), call_next)

        assert response.status_code == 201
        line = caplog.records[-1].getMessage()
        assert "remote=203.0.113.7" in line
        assert "path=/api/move" in line
        assert "status=201" in line

    @pytest.mark.asyncio
    async def test_failed_request_logged_as_500(self, caplog):
        async def call_next(request):
            raise RuntimeError("boom")

        with caplog.at_level(logging.INFO, logger="power4.access"):
            with pytest.raises(RuntimeError):
                await log_requests(make_request("/api/bonus/move"), call_next)

        line = caplog.records[-1].getMessage()
        assert "path=/api/bonus/move" in line
        assert "status=500" in line
        assert "duration=" in line


class TestLoggingSetup:
    def test_app_import_enables_info_logging(self):
        assert logging.getLogger("power4.session").isEnabledFor(logging.INFO)
        assert logging.getLogger("power4.access").isEnabledFor(logging.INFO)
