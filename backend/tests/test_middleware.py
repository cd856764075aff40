"""
Cursebreakers Backend - Middleware Tests
=========================================

What we test:
    ✅ Client request ids are reused only when they are short safe tokens
    ✅ Access-log level follows the response status
    ✅ Every request gets one access-log line, except quiet paths
"""

import logging

import pytest

from cursebreakers.middleware.logging import level_for_status
from cursebreakers.middleware.request_id import resolve_request_id


class TestResolveRequestId:

    @pytest.mark.parametrize("value", ["trace-123", "a.b_c", "x" * 64])
    def test_safe_client_id_kept(self, value):
        assert resolve_request_id(value) == value

    @pytest.mark.parametrize("value", [None, "", "bad id", "abc\n", "x\r\nSet-Cookie: a=b", "x" * 65])
    def test_unsafe_client_id_replaced(self, value):
        rid = resolve_request_id(value)

        assert rid != value
        assert len(rid) == 8


class TestLevelForStatus:

    @pytest.mark.parametrize(
        "status,level",
        [(200, logging.INFO), (304, logging.INFO), (404, logging.WARNING), (500, logging.ERROR)],
    )
    def test_level(self, status, level):
        assert level_for_status(status) == level


class TestMiddlewareOverHttp:

    @pytest.mark.asyncio
    async def test_unsafe_request_id_header_replaced(self, test_client):
        response = await test_client.get("/profile", headers={"X-Request-ID": "not a safe id!"})

        rid = response.headers["X-Request-ID"]
        assert rid != "not a safe id!"
        assert len(rid) == 8

    @pytest.mark.asyncio
    async def test_access_line_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="cursebreakers.access")

        await test_client.get("/profile", headers={"X-Request-ID": "trace-123"})

        lines = [r for r in caplog.records if r.name == "cursebreakers.access"]
        assert len(lines) == 1
        assert lines[0].levelno == logging.INFO
        assert "GET /profile 200" in lines[0].getMessage()
        assert "[trace-123]" in lines[0].getMessage()

    @pytest.mark.asyncio
    async def test_not_found_logged_as_warning(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="cursebreakers.access")

        await test_client.get("/profile/nobody")

        lines = [r for r in caplog.records if r.name == "cursebreakers.access"]
        assert [r.levelno for r in lines] == [logging.WARNING]

    @pytest.mark.asyncio
    async def test_health_not_logged(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="cursebreakers.access")

        await test_client.get("/health")

        assert not [r for r in caplog.records if r.name == "cursebreakers.access"]
