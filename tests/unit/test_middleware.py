"""Tests for IdentityContextMiddleware.

Validates:
  - org, user and request IDs from headers are bound while the request runs
  - request-ID generation, validation and spoofing rejection
  - no identity leaks across requests
  - entries created inside a handler carry the request's fields
"""

from __future__ import annotations

import uuid

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from scopelog.context import log_fields
from scopelog.logging import setup, with_context
from scopelog.middleware import (
    IdentityContextMiddleware,
    _VALID_REQUEST_ID,
    resolve_request_id,
)


def _create_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(IdentityContextMiddleware)

    @app.get("/fields")
    async def fields_endpoint():
        return log_fields()

    @app.get("/log")
    async def log_endpoint():
        with_context().info("handled")
        return {"status": "ok"}

    return app


@pytest.fixture
def app():
    return _create_app()


def _client(app: FastAPI) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestIdentityContextMiddleware:

    @pytest.mark.asyncio
    async def test_binds_headers(self, app):
        async with _client(app) as c:
            r = await c.get(
                "/fields",
                headers={
                    "X-Scope-OrgID": "t1",
                    "X-Scope-UserID": "u1",
                    "X-Request-ID": "valid-abc-123",
                },
            )
        assert r.json() == {"user_id": "u1", "org_id": "t1", "request_id": "valid-abc-123"}
        assert r.headers["x-request-id"] == "valid-abc-123"

    @pytest.mark.asyncio
    async def test_no_identity_headers(self, app):
        async with _client(app) as c:
            r = await c.get("/fields")
        body = r.json()
        assert set(body) == {"request_id"}
        uuid.UUID(body["request_id"])
        assert r.headers["x-request-id"] == body["request_id"]

    @pytest.mark.asyncio
    async def test_rejects_malformed_request_id(self, app):
        async with _client(app) as c:
            r = await c.get("/fields", headers={"X-Request-ID": "<script>alert(1)</script>"})
        rid = r.headers["x-request-id"]
        assert rid != "<script>alert(1)</script>"
        uuid.UUID(rid)

    @pytest.mark.asyncio
    async def test_no_cross_request_leak(self, app):
        async with _client(app) as c:
            r1 = await c.get("/fields", headers={"X-Scope-OrgID": "t1"})
            r2 = await c.get("/fields")
        assert r1.json()["org_id"] == "t1"
        assert "org_id" not in r2.json()
        assert log_fields() == {}

    @pytest.mark.asyncio
    async def test_handler_entries_carry_fields(self, app, stream, registry):
        setup("info", stream=stream, registry=registry)
        async with _client(app) as c:
            await c.get(
                "/log",
                headers={"X-Scope-OrgID": "t1", "X-Request-ID": "valid-abc-123"},
            )
        lines = stream.getvalue().splitlines()
        assert any(
            line.startswith("INFO: ") and line.endswith(" handled org_id=t1 request_id=valid-abc-123")
            for line in lines
        )


class TestResolveRequestId:

    def test_keeps_valid(self):
        assert resolve_request_id("550e8400-e29b-41d4-a716-446655440000") == (
            "550e8400-e29b-41d4-a716-446655440000"
        )

    @pytest.mark.parametrize("incoming", [None, "", "short", "a" * 129, "bad id!"])
    def test_replaces_invalid(self, incoming):
        rid = resolve_request_id(incoming)
        assert rid != incoming
        uuid.UUID(rid)

    def test_pattern_bounds(self):
        assert _VALID_REQUEST_ID.match("a" * 8)
        assert _VALID_REQUEST_ID.match("a" * 128)
        assert not _VALID_REQUEST_ID.match("a" * 7)
