"""
CatTrack Backend — Middleware Tests
====================================

What we test:
    ✅ Rate limit returns 429 with Retry-After once the window is full
    ✅ Excluded paths are never limited
    ✅ Request id is echoed back, rate-limited responses included
"""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from cattrack.main import create_app
from cattrack.middleware.rate_limit import RateLimitMiddleware
from cattrack.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware


def _app(max_requests: int = 2) -> FastAPI:
    app = FastAPI()

    @app.get("/ping")
    async def ping():
        return {"ok": True}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    # Same order as create_app: request id wraps the limiter
    app.add_middleware(RateLimitMiddleware, max_requests=max_requests, window_seconds=60)
    app.add_middleware(RequestIDMiddleware)
    return app


@pytest.mark.asyncio
async def test_rate_limit_rejects_after_max_requests():
    transport = ASGITransport(app=_app(max_requests=2))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        first = await client.get("/ping")
        second = await client.get("/ping")
        third = await client.get("/ping", headers={REQUEST_ID_HEADER: "req-429"})

    assert first.status_code == 200
    assert second.status_code == 200
    assert third.status_code == 429
    assert third.json()["error"] == "rate_limit_exceeded"
    assert 1 <= int(third.headers["Retry-After"]) <= 61
    assert third.json()["request_id"] == "req-429"
    assert third.headers[REQUEST_ID_HEADER] == "req-429"


@pytest.mark.asyncio
async def test_health_is_not_limited():
    transport = ASGITransport(app=_app(max_requests=1))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        statuses = [(await client.get("/health")).status_code for _ in range(3)]

    assert statuses == [200, 200, 200]


@pytest.mark.asyncio
async def test_request_id_round_trip():
    transport = ASGITransport(app=_app())
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/ping", headers={REQUEST_ID_HEADER: "req-123"})

    assert response.headers[REQUEST_ID_HEADER] == "req-123"


def test_app_assigns_request_id_outside_rate_limit():
    # user_middleware lists the outermost middleware first
    order = [m.cls for m in create_app().user_middleware]
    assert order.index(RequestIDMiddleware) < order.index(RateLimitMiddleware)
