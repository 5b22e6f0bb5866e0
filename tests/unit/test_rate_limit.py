"""Tests for the Redis sliding-window rate limiter."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from codehunt.middleware.rate_limit import RateLimitMiddleware


def _build_app(redis_getter, limit: int = 5) -> FastAPI:
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, redis_getter=redis_getter, limit=limit)

    @app.post("/api/phase2/check-single")
    async def check():
        return {"ok": True}

    @app.get("/api/phase2/content")
    async def phase_content():
        return {"ok": True}

    @app.post("/api/teams/register")
    async def register():
        return {"ok": True}

    return app


async def _post(app: FastAPI, path: str):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        return await ac.post(path)


class TestRateLimitMiddleware:
    @pytest.mark.asyncio
    async def test_under_limit_sets_headers(self, mock_redis_client):
        app = _build_app(lambda: mock_redis_client)
        resp = await _post(app, "/api/phase2/check-single")
        assert resp.status_code == 200
        assert resp.headers["X-RateLimit-Limit"] == "5"
        assert resp.headers["X-RateLimit-Remaining"] == "4"

    @pytest.mark.asyncio
    async def test_over_limit_rejected(self, mock_redis_client):
        mock_redis_client.execute = AsyncMock(return_value=[0, 1, 6, True])
        app = _build_app(lambda: mock_redis_client)
        resp = await _post(app, "/api/phase2/check-single")
        assert resp.status_code == 429
        assert resp.json()["error"] == "rate_limit_exceeded"
        assert resp.headers["Retry-After"] == "60"

    @pytest.mark.asyncio
    async def test_fails_open_without_redis(self):
        def missing():
            raise RuntimeError("Redis not initialized")

        app = _build_app(missing)
        resp = await _post(app, "/api/phase2/check-single")
        assert resp.status_code == 200
        assert "X-RateLimit-Limit" not in resp.headers

    @pytest.mark.asyncio
    async def test_other_routes_not_counted(self, mock_redis_client):
        app = _build_app(lambda: mock_redis_client)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            assert (await ac.post("/api/teams/register")).status_code == 200
            assert (await ac.get("/api/phase2/content")).status_code == 200
        mock_redis_client.execute.assert_not_awaited()
