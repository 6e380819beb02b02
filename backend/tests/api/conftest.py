"""API test infrastructure — async httpx client against the ASGI app."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.rate_limit import calc_limiter


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def app():
    from app.main import create_app

    application = create_app()

    # Reset rate limiter between tests
    calc_limiter.reset()

    yield application

    application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
