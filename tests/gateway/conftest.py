"""Gateway 测试 fixture -- app + httpx AsyncClient"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from peezy.planner.store import create_store_group, replace_catalog


@pytest_asyncio.fixture
async def gateway_app(tmp_path: Path, monkeypatch, clock, sample_catalog):
    """测试用 FastAPI app（手动注入 app.state，不依赖 lifespan）"""
    monkeypatch.setenv("PEEZY_DB_PATH", str(tmp_path / "gateway.db"))

    from peezy.gateway.main import create_app
    from peezy.gateway.services.planner_service import PlannerService

    app = create_app()
    store_group = await create_store_group(str(tmp_path / "gateway.db"))
    await replace_catalog(store_group.conn, store_group.catalog_store, sample_catalog)

    app.state.store_group = store_group
    app.state.planner_service = PlannerService(store_group, clock)

    yield app

    await store_group.close()


@pytest_asyncio.fixture
async def client(gateway_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=gateway_app),
        base_url="http://test",
    ) as ac:
        yield ac
