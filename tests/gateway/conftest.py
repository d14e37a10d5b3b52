"""gateway 测试配置 -- 手动初始化 app.state（绕过 lifespan）+ httpx AsyncClient"""

from collections.abc import AsyncGenerator
from datetime import UTC
from pathlib import Path

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from quadrant.core.repository import TaskRepository
from quadrant.core.undo import UndoBuffer


@pytest_asyncio.fixture
async def test_app(tmp_path: Path, tmp_db_path: Path, store_group, hub, clock, monkeypatch):
    monkeypatch.setenv("QUADRANT_DB_PATH", str(tmp_db_path))
    monkeypatch.setenv("QUADRANT_SWEEP_INTERVAL_S", "0")

    from quadrant.gateway.main import create_app

    app = create_app()

    # 手动初始化（绕过 lifespan）
    app.state.db_path = str(tmp_db_path)
    app.state.store_group = store_group
    app.state.change_hub = hub
    app.state.repository = TaskRepository(store_group, hub=hub, clock=clock, tz=UTC)
    app.state.undo_buffer = UndoBuffer()

    yield app


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
