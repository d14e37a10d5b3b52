"""全局 pytest 配置 -- 临时 SQLite 数据库 + 可控时钟 + 仓库 fixture"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite
import pytest
import pytest_asyncio
from quadrant.core.repository import TaskRepository
from quadrant.core.store import StoreGroup, create_store_group
from quadrant.core.store.sqlite_init import init_db
from quadrant.core.subscriptions import ChangeHub

# 2026-03-10 10:00:00 UTC
START_MILLIS = int(datetime(2026, 3, 10, 10, 0, tzinfo=UTC).timestamp() * 1000)


class FakeClock:
    """可手动推进的毫秒时钟"""

    def __init__(self, start: int = START_MILLIS) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, millis: int) -> int:
        self.now += millis
        return self.now


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def db_conn(tmp_path: Path) -> AsyncGenerator[aiosqlite.Connection, None]:
    """提供已初始化的临时 SQLite 数据库连接"""
    conn = await aiosqlite.connect(str(tmp_path / "conn.db"))
    await init_db(conn)
    yield conn
    await conn.close()


@pytest_asyncio.fixture
async def store_group(tmp_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    group = await create_store_group(str(tmp_db_path))
    yield group
    await group.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def hub() -> ChangeHub:
    return ChangeHub()


@pytest.fixture
def repo(store_group: StoreGroup, hub: ChangeHub, clock: FakeClock) -> TaskRepository:
    """使用 UTC 与可控时钟的仓库"""
    return TaskRepository(store_group, hub=hub, clock=clock, tz=UTC)
