"""Quadrant Core Store -- SQLite 持久化实现

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from .protocols import TaskStore
from .sqlite_init import init_db
from .task_store import SqliteTaskStore
from .transaction import read_only, transaction


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接与访问锁"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.task_store: TaskStore = SqliteTaskStore(conn)
        self.lock = asyncio.Lock()

    @asynccontextmanager
    async def transaction(self, operation: str) -> AsyncIterator[TaskStore]:
        """写事务：块内的所有读写一次性提交或整体回滚"""
        async with transaction(self.conn, self.lock, operation):
            yield self.task_store

    @asynccontextmanager
    async def read(self, operation: str) -> AsyncIterator[TaskStore]:
        """只读访问"""
        async with read_only(self.conn, self.lock, operation):
            yield self.task_store

    async def close(self) -> None:
        await self.conn.close()


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 Store 实例组

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        StoreGroup 实例
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "TaskStore",
    "create_store_group",
    "SqliteTaskStore",
    "init_db",
    "transaction",
    "read_only",
]
