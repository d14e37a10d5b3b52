"""事务封装 -- 读-检查-写在同一 SQLite 事务内原子提交

所有写操作共享一个连接，通过 asyncio.Lock 串行化，
事务以 BEGIN IMMEDIATE 开始，任何异常（包括任务取消）都会整体回滚，
读者不会看到部分提交的状态。
"""

import asyncio
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite
import structlog

from ..exceptions import StoreError

log = structlog.get_logger()


@asynccontextmanager
async def transaction(
    conn: aiosqlite.Connection,
    lock: asyncio.Lock,
    operation: str,
) -> AsyncIterator[None]:
    """在同一事务内执行多步读写

    Args:
        conn: 数据库连接（需在同一连接上操作以保证事务性）
        lock: 串行化该连接访问的锁
        operation: 操作名，用于日志与 StoreError

    Raises:
        StoreError: 存储层失败，事务已回滚
    """
    async with lock:
        try:
            await conn.execute("BEGIN IMMEDIATE")
        except sqlite3.Error as e:
            raise StoreError(operation, e) from e

        try:
            yield
            await conn.commit()
        except sqlite3.Error as e:
            await _rollback(conn, operation)
            raise StoreError(operation, e) from e
        except BaseException:
            # 校验失败、任务取消等：回滚后原样抛出
            await _rollback(conn, operation)
            raise


@asynccontextmanager
async def read_only(
    conn: aiosqlite.Connection,
    lock: asyncio.Lock,
    operation: str,
) -> AsyncIterator[None]:
    """只读访问：同样持锁，避免读到其他协程尚未提交的中间状态"""
    async with lock:
        try:
            yield
        except sqlite3.Error as e:
            raise StoreError(operation, e) from e


async def _rollback(conn: aiosqlite.Connection, operation: str) -> None:
    try:
        await conn.rollback()
    except sqlite3.Error:
        log.exception("transaction_rollback_failed", operation=operation)
