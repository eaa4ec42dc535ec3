"""批量写入原子事务封装

同一次生成/级联的所有写入（答案合并、任务 upsert、状态更新、审计事件）
在同一 SQLite 事务内提交；任一步失败整体回滚，读者看不到部分写入。

写入 Store 共享同一个写连接，事务区段用连接级写锁串行化，
避免不同用户的写入混入同一个事务。事务外的查询走独立的只读连接。
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from ..models.catalog import CatalogEntry
from .catalog_store import SqliteCatalogStore


@asynccontextmanager
async def atomic(
    conn: aiosqlite.Connection,
    write_lock: asyncio.Lock | None = None,
) -> AsyncIterator[aiosqlite.Connection]:
    """原子事务区段：正常退出时提交，异常时回滚并重新抛出

    Args:
        conn: 数据库连接（需在同一连接上操作以保证事务性）
        write_lock: 连接级写锁，None 时不加锁
    """
    if write_lock is None:
        async with _commit_or_rollback(conn):
            yield conn
        return

    async with write_lock:
        async with _commit_or_rollback(conn):
            yield conn


@asynccontextmanager
async def _commit_or_rollback(conn: aiosqlite.Connection) -> AsyncIterator[None]:
    try:
        yield
        await conn.commit()
    except BaseException:
        await conn.rollback()
        raise


async def replace_catalog(
    conn: aiosqlite.Connection,
    catalog_store: SqliteCatalogStore,
    entries: list[CatalogEntry],
    write_lock: asyncio.Lock | None = None,
) -> int:
    """清空并重新导入目录（原子）

    Returns:
        导入的条目数
    """
    async with atomic(conn, write_lock):
        await catalog_store.delete_all()
        await catalog_store.put_entries(entries)
    return len(entries)
