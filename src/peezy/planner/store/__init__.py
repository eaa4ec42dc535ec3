"""Peezy Planner Store -- SQLite 持久化实现

提供工厂函数创建 Store 实例组：
- 写连接：事务内的所有读写（由 write_lock 串行化）
- 读连接：事务外的查询，只读取已提交数据
"""

import asyncio
from pathlib import Path

import aiosqlite

from .assessment_store import SqliteAssessmentStore
from .catalog_store import SqliteCatalogStore
from .event_store import SqliteEventStore
from .mini_assessment_store import SqliteMiniAssessmentStore
from .sqlite_init import init_db, init_read_conn
from .task_store import SqliteTaskStore
from .transaction import atomic, replace_catalog


class StoreGroup:
    """Store 实例组 -- 一个写连接 + 一个只读连接

    write_lock 串行化写连接上的事务区段。
    事务外的查询走 *_reader，不会读到其他协程尚未提交（可能回滚）的批次。
    """

    def __init__(
        self,
        conn: aiosqlite.Connection,
        read_conn: aiosqlite.Connection | None = None,
    ) -> None:
        self.conn = conn
        self.read_conn = read_conn or conn
        self.write_lock = asyncio.Lock()

        # 写连接：仅在 atomic() 区段内使用
        self.catalog_store = SqliteCatalogStore(conn)
        self.assessment_store = SqliteAssessmentStore(conn)
        self.mini_assessment_store = SqliteMiniAssessmentStore(conn)
        self.task_store = SqliteTaskStore(conn)
        self.event_store = SqliteEventStore(conn)

        # 只读连接
        self.catalog_reader = SqliteCatalogStore(self.read_conn)
        self.task_reader = SqliteTaskStore(self.read_conn)
        self.event_reader = SqliteEventStore(self.read_conn)

    def atomic(self):
        """在写连接上开启原子事务区段"""
        return atomic(self.conn, self.write_lock)

    async def close(self) -> None:
        if self.read_conn is not self.conn:
            await self.read_conn.close()
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
    conn.row_factory = aiosqlite.Row
    await init_db(conn)

    read_conn = await aiosqlite.connect(db_path)
    read_conn.row_factory = aiosqlite.Row
    await init_read_conn(read_conn)

    return StoreGroup(conn=conn, read_conn=read_conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteCatalogStore",
    "SqliteAssessmentStore",
    "SqliteMiniAssessmentStore",
    "SqliteTaskStore",
    "SqliteEventStore",
    "init_db",
    "init_read_conn",
    "atomic",
    "replace_catalog",
]
