"""CatalogStore SQLite 实现

目录只读提供给引擎：fetch_all 返回全部条目，不下推过滤。
写入仅用于导入目录（replace_all），由 transaction.atomic 管理提交。
"""

import json

import aiosqlite

from ..models.catalog import CatalogEntry


class SqliteCatalogStore:
    """CatalogSource 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def fetch_all(self) -> list[CatalogEntry]:
        """读取全部目录条目，按 entry_id 排序"""
        cursor = await self._conn.execute(
            "SELECT entry_id, parent_id, payload FROM catalog_entries ORDER BY entry_id ASC"
        )
        rows = await cursor.fetchall()
        return [self._row_to_entry(row) for row in rows]

    async def put_entries(self, entries: list[CatalogEntry]) -> None:
        """写入/覆盖目录条目

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        await self._conn.executemany(
            """
            INSERT INTO catalog_entries (entry_id, parent_id, payload)
            VALUES (?, ?, ?)
            ON CONFLICT(entry_id) DO UPDATE SET
                parent_id = excluded.parent_id,
                payload = excluded.payload
            """,
            [
                (entry.entry_id, entry.parent_id, entry.model_dump_json())
                for entry in entries
            ],
        )

    async def delete_all(self) -> None:
        """清空目录（不自动提交）"""
        await self._conn.execute("DELETE FROM catalog_entries")

    async def count(self) -> int:
        """目录条目总数"""
        cursor = await self._conn.execute("SELECT COUNT(*) FROM catalog_entries")
        row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _row_to_entry(row: aiosqlite.Row) -> CatalogEntry:
        """将数据库行转换为 CatalogEntry 模型"""
        return CatalogEntry.model_validate(json.loads(row[2]))
