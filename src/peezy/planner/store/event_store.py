"""EventStore SQLite 实现

审计事件表 append-only：只允许插入，不允许更新或删除。
"""

import json
from datetime import datetime

import aiosqlite

from ..models.enums import PlannerEventType
from ..models.event import PlannerEvent


class SqliteEventStore:
    """EventStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def append_event(self, event: PlannerEvent) -> None:
        """追加事件（append-only）

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        await self._conn.execute(
            """
            INSERT INTO planner_events (event_id, user_id, ts, type, payload)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                event.event_id,
                event.user_id,
                event.ts.isoformat(),
                event.type.value,
                json.dumps(event.payload, ensure_ascii=False),
            ),
        )

    async def get_events_for_user(self, user_id: str) -> list[PlannerEvent]:
        """查询指定用户的所有事件，按写入顺序"""
        cursor = await self._conn.execute(
            "SELECT * FROM planner_events WHERE user_id = ? ORDER BY ts ASC, rowid ASC",
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_event(row) for row in rows]

    @staticmethod
    def _row_to_event(row: aiosqlite.Row) -> PlannerEvent:
        """将数据库行转换为 PlannerEvent 模型"""
        payload = json.loads(row[4]) if row[4] else {}
        return PlannerEvent(
            event_id=row[0],
            user_id=row[1],
            ts=datetime.fromisoformat(row[2]),
            type=PlannerEventType(row[3]),
            payload=payload,
        )
