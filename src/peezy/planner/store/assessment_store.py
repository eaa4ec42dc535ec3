"""AssessmentStore SQLite 实现

核心评估每用户一行；保存时与已有答案合并（新答案优先）。
"""

import json
from datetime import datetime

import aiosqlite

from ..models.assessment import AssessmentResponse


class SqliteAssessmentStore:
    """核心评估存储的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def merge_assessment(
        self,
        user_id: str,
        data: AssessmentResponse,
        updated_at: datetime,
    ) -> AssessmentResponse:
        """合并写入核心评估

        注意：此方法不自动提交事务，需由调用方管理事务。

        Returns:
            合并后的完整评估
        """
        existing = await self.get_assessment(user_id)
        merged = existing.merged_with(data) if existing is not None else data
        await self._conn.execute(
            """
            INSERT INTO user_assessments (user_id, answers, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(user_id) DO UPDATE SET
                answers = excluded.answers,
                updated_at = excluded.updated_at
            """,
            (
                user_id,
                json.dumps(merged.to_raw(), ensure_ascii=False),
                updated_at.isoformat(),
            ),
        )
        return merged

    async def get_assessment(self, user_id: str) -> AssessmentResponse | None:
        """查询用户核心评估"""
        cursor = await self._conn.execute(
            "SELECT answers FROM user_assessments WHERE user_id = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return AssessmentResponse.from_raw(json.loads(row[0]))
