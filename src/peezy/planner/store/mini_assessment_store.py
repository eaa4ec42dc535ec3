"""MiniAssessmentStore SQLite 实现

按 (user_id, parent_id) 合并写入答案。
每次完成都分配用户内新的 completion_seq（MAX+1），
合并视图按 completion_seq 正序叠加，后完成者在 key 冲突时优先。
"""

import json
from datetime import datetime

import aiosqlite

from ..models.assessment import AssessmentResponse
from ..models.mini_assessment import MiniAssessmentRecord


class SqliteMiniAssessmentStore:
    """mini-assessment 答案存储的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def merge_answers(
        self,
        user_id: str,
        parent_id: str,
        answers: AssessmentResponse,
        completed_at: datetime,
    ) -> MiniAssessmentRecord:
        """合并写入答案并刷新完成顺序

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        existing = await self.get_record(user_id, parent_id)
        merged = existing.answers.merged_with(answers) if existing is not None else answers
        seq = await self.get_next_completion_seq(user_id)

        record = MiniAssessmentRecord(
            user_id=user_id,
            parent_id=parent_id,
            answers=merged,
            completion_seq=seq,
            completed_at=completed_at,
        )
        await self._conn.execute(
            """
            INSERT INTO mini_assessments (user_id, parent_id, answers,
                                          completion_seq, completed_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(user_id, parent_id) DO UPDATE SET
                answers = excluded.answers,
                completion_seq = excluded.completion_seq,
                completed_at = excluded.completed_at
            """,
            (
                record.user_id,
                record.parent_id,
                json.dumps(record.answers.to_raw(), ensure_ascii=False),
                record.completion_seq,
                record.completed_at.isoformat(),
            ),
        )
        return record

    async def get_record(self, user_id: str, parent_id: str) -> MiniAssessmentRecord | None:
        """查询单个 mini-assessment 记录"""
        cursor = await self._conn.execute(
            "SELECT * FROM mini_assessments WHERE user_id = ? AND parent_id = ?",
            (user_id, parent_id),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_record(row)

    async def list_for_user(self, user_id: str) -> list[MiniAssessmentRecord]:
        """查询用户全部 mini-assessment，按完成顺序正序"""
        cursor = await self._conn.execute(
            """
            SELECT * FROM mini_assessments
            WHERE user_id = ?
            ORDER BY completion_seq ASC
            """,
            (user_id,),
        )
        rows = await cursor.fetchall()
        return [self._row_to_record(row) for row in rows]

    async def get_next_completion_seq(self, user_id: str) -> int:
        """获取用户下一个 completion_seq（MAX+1）

        在事务内调用以确保原子性。
        """
        cursor = await self._conn.execute(
            "SELECT COALESCE(MAX(completion_seq), 0) FROM mini_assessments WHERE user_id = ?",
            (user_id,),
        )
        row = await cursor.fetchone()
        return (row[0] if row else 0) + 1

    @staticmethod
    def _row_to_record(row: aiosqlite.Row) -> MiniAssessmentRecord:
        """将数据库行转换为 MiniAssessmentRecord 模型"""
        return MiniAssessmentRecord(
            user_id=row[0],
            parent_id=row[1],
            answers=AssessmentResponse.from_raw(json.loads(row[2])),
            completion_seq=row[3],
            completed_at=datetime.fromisoformat(row[4]),
        )
