"""TaskStore SQLite 实现

user_tasks 主键 (user_id, task_id)。
upsert_tasks 覆盖同主键的整行：重复生成替换而不是追加。
所有写方法不自动提交，由 transaction.atomic 统一提交或回滚。
"""

from datetime import date, datetime

import aiosqlite

from ..models.enums import TaskSource, TaskStatus
from ..models.task import GeneratedTask

_UPSERT_SQL = """
INSERT INTO user_tasks (user_id, task_id, title, description, category, tips,
                        rationale, est_hours, priority, urgency_percentage,
                        due_date, status, source, parent_id, workflow_id, icon,
                        created_at, updated_at, completed_at)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
ON CONFLICT(user_id, task_id) DO UPDATE SET
    title = excluded.title,
    description = excluded.description,
    category = excluded.category,
    tips = excluded.tips,
    rationale = excluded.rationale,
    est_hours = excluded.est_hours,
    priority = excluded.priority,
    urgency_percentage = excluded.urgency_percentage,
    due_date = excluded.due_date,
    status = excluded.status,
    source = excluded.source,
    parent_id = excluded.parent_id,
    workflow_id = excluded.workflow_id,
    icon = excluded.icon,
    created_at = excluded.created_at,
    updated_at = excluded.updated_at,
    completed_at = excluded.completed_at
"""


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def upsert_tasks(self, tasks: list[GeneratedTask]) -> None:
        """批量 upsert 任务

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        await self._conn.executemany(
            _UPSERT_SQL,
            [self._task_to_params(task) for task in tasks],
        )

    async def get_task(self, user_id: str, task_id: str) -> GeneratedTask | None:
        """根据 (user_id, task_id) 查询任务"""
        cursor = await self._conn.execute(
            "SELECT * FROM user_tasks WHERE user_id = ? AND task_id = ?",
            (user_id, task_id),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_tasks(
        self,
        user_id: str,
        status: str | None = None,
        parent_id: str | None = None,
    ) -> list[GeneratedTask]:
        """查询用户任务，支持按状态和 parent_id 筛选，按截止日期正序"""
        sql = "SELECT * FROM user_tasks WHERE user_id = ?"
        params: list[str] = [user_id]
        if status:
            sql += " AND status = ?"
            params.append(status)
        if parent_id:
            sql += " AND parent_id = ?"
            params.append(parent_id)
        sql += " ORDER BY due_date ASC, task_id ASC"

        cursor = await self._conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def update_task_status(
        self,
        user_id: str,
        task_id: str,
        status: str,
        updated_at: str,
        completed_at: str | None = None,
    ) -> bool:
        """更新任务状态（不自动提交）

        Returns:
            True 如果任务存在并已更新
        """
        cursor = await self._conn.execute(
            """
            UPDATE user_tasks
            SET status = ?, updated_at = ?, completed_at = ?
            WHERE user_id = ? AND task_id = ?
            """,
            (status, updated_at, completed_at, user_id, task_id),
        )
        return cursor.rowcount > 0

    @staticmethod
    def _task_to_params(task: GeneratedTask) -> tuple:
        return (
            task.user_id,
            task.task_id,
            task.title,
            task.description,
            task.category,
            task.tips,
            task.rationale,
            task.est_hours,
            task.priority,
            task.urgency_percentage,
            task.due_date.isoformat(),
            task.status.value,
            task.source.value,
            task.parent_id,
            task.workflow_id,
            task.icon,
            task.created_at.isoformat(),
            task.updated_at.isoformat(),
            task.completed_at.isoformat() if task.completed_at else None,
        )

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> GeneratedTask:
        """将数据库行转换为 GeneratedTask 模型"""
        return GeneratedTask(
            user_id=row[0],
            task_id=row[1],
            title=row[2],
            description=row[3],
            category=row[4],
            tips=row[5],
            rationale=row[6],
            est_hours=row[7],
            priority=row[8],
            urgency_percentage=row[9],
            due_date=date.fromisoformat(row[10]),
            status=TaskStatus(row[11]),
            source=TaskSource(row[12]),
            parent_id=row[13],
            workflow_id=row[14],
            icon=row[15],
            created_at=datetime.fromisoformat(row[16]),
            updated_at=datetime.fromisoformat(row[17]),
            completed_at=datetime.fromisoformat(row[18]) if row[18] else None,
        )
