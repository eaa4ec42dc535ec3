"""Store Protocol 接口定义

规划引擎只依赖这些接口，使用 Python Protocol 实现结构化子类型（duck typing）。
测试可替换为内存实现或故障注入实现。
"""

from datetime import datetime
from typing import Protocol

from ..models.assessment import AssessmentResponse
from ..models.catalog import CatalogEntry
from ..models.event import PlannerEvent
from ..models.mini_assessment import MiniAssessmentRecord
from ..models.task import GeneratedTask


class CatalogSource(Protocol):
    """任务目录只读接口"""

    async def fetch_all(self) -> list[CatalogEntry]:
        """读取全部目录条目"""
        ...


class TaskStore(Protocol):
    """用户任务存储接口"""

    async def upsert_tasks(self, tasks: list[GeneratedTask]) -> None:
        """批量 upsert，主键 (user_id, task_id)"""
        ...

    async def get_task(self, user_id: str, task_id: str) -> GeneratedTask | None:
        ...

    async def list_tasks(
        self,
        user_id: str,
        status: str | None = None,
        parent_id: str | None = None,
    ) -> list[GeneratedTask]:
        ...

    async def update_task_status(
        self,
        user_id: str,
        task_id: str,
        status: str,
        updated_at: str,
        completed_at: str | None = None,
    ) -> bool:
        ...


class AssessmentStore(Protocol):
    """核心评估存储接口"""

    async def merge_assessment(
        self,
        user_id: str,
        data: AssessmentResponse,
        updated_at: datetime,
    ) -> AssessmentResponse:
        ...

    async def get_assessment(self, user_id: str) -> AssessmentResponse | None:
        ...


class MiniAssessmentStore(Protocol):
    """mini-assessment 答案存储接口"""

    async def merge_answers(
        self,
        user_id: str,
        parent_id: str,
        answers: AssessmentResponse,
        completed_at: datetime,
    ) -> MiniAssessmentRecord:
        ...

    async def list_for_user(self, user_id: str) -> list[MiniAssessmentRecord]:
        """按 completion_seq 正序返回"""
        ...


class EventStore(Protocol):
    """审计事件存储接口

    事件表 append-only：只允许插入，不允许更新或删除。
    """

    async def append_event(self, event: PlannerEvent) -> None:
        """追加事件（append-only）"""
        ...

    async def get_events_for_user(self, user_id: str) -> list[PlannerEvent]:
        """查询指定用户的所有事件"""
        ...
