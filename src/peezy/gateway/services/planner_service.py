"""PlannerService -- Gateway 侧的规划入口

生成管线与级联共享同一个用户锁注册表，同一用户的两类操作互斥。
"""

from datetime import date

from peezy.planner.clock import Clock
from peezy.planner.models import AssessmentResponse, GeneratedTask
from peezy.planner.services import (
    CascadeResult,
    GenerationResult,
    MiniAssessmentCascade,
    TaskGenerationPipeline,
    UserLockRegistry,
)
from peezy.planner.store import StoreGroup


class PlannerService:
    """规划业务服务"""

    def __init__(
        self,
        store_group: StoreGroup,
        clock: Clock,
        include_system_tasks: bool = True,
    ) -> None:
        self._stores = store_group
        locks = UserLockRegistry()
        self._pipeline = TaskGenerationPipeline(
            store_group,
            clock,
            locks=locks,
            include_system_tasks=include_system_tasks,
        )
        self._cascade = MiniAssessmentCascade(store_group, clock, locks=locks)

    async def generate(
        self,
        user_id: str,
        data: AssessmentResponse,
        move_date: date,
        today: date | None = None,
    ) -> GenerationResult:
        return await self._pipeline.generate(user_id, data, move_date, today=today)

    async def complete_mini_assessment(
        self,
        user_id: str,
        parent_id: str,
        answers: AssessmentResponse,
        move_date: date,
        today: date | None = None,
    ) -> CascadeResult:
        return await self._cascade.on_mini_assessment_completed(
            user_id, parent_id, answers, move_date, today=today
        )

    async def list_tasks(
        self,
        user_id: str,
        status: str | None = None,
        parent_id: str | None = None,
    ) -> list[GeneratedTask]:
        return await self._stores.task_reader.list_tasks(user_id, status, parent_id)

    async def get_task(self, user_id: str, task_id: str) -> GeneratedTask | None:
        return await self._stores.task_reader.get_task(user_id, task_id)
