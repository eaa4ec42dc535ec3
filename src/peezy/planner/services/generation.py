"""TaskGenerationPipeline -- 评估完成后的初始任务生成

流程：
1. 读取目录（每次调用一次）
2. 匹配条件（排除子任务）并推算截止日期
3. 附加系统任务（评估完成卡 + mini-assessment 入口）
4. 单事务写入：核心评估合并 + 任务批量 upsert + TASKS_GENERATED 审计事件

任务 ID 等于目录条目 ID，重复生成覆盖而不是追加。
"""

from datetime import date, datetime

import structlog
from pydantic import BaseModel, Field
from ulid import ULID

from ..clock import Clock
from ..exceptions import MissingUserError, TaskWriteError
from ..matcher import match_catalog
from ..models.assessment import AssessmentResponse
from ..models.catalog import CatalogEntry
from ..models.enums import PlannerEventType, TaskSource, TaskStatus
from ..models.event import PlannerEvent, TasksGeneratedPayload
from ..models.task import GeneratedTask
from ..scheduler import schedule_due_date
from ..store import StoreGroup
from ..store.protocols import CatalogSource
from ..system_tasks import build_system_tasks
from .locks import UserLockRegistry

log = structlog.get_logger()


class GenerationResult(BaseModel):
    """一次生成/级联的结果"""

    user_id: str
    tasks: list[GeneratedTask] = Field(default_factory=list)
    event_id: str = Field(description="本次写入的审计事件 ID")

    @property
    def count(self) -> int:
        return len(self.tasks)

    @property
    def task_ids(self) -> list[str]:
        return [task.task_id for task in self.tasks]


def require_user(user_id: str | None, operation: str) -> str:
    """调用边界校验用户身份，缺失时在访问存储前拒绝"""
    if user_id is None or not user_id.strip():
        raise MissingUserError(operation)
    return user_id


def build_generated_tasks(
    entries: list[CatalogEntry],
    data: AssessmentResponse,
    user_id: str,
    move_date: date,
    today: date,
    now: datetime,
    *,
    exclude_child_entries: bool = True,
    source: TaskSource = TaskSource.ASSESSMENT,
    parent_id: str | None = None,
) -> list[GeneratedTask]:
    """匹配目录并构建任务行（纯函数，不访问存储）

    Args:
        entries: 目录条目
        data: 评估答案（核心评估或合并视图）
        user_id: 所属用户
        move_date: 搬家日期
        today: 推算基准日期
        now: created_at / updated_at
        exclude_child_entries: 初始生成为 True，级联为 False
        source: 生成来源标记
        parent_id: 级联生成时的 mini-assessment ID

    Returns:
        按 entry_id 排序的任务列表
    """
    tasks: list[GeneratedTask] = []
    for entry in match_catalog(entries, data, exclude_child_entries):
        due_date = schedule_due_date(
            today,
            move_date,
            entry.urgency_percentage,
            entry.earliest_days_before_move,
            entry.latest_days_before_move,
        )
        tasks.append(
            GeneratedTask(
                task_id=entry.entry_id,
                user_id=user_id,
                title=entry.title,
                description=entry.description,
                category=entry.category,
                tips=entry.tips,
                rationale=entry.rationale,
                est_hours=entry.est_hours,
                priority=entry.priority,
                urgency_percentage=entry.urgency_percentage,
                due_date=due_date,
                status=TaskStatus.UPCOMING,
                source=source,
                parent_id=parent_id if parent_id is not None else entry.parent_id,
                created_at=now,
                updated_at=now,
            )
        )
    return tasks


class TaskGenerationPipeline:
    """初始任务生成"""

    def __init__(
        self,
        store_group: StoreGroup,
        clock: Clock,
        catalog_source: CatalogSource | None = None,
        locks: UserLockRegistry | None = None,
        include_system_tasks: bool = True,
    ) -> None:
        self._stores = store_group
        self._clock = clock
        self._catalog = catalog_source or store_group.catalog_reader
        self._locks = locks or UserLockRegistry()
        self._include_system_tasks = include_system_tasks

    async def generate(
        self,
        user_id: str,
        data: AssessmentResponse,
        move_date: date,
        *,
        today: date | None = None,
        catalog: list[CatalogEntry] | None = None,
    ) -> GenerationResult:
        """为用户生成任务并原子写入

        Args:
            user_id: 用户 ID（不能为空）
            data: 核心评估答案
            move_date: 搬家日期
            today: 推算基准日期，None 时取注入时钟
            catalog: 已读取的目录，None 时从 CatalogSource 读取

        Raises:
            MissingUserError: user_id 为空
            TaskWriteError: 批量写入失败（已整体回滚）
        """
        require_user(user_id, "generate")

        async with self._locks.hold(user_id):
            today = today or self._clock.today()
            now = self._clock.now()
            entries = catalog if catalog is not None else await self._catalog.fetch_all()

            await log.ainfo(
                "task_generation_started",
                user_id=user_id,
                move_date=move_date.isoformat(),
                today=today.isoformat(),
                catalog_size=len(entries),
                answer_count=len(data),
            )

            tasks = build_generated_tasks(entries, data, user_id, move_date, today, now)
            system_tasks: list[GeneratedTask] = []
            if self._include_system_tasks:
                system_tasks = build_system_tasks(user_id, today, move_date, now)

            # 同一批次内 task_id 必须唯一，系统任务优先
            system_ids = {task.task_id for task in system_tasks}
            shadowed = [task.task_id for task in tasks if task.task_id in system_ids]
            if shadowed:
                await log.awarning(
                    "catalog_tasks_shadowed_by_system_tasks",
                    user_id=user_id,
                    task_ids=shadowed,
                )
                tasks = [task for task in tasks if task.task_id not in system_ids]
            batch = tasks + system_tasks

            event = PlannerEvent(
                event_id=str(ULID()),
                user_id=user_id,
                ts=now,
                type=PlannerEventType.TASKS_GENERATED,
                payload=TasksGeneratedPayload(
                    move_date=move_date.isoformat(),
                    today=today.isoformat(),
                    catalog_size=len(entries),
                    generated_count=len(tasks),
                    system_task_count=len(system_tasks),
                    task_ids=[task.task_id for task in batch],
                ).model_dump(),
            )

            try:
                async with self._stores.atomic():
                    await self._stores.assessment_store.merge_assessment(user_id, data, now)
                    await self._stores.task_store.upsert_tasks(batch)
                    await self._stores.event_store.append_event(event)
            except Exception as e:
                await log.aerror(
                    "task_generation_failed",
                    user_id=user_id,
                    batch_size=len(batch),
                    error_type=type(e).__name__,
                    error=str(e),
                )
                raise TaskWriteError(user_id, e) from e

        await log.ainfo(
            "task_generation_completed",
            user_id=user_id,
            generated_count=len(tasks),
            system_task_count=len(system_tasks),
            event_id=event.event_id,
        )
        return GenerationResult(user_id=user_id, tasks=batch, event_id=event.event_id)
