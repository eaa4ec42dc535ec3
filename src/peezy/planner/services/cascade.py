"""MiniAssessmentCascade -- mini-assessment 完成后的子任务生成

由外层服务在收到完成事件后显式调用 on_mini_assessment_completed()。
单事务内依次：
1. 合并写入答案（同 (user_id, parent_id) 合并而非替换，刷新完成顺序）
2. 入口任务标记 Completed
3. 构建合并视图：核心评估 + 全部 mini-assessment 答案（按完成顺序叠加）
4. 只匹配 parent_id 等于本次 mini-assessment 的目录条目
5. 批量 upsert 合格子任务并写入审计事件

事务内的读取能看到本事务前面步骤的写入。
"""

from datetime import date

import structlog
from ulid import ULID

from ..clock import Clock
from ..exceptions import PlannerError, TaskWriteError
from ..matcher import children_of
from ..models.assessment import AssessmentResponse
from ..models.catalog import CatalogEntry
from ..models.enums import PlannerEventType, TaskSource, TaskStatus
from ..models.event import MiniAssessmentCompletedPayload, PlannerEvent
from ..models.mini_assessment import MiniAssessmentRecord
from ..store import StoreGroup
from ..store.protocols import CatalogSource
from .generation import GenerationResult, build_generated_tasks, require_user
from .locks import UserLockRegistry

log = structlog.get_logger()


class CascadeResult(GenerationResult):
    """级联结果"""

    parent_id: str
    parent_task_found: bool = True


def build_combined_view(
    core: AssessmentResponse | None,
    records: list[MiniAssessmentRecord],
) -> AssessmentResponse:
    """核心评估 ∪ mini-assessment 答案，后完成者在 key 冲突时优先"""
    combined = core or AssessmentResponse()
    for record in sorted(records, key=lambda r: r.completion_seq):
        combined = combined.merged_with(record.answers)
    return combined


class MiniAssessmentCascade:
    """mini-assessment 级联生成"""

    def __init__(
        self,
        store_group: StoreGroup,
        clock: Clock,
        catalog_source: CatalogSource | None = None,
        locks: UserLockRegistry | None = None,
    ) -> None:
        self._stores = store_group
        self._clock = clock
        self._catalog = catalog_source or store_group.catalog_reader
        self._locks = locks or UserLockRegistry()

    async def on_mini_assessment_completed(
        self,
        user_id: str,
        parent_id: str,
        answers: AssessmentResponse,
        move_date: date,
        *,
        today: date | None = None,
        catalog: list[CatalogEntry] | None = None,
    ) -> CascadeResult:
        """处理 mini-assessment 完成

        重复调用（相同合并答案）得到相同的子任务集合。

        Raises:
            MissingUserError: user_id 为空
            PlannerError: parent_id 为空
            TaskWriteError: 批量写入失败（已整体回滚）
        """
        require_user(user_id, "on_mini_assessment_completed")
        if not parent_id or not parent_id.strip():
            raise PlannerError("mini-assessment 缺少 parent_id", recoverable=False)

        async with self._locks.hold(user_id):
            today = today or self._clock.today()
            now = self._clock.now()
            entries = catalog if catalog is not None else await self._catalog.fetch_all()
            children = children_of(entries, parent_id)

            try:
                async with self._stores.atomic():
                    record = await self._stores.mini_assessment_store.merge_answers(
                        user_id, parent_id, answers, now
                    )
                    parent_task_found = await self._stores.task_store.update_task_status(
                        user_id,
                        parent_id,
                        TaskStatus.COMPLETED.value,
                        now.isoformat(),
                        completed_at=now.isoformat(),
                    )

                    core = await self._stores.assessment_store.get_assessment(user_id)
                    records = await self._stores.mini_assessment_store.list_for_user(user_id)
                    combined = build_combined_view(core, records)

                    tasks = build_generated_tasks(
                        children,
                        combined,
                        user_id,
                        move_date,
                        today,
                        now,
                        exclude_child_entries=False,
                        source=TaskSource.MINI_ASSESSMENT,
                        parent_id=parent_id,
                    )
                    await self._stores.task_store.upsert_tasks(tasks)

                    event = PlannerEvent(
                        event_id=str(ULID()),
                        user_id=user_id,
                        ts=now,
                        type=PlannerEventType.MINI_ASSESSMENT_COMPLETED,
                        payload=MiniAssessmentCompletedPayload(
                            parent_id=parent_id,
                            answer_count=len(record.answers),
                            child_candidate_count=len(children),
                            generated_count=len(tasks),
                            task_ids=[task.task_id for task in tasks],
                        ).model_dump(),
                    )
                    await self._stores.event_store.append_event(event)
            except Exception as e:
                await log.aerror(
                    "mini_assessment_cascade_failed",
                    user_id=user_id,
                    parent_id=parent_id,
                    error_type=type(e).__name__,
                    error=str(e),
                )
                raise TaskWriteError(user_id, e) from e

        if not parent_task_found:
            await log.awarning(
                "mini_assessment_parent_task_missing",
                user_id=user_id,
                parent_id=parent_id,
            )
        await log.ainfo(
            "mini_assessment_cascade_completed",
            user_id=user_id,
            parent_id=parent_id,
            completion_seq=record.completion_seq,
            child_candidate_count=len(children),
            generated_count=len(tasks),
            event_id=event.event_id,
        )
        return CascadeResult(
            user_id=user_id,
            tasks=tasks,
            event_id=event.event_id,
            parent_id=parent_id,
            parent_task_found=parent_task_found,
        )
