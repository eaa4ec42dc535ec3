"""TaskGenerationPipeline 测试

测试内容：
1. 匹配 + 推算 + 系统任务
2. 重复生成幂等（同 ID 覆盖）
3. 子任务不参与初始生成
4. 缺少用户身份时不访问存储
5. 写入失败整体回滚，包装为 TaskWriteError
6. 未提交批次对并发读取不可见
7. 目录条目与系统任务 ID 冲突时系统任务优先
"""

import asyncio
from datetime import date

import pytest
from peezy.planner.exceptions import MissingUserError, TaskWriteError
from peezy.planner.models import (
    AssessmentResponse,
    CatalogEntry,
    PlannerEventType,
    TaskSource,
    TaskStatus,
)
from peezy.planner.services import TaskGenerationPipeline, build_generated_tasks
from peezy.planner.store import replace_catalog

MOVE = date(2025, 1, 31)

ANSWERS = {"hireMovers": "Yes", "childrenCount": 2, "fitnessWellness": ["Yoga"]}


class FailingTaskStore:
    """upsert 时抛异常的 TaskStore"""

    def __init__(self, inner) -> None:
        self._inner = inner

    async def upsert_tasks(self, tasks) -> None:
        raise OSError("disk full")

    def __getattr__(self, name):
        return getattr(self._inner, name)


class BlockingEventStore:
    """append_event 时挂起，放行后抛异常"""

    def __init__(self, inner) -> None:
        self._inner = inner
        self.reached = asyncio.Event()
        self.release = asyncio.Event()

    async def append_event(self, event) -> None:
        self.reached.set()
        await self.release.wait()
        raise OSError("disk full")

    def __getattr__(self, name):
        return getattr(self._inner, name)


class CountingCatalog:
    """记录读取次数的 CatalogSource"""

    def __init__(self, entries) -> None:
        self.entries = entries
        self.calls = 0

    async def fetch_all(self):
        self.calls += 1
        return list(self.entries)


class TestBuildGeneratedTasks:
    """纯函数构建任务行"""

    def test_due_dates_and_fields(self, sample_catalog, clock):
        tasks = build_generated_tasks(
            sample_catalog,
            AssessmentResponse.from_raw(ANSWERS),
            "u1",
            MOVE,
            clock.today(),
            clock.now(),
        )
        by_id = {t.task_id: t for t in tasks}
        assert sorted(by_id) == [
            "book_movers",
            "change_address_usps",
            "gym_transfer",
            "no_pets_checklist",
            "school_records",
        ]
        # 30 * 20 // 100 = 6
        assert by_id["book_movers"].due_date == date(2025, 1, 7)
        # 紧急度 50 -> 1/16，latest 5 天不影响
        assert by_id["change_address_usps"].due_date == date(2025, 1, 16)
        assert all(t.status == TaskStatus.UPCOMING for t in tasks)
        assert all(t.source == TaskSource.ASSESSMENT for t in tasks)
        assert all(t.parent_id is None for t in tasks)


class TestTaskGenerationPipeline:
    """生成管线（含存储）"""

    async def test_generate_writes_tasks_event_and_assessment(self, store_group, clock, sample_catalog):
        pipeline = TaskGenerationPipeline(store_group, clock)
        result = await pipeline.generate(
            "u1", AssessmentResponse.from_raw(ANSWERS), MOVE, catalog=sample_catalog
        )

        # 5 个目录任务 + 1 个评估完成卡 + 6 个 mini-assessment 入口
        assert result.count == 12
        stored = await store_group.task_store.list_tasks("u1")
        assert sorted(t.task_id for t in stored) == sorted(result.task_ids)

        events = await store_group.event_store.get_events_for_user("u1")
        assert [e.type for e in events] == [PlannerEventType.TASKS_GENERATED]
        assert events[0].event_id == result.event_id
        assert events[0].payload["generated_count"] == 5
        assert events[0].payload["system_task_count"] == 7

        saved = await store_group.assessment_store.get_assessment("u1")
        assert saved.to_raw() == ANSWERS

    async def test_idempotent(self, store_group, clock, sample_catalog):
        """重复生成不产生重复任务"""
        pipeline = TaskGenerationPipeline(store_group, clock)
        data = AssessmentResponse.from_raw(ANSWERS)
        first = await pipeline.generate("u1", data, MOVE, catalog=sample_catalog)
        second = await pipeline.generate("u1", data, MOVE, catalog=sample_catalog)

        assert first.task_ids == second.task_ids
        stored = await store_group.task_store.list_tasks("u1")
        assert len(stored) == first.count
        assert len(await store_group.event_store.get_events_for_user("u1")) == 2

    async def test_children_never_generated(self, store_group, clock, sample_catalog):
        """子任务即使条件满足也不参与初始生成"""
        pipeline = TaskGenerationPipeline(store_group, clock, include_system_tasks=False)
        data = AssessmentResponse.from_raw({"hasBankAccount": "Yes", "hasInvestments": "Yes"})
        result = await pipeline.generate("u1", data, MOVE, catalog=sample_catalog)

        assert "update_bank_address" not in result.task_ids
        assert "update_doctor_address" not in result.task_ids
        assert result.task_ids == ["change_address_usps", "no_pets_checklist"]

    async def test_reads_catalog_once_from_source(self, store_group, clock, sample_catalog):
        """未传入目录时从 CatalogSource 读取一次"""
        source = CountingCatalog(sample_catalog)
        pipeline = TaskGenerationPipeline(store_group, clock, catalog_source=source)
        await pipeline.generate("u1", AssessmentResponse(), MOVE)
        assert source.calls == 1

    async def test_reads_seeded_catalog(self, store_group, clock, sample_catalog):
        """默认读取 SQLite 目录"""
        await replace_catalog(store_group.conn, store_group.catalog_store, sample_catalog)
        pipeline = TaskGenerationPipeline(store_group, clock, include_system_tasks=False)
        result = await pipeline.generate("u1", AssessmentResponse.from_raw({"hireMovers": "Yes"}), MOVE)
        assert "book_movers" in result.task_ids

    async def test_explicit_today_overrides_clock(self, store_group, clock, sample_catalog):
        pipeline = TaskGenerationPipeline(store_group, clock, include_system_tasks=False)
        result = await pipeline.generate(
            "u1", AssessmentResponse(), MOVE, today=date(2025, 1, 21), catalog=sample_catalog
        )
        usps = next(t for t in result.tasks if t.task_id == "change_address_usps")
        # 10 天窗口，紧急度 50 -> 1/26，latest 5 天 -> 1/26
        assert usps.due_date == date(2025, 1, 26)

    @pytest.mark.parametrize("user_id", ["", "   ", None])
    async def test_missing_user_rejected_before_store_access(self, store_group, clock, user_id):
        """缺少用户身份：在读目录之前拒绝"""
        source = CountingCatalog([])
        pipeline = TaskGenerationPipeline(store_group, clock, catalog_source=source)
        with pytest.raises(MissingUserError):
            await pipeline.generate(user_id, AssessmentResponse(), MOVE)
        assert source.calls == 0

    async def test_write_failure_rolls_back(self, store_group, clock, sample_catalog):
        """批量写入失败：核心评估与事件都不落盘"""
        store_group.task_store = FailingTaskStore(store_group.task_store)
        pipeline = TaskGenerationPipeline(store_group, clock)

        with pytest.raises(TaskWriteError) as exc_info:
            await pipeline.generate(
                "u1", AssessmentResponse.from_raw(ANSWERS), MOVE, catalog=sample_catalog
            )

        assert exc_info.value.recoverable is True
        assert isinstance(exc_info.value.original_error, OSError)
        assert await store_group.assessment_store.get_assessment("u1") is None
        assert await store_group.event_store.get_events_for_user("u1") == []
        assert await store_group.task_store.list_tasks("u1") == []

    async def test_concurrent_reader_never_sees_failing_batch(self, store_group, clock, sample_catalog):
        """批次写到一半时并发读取为空，失败回滚后仍为空"""
        blocking = BlockingEventStore(store_group.event_store)
        store_group.event_store = blocking
        pipeline = TaskGenerationPipeline(store_group, clock)

        job = asyncio.create_task(
            pipeline.generate("u1", AssessmentResponse.from_raw(ANSWERS), MOVE, catalog=sample_catalog)
        )
        await blocking.reached.wait()

        # 写连接上任务已 upsert，尚未提交
        assert len(await store_group.task_store.list_tasks("u1")) == 12
        assert await store_group.task_reader.list_tasks("u1") == []
        assert await store_group.task_reader.get_task("u1", "book_movers") is None

        blocking.release.set()
        with pytest.raises(TaskWriteError):
            await job

        assert await store_group.task_reader.list_tasks("u1") == []

    async def test_system_task_wins_id_collision(self, store_group, clock, sample_catalog):
        """目录条目与系统任务同 ID 时，批次内只保留系统任务"""
        colliding = [
            *sample_catalog,
            CatalogEntry(entry_id="assessment_complete", title="Shadow", urgency_percentage=10),
            CatalogEntry(entry_id="address_change_health", title="Shadow", urgency_percentage=10),
        ]
        pipeline = TaskGenerationPipeline(store_group, clock)
        result = await pipeline.generate(
            "u1", AssessmentResponse.from_raw(ANSWERS), MOVE, catalog=colliding
        )

        assert len(result.task_ids) == len(set(result.task_ids)) == 12
        by_id = {t.task_id: t for t in result.tasks}
        assert by_id["assessment_complete"].source == TaskSource.SYSTEM
        assert by_id["address_change_health"].title == "Create healthcare address list"

        events = await store_group.event_store.get_events_for_user("u1")
        assert events[0].payload["generated_count"] == 5
        assert events[0].payload["system_task_count"] == 7
        stored = await store_group.task_reader.list_tasks("u1")
        assert sorted(t.task_id for t in stored) == sorted(result.task_ids)

    async def test_catalog_ids_kept_without_system_tasks(self, store_group, clock):
        """不写系统任务时不做去重"""
        catalog = [CatalogEntry(entry_id="assessment_complete", title="Custom", urgency_percentage=10)]
        pipeline = TaskGenerationPipeline(store_group, clock, include_system_tasks=False)
        result = await pipeline.generate("u1", AssessmentResponse(), MOVE, catalog=catalog)
        assert result.task_ids == ["assessment_complete"]
        assert result.tasks[0].source == TaskSource.ASSESSMENT
