"""PlannerEvent Domain Model

审计事件 append-only，与任务批量写入在同一事务内提交。
event_id 使用 ULID 格式，时间有序。
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .enums import PlannerEventType


class PlannerEvent(BaseModel):
    """规划审计事件"""

    event_id: str = Field(description="唯一标识，ULID 格式，时间有序")
    user_id: str = Field(description="所属用户")
    ts: datetime = Field(description="事件时间戳")
    type: PlannerEventType = Field(description="事件类型")
    payload: dict[str, Any] = Field(default_factory=dict, description="结构化 payload")


class TasksGeneratedPayload(BaseModel):
    """TASKS_GENERATED 事件 payload"""

    move_date: str
    today: str
    catalog_size: int
    generated_count: int
    system_task_count: int = 0
    task_ids: list[str] = Field(default_factory=list)


class MiniAssessmentCompletedPayload(BaseModel):
    """MINI_ASSESSMENT_COMPLETED 事件 payload"""

    parent_id: str
    answer_count: int
    child_candidate_count: int
    generated_count: int
    task_ids: list[str] = Field(default_factory=list)
