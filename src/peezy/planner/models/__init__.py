"""Peezy Planner Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .assessment import (
    AssessmentResponse,
    AssessmentValue,
    BoolValue,
    ListValue,
    NumberValue,
    StringValue,
    wrap_value,
)
from .catalog import CatalogEntry, ConditionSet
from .enums import (
    AcceptedValueKind,
    ComparisonOperator,
    PlannerEventType,
    TaskSource,
    TaskStatus,
)
from .event import MiniAssessmentCompletedPayload, PlannerEvent, TasksGeneratedPayload
from .mini_assessment import MiniAssessmentRecord
from .task import GeneratedTask

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskSource",
    "PlannerEventType",
    "ComparisonOperator",
    "AcceptedValueKind",
    # Assessment
    "AssessmentResponse",
    "AssessmentValue",
    "StringValue",
    "BoolValue",
    "NumberValue",
    "ListValue",
    "wrap_value",
    # Catalog
    "CatalogEntry",
    "ConditionSet",
    # Task
    "GeneratedTask",
    # MiniAssessment
    "MiniAssessmentRecord",
    # Event
    "PlannerEvent",
    "TasksGeneratedPayload",
    "MiniAssessmentCompletedPayload",
]
