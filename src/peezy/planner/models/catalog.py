"""Catalog Domain Model

任务目录条目由内容团队维护，引擎只读。
conditions 格式：字段名 -> 可接受值列表（列表内 OR，字段间 AND）。
目录 JSON 沿用 camelCase 键名（taskId / desc / whyNeeded / parentTask ...），
两种写法均可通过校验。
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# 条件集合：字段名 -> 可接受值原文列表
ConditionSet = dict[str, list[str]]

# 提前/截止天数上限（约 100 年），避免日期运算溢出
MAX_DAYS_BEFORE_MOVE = 36500


class CatalogEntry(BaseModel):
    """任务目录条目（不可变）"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    entry_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("entry_id", "taskId", "pageKey", "id"),
        description="全局唯一且稳定的条目 ID",
    )
    title: str = Field(default="", description="标题")
    description: str = Field(
        default="",
        validation_alias=AliasChoices("description", "desc"),
        description="描述",
    )
    category: str = Field(default="custom", description="分类")
    tips: str = Field(default="", description="小贴士")
    rationale: str = Field(
        default="",
        validation_alias=AliasChoices("rationale", "whyNeeded"),
        description="为什么需要做这件事",
    )
    est_hours: float = Field(
        default=0.0,
        ge=0.0,
        validation_alias=AliasChoices("est_hours", "estHours"),
        description="预估耗时（小时）",
    )
    priority: str = Field(default="", description="优先级标签（展示用）")
    urgency_percentage: int = Field(
        ge=0,
        le=100,
        validation_alias=AliasChoices("urgency_percentage", "urgencyPercentage"),
        description="紧急度 0-100，100 表示立即处理",
    )
    earliest_days_before_move: int | None = Field(
        default=None,
        ge=0,
        le=MAX_DAYS_BEFORE_MOVE,
        validation_alias=AliasChoices("earliest_days_before_move", "earliestDaysBeforeMove"),
        description="最早在搬家前多少天",
    )
    latest_days_before_move: int | None = Field(
        default=None,
        ge=0,
        le=MAX_DAYS_BEFORE_MOVE,
        validation_alias=AliasChoices("latest_days_before_move", "latestDaysBeforeMove"),
        description="最晚在搬家前多少天",
    )
    conditions: ConditionSet = Field(default_factory=dict, description="适用条件")
    parent_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("parent_id", "parentId", "parentTask"),
        description="所属 mini-assessment ID（子任务才有）",
    )

    @field_validator("conditions", mode="before")
    @classmethod
    def _normalize_conditions(cls, value: Any) -> Any:
        """空值视为无条件；单个字符串包装为单元素列表"""
        if value is None or value == "":
            return {}
        if isinstance(value, dict):
            return {
                key: [accepted] if isinstance(accepted, str) else accepted
                for key, accepted in value.items()
            }
        return value

    @field_validator("parent_id", mode="before")
    @classmethod
    def _normalize_parent_id(cls, value: Any) -> Any:
        """空字符串视为无父任务"""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def is_child(self) -> bool:
        """是否为 mini-assessment 子任务"""
        return self.parent_id is not None
