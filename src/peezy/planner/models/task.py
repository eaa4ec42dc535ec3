"""GeneratedTask Domain Model

每个用户对每个适用的目录条目最多一行。
task_id 由目录条目 ID 确定性派生，重复生成时覆盖而不是追加。
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from .enums import TaskSource, TaskStatus


class GeneratedTask(BaseModel):
    """用户任务行 -- user_tasks 表主键 (user_id, task_id)"""

    task_id: str = Field(description="确定性 ID，等于来源目录条目 ID")
    user_id: str = Field(description="所属用户")
    title: str = Field(default="", description="标题")
    description: str = Field(default="", description="描述")
    category: str = Field(default="custom", description="分类")
    tips: str = Field(default="", description="小贴士")
    rationale: str = Field(default="", description="为什么需要做这件事")
    est_hours: float = Field(default=0.0, description="预估耗时（小时）")
    priority: str = Field(default="", description="优先级标签")
    urgency_percentage: int = Field(description="紧急度 0-100")
    due_date: date = Field(description="截止日期")
    status: TaskStatus = Field(default=TaskStatus.UPCOMING, description="生命周期状态")
    source: TaskSource = Field(default=TaskSource.ASSESSMENT, description="生成来源")
    parent_id: str | None = Field(default=None, description="级联生成时的 mini-assessment ID")
    workflow_id: str | None = Field(
        default=None,
        description="mini-assessment 入口任务关联的问卷 ID",
    )
    icon: str = Field(default="", description="入口任务图标名")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")
    completed_at: datetime | None = Field(default=None, description="完成时间")
