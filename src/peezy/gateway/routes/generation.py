"""任务生成路由

POST /api/users/{user_id}/tasks/generate: 核心评估完成后生成任务。
"""

from datetime import date

from fastapi import APIRouter, Depends
from peezy.planner.derived import MoveGeography, derive_condition_fields
from pydantic import BaseModel, Field

from ..deps import get_planner_service
from ..services.planner_service import PlannerService

router = APIRouter()

# 问卷答案原始值：字符串 / 布尔 / 数字 / 多选列表；null 视为未作答
RawAnswer = str | bool | int | float | list[str] | None


class GenerateTasksRequest(BaseModel):
    """生成请求体"""

    assessment: dict[str, RawAnswer] = Field(default_factory=dict, description="核心评估原始答案")
    move_date: date = Field(description="搬家日期")
    today: date | None = Field(default=None, description="推算基准日期，缺省取服务器时钟")
    geography: MoveGeography | None = Field(
        default=None,
        description="地理编码结果，用于推导 moveDistance / isInterstate",
    )


class GenerateTasksResponse(BaseModel):
    """生成响应"""

    user_id: str
    count: int
    task_ids: list[str]
    event_id: str


@router.post("/api/users/{user_id}/tasks/generate", response_model=GenerateTasksResponse)
async def generate_tasks(
    user_id: str,
    body: GenerateTasksRequest,
    service: PlannerService = Depends(get_planner_service),
):
    """生成（或重新生成）用户任务，重复调用覆盖同 ID 任务"""
    data = derive_condition_fields(body.assessment, body.geography)
    result = await service.generate(user_id, data, body.move_date, today=body.today)
    return GenerateTasksResponse(
        user_id=result.user_id,
        count=result.count,
        task_ids=result.task_ids,
        event_id=result.event_id,
    )
