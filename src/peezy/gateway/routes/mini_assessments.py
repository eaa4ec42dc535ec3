"""mini-assessment 完成路由

POST /api/users/{user_id}/mini-assessments/{parent_id}: 合并答案并生成子任务。
"""

from datetime import date

from fastapi import APIRouter, Depends
from peezy.planner.models import AssessmentResponse
from pydantic import BaseModel, Field

from ..deps import get_planner_service
from ..services.planner_service import PlannerService
from .generation import RawAnswer

router = APIRouter()


class CompleteMiniAssessmentRequest(BaseModel):
    """mini-assessment 完成请求体"""

    answers: dict[str, RawAnswer] = Field(default_factory=dict, description="mini-assessment 答案")
    move_date: date = Field(description="搬家日期")
    today: date | None = Field(default=None, description="推算基准日期，缺省取服务器时钟")


class CompleteMiniAssessmentResponse(BaseModel):
    """级联响应"""

    user_id: str
    parent_id: str
    parent_task_found: bool
    count: int
    task_ids: list[str]
    event_id: str


@router.post(
    "/api/users/{user_id}/mini-assessments/{parent_id}",
    response_model=CompleteMiniAssessmentResponse,
)
async def complete_mini_assessment(
    user_id: str,
    parent_id: str,
    body: CompleteMiniAssessmentRequest,
    service: PlannerService = Depends(get_planner_service),
):
    """处理 mini-assessment 完成事件"""
    answers = AssessmentResponse.from_raw(body.answers)
    result = await service.complete_mini_assessment(
        user_id, parent_id, answers, body.move_date, today=body.today
    )
    return CompleteMiniAssessmentResponse(
        user_id=result.user_id,
        parent_id=result.parent_id,
        parent_task_found=result.parent_task_found,
        count=result.count,
        task_ids=result.task_ids,
        event_id=result.event_id,
    )
