"""用户任务查询路由

GET /api/users/{user_id}/tasks: 任务列表，支持 status / parent_id 筛选，按截止日期正序。
GET /api/users/{user_id}/tasks/{task_id}: 任务详情。
"""

from fastapi import APIRouter, Depends, Query
from peezy.planner.models import TaskStatus
from pydantic import BaseModel

from ..deps import get_planner_service
from ..errors import error_response
from ..services.planner_service import PlannerService

router = APIRouter()


class TaskSummary(BaseModel):
    """任务摘要（列表项）"""

    task_id: str
    title: str
    category: str
    status: str
    source: str
    urgency_percentage: int
    due_date: str
    parent_id: str | None
    workflow_id: str | None


class TaskListResponse(BaseModel):
    """任务列表响应"""

    tasks: list[TaskSummary]


@router.get("/api/users/{user_id}/tasks", response_model=TaskListResponse)
async def list_tasks(
    user_id: str,
    status: TaskStatus | None = Query(default=None, description="按状态筛选"),
    parent_id: str | None = Query(default=None, description="按 mini-assessment 筛选"),
    service: PlannerService = Depends(get_planner_service),
):
    """查询用户任务列表"""
    tasks = await service.list_tasks(
        user_id,
        status.value if status else None,
        parent_id,
    )
    return TaskListResponse(
        tasks=[
            TaskSummary(
                task_id=t.task_id,
                title=t.title,
                category=t.category,
                status=t.status.value,
                source=t.source.value,
                urgency_percentage=t.urgency_percentage,
                due_date=t.due_date.isoformat(),
                parent_id=t.parent_id,
                workflow_id=t.workflow_id,
            )
            for t in tasks
        ]
    )


@router.get("/api/users/{user_id}/tasks/{task_id}")
async def get_task_detail(
    user_id: str,
    task_id: str,
    service: PlannerService = Depends(get_planner_service),
):
    """查询任务详情"""
    task = await service.get_task(user_id, task_id)
    if task is None:
        return error_response(
            404,
            "TASK_NOT_FOUND",
            f"Task {task_id} does not exist for user {user_id}",
        )
    return {"task": task.model_dump(mode="json")}
