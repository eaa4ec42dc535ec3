"""系统任务 -- 初始生成时固定写入的任务

1. "Complete Moving Assessment"：用户的第一张任务卡，紧急度 100，当天到期
2. 六个地址变更 mini-assessment 入口任务：紧急度 85，workflow_id 指向对应问卷

mini-assessment 完成时，级联流程会把同 ID 的入口任务标记为 Completed，
其子任务（目录中 parent_id 等于该 ID 的条目）随后生成。
"""

from datetime import date, datetime

from pydantic import BaseModel

from .config import ASSESSMENT_TASK_URGENCY, MINI_ASSESSMENT_TASK_URGENCY
from .models.enums import TaskSource, TaskStatus
from .models.task import GeneratedTask
from .scheduler import schedule_due_date

ASSESSMENT_TASK_ID = "assessment_complete"


class MiniAssessmentDefinition(BaseModel):
    """mini-assessment 入口任务定义"""

    parent_id: str
    title: str
    description: str
    icon: str


MINI_ASSESSMENTS: tuple[MiniAssessmentDefinition, ...] = (
    MiniAssessmentDefinition(
        parent_id="address_change_financial",
        title="Create financial address list",
        description=(
            "Let's identify all your financial accounts that need your new address "
            "- banks, credit cards, investments, and more."
        ),
        icon="dollarsign.circle.fill",
    ),
    MiniAssessmentDefinition(
        parent_id="address_change_health",
        title="Create healthcare address list",
        description=(
            "Update your healthcare providers with your new address "
            "- doctors, dentists, insurance, and pharmacies."
        ),
        icon="heart.fill",
    ),
    MiniAssessmentDefinition(
        parent_id="address_change_insurance",
        title="Create insurance address list",
        description=(
            "Your insurance rates can change with your address! "
            "Let's make sure all policies are updated."
        ),
        icon="shield.fill",
    ),
    MiniAssessmentDefinition(
        parent_id="address_change_fitness",
        title="Create fitness membership list",
        description="Identify gym memberships and fitness subscriptions to transfer or cancel.",
        icon="figure.run",
    ),
    MiniAssessmentDefinition(
        parent_id="address_change_memberships",
        title="Create membership address list",
        description=(
            "Warehouse clubs, AAA, library cards "
            "- let's catch all memberships that need updating."
        ),
        icon="person.2.fill",
    ),
    MiniAssessmentDefinition(
        parent_id="address_change_subscriptions",
        title="Create subscription address list",
        description=(
            "Don't let deliveries go to your old address! "
            "Update meal kits, pet food, and other subscriptions."
        ),
        icon="shippingbox.fill",
    ),
)

# 系统任务占用的任务 ID，目录条目不能使用
RESERVED_TASK_IDS: frozenset[str] = frozenset(
    {ASSESSMENT_TASK_ID, *(definition.parent_id for definition in MINI_ASSESSMENTS)}
)


def build_assessment_task(user_id: str, today: date, now: datetime) -> GeneratedTask:
    """构建"完成评估"任务"""
    return GeneratedTask(
        task_id=ASSESSMENT_TASK_ID,
        user_id=user_id,
        title="Complete Moving Assessment",
        description=(
            "Congratulations! You've completed your moving assessment. "
            "Mark this task as complete to see how task completion works."
        ),
        category="assessment",
        tips="This is your first task! Long-press to trace the checkmark.",
        rationale="Introduces the task completion ritual and kicks off your moving journey.",
        priority="High",
        urgency_percentage=ASSESSMENT_TASK_URGENCY,
        due_date=today,
        status=TaskStatus.UPCOMING,
        source=TaskSource.SYSTEM,
        created_at=now,
        updated_at=now,
    )


def build_mini_assessment_tasks(
    user_id: str,
    today: date,
    move_date: date,
    now: datetime,
) -> list[GeneratedTask]:
    """构建全部 mini-assessment 入口任务"""
    due_date = schedule_due_date(today, move_date, MINI_ASSESSMENT_TASK_URGENCY)
    return [
        GeneratedTask(
            task_id=definition.parent_id,
            user_id=user_id,
            title=definition.title,
            description=definition.description,
            category="address_change",
            tips="Swipe right to start. We'll help you think of everything!",
            rationale=(
                "Updating your address everywhere prevents missed bills, "
                "lost mail, and service interruptions."
            ),
            est_hours=0.25,
            priority="Medium",
            urgency_percentage=MINI_ASSESSMENT_TASK_URGENCY,
            due_date=due_date,
            status=TaskStatus.UPCOMING,
            source=TaskSource.SYSTEM,
            workflow_id=definition.parent_id,
            icon=definition.icon,
            created_at=now,
            updated_at=now,
        )
        for definition in MINI_ASSESSMENTS
    ]


def build_system_tasks(
    user_id: str,
    today: date,
    move_date: date,
    now: datetime,
) -> list[GeneratedTask]:
    """构建全部系统任务"""
    return [
        build_assessment_task(user_id, today, now),
        *build_mini_assessment_tasks(user_id, today, move_date, now),
    ]
