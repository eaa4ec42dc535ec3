"""枚举定义

包含 TaskStatus 任务生命周期、TaskSource 生成来源、PlannerEventType 审计事件类型，
以及条件比较运算符 ComparisonOperator。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """用户任务生命周期状态

    取值与客户端任务卡片保持一致（首字母大写）。
    状态流转本身由任务生命周期服务负责，规划引擎只写入 Upcoming 和 Completed。
    """

    UPCOMING = "Upcoming"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    SNOOZED = "Snoozed"
    SKIPPED = "Skipped"


class TaskSource(StrEnum):
    """任务生成来源"""

    # 核心评估生成
    ASSESSMENT = "assessment"
    # mini-assessment 完成后级联生成
    MINI_ASSESSMENT = "mini_assessment"
    # 固定的系统任务（评估完成卡片、mini-assessment 入口卡片）
    SYSTEM = "system"


class PlannerEventType(StrEnum):
    """审计事件类型（planner_events 表 append-only）"""

    TASKS_GENERATED = "TASKS_GENERATED"
    MINI_ASSESSMENT_COMPLETED = "MINI_ASSESSMENT_COMPLETED"


class ComparisonOperator(StrEnum):
    """数值比较运算符

    声明顺序即解析时的前缀匹配顺序：两字符运算符必须先于单字符运算符。
    """

    GE = ">="
    LE = "<="
    GT = ">"
    LT = "<"


class AcceptedValueKind(StrEnum):
    """条件可接受值类型"""

    LITERAL = "literal"
    COMPARISON = "comparison"
