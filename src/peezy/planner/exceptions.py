"""Planner 异常体系"""


class PlannerError(Exception):
    """Planner 包基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可通过重试恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class MissingUserError(PlannerError):
    """调用边界缺少用户身份

    前置条件违规，在访问任何存储之前抛出。
    """

    def __init__(self, operation: str) -> None:
        super().__init__(f"{operation} 缺少 user_id", recoverable=False)
        self.operation = operation


class TaskWriteError(PlannerError):
    """任务批量写入失败

    事务已整体回滚，不存在部分写入；调用方可重试（重试即重写整批）。
    """

    def __init__(self, user_id: str, original_error: Exception) -> None:
        """
        Args:
            user_id: 写入失败的用户
            original_error: 原始异常
        """
        super().__init__(
            f"用户 {user_id} 的任务批量写入失败 -- {original_error}",
            recoverable=True,
        )
        self.user_id = user_id
        self.original_error = original_error


class CatalogValidationError(PlannerError):
    """任务目录数据校验失败"""

    def __init__(self, message: str, errors: list[dict] | None = None) -> None:
        super().__init__(message, recoverable=False)
        self.errors = errors or []
