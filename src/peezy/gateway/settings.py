"""PlannerSettings -- Gateway 配置加载

从环境变量加载配置；非法值记录警告并回退默认值，不阻塞启动。
"""

import os
from typing import Literal

import structlog
from peezy.planner.config import get_db_path
from pydantic import BaseModel, Field

log = structlog.get_logger()

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}

LOG_FORMATS = ("dev", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class PlannerSettings(BaseModel):
    """Gateway 配置

    环境变量:
        PEEZY_DB_PATH: SQLite 数据库路径
        PEEZY_INCLUDE_SYSTEM_TASKS: 初始生成是否写入系统任务（默认 true）
        PEEZY_LOG_FORMAT: dev | json（默认 dev）
        PEEZY_LOG_LEVEL: 根 logger 级别（默认 INFO）
    """

    db_path: str = Field(description="SQLite 数据库文件路径")
    include_system_tasks: bool = Field(
        default=True,
        description="初始生成是否附加评估完成卡与 mini-assessment 入口任务",
    )
    log_format: Literal["dev", "json"] = Field(default="dev", description="日志渲染模式")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="根 logger 级别",
    )


def _invalid(env_var: str, value: str) -> None:
    # 此时日志尚未配置，走 structlog 默认输出
    log.warning("invalid_planner_config", env_var=env_var, value=value, fallback=True)


def load_planner_settings() -> PlannerSettings:
    """从环境变量加载 Gateway 配置

    Returns:
        PlannerSettings 实例
    """
    kwargs: dict = {"db_path": get_db_path()}

    if val := os.environ.get("PEEZY_INCLUDE_SYSTEM_TASKS"):
        normalized = val.strip().lower()
        if normalized in _TRUE_VALUES:
            kwargs["include_system_tasks"] = True
        elif normalized in _FALSE_VALUES:
            kwargs["include_system_tasks"] = False
        else:
            _invalid("PEEZY_INCLUDE_SYSTEM_TASKS", val)

    if val := os.environ.get("PEEZY_LOG_FORMAT"):
        if val.strip().lower() in LOG_FORMATS:
            kwargs["log_format"] = val.strip().lower()
        else:
            _invalid("PEEZY_LOG_FORMAT", val)

    if val := os.environ.get("PEEZY_LOG_LEVEL"):
        if val.strip().upper() in LOG_LEVELS:
            kwargs["log_level"] = val.strip().upper()
        else:
            _invalid("PEEZY_LOG_LEVEL", val)

    return PlannerSettings(**kwargs)
