"""Planner 日志配置

structlog 事件与标准库 logging 记录共用一个根 handler：
- dev：ConsoleRenderer 彩色输出
- json：每行一个 JSON 对象，异常堆栈展开为 "exception" 文本字段

每条事件都带 service 字段；LoggingMiddleware 绑定的 request_id / user_id
经 merge_contextvars 合并进同一请求内的所有事件（包括生成管线与存储层）。
"""

import logging

import structlog

from ..settings import PlannerSettings, load_planner_settings

SERVICE_NAME = "peezy-planner"

_HANDLER_NAME = "peezy"

# 第三方库的逐条 DEBUG 日志（aiosqlite 每次 execute 都会记录）只保留 WARNING 以上
_QUIET_LOGGERS = ("aiosqlite",)


def add_service_name(
    logger: logging.Logger, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        add_service_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_chain(log_format: str) -> list[structlog.types.Processor]:
    if log_format == "json":
        return [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    return [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        structlog.dev.ConsoleRenderer(),
    ]


def build_handler(settings: PlannerSettings) -> logging.Handler:
    """按配置构建根 handler"""
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=_render_chain(settings.log_format),
        foreign_pre_chain=_pre_chain(),
    )
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(formatter)
    return handler


def setup_logging(settings: PlannerSettings | None = None) -> None:
    """初始化日志

    重复调用时替换上一次安装的 handler，不动其他 handler。

    Args:
        settings: Gateway 配置，None 时从环境变量加载
    """
    settings = settings or load_planner_settings()

    structlog.configure(
        processors=[
            *_pre_chain(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            root_logger.removeHandler(existing)
    root_logger.addHandler(build_handler(settings))
    root_logger.setLevel(settings.log_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
