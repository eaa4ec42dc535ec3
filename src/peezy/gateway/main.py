"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 规划服务初始化 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from peezy.planner.clock import SystemClock
from peezy.planner.store import create_store_group

from .errors import register_exception_handlers
from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .routes import generation, health, mini_assessments, tasks
from .services.planner_service import PlannerService
from .settings import load_planner_settings

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB 和规划服务，关闭时清理连接"""
    settings = app.state.settings

    store_group = await create_store_group(settings.db_path)
    app.state.store_group = store_group
    app.state.planner_service = PlannerService(
        store_group,
        SystemClock(),
        include_system_tasks=settings.include_system_tasks,
    )
    log.info(
        "planner_service_initialized",
        db_path=settings.db_path,
        include_system_tasks=settings.include_system_tasks,
    )

    yield

    # 关闭：清理数据库连接
    if hasattr(app.state, "store_group") and app.state.store_group:
        await app.state.store_group.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="Peezy Planner Gateway",
        version="0.1.0",
        description="搬家任务清单生成 API",
        lifespan=lifespan,
    )

    settings = load_planner_settings()
    app.state.settings = settings

    # 先初始化日志，lifespan 与请求日志都使用同一份配置
    setup_logging(settings)

    app.add_middleware(LoggingMiddleware)
    register_exception_handlers(app)

    # 注册路由
    app.include_router(generation.router, tags=["generation"])
    app.include_router(mini_assessments.router, tags=["mini-assessments"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
