"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store 与规划服务

实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Request
from peezy.planner.store import StoreGroup

from .services.planner_service import PlannerService


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_planner_service(request: Request) -> PlannerService:
    """从 app.state 获取 PlannerService 实例"""
    return request.app.state.planner_service
