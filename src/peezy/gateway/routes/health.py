"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含 SQLite 连通性与目录条目数。
"""

import structlog
from fastapi import APIRouter, Depends
from peezy.planner.store import StoreGroup
from starlette.responses import JSONResponse

from ..deps import get_store_group

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(store_group: StoreGroup = Depends(get_store_group)):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. sqlite: 数据库连通性（只读连接）
    2. catalog_entries: 已提交的目录条目数（为 0 时生成只会产出系统任务，仍视为 ready）
    """
    checks: dict = {}
    all_ok = True

    try:
        cursor = await store_group.read_conn.execute("SELECT 1")
        await cursor.fetchone()
        checks["sqlite"] = "ok"
        checks["catalog_entries"] = await store_group.catalog_reader.count()
    except Exception as e:
        await log.awarning("readiness_check_failed", error=str(e))
        checks["sqlite"] = f"error: {str(e)}"
        all_ok = False

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={"status": status_text, "checks": checks},
    )
