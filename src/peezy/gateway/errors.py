"""异常到 HTTP 响应的映射

错误体统一为 {"error": {"code", "message"}}。
"""

import structlog
from fastapi import FastAPI, Request
from peezy.planner.exceptions import (
    CatalogValidationError,
    MissingUserError,
    PlannerError,
    TaskWriteError,
)
from starlette.responses import JSONResponse

log = structlog.get_logger()


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    """PlannerError 子类按类型映射状态码"""
    if isinstance(exc, MissingUserError):
        return error_response(400, "MISSING_USER", str(exc))
    if isinstance(exc, TaskWriteError):
        await log.awarning("task_write_failed", error=str(exc.original_error))
        return error_response(503, "TASK_WRITE_FAILED", str(exc))
    if isinstance(exc, CatalogValidationError):
        return error_response(422, "CATALOG_INVALID", str(exc))
    return error_response(400, "PLANNER_ERROR", str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PlannerError, planner_error_handler)
