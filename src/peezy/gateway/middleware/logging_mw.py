"""LoggingMiddleware -- 请求级日志上下文

为每个 HTTP 请求生成 request_id，绑定到 structlog contextvars；
/api/users/{user_id}/... 路径额外绑定 user_id。
"""

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

_USER_PATH_PREFIX = "/api/users/"


def extract_user_id(path: str) -> str | None:
    """从 /api/users/{user_id}/... 提取 user_id"""
    if not path.startswith(_USER_PATH_PREFIX):
        return None
    user_id = path[len(_USER_PATH_PREFIX) :].split("/", 1)[0]
    return user_id or None


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件 -- 为每个请求生成 request_id"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = str(ULID())

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        user_id = extract_user_id(request.url.path)
        if user_id:
            structlog.contextvars.bind_contextvars(user_id=user_id)

        log = structlog.get_logger()
        await log.ainfo("request_started")

        response = await call_next(request)

        await log.ainfo(
            "request_completed",
            status_code=response.status_code,
        )

        response.headers["X-Request-ID"] = request_id
        return response
