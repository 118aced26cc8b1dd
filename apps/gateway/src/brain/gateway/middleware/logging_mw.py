"""LoggingMiddleware

每个请求结束时输出一条 request_completed（状态码 + 耗时 + 追踪字段）。
客户端带来合法的 X-Request-ID 时沿用，否则生成 ULID。
/health 与 /ready 只记 debug。
"""

import re
import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

from .trace_mw import trace_fields

REQUEST_ID_HEADER = "X-Request-ID"

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

_HEALTH_PATHS = frozenset({"/health", "/ready"})


def resolve_request_id(incoming: str | None) -> str:
    """沿用合法的外部 request_id，否则生成新的 ULID"""
    if incoming and _REQUEST_ID_PATTERN.match(incoming):
        return incoming
    return str(ULID())


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        path = request.url.path

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=path,
        )

        log = structlog.get_logger()
        start_time = time.monotonic()
        try:
            response = await call_next(request)
        except Exception:
            await log.aexception(
                "request_failed",
                duration_ms=int((time.monotonic() - start_time) * 1000),
                **trace_fields(request),
            )
            raise

        duration_ms = int((time.monotonic() - start_time) * 1000)
        emit = log.adebug if path in _HEALTH_PATHS else log.ainfo
        await emit(
            "request_completed",
            status_code=response.status_code,
            duration_ms=duration_ms,
            **trace_fields(request),
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
