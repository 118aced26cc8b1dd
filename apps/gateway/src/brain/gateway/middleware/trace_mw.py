"""TraceMiddleware

把请求涉及的 task_id / project 绑定到 structlog contextvars，
该请求内 service 层输出的日志都会带上这两个字段。
"""

import structlog
from brain.core.sanitize import sanitize_project_name
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# /api/v1/tasks 下不是任务 ID 的路径段
_RESERVED_SEGMENTS = {"active", "queue"}


def extract_task_id(path: str) -> str | None:
    """从 /api/v1/tasks/{task_id}[/action] 提取 task_id"""
    parts = [p for p in path.split("/") if p]
    for i, part in enumerate(parts):
        if part == "tasks" and i + 1 < len(parts):
            candidate = parts[i + 1]
            if candidate not in _RESERVED_SEGMENTS:
                return candidate
    return None


def extract_project(request: Request) -> str | None:
    """项目名：优先 /api/v1/context/{project} 路径段，其次 ?project= 查询参数

    返回清洗后的项目名，与 service 层落库时的写法一致。
    """
    parts = [p for p in request.url.path.split("/") if p]
    raw: str | None = None
    if len(parts) >= 4 and parts[:3] == ["api", "v1", "context"]:
        raw = parts[3]
    else:
        raw = request.query_params.get("project")
    return sanitize_project_name(raw) or None


def trace_fields(request: Request) -> dict[str, str]:
    """请求的追踪字段，缺失的字段不出现"""
    fields: dict[str, str] = {}
    task_id = extract_task_id(request.url.path)
    if task_id:
        fields["task_id"] = task_id
    project = extract_project(request)
    if project:
        fields["project"] = project
    return fields


class TraceMiddleware(BaseHTTPMiddleware):
    """追踪中间件 -- 为任务 / 项目相关请求绑定 task_id 与 project"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        fields = trace_fields(request)
        if fields:
            structlog.contextvars.bind_contextvars(**fields)

        return await call_next(request)
