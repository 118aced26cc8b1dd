"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 镜像配置 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from brain.core.config import get_db_path, get_vault_path
from brain.core.mirror import MirrorNotifier, build_mirror
from brain.core.store import create_store_group
from fastapi import FastAPI

from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import artifacts, context, feedback, health, notes, search, tasks

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB 与镜像，关闭时清理连接"""
    db_path = get_db_path()
    store_group = await create_store_group(db_path)
    app.state.store_group = store_group

    vault_path = get_vault_path()
    app.state.notifier = MirrorNotifier(build_mirror(vault_path))
    log.info(
        "brain_started",
        db_path=db_path,
        vault_enabled=vault_path is not None,
    )

    yield

    # 关闭：清理数据库连接
    if getattr(app.state, "store_group", None):
        await app.state.store_group.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="Brain",
        version="0.1.0",
        description="个人多来源知识采集后端 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    # 初始化日志
    setup_logging()

    # 注册路由
    app.include_router(health.router, tags=["health"])
    app.include_router(notes.router, tags=["notes"])
    app.include_router(artifacts.router, tags=["artifacts"])
    app.include_router(context.router, tags=["context"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(search.router, tags=["search"])
    app.include_router(feedback.router, tags=["feedback"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
