"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store 与业务服务

Store 实例与镜像通知器通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from brain.core.mirror import MirrorNotifier
from brain.core.store import StoreGroup
from fastapi import Depends, Request

from .services.artifact_service import ArtifactService
from .services.context_service import ContextService
from .services.feedback_service import FeedbackService
from .services.note_service import NoteService
from .services.search_service import SearchService
from .services.task_service import TaskService


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_notifier(request: Request) -> MirrorNotifier:
    """从 app.state 获取镜像通知器"""
    return request.app.state.notifier


def get_task_service(
    store_group: StoreGroup = Depends(get_store_group),
    notifier: MirrorNotifier = Depends(get_notifier),
) -> TaskService:
    return TaskService(store_group, notifier)


def get_note_service(
    store_group: StoreGroup = Depends(get_store_group),
    notifier: MirrorNotifier = Depends(get_notifier),
) -> NoteService:
    return NoteService(store_group, notifier)


def get_artifact_service(
    store_group: StoreGroup = Depends(get_store_group),
    notifier: MirrorNotifier = Depends(get_notifier),
) -> ArtifactService:
    return ArtifactService(store_group, notifier)


def get_search_service(store_group: StoreGroup = Depends(get_store_group)) -> SearchService:
    return SearchService(store_group)


def get_feedback_service(store_group: StoreGroup = Depends(get_store_group)) -> FeedbackService:
    return FeedbackService(store_group)


def get_context_service(store_group: StoreGroup = Depends(get_store_group)) -> ContextService:
    return ContextService(store_group)
