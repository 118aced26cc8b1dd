"""检索路由

GET /api/v1/search          跨实体检索
GET /api/v1/search/suggest  联想词
"""

from brain.core.config import SEARCH_DEFAULT_LIMIT
from brain.core.models import SearchEntityType
from fastapi import APIRouter, Depends, Query

from ..deps import get_search_service
from ..services.search_service import SearchService

router = APIRouter(prefix="/api/v1/search")


def parse_types(raw: str | None) -> list[SearchEntityType] | None:
    """解析逗号分隔的 types 参数，忽略未知取值；为空时返回 None（全部类型）"""
    if not raw:
        return None
    valid = {t.value for t in SearchEntityType}
    parsed = [
        SearchEntityType(part)
        for part in (p.strip().lower() for p in raw.split(","))
        if part in valid
    ]
    return parsed or None


@router.get("")
async def search(
    q: str = Query(min_length=1, max_length=200),
    types: str | None = Query(default=None, max_length=100),
    project: str | None = Query(default=None, max_length=100),
    limit: int = Query(default=SEARCH_DEFAULT_LIMIT, ge=1, le=100),
    service: SearchService = Depends(get_search_service),
):
    results = await service.search(q, parse_types(types), project, limit)
    return {
        "query": q,
        "results": [r.model_dump(mode="json") for r in results],
        "total": len(results),
    }


@router.get("/suggest")
async def suggest(
    q: str = Query(default="", max_length=100),
    limit: int = Query(default=5, ge=1, le=20),
    service: SearchService = Depends(get_search_service),
):
    return {"suggestions": await service.get_suggestions(q, limit)}
