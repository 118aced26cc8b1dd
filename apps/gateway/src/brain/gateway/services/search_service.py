"""SearchService -- 跨实体检索与联想词

只读服务。依次扫描 notes / artifacts / tasks（每类最多 limit 条），
逐条评分并截取摘要，合并后按评分稳定降序排序，再截断到 limit。
同分时保持扫描顺序：notes、artifacts、tasks。
"""

from collections.abc import Iterable

import structlog
from brain.core.config import SEARCH_DEFAULT_LIMIT, SNIPPET_MAX_LENGTH, SUGGESTION_MIN_LENGTH
from brain.core.models import SearchEntityType, SearchResult, SearchResultType
from brain.core.relevance import calculate_score, create_snippet
from brain.core.store import StoreGroup

log = structlog.get_logger()

ALL_ENTITY_TYPES: frozenset[SearchEntityType] = frozenset(SearchEntityType)


def _pick_snippet_source(primary: str, secondary: str | None, query: str) -> str:
    """标题命中时取标题，否则取正文/描述（为空时退回标题）"""
    if query.lower() in primary.lower():
        return primary
    return secondary if secondary else primary


class SearchService:
    """跨实体检索服务"""

    def __init__(
        self,
        store_group: StoreGroup,
        snippet_max_length: int = SNIPPET_MAX_LENGTH,
    ) -> None:
        self._stores = store_group
        self._snippet_max_length = snippet_max_length

    async def search(
        self,
        q: str,
        types: Iterable[SearchEntityType | str] | None = None,
        project: str | None = None,
        limit: int = SEARCH_DEFAULT_LIMIT,
    ) -> list[SearchResult]:
        """检索 notes / artifacts / tasks

        Args:
            q: 查询词（去除首尾空白后为空则返回空列表）
            types: 检索范围，默认全部三类
            project: 项目精确过滤
            limit: 每类扫描上限，同时也是最终结果上限

        Returns:
            按评分降序排列的检索结果
        """
        if not q or not q.strip():
            return []

        wanted = (
            ALL_ENTITY_TYPES
            if types is None
            else frozenset(SearchEntityType(t) for t in types)
        )
        results: list[SearchResult] = []

        if SearchEntityType.NOTES in wanted:
            for note in await self._stores.note_store.search_notes(q, project, limit):
                results.append(
                    SearchResult(
                        type=SearchResultType.NOTE,
                        id=note.id,
                        snippet=create_snippet(note.content, q, self._snippet_max_length),
                        score=calculate_score(note.content, q),
                        project=note.project,
                    )
                )

        if SearchEntityType.ARTIFACTS in wanted:
            for artifact in await self._stores.artifact_store.search_artifacts(q, project, limit):
                source = _pick_snippet_source(artifact.title, artifact.content, q)
                results.append(
                    SearchResult(
                        type=SearchResultType.ARTIFACT,
                        id=artifact.id,
                        snippet=create_snippet(source, q, self._snippet_max_length),
                        score=calculate_score(f"{artifact.title} {artifact.content}", q),
                        project=artifact.project,
                    )
                )

        if SearchEntityType.TASKS in wanted:
            for task in await self._stores.task_store.search_tasks(q, project, limit):
                source = _pick_snippet_source(task.title, task.description, q)
                results.append(
                    SearchResult(
                        type=SearchResultType.TASK,
                        id=task.id,
                        snippet=create_snippet(source, q, self._snippet_max_length),
                        score=calculate_score(f"{task.title} {task.description or ''}", q),
                        project=task.project,
                    )
                )

        # list.sort 是稳定排序，同分保持扫描顺序
        results.sort(key=lambda r: r.score, reverse=True)
        log.debug("search_completed", query_length=len(q), result_count=len(results))
        return results[:limit]

    async def get_suggestions(self, partial: str, limit: int = 5) -> list[str]:
        """联想词：笔记标签前缀匹配（大小写不敏感）+ Artifact 标题前缀匹配（大小写敏感）

        partial 少于 2 个字符时返回空列表。结果去重并保持首次出现顺序。
        """
        if not partial or len(partial) < SUGGESTION_MIN_LENGTH:
            return []

        suggestions: dict[str, None] = {}

        for tag_set in await self._stores.note_store.list_tag_sets_matching(partial, limit):
            for tag in tag_set.starting_with(partial):
                suggestions.setdefault(tag, None)

        for title in await self._stores.artifact_store.list_titles_with_prefix(partial, limit):
            suggestions.setdefault(title, None)

        return list(suggestions)[:limit]
