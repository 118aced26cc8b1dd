"""检索相关度算法 -- 纯函数，无 I/O

评分规则（针对一条记录被检索的文本）：
1. 非重叠命中次数 * 0.2，上限 1.0
2. 文本以查询词开头：+0.3
3. 查询词作为完整单词出现：+0.2
4. 最终截断到 [0, 1]

摘要以首个命中位置为中心截取 max_length 长度窗口，
再向内对齐到空格边界，被截断的一侧补 "..."。
"""

import re

from .config import SNIPPET_MAX_LENGTH
from .sanitize import truncate

OCCURRENCE_WEIGHT = 0.2
PREFIX_BOOST = 0.3
WHOLE_WORD_BOOST = 0.2
ELLIPSIS = "..."


def count_occurrences(text: str, query: str) -> int:
    """大小写不敏感的非重叠命中次数"""
    if not query:
        return 0
    return text.lower().count(query.lower())


def calculate_score(text: str, query: str) -> float:
    """计算 text 对 query 的相关度，范围 [0, 1]"""
    if not query:
        return 0.0
    lower_text = text.lower()
    lower_query = query.lower()

    score = min(count_occurrences(lower_text, lower_query) * OCCURRENCE_WEIGHT, 1.0)

    if lower_text.startswith(lower_query):
        score += PREFIX_BOOST

    if re.search(rf"\b{re.escape(lower_query)}\b", text, re.IGNORECASE):
        score += WHOLE_WORD_BOOST

    return max(0.0, min(score, 1.0))


def create_snippet(text: str, query: str, max_length: int = SNIPPET_MAX_LENGTH) -> str:
    """围绕首个命中位置截取摘要

    Args:
        text: 原文
        query: 查询词
        max_length: 窗口长度

    Returns:
        摘要；未命中时返回截断到 max_length 的原文
    """
    index = text.lower().find(query.lower())
    if index == -1 or not query:
        return truncate(text, max_length)

    query_length = len(query)
    radius = max(0, (max_length - query_length) // 2)
    start = max(0, index - radius)
    end = min(len(text), index + query_length + radius)

    # 左边界前移到窗口内第一个空格之后（该空格须在命中之前）
    if start > 0:
        space_index = text.find(" ", start)
        if space_index != -1 and space_index < index:
            start = space_index + 1

    # 右边界回退到 end 及之前最后一个空格（该空格须在命中之后）
    if end < len(text):
        space_index = text.rfind(" ", 0, end + 1)
        if space_index > index + query_length:
            end = space_index

    snippet = text[start:end]
    if start > 0:
        snippet = ELLIPSIS + snippet
    if end < len(text):
        snippet = snippet + ELLIPSIS
    return snippet
