"""TagSet 值对象 -- 有序、去重、已清洗的短字符串集合

所有写入数据库的标签都经过 TagSet 构造校验，
因此读取时直接反序列化，无需容错解析。
"""

from collections.abc import Iterator

from pydantic import RootModel, field_validator

from ..sanitize import TAG_MAX_LENGTH, TAGS_MAX_COUNT, sanitize_tag


class TagSet(RootModel[list[str]]):
    """有序标签集合

    构造时：逐个清洗（去空白、小写、仅保留 [a-z0-9_-]），
    丢弃空标签和超长标签，按首次出现去重，最多保留 20 个。
    """

    root: list[str] = []

    @field_validator("root")
    @classmethod
    def _normalize(cls, value: list[str]) -> list[str]:
        seen: set[str] = set()
        tags: list[str] = []
        for raw in value:
            tag = sanitize_tag(raw)
            if not tag or len(tag) > TAG_MAX_LENGTH or tag in seen:
                continue
            seen.add(tag)
            tags.append(tag)
        return tags[:TAGS_MAX_COUNT]

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __contains__(self, tag: object) -> bool:
        return tag in self.root

    def starting_with(self, partial: str) -> list[str]:
        """返回以 partial 开头的标签（大小写不敏感）"""
        lowered = partial.lower()
        return [tag for tag in self.root if tag.lower().startswith(lowered)]
