"""NoteStore / ArtifactStore 单元测试"""

from datetime import UTC, datetime, timedelta

from brain.core.models import Artifact, ContentType, Note, TagSet
from brain.core.store import StoreGroup

_BASE = datetime(2026, 1, 1, tzinfo=UTC)


async def _note(
    store_group: StoreGroup,
    note_id: str,
    content: str,
    *,
    project: str | None = None,
    tags: list[str] | None = None,
    offset_seconds: int = 0,
) -> Note:
    note = Note(
        id=note_id,
        content=content,
        project=project,
        tags=TagSet(tags or []),
        created_at=_BASE + timedelta(seconds=offset_seconds),
    )
    async with store_group.transaction():
        await store_group.note_store.create_note(note)
    return note


async def _artifact(
    store_group: StoreGroup,
    artifact_id: str,
    title: str,
    content: str = "body",
    *,
    content_type: ContentType = ContentType.MARKDOWN,
    project: str | None = None,
    offset_seconds: int = 0,
) -> Artifact:
    artifact = Artifact(
        id=artifact_id,
        title=title,
        content=content,
        content_type=content_type,
        project=project,
        created_at=_BASE + timedelta(seconds=offset_seconds),
    )
    async with store_group.transaction():
        await store_group.artifact_store.create_artifact(artifact)
    return artifact


class TestNoteStore:
    async def test_create_and_get(self, store_group: StoreGroup):
        note = await _note(store_group, "note_1", "hello", project="demo", tags=["a", "b"])
        loaded = await store_group.note_store.get_note("note_1")
        assert loaded == note
        assert list(loaded.tags) == ["a", "b"]

    async def test_get_missing(self, store_group: StoreGroup):
        assert await store_group.note_store.get_note("note_missing") is None

    async def test_update(self, store_group: StoreGroup):
        note = await _note(store_group, "note_1", "hello")
        changed = note.model_copy(
            update={"content": "bye", "tags": TagSet(["x"]), "updated_at": _BASE}
        )
        async with store_group.transaction():
            await store_group.note_store.update_note(changed)
        loaded = await store_group.note_store.get_note("note_1")
        assert loaded.content == "bye"
        assert list(loaded.tags) == ["x"]
        assert loaded.updated_at == _BASE

    async def test_delete(self, store_group: StoreGroup):
        await _note(store_group, "note_1", "hello")
        async with store_group.transaction():
            assert await store_group.note_store.delete_note("note_1") is True
            assert await store_group.note_store.delete_note("note_1") is False

    async def test_list_newest_first_with_total(self, store_group: StoreGroup):
        for i in range(3):
            await _note(store_group, f"note_{i}", f"n{i}", project="demo", offset_seconds=i)
        await _note(store_group, "note_x", "other", project="other", offset_seconds=10)

        notes, total = await store_group.note_store.list_notes("demo", None, 2, 0)
        assert total == 3
        assert [n.id for n in notes] == ["note_2", "note_1"]

    async def test_list_contains_filter(self, store_group: StoreGroup):
        await _note(store_group, "note_1", "Fix the Parser")
        await _note(store_group, "note_2", "lunch")
        notes, total = await store_group.note_store.list_notes(None, "parser", 20, 0)
        assert total == 1
        assert notes[0].id == "note_1"

    async def test_search_with_project(self, store_group: StoreGroup):
        await _note(store_group, "note_1", "rust notes", project="demo")
        await _note(store_group, "note_2", "rust again", project="other")
        results = await store_group.note_store.search_notes("RUST", project="demo")
        assert [n.id for n in results] == ["note_1"]

    async def test_tag_sets_matching(self, store_group: StoreGroup):
        await _note(store_group, "note_1", "a", tags=["python", "web"])
        await _note(store_group, "note_2", "b", tags=["rust"])
        await _note(store_group, "note_3", "c", tags=["typing"])

        tag_sets = await store_group.note_store.list_tag_sets_matching("py", 5)
        assert [list(t) for t in tag_sets] == [["python", "web"]]


class TestArtifactStore:
    async def test_create_and_get(self, store_group: StoreGroup):
        artifact = await _artifact(
            store_group, "art_1", "Snippet", "print(1)", content_type=ContentType.CODE
        )
        assert await store_group.artifact_store.get_artifact("art_1") == artifact

    async def test_update_and_delete(self, store_group: StoreGroup):
        artifact = await _artifact(store_group, "art_1", "Old")
        async with store_group.transaction():
            await store_group.artifact_store.update_artifact(
                artifact.model_copy(update={"title": "New", "updated_at": _BASE})
            )
        assert (await store_group.artifact_store.get_artifact("art_1")).title == "New"

        async with store_group.transaction():
            assert await store_group.artifact_store.delete_artifact("art_1") is True
        assert await store_group.artifact_store.get_artifact("art_1") is None

    async def test_list_filters(self, store_group: StoreGroup):
        await _artifact(store_group, "art_1", "a", project="demo", offset_seconds=0)
        await _artifact(
            store_group,
            "art_2",
            "b",
            project="demo",
            content_type=ContentType.JSON,
            offset_seconds=1,
        )
        await _artifact(store_group, "art_3", "c", project="other", offset_seconds=2)

        items, total = await store_group.artifact_store.list_artifacts("demo", None, 20, 0)
        assert total == 2
        assert [a.id for a in items] == ["art_2", "art_1"]

        items, total = await store_group.artifact_store.list_artifacts(None, "json", 20, 0)
        assert total == 1
        assert items[0].id == "art_2"

    async def test_search_title_or_content_scoped_by_project(self, store_group: StoreGroup):
        await _artifact(store_group, "art_1", "Deploy guide", project="demo")
        await _artifact(store_group, "art_2", "Notes", "how to deploy", project="demo")
        await _artifact(store_group, "art_3", "Deploy other", project="other")

        results = await store_group.artifact_store.search_artifacts("deploy", project="demo")
        assert sorted(a.id for a in results) == ["art_1", "art_2"]

    async def test_titles_with_prefix_case_sensitive(self, store_group: StoreGroup):
        await _artifact(store_group, "art_1", "Docker compose")
        await _artifact(store_group, "art_2", "docker tips")
        await _artifact(store_group, "art_3", "Docker compose")

        assert await store_group.artifact_store.list_titles_with_prefix("Doc", 5) == [
            "Docker compose"
        ]
