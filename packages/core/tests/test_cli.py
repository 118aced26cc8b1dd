"""CLI 命令测试 -- init-db / resync-vault"""

from datetime import UTC, datetime
from pathlib import Path

import pytest
from brain.core import __main__ as cli
from brain.core.models import Note, Task
from brain.core.store import create_store_group


class TestCli:
    async def test_init_database_creates_file(self, tmp_path: Path, monkeypatch):
        db_path = tmp_path / "nested" / "brain.db"
        monkeypatch.setenv("BRAIN_DB_PATH", str(db_path))

        await cli.init_database()

        assert db_path.exists()

    async def test_resync_vault_writes_all_entities(self, tmp_path: Path, monkeypatch):
        db_path = tmp_path / "brain.db"
        vault = tmp_path / "vault"
        monkeypatch.setenv("BRAIN_DB_PATH", str(db_path))
        monkeypatch.setenv("BRAIN_VAULT_PATH", str(vault))

        store_group = await create_store_group(db_path)
        now = datetime.now(UTC)
        async with store_group.transaction():
            await store_group.task_store.create_task(
                Task(id="DEMO-001", title="t", project="demo", created_at=now)
            )
            await store_group.note_store.create_note(
                Note(id="note_1", content="n", created_at=now)
            )
        await store_group.close()

        written = await cli.resync_vault()

        assert written == 2
        assert (vault / "brain" / "tasks" / "DEMO-001.md").exists()
        assert (vault / "brain" / "notes" / "note_1.md").exists()

    def test_unknown_command_exits(self, monkeypatch):
        monkeypatch.setattr("sys.argv", ["brain", "bogus"])
        with pytest.raises(SystemExit):
            cli.main()

    def test_resync_requires_vault(self, monkeypatch):
        monkeypatch.delenv("BRAIN_VAULT_PATH", raising=False)
        monkeypatch.setattr("sys.argv", ["brain", "resync-vault"])
        with pytest.raises(SystemExit):
            cli.main()
