"""集成测试共享 fixture"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from brain.core.mirror import MirrorNotifier, VaultMirror
from brain.core.store import create_store_group
from httpx import ASGITransport, AsyncClient


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path, tmp_vault_dir: Path):
    """集成测试用 FastAPI app（启用 Vault 镜像）"""
    os.environ["BRAIN_DB_PATH"] = str(tmp_path / "test.db")
    os.environ["BRAIN_VAULT_PATH"] = str(tmp_vault_dir)

    from brain.gateway.main import create_app

    app = create_app()

    store_group = await create_store_group(tmp_path / "test.db")
    app.state.store_group = store_group
    app.state.notifier = MirrorNotifier(VaultMirror(tmp_vault_dir))

    yield app

    await store_group.close()
    os.environ.pop("BRAIN_DB_PATH", None)
    os.environ.pop("BRAIN_VAULT_PATH", None)


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
