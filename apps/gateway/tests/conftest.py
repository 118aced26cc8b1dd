"""apps/gateway 测试配置 -- FastAPI app + httpx AsyncClient + StoreGroup fixture"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio
from brain.core.mirror import MirrorNotifier, VaultMirror
from brain.core.store import StoreGroup, create_store_group
from httpx import ASGITransport, AsyncClient


@pytest_asyncio.fixture
async def gateway_tmp_dir(tmp_path: Path) -> Path:
    """Gateway 临时数据目录"""
    (tmp_path / "sqlite").mkdir(parents=True, exist_ok=True)
    (tmp_path / "vault").mkdir(parents=True, exist_ok=True)
    return tmp_path


@pytest_asyncio.fixture
async def store_group(gateway_tmp_dir: Path) -> AsyncGenerator[StoreGroup, None]:
    """服务层测试用 StoreGroup"""
    group = await create_store_group(gateway_tmp_dir / "sqlite" / "test.db")
    yield group
    await group.close()


@pytest_asyncio.fixture
async def app(gateway_tmp_dir: Path, store_group: StoreGroup):
    """创建测试用 FastAPI app 实例（手动初始化 app.state，绕过 lifespan）"""
    os.environ["BRAIN_DB_PATH"] = str(gateway_tmp_dir / "sqlite" / "test.db")
    os.environ["BRAIN_VAULT_PATH"] = str(gateway_tmp_dir / "vault")

    from brain.gateway.main import create_app

    application = create_app()
    application.state.store_group = store_group
    application.state.notifier = MirrorNotifier(VaultMirror(gateway_tmp_dir / "vault"))
    yield application

    for key in ["BRAIN_DB_PATH", "BRAIN_VAULT_PATH"]:
        os.environ.pop(key, None)


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
