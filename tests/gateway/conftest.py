"""gateway 测试配置 -- FastAPI app + httpx AsyncClient"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskboard.core.config import load_config
from taskboard.core.store import StoreGroup, create_store_group


@pytest_asyncio.fixture
async def store_group() -> AsyncGenerator[StoreGroup, None]:
    """按当前环境配置创建 StoreGroup（默认 JSON 后端，位于 tmp_path）"""
    group = await create_store_group(load_config())
    yield group
    await group.close()


@pytest_asyncio.fixture
async def test_app(store_group: StoreGroup):
    """创建测试用 FastAPI app 实例"""
    from taskboard.gateway.main import create_app

    app = create_app()

    # 手动注入（绕过 lifespan）
    app.state.store_group = store_group
    yield app


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def create_task(client: AsyncClient):
    """通过 API 创建任务并返回记录的辅助函数"""

    async def _create(**overrides) -> dict:
        payload = {
            "title": "修复登录问题",
            "description": "用户反馈无法登录",
            "status": "pending",
            "priority": "high",
        }
        payload.update(overrides)
        resp = await client.post("/api/tasks", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _create
