"""core 测试配置 -- 存储实例 + Task 工厂"""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime
from pathlib import Path

import pytest
import pytest_asyncio
from taskboard.core.models import Task, TaskPriority, TaskStatus
from taskboard.core.store import JsonFileTaskStore, SqliteTaskStore, open_sqlite_store


@pytest.fixture
def make_task() -> Callable[..., Task]:
    """构造 Task，未指定字段使用默认值"""

    def _make(task_id: str = "01JTEST000000000000000001", **overrides) -> Task:
        now = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)
        fields = {
            "id": task_id,
            "title": "写周报",
            "description": "整理本周进展",
            "status": TaskStatus.PENDING,
            "priority": TaskPriority.MEDIUM,
            "created_at": now,
            "updated_at": now,
        }
        fields.update(overrides)
        return Task(**fields)

    return _make


@pytest.fixture
def json_store(tasks_file: Path) -> JsonFileTaskStore:
    """JSON 文件存储（文件尚未创建）"""
    return JsonFileTaskStore(tasks_file)


@pytest_asyncio.fixture
async def sqlite_store(tmp_path: Path) -> AsyncGenerator[SqliteTaskStore, None]:
    """已初始化的 SQLite 存储"""
    store, conn = await open_sqlite_store(tmp_path / "core_test.db")
    yield store
    await conn.close()
