"""SqliteTaskStore 单元测试

与 JSON 后端保持一致的语义：插入顺序、原位替换、删除返回记录。
"""

from pathlib import Path

import aiosqlite
import pytest
from taskboard.core.exceptions import StoreError
from taskboard.core.models import TaskPriority
from taskboard.core.store import SqliteTaskStore
from taskboard.core.store.sqlite_init import init_db, verify_wal_mode


class TestSqliteInit:
    async def test_wal_mode_enabled(self, tmp_path: Path):
        conn = await aiosqlite.connect(str(tmp_path / "wal.db"))
        try:
            await init_db(conn)
            assert await verify_wal_mode(conn)
        finally:
            await conn.close()


class TestSqliteStore:
    """SQLite 后端 CRUD"""

    async def test_empty_store(self, sqlite_store: SqliteTaskStore):
        assert await sqlite_store.list_tasks() == []
        assert await sqlite_store.get_task("nope") is None

    async def test_insert_preserves_order(self, sqlite_store: SqliteTaskStore, make_task):
        for task_id in ("c", "a", "b"):
            await sqlite_store.insert_task(make_task(task_id))

        assert [t.id for t in await sqlite_store.list_tasks()] == ["c", "a", "b"]

    async def test_get_task_round_trip(self, sqlite_store: SqliteTaskStore, make_task):
        task = make_task("a", assigned_to="Alice")
        await sqlite_store.insert_task(task)

        assert await sqlite_store.get_task("a") == task

    async def test_duplicate_insert_raises(self, sqlite_store: SqliteTaskStore, make_task):
        await sqlite_store.insert_task(make_task("a"))
        with pytest.raises(StoreError):
            await sqlite_store.insert_task(make_task("a"))

    async def test_replace(self, sqlite_store: SqliteTaskStore, make_task):
        await sqlite_store.insert_task(make_task("a"))
        await sqlite_store.insert_task(make_task("b"))

        assert await sqlite_store.replace_task(make_task("a", priority=TaskPriority.URGENT))
        assert not await sqlite_store.replace_task(make_task("ghost"))

        tasks = await sqlite_store.list_tasks()
        assert [t.id for t in tasks] == ["a", "b"]
        assert tasks[0].priority == TaskPriority.URGENT

    async def test_remove(self, sqlite_store: SqliteTaskStore, make_task):
        await sqlite_store.insert_task(make_task("a"))

        removed = await sqlite_store.remove_task("a")

        assert removed is not None and removed.id == "a"
        assert await sqlite_store.remove_task("a") is None
        assert await sqlite_store.list_tasks() == []

    async def test_insert_after_remove_appends(self, sqlite_store: SqliteTaskStore, make_task):
        await sqlite_store.insert_task(make_task("a"))
        await sqlite_store.insert_task(make_task("b"))
        await sqlite_store.remove_task("b")
        await sqlite_store.insert_task(make_task("c"))

        assert [t.id for t in await sqlite_store.list_tasks()] == ["a", "c"]
