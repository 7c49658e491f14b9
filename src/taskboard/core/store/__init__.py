"""Taskboard Core Store -- 任务记录持久化

提供工厂函数按配置创建 Store 实例组。
"""

import asyncio
from pathlib import Path

import aiosqlite

from ..config import TaskboardConfig
from .json_store import JsonFileTaskStore
from .protocols import TaskStore
from .sqlite_init import init_db
from .sqlite_store import SqliteTaskStore


class StoreGroup:
    """Store 实例组

    write_lock 串行化所有 read-modify-write 变更，
    避免并发请求互相覆盖。
    """

    def __init__(
        self,
        task_store: TaskStore,
        data_dir: Path,
        conn: aiosqlite.Connection | None = None,
    ) -> None:
        self.task_store = task_store
        self.data_dir = data_dir
        self.conn = conn
        self.write_lock = asyncio.Lock()

    async def close(self) -> None:
        """释放数据库连接（JSON 后端无需清理）"""
        if self.conn is not None:
            await self.conn.close()
            self.conn = None


async def open_sqlite_store(db_path: str | Path) -> tuple[SqliteTaskStore, aiosqlite.Connection]:
    """打开并初始化 SQLite 存储"""
    db_file = Path(db_path)
    db_file.parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(str(db_file))
    await init_db(conn)
    return SqliteTaskStore(conn), conn


async def create_store_group(config: TaskboardConfig) -> StoreGroup:
    """按配置创建 Store 实例组

    Args:
        config: 运行配置，store_backend 决定使用 JSON 文件或 SQLite

    Returns:
        StoreGroup 实例
    """
    if config.store_backend == "sqlite":
        store, conn = await open_sqlite_store(config.db_path)
        return StoreGroup(task_store=store, data_dir=config.db_path.parent, conn=conn)

    config.tasks_file.parent.mkdir(parents=True, exist_ok=True)
    return StoreGroup(
        task_store=JsonFileTaskStore(config.tasks_file),
        data_dir=config.tasks_file.parent,
    )


__all__ = [
    "StoreGroup",
    "TaskStore",
    "create_store_group",
    "open_sqlite_store",
    "JsonFileTaskStore",
    "SqliteTaskStore",
    "init_db",
]
