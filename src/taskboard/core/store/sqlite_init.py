"""SQLite 数据库初始化

PRAGMA 配置 + tasks 表 DDL + 索引创建。
每个任务一行，doc 列保存与 JSON 文档相同的记录结构。
"""

import aiosqlite

# tasks 表 DDL
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id        TEXT PRIMARY KEY,
    position  INTEGER NOT NULL,
    doc       TEXT NOT NULL
);
"""

_TASKS_INDEXES = [
    # 保持插入顺序
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_tasks_position ON tasks(position);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    await conn.execute(_TASKS_DDL)
    for idx_sql in _TASKS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效"""
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
