"""CLI 入口模块 -- python -m taskboard.core <command>

支持的命令：
  init-store         为当前配置的后端创建空存储
  migrate-to-sqlite  将 JSON 文件中的任务复制到 SQLite
"""

import asyncio
import sys

from .config import load_config
from .exceptions import StoreError

USAGE = """用法: python -m taskboard.core <command>
命令:
  init-store         为当前配置的后端创建空存储
  migrate-to-sqlite  将 JSON 文件中的任务复制到 SQLite"""


def main(argv: list[str] | None = None) -> int:
    """CLI 主入口，返回退出码"""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print(USAGE)
        return 1

    command = args[0]

    if command == "init-store":
        asyncio.run(init_store())
    elif command == "migrate-to-sqlite":
        return asyncio.run(migrate_to_sqlite())
    else:
        print(f"未知命令: {command}")
        print("可用命令: init-store, migrate-to-sqlite")
        return 1
    return 0


async def init_store() -> None:
    """创建空存储（已存在时不覆盖）"""
    from .store import JsonFileTaskStore, open_sqlite_store

    config = load_config()
    if config.store_backend == "sqlite":
        _, conn = await open_sqlite_store(config.db_path)
        await conn.close()
        print(f"SQLite 存储已就绪: {config.db_path}")
        return

    created = await JsonFileTaskStore(config.tasks_file).ensure_exists()
    if created:
        print(f"已创建空任务文件: {config.tasks_file}")
    else:
        print(f"任务文件已存在: {config.tasks_file}")


async def migrate_to_sqlite() -> int:
    """按原顺序复制任务，跳过 SQLite 中已存在的 id

    Returns:
        退出码：0 成功，1 读取或写入存储失败
    """
    from .store import JsonFileTaskStore, open_sqlite_store

    config = load_config()
    print(f"JSON 文件: {config.tasks_file}")
    print(f"SQLite 路径: {config.db_path}")

    try:
        tasks = await JsonFileTaskStore(config.tasks_file).list_tasks()
    except StoreError as e:
        print(f"读取 JSON 文件失败: {e}")
        return 1

    store, conn = await open_sqlite_store(config.db_path)
    copied = 0
    try:
        for task in tasks:
            if await store.get_task(task.id) is not None:
                continue
            await store.insert_task(task)
            copied += 1
    except StoreError as e:
        print(f"写入 SQLite 失败（已复制 {copied} 条）: {e}")
        return 1
    finally:
        await conn.close()

    print(f"迁移完成，复制 {copied} 条任务（共 {len(tasks)} 条）")
    return 0


if __name__ == "__main__":
    sys.exit(main())
