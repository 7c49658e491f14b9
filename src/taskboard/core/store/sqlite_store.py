"""TaskStore SQLite 实现

与 JsonFileTaskStore 行为一致，可通过 TASKBOARD_STORE_BACKEND=sqlite 切换。
aiosqlite.Error 统一包装为 StoreError。
"""

import json

import aiosqlite
from pydantic import ValidationError

from ..exceptions import StoreError
from ..models.task import Task


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def list_tasks(self) -> list[Task]:
        """按插入顺序返回全部任务"""
        try:
            cursor = await self._conn.execute(
                "SELECT doc FROM tasks ORDER BY position"
            )
            rows = await cursor.fetchall()
        except aiosqlite.Error as e:
            raise StoreError("Failed to read tasks", e) from e
        return [self._row_to_task(row) for row in rows]

    async def get_task(self, task_id: str) -> Task | None:
        """根据 id 查询任务"""
        try:
            cursor = await self._conn.execute(
                "SELECT doc FROM tasks WHERE id = ?",
                (task_id,),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StoreError(f"Failed to read task {task_id}", e) from e
        if row is None:
            return None
        return self._row_to_task(row)

    async def insert_task(self, task: Task) -> None:
        """追加任务（position = MAX + 1）"""
        try:
            await self._conn.execute(
                """
                INSERT INTO tasks (id, position, doc)
                VALUES (?, (SELECT COALESCE(MAX(position), 0) + 1 FROM tasks), ?)
                """,
                (task.id, self._dump(task)),
            )
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            raise StoreError(f"Failed to insert task {task.id}", e) from e

    async def replace_task(self, task: Task) -> bool:
        """整体替换同 id 的任务，position 不变"""
        try:
            cursor = await self._conn.execute(
                "UPDATE tasks SET doc = ? WHERE id = ?",
                (self._dump(task), task.id),
            )
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            raise StoreError(f"Failed to update task {task.id}", e) from e
        return cursor.rowcount > 0

    async def remove_task(self, task_id: str) -> Task | None:
        """删除任务并返回被删除的记录"""
        task = await self.get_task(task_id)
        if task is None:
            return None
        try:
            await self._conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            raise StoreError(f"Failed to delete task {task_id}", e) from e
        return task

    @staticmethod
    def _dump(task: Task) -> str:
        return json.dumps(task.to_document(), ensure_ascii=False)

    @staticmethod
    def _row_to_task(row) -> Task:
        """将数据库行转换为 Task 模型"""
        try:
            return Task.model_validate(json.loads(row[0]))
        except (json.JSONDecodeError, ValidationError) as e:
            raise StoreError("Invalid task record in database", e) from e
