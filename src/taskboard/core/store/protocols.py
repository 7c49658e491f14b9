"""Store Protocol 接口定义

HTTP 层只依赖 TaskStore 接口，不接触文件路径；
JSON 文件与 SQLite 两种实现可互换。
"""

from typing import Protocol

from ..models.task import Task


class TaskStore(Protocol):
    """Task 存储接口

    读写失败抛出 StoreError。
    """

    async def list_tasks(self) -> list[Task]:
        """按存储顺序返回全部任务"""
        ...

    async def get_task(self, task_id: str) -> Task | None:
        """根据 id 查询任务"""
        ...

    async def insert_task(self, task: Task) -> None:
        """追加任务到集合末尾"""
        ...

    async def replace_task(self, task: Task) -> bool:
        """整体替换同 id 的任务，不存在时返回 False"""
        ...

    async def remove_task(self, task_id: str) -> Task | None:
        """删除任务并返回被删除的记录，不存在时返回 None"""
        ...
