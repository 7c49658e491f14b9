"""TaskService -- 任务增删改查业务逻辑

- 创建：校验 -> 分配 ULID -> 规范化可选字段 -> 追加落盘
- 更新：partial merge，只校验出现的字段，刷新 updatedAt
- 删除：返回被删除的记录
所有变更在 StoreGroup.write_lock 内完成 read-modify-write。
"""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

import structlog
from taskboard.core.exceptions import TaskNotFoundError
from taskboard.core.models import Subtask, SubtaskInput, Task
from taskboard.core.store import StoreGroup
from taskboard.core.validation import validate_create, validate_update
from ulid import ULID

log = structlog.get_logger()


class TaskService:
    """任务业务服务"""

    def __init__(self, store_group: StoreGroup) -> None:
        self._stores = store_group

    async def list_tasks(
        self,
        status: str | None = None,
        priority: str | None = None,
        assigned_to: str | None = None,
        created_by: str | None = None,
        assigned_by: str | None = None,
    ) -> list[Task]:
        """查询任务列表，保持存储顺序

        status / priority 精确匹配；assigned_to 与 created_by / assigned_by 的
        name 做大小写不敏感的子串匹配，缺少该字段的记录被排除。
        """
        tasks = await self._stores.task_store.list_tasks()

        if status:
            tasks = [t for t in tasks if t.status == status]
        if priority:
            tasks = [t for t in tasks if t.priority == priority]
        if assigned_to:
            needle = assigned_to.lower()
            tasks = [
                t for t in tasks
                if t.assigned_to is not None and needle in t.assigned_to.lower()
            ]
        if created_by:
            needle = created_by.lower()
            tasks = [
                t for t in tasks
                if t.created_by is not None and needle in t.created_by.name.lower()
            ]
        if assigned_by:
            needle = assigned_by.lower()
            tasks = [
                t for t in tasks
                if t.assigned_by is not None and needle in t.assigned_by.name.lower()
            ]
        return tasks

    async def get_task(self, task_id: str) -> Task:
        """查询任务详情

        Raises:
            TaskNotFoundError: 任务不存在
        """
        task = await self._stores.task_store.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def create_task(self, payload: Any) -> Task:
        """创建任务

        Args:
            payload: 请求体（camelCase JSON 对象）

        Returns:
            新创建的 Task

        Raises:
            TaskValidationError: 字段缺失或非法
        """
        data = validate_create(payload)

        now = datetime.now(UTC)
        task_id = str(ULID())
        task = Task(
            id=task_id,
            title=data.title,
            description=data.description,
            status=data.status,
            priority=data.priority,
            due_date=data.due_date,
            assigned_to=data.assigned_to,
            subtasks=assign_subtask_ids(task_id, data.subtasks),
            created_at=now,
            updated_at=now,
            created_by=data.created_by,
            assigned_by=data.assigned_by,
        )

        async with self._stores.write_lock:
            await self._stores.task_store.insert_task(task)

        log.info("task_created", task_id=task_id, status=task.status.value)
        return task

    async def update_task(self, task_id: str, payload: Any) -> Task:
        """更新任务（partial merge）

        id / createdAt 不可修改；subtasks 出现时整体替换。

        Raises:
            TaskValidationError: 出现的字段非法
            TaskNotFoundError: 任务不存在
        """
        patch = validate_update(payload)
        changes = patch.changes()

        async with self._stores.write_lock:
            current = await self._stores.task_store.get_task(task_id)
            if current is None:
                raise TaskNotFoundError(task_id)

            if "subtasks" in changes:
                changes["subtasks"] = assign_subtask_ids(
                    task_id, changes["subtasks"], existing=current.subtasks
                )
            changes["updated_at"] = next_timestamp(current.updated_at)

            updated = current.model_copy(update=changes)
            if not await self._stores.task_store.replace_task(updated):
                raise TaskNotFoundError(task_id)

        log.info("task_updated", task_id=task_id, fields=sorted(patch.model_fields_set))
        return updated

    async def delete_task(self, task_id: str) -> Task:
        """删除任务并返回被删除的记录

        Raises:
            TaskNotFoundError: 任务不存在
        """
        async with self._stores.write_lock:
            removed = await self._stores.task_store.remove_task(task_id)

        if removed is None:
            raise TaskNotFoundError(task_id)

        log.info("task_deleted", task_id=task_id)
        return removed


def assign_subtask_ids(
    task_id: str,
    inputs: Iterable[SubtaskInput],
    existing: Iterable[Subtask] = (),
) -> list[Subtask]:
    """为子任务分配 <taskId>.<n> 形式的 id

    输入中引用已有子任务 id 的条目保留原 id，其余按现有最大 n 继续递增。
    """
    inputs = list(inputs)
    existing_ids = {s.id for s in existing}
    sequences = [s.sequence for s in existing if s.sequence is not None]
    next_seq = max(sequences, default=0) + 1

    result: list[Subtask] = []
    used: set[str] = set()
    for item in inputs:
        if item.id is not None and item.id in existing_ids and item.id not in used:
            subtask_id = item.id
        else:
            subtask_id = f"{task_id}.{next_seq}"
            next_seq += 1
        used.add(subtask_id)
        result.append(
            Subtask(
                id=subtask_id,
                title=item.title,
                description=item.description,
                completed=item.completed,
            )
        )
    return result


def next_timestamp(previous: datetime) -> datetime:
    """返回严格晚于 previous 的当前时间"""
    now = datetime.now(UTC)
    if previous.tzinfo is None:
        previous = previous.replace(tzinfo=UTC)
    if now <= previous:
        now = previous + timedelta(microseconds=1)
    return now
