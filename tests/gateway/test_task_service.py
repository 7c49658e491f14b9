"""TaskService 测试

覆盖：
1. 创建 -> 查询 -> 更新 -> 查询 往返
2. 并发更新不同字段互不覆盖（write_lock 串行化）
3. 存储错误向上抛出，不降级为空列表
4. 子任务 id 分配与 updatedAt 单调递增
"""

import asyncio
from datetime import UTC, datetime, timedelta

import pytest
from taskboard.core.exceptions import StoreError, TaskNotFoundError, TaskValidationError
from taskboard.core.models import Subtask, SubtaskInput, TaskStatus
from taskboard.core.store import StoreGroup
from taskboard.gateway.services.task_service import (
    TaskService,
    assign_subtask_ids,
    next_timestamp,
)

_BASE = {
    "title": "季度规划",
    "description": "确定下季度目标",
    "status": "pending",
    "priority": "medium",
}


class TestTaskServiceLifecycle:
    async def test_create_get_update_get(self, store_group: StoreGroup):
        service = TaskService(store_group)

        created = await service.create_task(_BASE)
        fetched = await service.get_task(created.id)
        assert fetched == created

        updated = await service.update_task(created.id, {"status": "completed"})
        refetched = await service.get_task(created.id)

        assert refetched == updated
        assert refetched.status == TaskStatus.COMPLETED
        assert refetched.updated_at > created.updated_at
        assert refetched.created_at == created.created_at

    async def test_validation_error_leaves_store_untouched(self, store_group: StoreGroup):
        service = TaskService(store_group)

        with pytest.raises(TaskValidationError):
            await service.create_task({**_BASE, "status": "unknown"})

        assert await service.list_tasks() == []

    async def test_not_found(self, store_group: StoreGroup):
        service = TaskService(store_group)

        with pytest.raises(TaskNotFoundError):
            await service.get_task("missing")
        with pytest.raises(TaskNotFoundError):
            await service.update_task("missing", {"title": "x"})
        with pytest.raises(TaskNotFoundError):
            await service.delete_task("missing")

    async def test_assignee_filter_skips_unassigned(self, store_group: StoreGroup):
        service = TaskService(store_group)
        await service.create_task(_BASE)
        assigned = await service.create_task({**_BASE, "assignedTo": "Alice"})

        tasks = await service.list_tasks(assigned_to="ALICE")
        assert [t.id for t in tasks] == [assigned.id]


class TestTaskServiceConcurrency:
    async def test_concurrent_updates_are_not_lost(self, store_group: StoreGroup):
        service = TaskService(store_group)
        created = await service.create_task(_BASE)

        await asyncio.gather(
            service.update_task(created.id, {"title": "新标题"}),
            service.update_task(created.id, {"priority": "urgent"}),
            service.update_task(created.id, {"assignedTo": "Bob"}),
        )

        task = await service.get_task(created.id)
        assert task.title == "新标题"
        assert task.priority == "urgent"
        assert task.assigned_to == "Bob"

    async def test_concurrent_creates_are_all_kept(self, store_group: StoreGroup):
        service = TaskService(store_group)

        created = await asyncio.gather(
            *(service.create_task({**_BASE, "title": f"任务 {i}"}) for i in range(10))
        )

        stored = await service.list_tasks()
        assert {t.id for t in stored} == {t.id for t in created}


class TestTaskServiceStoreErrors:
    async def test_list_surfaces_store_error(self, store_group: StoreGroup, monkeypatch):
        async def broken_list():
            raise StoreError("disk on fire")

        monkeypatch.setattr(store_group.task_store, "list_tasks", broken_list)

        with pytest.raises(StoreError):
            await TaskService(store_group).list_tasks()


class TestSubtaskIds:
    def test_new_subtasks_numbered_from_one(self):
        result = assign_subtask_ids("T", [SubtaskInput(title="a"), SubtaskInput(title="b")])
        assert [s.id for s in result] == ["T.1", "T.2"]

    def test_client_ids_ignored_on_create(self):
        result = assign_subtask_ids("T", [SubtaskInput(id="X.9", title="a")])
        assert [s.id for s in result] == ["T.1"]

    def test_existing_ids_kept_and_new_continue_after_max(self):
        existing = [Subtask(id="T.1", title="a"), Subtask(id="T.4", title="b")]
        result = assign_subtask_ids(
            "T",
            [SubtaskInput(title="new"), SubtaskInput(id="T.1", title="a")],
            existing=existing,
        )
        assert [s.id for s in result] == ["T.5", "T.1"]

    def test_duplicate_reference_gets_fresh_id(self):
        existing = [Subtask(id="T.1", title="a")]
        result = assign_subtask_ids(
            "T",
            [SubtaskInput(id="T.1", title="a"), SubtaskInput(id="T.1", title="copy")],
            existing=existing,
        )
        assert [s.id for s in result] == ["T.1", "T.2"]


class TestNextTimestamp:
    def test_strictly_after_future_previous(self):
        future = datetime.now(UTC) + timedelta(hours=1)
        assert next_timestamp(future) == future + timedelta(microseconds=1)

    def test_naive_previous_treated_as_utc(self):
        previous = datetime(2020, 1, 1)
        assert next_timestamp(previous) > previous.replace(tzinfo=UTC)
