"""TaskStore JSON 文件实现

整个集合保存为一个 JSON 数组：每次读取全量解析，每次变更全量重写。
写入先落到同目录临时文件，再 os.replace 原子替换，
读者只会看到旧文档或新文档。
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path

import structlog
from pydantic import TypeAdapter, ValidationError

from ..exceptions import StoreError
from ..models.task import Task

log = structlog.get_logger()

_TASK_LIST = TypeAdapter(list[Task])


class JsonFileTaskStore:
    """TaskStore 的 JSON 文件实现"""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    async def list_tasks(self) -> list[Task]:
        """按文件中的顺序返回全部任务"""
        return await asyncio.to_thread(self._read)

    async def get_task(self, task_id: str) -> Task | None:
        """根据 id 查询任务（按字符串精确匹配）"""
        for task in await self.list_tasks():
            if task.id == task_id:
                return task
        return None

    async def insert_task(self, task: Task) -> None:
        """追加任务到数组末尾"""
        tasks = await self.list_tasks()
        if any(t.id == task.id for t in tasks):
            raise StoreError(f"Duplicate task id: {task.id}")
        tasks.append(task)
        await self.write_all(tasks)

    async def replace_task(self, task: Task) -> bool:
        """原位替换同 id 的任务，保持数组顺序"""
        tasks = await self.list_tasks()
        for index, existing in enumerate(tasks):
            if existing.id == task.id:
                tasks[index] = task
                await self.write_all(tasks)
                return True
        return False

    async def remove_task(self, task_id: str) -> Task | None:
        """删除任务并返回被删除的记录"""
        tasks = await self.list_tasks()
        for index, existing in enumerate(tasks):
            if existing.id == task_id:
                removed = tasks.pop(index)
                await self.write_all(tasks)
                return removed
        return None

    async def write_all(self, tasks: list[Task]) -> None:
        """整体重写文档"""
        await asyncio.to_thread(self._write, tasks)

    async def ensure_exists(self) -> bool:
        """文件不存在时写入空数组，返回是否新建"""
        if self._path.exists():
            return False
        await self.write_all([])
        return True

    def _read(self) -> list[Task]:
        # 文件不存在视为空集合
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except UnicodeDecodeError as e:
            raise StoreError(f"Malformed JSON in {self._path}", e) from e
        except OSError as e:
            raise StoreError(f"Failed to read {self._path}", e) from e

        if not raw.strip():
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreError(f"Malformed JSON in {self._path}", e) from e

        if not isinstance(data, list):
            raise StoreError(f"Expected a JSON array in {self._path}")

        try:
            return _TASK_LIST.validate_python(data)
        except ValidationError as e:
            raise StoreError(f"Invalid task record in {self._path}", e) from e

    def _write(self, tasks: list[Task]) -> None:
        content = json.dumps(
            [task.to_document() for task in tasks],
            indent=2,
            ensure_ascii=False,
        )
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_name = fh.name
                fh.write(content)
                fh.write("\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as e:
            raise StoreError(f"Failed to write {self._path}", e) from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    log.warning("tmp_file_cleanup_failed", path=tmp_name)
