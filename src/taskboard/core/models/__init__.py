"""Taskboard Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import TaskPriority, TaskStatus, allowed_values
from .payloads import REQUIRED_FIELDS, SubtaskInput, TaskCreate, TaskUpdate
from .task import PersonRef, Subtask, Task

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskPriority",
    "allowed_values",
    # Task
    "Task",
    "Subtask",
    "PersonRef",
    # Payloads
    "REQUIRED_FIELDS",
    "TaskCreate",
    "TaskUpdate",
    "SubtaskInput",
]
