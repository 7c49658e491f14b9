"""枚举定义 -- TaskStatus / TaskPriority

取值即 wire 格式（小写，连字符分隔）。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """任务状态"""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(StrEnum):
    """任务优先级"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


def allowed_values(enum_cls: type[StrEnum]) -> str:
    """枚举取值列表，用于错误提示，如 "low, medium, high, urgent" """
    return ", ".join(member.value for member in enum_cls)
