"""Taskboard 异常体系

ValidationError -> 400，NotFound -> 404，StoreError -> 500。
"""


class TaskboardError(Exception):
    """Taskboard 基础异常"""


class TaskValidationError(TaskboardError):
    """任务字段缺失或取值非法

    只描述第一个失败的字段。
    """

    def __init__(self, field: str, message: str) -> None:
        """
        Args:
            field: 失败的字段名（wire 格式，camelCase）
            message: 面向调用方的错误描述
        """
        super().__init__(message)
        self.field = field
        self.message = message


class TaskNotFoundError(TaskboardError):
    """指定 id 的任务不存在"""

    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task with id {task_id} does not exist")
        self.task_id = task_id


class StoreError(TaskboardError):
    """底层存储读写失败

    original_error 仅用于日志，不回传给客户端。
    """

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """
        Args:
            message: 错误描述
            original_error: 原始异常
        """
        super().__init__(message)
        self.original_error = original_error
