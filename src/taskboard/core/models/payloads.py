"""请求 payload 模型 -- 创建 / 更新任务的输入格式

TaskCreate 与 TaskUpdate 共用同一套字段约束；
TaskUpdate 全部字段可选，只校验请求中出现的字段。
"""

from datetime import date

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from .enums import TaskPriority, TaskStatus
from .task import PersonRef, RecordId, WireModel

# 必填字段（wire 名），按校验顺序排列
REQUIRED_FIELDS: tuple[str, ...] = ("title", "description", "status", "priority")


class SubtaskInput(WireModel):
    """子任务输入，id 缺省时由服务端分配"""

    id: RecordId | None = Field(default=None, description="已有子任务 ID（更新时保留）")
    title: str = Field(min_length=1, description="标题")
    description: str = Field(default="", description="描述")
    completed: bool = Field(default=False, description="是否完成")


class TaskCreate(WireModel):
    """创建任务请求体"""

    title: str = Field(min_length=1, description="标题")
    description: str = Field(min_length=1, description="描述")
    status: TaskStatus = Field(description="状态")
    priority: TaskPriority = Field(description="优先级")
    due_date: date | None = Field(default=None, description="截止日期")
    assigned_to: str | None = Field(default=None, description="负责人")
    subtasks: list[SubtaskInput] = Field(default_factory=list, description="子任务")
    created_by: PersonRef | None = Field(default=None, description="创建人")
    assigned_by: PersonRef | None = Field(default=None, description="指派人")


class TaskUpdate(WireModel):
    """更新任务请求体（partial merge）

    未出现的字段保持原值；必填字段不允许显式置为 null。
    """

    title: str | None = Field(default=None, min_length=1, description="标题")
    description: str | None = Field(default=None, min_length=1, description="描述")
    status: TaskStatus | None = Field(default=None, description="状态")
    priority: TaskPriority | None = Field(default=None, description="优先级")
    due_date: date | None = Field(default=None, description="截止日期，null 清空")
    assigned_to: str | None = Field(default=None, description="负责人，null 清空")
    subtasks: list[SubtaskInput] | None = Field(default=None, description="子任务（整体替换）")
    created_by: PersonRef | None = Field(default=None, description="创建人")
    assigned_by: PersonRef | None = Field(default=None, description="指派人")

    @field_validator("title", "description", "status", "priority", mode="before")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise PydanticCustomError("null_not_allowed", "value must not be null")
        return value

    @field_validator("subtasks", mode="before")
    @classmethod
    def _null_subtasks_means_empty(cls, value):
        return [] if value is None else value

    def changes(self) -> dict:
        """返回请求中出现的字段（snake_case key）"""
        return {name: getattr(self, name) for name in self.model_fields_set}
