"""Task Domain Model

wire 格式使用 camelCase（dueDate、assignedTo、createdAt ...），
Python 属性使用 snake_case，通过 pydantic alias 互转。
"""

from datetime import date, datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .enums import TaskPriority, TaskStatus


class WireModel(BaseModel):
    """camelCase wire 格式基类"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        """序列化为 JSON 文档（camelCase key）"""
        return self.model_dump(mode="json", by_alias=True)


def _coerce_id(value):
    # 历史数据中的数字 id 统一按字符串处理
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


RecordId = Annotated[str, BeforeValidator(_coerce_id)]


class PersonRef(WireModel):
    """createdBy / assignedBy 人员引用"""

    id: RecordId = Field(description="人员 ID")
    name: str = Field(description="姓名")
    email: str = Field(default="", description="邮箱")


class Subtask(WireModel):
    """子任务，id 形如 <taskId>.<n>"""

    id: RecordId = Field(description="子任务 ID，任务内唯一")
    title: str = Field(description="标题")
    description: str = Field(default="", description="描述")
    completed: bool = Field(default=False, description="是否完成")

    @property
    def sequence(self) -> int | None:
        """<taskId>.<n> 中的 n，非该格式时返回 None"""
        _, sep, tail = self.id.rpartition(".")
        if not sep or not tail.isdigit():
            return None
        return int(tail)


class Task(WireModel):
    """Task 数据模型

    不变量：
    - id 在集合内唯一，删除后不复用
    - status / priority 始终为枚举值
    - updated_at >= created_at
    - subtasks 的 id 在任务内唯一
    """

    id: RecordId = Field(description="唯一标识，ULID 格式（历史数据可能为数字字符串）")
    title: str = Field(description="标题")
    description: str = Field(description="描述")
    status: TaskStatus = Field(description="当前状态")
    priority: TaskPriority = Field(description="优先级")
    due_date: date | None = Field(default=None, description="截止日期")
    assigned_to: str | None = Field(default=None, description="负责人（自由文本）")
    subtasks: list[Subtask] = Field(default_factory=list, description="子任务列表")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")
    created_by: PersonRef | None = Field(default=None, description="创建人")
    assigned_by: PersonRef | None = Field(default=None, description="指派人")
