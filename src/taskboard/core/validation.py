"""任务输入校验 -- 创建与更新共用

pydantic 负责字段解析，这里把 ValidationError 转换为只描述
第一个失败字段的 TaskValidationError：
1. 先报告缺失的必填字段（title -> description -> status -> priority）
2. 再按字段顺序报告非法取值
"""

from typing import Any

from pydantic import ValidationError

from .exceptions import TaskValidationError
from .models import (
    REQUIRED_FIELDS,
    TaskCreate,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
    allowed_values,
)

# 视为"缺失"的 pydantic 错误类型（空字符串同样按缺失处理）
_MISSING_TYPES = {"missing", "string_too_short", "null_not_allowed"}

_ENUM_FIELDS = {
    "status": TaskStatus,
    "priority": TaskPriority,
}


def validate_create(payload: Any) -> TaskCreate:
    """校验创建请求体

    Raises:
        TaskValidationError: 第一个失败字段
    """
    _ensure_object(payload)
    try:
        return TaskCreate.model_validate(payload)
    except ValidationError as e:
        raise to_task_validation_error(e) from e


def validate_update(payload: Any) -> TaskUpdate:
    """校验更新请求体，只校验出现的字段

    Raises:
        TaskValidationError: 第一个失败字段
    """
    _ensure_object(payload)
    try:
        return TaskUpdate.model_validate(payload)
    except ValidationError as e:
        raise to_task_validation_error(e) from e


def to_task_validation_error(exc: ValidationError) -> TaskValidationError:
    """将 pydantic ValidationError 转换为 TaskValidationError"""
    errors = exc.errors(include_url=False)

    missing: set[str] = set()
    for err in errors:
        loc = err["loc"]
        if len(loc) == 1 and loc[0] in REQUIRED_FIELDS and _is_missing(err):
            missing.add(str(loc[0]))
    for field in REQUIRED_FIELDS:
        if field in missing:
            return TaskValidationError(field, f"Missing required field: {field}")

    err = errors[0]
    loc = err["loc"]
    if not loc:
        return TaskValidationError("body", f"Invalid request body: {err['msg']}")

    field = str(loc[0])
    if field in _ENUM_FIELDS and len(loc) == 1:
        return TaskValidationError(
            field,
            f"Invalid {field}. Must be one of: {allowed_values(_ENUM_FIELDS[field])}",
        )

    path = ".".join(str(part) for part in loc)
    return TaskValidationError(path, f"Invalid {path}: {err['msg']}")


def _is_missing(err: dict) -> bool:
    return err["type"] in _MISSING_TYPES or err.get("input", ...) is None


def _ensure_object(payload: Any) -> None:
    if not isinstance(payload, dict):
        raise TaskValidationError("body", "Request body must be a JSON object")
