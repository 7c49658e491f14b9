"""任务 CRUD 路由

GET    /tasks: 任务列表，支持 status / priority / assignedTo / createdBy / assignedBy 筛选
GET    /tasks/{task_id}: 任务详情
POST   /tasks: 创建任务（201）
PUT    /tasks/{task_id}: 更新任务（partial merge）
DELETE /tasks/{task_id}: 删除任务，返回被删除的记录

路由前缀由 TASKBOARD_API_PREFIX 决定（默认 /api）。
"""

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, Request
from starlette.responses import JSONResponse
from taskboard.core.exceptions import (
    StoreError,
    TaskboardError,
    TaskNotFoundError,
    TaskValidationError,
)

from ..deps import get_store_group
from ..services.task_service import TaskService

log = structlog.get_logger()

router = APIRouter()


def _error_response(error: TaskboardError, server_message: str) -> JSONResponse:
    """将业务异常映射为 HTTP 错误响应

    StoreError 只返回通用描述，底层异常写日志。
    """
    if isinstance(error, TaskValidationError):
        return JSONResponse(
            status_code=400,
            content={
                "success": False,
                "error": {
                    "code": "VALIDATION_ERROR",
                    "message": error.message,
                    "field": error.field,
                },
            },
        )
    if isinstance(error, TaskNotFoundError):
        return JSONResponse(
            status_code=404,
            content={
                "success": False,
                "error": {
                    "code": "TASK_NOT_FOUND",
                    "message": str(error),
                },
            },
        )

    original = error.original_error if isinstance(error, StoreError) else None
    log.error(
        "task_store_error",
        error=str(error),
        error_type=type(original).__name__ if original else type(error).__name__,
    )
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": {
                "code": "STORE_ERROR",
                "message": server_message,
            },
        },
    )


async def _read_json_body(request: Request) -> Any:
    """读取 JSON 请求体，非法 JSON 视为校验错误"""
    try:
        return await request.json()
    except ValueError as e:
        raise TaskValidationError("body", "Request body must be valid JSON") from e


@router.get("/tasks")
async def list_tasks(
    status: str | None = Query(default=None, description="按状态精确筛选"),
    priority: str | None = Query(default=None, description="按优先级精确筛选"),
    assigned_to: str | None = Query(
        default=None, alias="assignedTo", description="负责人子串匹配（不区分大小写）"
    ),
    created_by: str | None = Query(
        default=None, alias="createdBy", description="创建人姓名子串匹配"
    ),
    assigned_by: str | None = Query(
        default=None, alias="assignedBy", description="指派人姓名子串匹配"
    ),
    store_group=Depends(get_store_group),
):
    """查询任务列表，保持存储顺序，无分页"""
    service = TaskService(store_group)
    try:
        tasks = await service.list_tasks(
            status=status,
            priority=priority,
            assigned_to=assigned_to,
            created_by=created_by,
            assigned_by=assigned_by,
        )
    except TaskboardError as e:
        return _error_response(e, "Error retrieving tasks")

    return JSONResponse(
        status_code=200,
        content={
            "success": True,
            "count": len(tasks),
            "data": [t.to_document() for t in tasks],
        },
    )


@router.get("/tasks/{task_id}")
async def get_task(
    task_id: str,
    store_group=Depends(get_store_group),
):
    """查询任务详情"""
    service = TaskService(store_group)
    try:
        task = await service.get_task(task_id)
    except TaskboardError as e:
        return _error_response(e, "Error retrieving task")

    return JSONResponse(
        status_code=200,
        content={"success": True, "data": task.to_document()},
    )


@router.post("/tasks")
async def create_task(
    request: Request,
    store_group=Depends(get_store_group),
):
    """创建任务

    - 201: 创建成功
    - 400: 必填字段缺失或 status / priority 非法
    - 500: 存储失败
    """
    service = TaskService(store_group)
    try:
        payload = await _read_json_body(request)
        task = await service.create_task(payload)
    except TaskboardError as e:
        return _error_response(e, "Error creating task")

    return JSONResponse(
        status_code=201,
        content={
            "success": True,
            "message": "Task created successfully",
            "data": task.to_document(),
        },
    )


@router.put("/tasks/{task_id}")
async def update_task(
    task_id: str,
    request: Request,
    store_group=Depends(get_store_group),
):
    """更新任务，未出现的字段保持原值

    - 200: 更新成功
    - 400: 出现的字段非法
    - 404: 任务不存在
    """
    service = TaskService(store_group)
    try:
        payload = await _read_json_body(request)
        task = await service.update_task(task_id, payload)
    except TaskboardError as e:
        return _error_response(e, "Error updating task")

    return JSONResponse(
        status_code=200,
        content={
            "success": True,
            "message": "Task updated successfully",
            "data": task.to_document(),
        },
    )


@router.delete("/tasks/{task_id}")
async def delete_task(
    task_id: str,
    store_group=Depends(get_store_group),
):
    """删除任务

    - 200: 返回被删除的记录
    - 404: 任务不存在
    """
    service = TaskService(store_group)
    try:
        task = await service.delete_task(task_id)
    except TaskboardError as e:
        return _error_response(e, "Error deleting task")

    return JSONResponse(
        status_code=200,
        content={
            "success": True,
            "message": "Task deleted successfully",
            "data": task.to_document(),
        },
    )
