"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含存储可读、数据目录可写、磁盘空间，
SQLite 后端额外校验 WAL 模式。
"""

import os
import shutil

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse
from taskboard.core.store.sqlite_init import verify_wal_mode

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 验证存储可用性

    检查项：
    1. store: 任务集合可读取
    2. data_dir: 数据目录存在且可写
    3. disk_space_mb: 磁盘剩余空间
    4. wal_mode: SQLite 后端的 journal_mode 为 WAL（JSON 后端不含此项）
    """
    checks = {}
    all_ok = True

    store_group = getattr(request.app.state, "store_group", None)

    # 1. 存储可读
    try:
        if store_group is None:
            raise RuntimeError("store not initialized")
        await store_group.task_store.list_tasks()
        checks["store"] = "ok"
    except Exception as e:
        log.warning("ready_check_store_failed", error_type=type(e).__name__)
        checks["store"] = f"error: {type(e).__name__}"
        all_ok = False

    # 2. 数据目录可写
    data_dir = store_group.data_dir if store_group is not None else None
    if data_dir is not None and data_dir.is_dir() and os.access(data_dir, os.W_OK):
        checks["data_dir"] = "ok"
    else:
        checks["data_dir"] = "error: directory missing or not writable"
        all_ok = False

    # 3. 磁盘空间
    try:
        disk_usage = shutil.disk_usage(data_dir if data_dir is not None else "/")
        checks["disk_space_mb"] = disk_usage.free // (1024 * 1024)
    except OSError:
        checks["disk_space_mb"] = 0
        all_ok = False

    # 4. SQLite WAL 模式
    conn = store_group.conn if store_group is not None else None
    if conn is not None:
        try:
            wal_ok = await verify_wal_mode(conn)
        except Exception as e:
            log.warning("ready_check_wal_failed", error_type=type(e).__name__)
            wal_ok = False
        checks["wal_mode"] = "ok" if wal_ok else "error: journal_mode is not wal"
        all_ok = all_ok and wal_ok

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_text,
            "checks": checks,
        },
    )
