"""配置模块 -- 可通过环境变量覆盖

包含数据文件路径、存储后端、API 前缀等可配置项。
"""

import os
from pathlib import Path
from typing import Literal

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()

StoreBackend = Literal["json", "sqlite"]
LogFormat = Literal["dev", "json"]

_DEFAULT_BACKEND: StoreBackend = "json"
_DEFAULT_LOG_FORMAT: LogFormat = "dev"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKBOARD_DATA_DIR", "data"))


def get_tasks_file() -> Path:
    """获取任务 JSON 文档路径"""
    return Path(
        os.environ.get(
            "TASKBOARD_TASKS_FILE",
            str(_get_base_dir() / "tasks.json"),
        )
    )


def get_db_path() -> Path:
    """获取 SQLite 数据库路径（sqlite 后端使用）"""
    return Path(
        os.environ.get(
            "TASKBOARD_DB_PATH",
            str(_get_base_dir() / "tasks.db"),
        )
    )


class TaskboardConfig(BaseModel):
    """Taskboard 运行配置 -- 从环境变量加载

    环境变量:
        TASKBOARD_DATA_DIR: 数据基础目录（默认 data）
        TASKBOARD_TASKS_FILE: JSON 文档路径
        TASKBOARD_DB_PATH: SQLite 数据库路径
        TASKBOARD_STORE_BACKEND: 存储后端（json/sqlite）
        TASKBOARD_API_PREFIX: 路由前缀（默认 /api）
        TASKBOARD_LOG_FORMAT: 日志渲染模式（dev/json）
        TASKBOARD_LOG_LEVEL: 日志级别（默认 INFO）
    """

    tasks_file: Path = Field(description="任务 JSON 文档路径")
    db_path: Path = Field(description="SQLite 数据库路径")
    store_backend: StoreBackend = Field(
        default=_DEFAULT_BACKEND,
        description="存储后端：json / sqlite",
    )
    api_prefix: str = Field(default="/api", description="任务路由前缀")
    log_format: LogFormat = Field(
        default=_DEFAULT_LOG_FORMAT,
        description="日志渲染模式：dev / json",
    )
    log_level: str = Field(default="INFO", description="根 logger 级别")


def load_config() -> TaskboardConfig:
    """从环境变量加载配置

    无效的 TASKBOARD_STORE_BACKEND / TASKBOARD_LOG_FORMAT / TASKBOARD_LOG_LEVEL
    不阻塞启动，记录 warning 后使用默认值。
    """
    kwargs: dict = {
        "tasks_file": get_tasks_file(),
        "db_path": get_db_path(),
    }

    if val := os.environ.get("TASKBOARD_STORE_BACKEND"):
        if val in ("json", "sqlite"):
            kwargs["store_backend"] = val
        else:
            log.warning(
                "invalid_store_backend_config",
                env_var="TASKBOARD_STORE_BACKEND",
                value=val,
                fallback=_DEFAULT_BACKEND,
            )

    if (val := os.environ.get("TASKBOARD_API_PREFIX")) is not None:
        kwargs["api_prefix"] = val.rstrip("/")

    if val := os.environ.get("TASKBOARD_LOG_FORMAT"):
        if val in ("dev", "json"):
            kwargs["log_format"] = val
        else:
            log.warning(
                "invalid_log_format_config",
                env_var="TASKBOARD_LOG_FORMAT",
                value=val,
                fallback=_DEFAULT_LOG_FORMAT,
            )

    if val := os.environ.get("TASKBOARD_LOG_LEVEL"):
        if val.upper() in _LOG_LEVELS:
            kwargs["log_level"] = val.upper()
        else:
            log.warning(
                "invalid_log_level_config",
                env_var="TASKBOARD_LOG_LEVEL",
                value=val,
                fallback="INFO",
            )

    return TaskboardConfig(**kwargs)
