"""structlog 配置模块

渲染模式与级别来自 TaskboardConfig（TASKBOARD_LOG_FORMAT / TASKBOARD_LOG_LEVEL）：
dev 模式 pretty print，json 模式每行一个 JSON 对象。
Logfire APM：LOGFIRE_SEND_TO_LOGFIRE 环境变量控制，false 时降级为纯本地日志。
"""

import logging
import os

import structlog
from fastapi import FastAPI
from taskboard.core.config import LogFormat, TaskboardConfig

# 第三方库日志降到 WARNING，避免每条 SQL / 连接事件刷屏
_QUIET_LOGGERS = ("aiosqlite", "asyncio")


def _add_service_name(_logger, _method_name, event_dict):
    event_dict.setdefault("service", "taskboard")
    return event_dict


def build_renderer(log_format: LogFormat) -> structlog.types.Processor:
    """按渲染模式选择最终 renderer"""
    if log_format == "json":
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(config: TaskboardConfig) -> None:
    """初始化 structlog + 标准库 logging

    structlog 事件与 uvicorn 等标准库日志共用同一处理链，
    json 模式下额外带 service 字段便于日志平台按服务聚合。
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    if config.log_format == "json":
        shared_processors.append(_add_service_name)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                build_renderer(config.log_format),
            ],
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(config.log_level)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def setup_logfire(app: FastAPI) -> None:
    """Logfire 可选初始化

    LOGFIRE_SEND_TO_LOGFIRE 环境变量控制：
    - "true": 启用 Logfire APM（需要 LOGFIRE_TOKEN，安装 observability extra）
    - "false" (默认): 纯本地日志
    """
    send_to_logfire = os.environ.get("LOGFIRE_SEND_TO_LOGFIRE", "false").lower()
    if send_to_logfire != "true":
        return
    try:
        import logfire

        logfire.configure()
        logfire.instrument_fastapi(app)
    except Exception:
        # 初始化失败不影响服务运行
        structlog.get_logger().warning(
            "logfire_init_failed",
            message="Logfire 初始化失败，降级为纯本地日志",
        )
