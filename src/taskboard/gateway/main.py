"""FastAPI 应用主文件

app 创建 + lifespan 管理：Store 初始化/关闭 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from taskboard.core.config import load_config
from taskboard.core.store import create_store_group

from .middleware.logging_config import setup_logfire, setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import health, tasks

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 Store，关闭时释放连接"""
    config = app.state.config
    store_group = await create_store_group(config)
    app.state.store_group = store_group
    log.info(
        "store_initialized",
        backend=config.store_backend,
        data_dir=str(store_group.data_dir),
    )

    yield

    if getattr(app.state, "store_group", None) is not None:
        await app.state.store_group.close()


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    config = load_config()

    app = FastAPI(
        title="Taskboard API",
        version="0.1.0",
        description="基于 JSON 文件存储的任务管理 REST API",
        lifespan=lifespan,
    )
    app.state.config = config

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging(config)
    setup_logfire(app)

    app.include_router(tasks.router, prefix=config.api_prefix, tags=["tasks"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
