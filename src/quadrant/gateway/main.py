"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭、变更广播、撤销缓冲区、
后台逾期扫描 + 路由注册 + 异常映射。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from quadrant.core.config import get_db_path, get_sweep_interval
from quadrant.core.exceptions import StoreError, ValidationError
from quadrant.core.repository import TaskRepository
from quadrant.core.store import create_store_group
from quadrant.core.subscriptions import ChangeHub
from quadrant.core.undo import UndoBuffer
from starlette.responses import JSONResponse

from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import actions, health, mit, reminders, stream, tasks
from .services.overdue_sweeper import OverdueSweeper

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB 并执行一次逾期扫描，关闭时停止扫描并关闭连接"""
    db_path = get_db_path()
    store_group = await create_store_group(db_path)
    app.state.db_path = db_path
    app.state.store_group = store_group

    change_hub = ChangeHub()
    repository = TaskRepository(store_group, hub=change_hub)
    app.state.change_hub = change_hub
    app.state.repository = repository
    app.state.undo_buffer = UndoBuffer()

    # 启动扫描：补齐停机期间到期的任务
    sweeper = OverdueSweeper(repository, get_sweep_interval())
    count = await sweeper.sweep_once()
    log.info("startup_overdue_sweep", updated=count, db_path=db_path)
    if get_sweep_interval() > 0:
        sweeper.start()
        app.state.overdue_sweeper = sweeper

    yield

    # 关闭：先停扫描器，再关闭数据库连接
    if getattr(app.state, "overdue_sweeper", None) is not None:
        await app.state.overdue_sweeper.stop()
    if hasattr(app.state, "store_group") and app.state.store_group:
        await app.state.store_group.close()


async def handle_validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    code = "TITLE_REQUIRED" if exc.field == "title" else "INVALID_ARGUMENT"
    return JSONResponse(
        status_code=422,
        content={"error": {"code": code, "message": str(exc), "field": exc.field}},
    )


async def handle_request_validation_error(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": {
                "code": "INVALID_ARGUMENT",
                "message": "Request validation failed",
                "details": [
                    {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
                    for err in exc.errors()
                ],
            }
        },
    )


async def handle_store_error(request: Request, exc: StoreError) -> JSONResponse:
    log.error("store_unavailable", operation=exc.operation, error=str(exc.original_error))
    return JSONResponse(
        status_code=503,
        content={"error": {"code": "STORE_UNAVAILABLE", "message": str(exc)}},
    )


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="Quadrant Gateway",
        version="0.1.0",
        description="四象限任务管理核心 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    # 初始化日志
    setup_logging()

    # 异常映射
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(StoreError, handle_store_error)

    # 注册路由
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(actions.router, tags=["actions"])
    app.include_router(mit.router, tags=["mit"])
    app.include_router(reminders.router, tags=["reminders"])
    app.include_router(stream.router, tags=["stream"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
