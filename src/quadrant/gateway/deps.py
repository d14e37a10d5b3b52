"""依赖注入模块 -- 通过 FastAPI Depends 注入仓库与共享组件

实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Request
from quadrant.core.repository import TaskRepository
from quadrant.core.subscriptions import ChangeHub
from quadrant.core.undo import UndoBuffer


def get_repository(request: Request) -> TaskRepository:
    """从 app.state 获取 TaskRepository 实例"""
    return request.app.state.repository


def get_change_hub(request: Request) -> ChangeHub:
    return request.app.state.change_hub


def get_undo_buffer(request: Request) -> UndoBuffer:
    return request.app.state.undo_buffer
