"""任务动作路由 -- 置顶、移动、排序、状态、推迟、删除与撤销

不存在的任务一律静默处理：返回 200，applied=false。
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from quadrant.core.models import Quadrant, TaskStatus
from quadrant.core.repository import TaskRepository
from quadrant.core.undo import UndoBuffer

from ..deps import get_repository, get_undo_buffer
from .tasks import task_not_found

router = APIRouter()


class MoveRequest(BaseModel):
    quadrant: Quadrant


class StatusRequest(BaseModel):
    status: TaskStatus


class DeferRequest(BaseModel):
    days: int = Field(default=1, description="推迟天数，可为负数")


@router.post("/api/tasks/{task_id}/pin")
async def toggle_pin(task_id: int, repo: TaskRepository = Depends(get_repository)):
    """切换置顶；返回切换后的状态"""
    pinned = await repo.toggle_pinned(task_id)
    return {"task_id": task_id, "applied": pinned is not None, "is_pinned": pinned}


@router.post("/api/tasks/{task_id}/move")
async def move_task(
    task_id: int,
    body: MoveRequest,
    repo: TaskRepository = Depends(get_repository),
):
    """移到其他象限的末尾；目标与当前象限相同时不做修改"""
    applied = await repo.move_to_quadrant(task_id, body.quadrant)
    return {"task_id": task_id, "applied": applied}


@router.post("/api/tasks/{task_id}/up")
async def move_up(task_id: int, repo: TaskRepository = Depends(get_repository)):
    applied = await repo.move_up(task_id)
    return {"task_id": task_id, "applied": applied}


@router.post("/api/tasks/{task_id}/down")
async def move_down(task_id: int, repo: TaskRepository = Depends(get_repository)):
    applied = await repo.move_down(task_id)
    return {"task_id": task_id, "applied": applied}


@router.post("/api/tasks/{task_id}/status")
async def set_status(
    task_id: int,
    body: StatusRequest,
    repo: TaskRepository = Depends(get_repository),
):
    applied = await repo.set_status(task_id, body.status)
    return {"task_id": task_id, "applied": applied, "status": body.status.value}


@router.post("/api/tasks/{task_id}/complete")
async def complete_task(task_id: int, repo: TaskRepository = Depends(get_repository)):
    applied = await repo.complete(task_id)
    return {"task_id": task_id, "applied": applied}


@router.post("/api/tasks/{task_id}/defer")
async def defer_task(
    task_id: int,
    body: DeferRequest,
    repo: TaskRepository = Depends(get_repository),
):
    """推迟按天截止日期；只修改 due_date"""
    due_date = await repo.defer_due(task_id, body.days)
    return {
        "task_id": task_id,
        "applied": due_date is not None,
        "due_date": due_date.isoformat() if due_date else None,
    }


@router.delete("/api/tasks/{task_id}")
async def delete_task(
    task_id: int,
    repo: TaskRepository = Depends(get_repository),
    undo: UndoBuffer = Depends(get_undo_buffer),
):
    """删除任务，删除前的记录进入撤销缓冲区"""
    removed = await repo.delete_and_return(task_id)
    if removed is not None:
        undo.put(removed)
    return {"task_id": task_id, "applied": removed is not None}


@router.post("/api/tasks/{task_id}/undo")
async def undo_delete(
    task_id: int,
    repo: TaskRepository = Depends(get_repository),
    undo: UndoBuffer = Depends(get_undo_buffer),
):
    """撤销删除；缓冲区里没有该任务时返回 404

    恢复成功后才移出缓冲区，存储失败时仍可再次撤销。
    """
    task = undo.get(task_id)
    if task is None:
        return task_not_found(task_id)
    await repo.restore(task)
    undo.pop(task_id)
    return {"task_id": task_id, "applied": True}
