"""MIT（今日最重要任务）路由

GET    /api/mit: 当前 MIT，没有时 task 为 null
PUT    /api/mit/{task_id}: 设为 MIT（先清后设，同一事务）
DELETE /api/mit: 清除 MIT
GET    /api/mit/suggested: 建议的 MIT（重要不紧急象限第一个未完成任务）
"""

from fastapi import APIRouter, Depends
from quadrant.core.repository import TaskRepository

from ..deps import get_repository
from ..services.serializers import task_to_data

router = APIRouter()


@router.get("/api/mit")
async def get_mit(repo: TaskRepository = Depends(get_repository)):
    task = await repo.get_mit()
    return {"task": task_to_data(task, repo.now(), repo.tz) if task else None}


@router.put("/api/mit/{task_id}")
async def set_mit(task_id: int, repo: TaskRepository = Depends(get_repository)):
    """目标不存在或已完成时 applied=false，现有 MIT 保持不变"""
    applied = await repo.set_mit(task_id)
    return {"task_id": task_id, "applied": applied}


@router.delete("/api/mit")
async def clear_mit(repo: TaskRepository = Depends(get_repository)):
    cleared = await repo.clear_mit()
    return {"cleared": cleared}


@router.get("/api/mit/suggested")
async def get_suggested_mit(repo: TaskRepository = Depends(get_repository)):
    task = await repo.get_suggested_mit()
    return {"task": task_to_data(task, repo.now(), repo.tz) if task else None}
