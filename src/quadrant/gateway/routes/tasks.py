"""任务编辑与查询路由

POST /api/tasks: 按草稿新建（无 id）或更新（有 id）任务
GET  /api/tasks: 全部任务，可按截止日期区间过滤
GET  /api/tasks/{task_id}: 任务详情
GET  /api/tasks/{task_id}/draft: 编辑草稿
GET  /api/quadrants/{quadrant}/tasks: 象限内任务（展示顺序），today=true 只看今天
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from quadrant.core.models import Quadrant, TaskDraft
from quadrant.core.repository import TaskRepository
from starlette.responses import JSONResponse

from ..deps import get_repository
from ..services.serializers import task_to_data, tasks_to_data

router = APIRouter()


class UpsertResponse(BaseModel):
    """保存草稿的响应；更新的任务已被删除时 task_id 为 None"""

    task_id: int | None
    created: bool


def task_not_found(task_id: int) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={
            "error": {
                "code": "TASK_NOT_FOUND",
                "message": f"Task with id {task_id} does not exist",
            }
        },
    )


@router.post("/api/tasks", response_model=UpsertResponse)
async def upsert_task(
    draft: TaskDraft,
    repo: TaskRepository = Depends(get_repository),
):
    """保存草稿

    - 新建返回 201
    - 更新返回 200（任务已被并发删除时静默忽略，task_id 为 null）
    - 标题为空返回 422 TITLE_REQUIRED
    """
    task_id = await repo.upsert(draft)
    created = draft.id is None
    return JSONResponse(
        status_code=201 if created else 200,
        content=UpsertResponse(task_id=task_id, created=created).model_dump(),
    )


@router.get("/api/tasks")
async def list_tasks(
    start: date | None = Query(default=None, description="截止区间起始日（含）"),
    end: date | None = Query(default=None, description="截止区间结束日（含）"),
    repo: TaskRepository = Depends(get_repository),
):
    """全部任务；同时给出 start 与 end 时按截止区间过滤"""
    if start is not None and end is not None:
        tasks = await repo.list_by_due_range(start, end)
    else:
        tasks = await repo.list_all()
    return {"tasks": tasks_to_data(tasks, repo.now(), repo.tz)}


@router.get("/api/tasks/{task_id}")
async def get_task_detail(
    task_id: int,
    repo: TaskRepository = Depends(get_repository),
):
    task = await repo.get_task(task_id)
    if task is None:
        return task_not_found(task_id)
    return {"task": task_to_data(task, repo.now(), repo.tz)}


@router.get("/api/tasks/{task_id}/draft")
async def get_task_draft(
    task_id: int,
    repo: TaskRepository = Depends(get_repository),
):
    draft = await repo.get_draft(task_id)
    if draft is None:
        return task_not_found(task_id)
    return draft.model_dump(mode="json")


@router.get("/api/quadrants/{quadrant}/tasks")
async def list_quadrant_tasks(
    quadrant: Quadrant,
    today: bool = Query(default=False, description="只返回今天要处理的未完成任务"),
    repo: TaskRepository = Depends(get_repository),
):
    """象限内任务，按 置顶 > sort_order > 最近更新 排序"""
    if today:
        tasks = await repo.list_today_quadrant(quadrant)
    else:
        tasks = await repo.list_quadrant(quadrant)
    return {"quadrant": quadrant.value, "tasks": tasks_to_data(tasks, repo.now(), repo.tz)}
