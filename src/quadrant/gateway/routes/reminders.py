"""提醒、逾期扫描与复盘统计路由

GET  /api/reminders: 此刻应显示提醒的任务（按有效截止时间升序）
POST /api/overdue/sweep: 立即执行一次逾期扫描
GET  /api/stats: 复盘统计，可按创建时间区间过滤
"""

from fastapi import APIRouter, Depends, Query
from quadrant.core.repository import TaskRepository

from ..deps import get_repository
from ..services.serializers import tasks_to_data

router = APIRouter()


@router.get("/api/reminders")
async def list_reminders(repo: TaskRepository = Depends(get_repository)):
    now = repo.now()
    tasks = await repo.active_reminders(now)
    return {"now": now, "tasks": tasks_to_data(tasks, now, repo.tz)}


@router.post("/api/overdue/sweep")
async def sweep_overdue(repo: TaskRepository = Depends(get_repository)):
    """手动触发逾期扫描；重复调用幂等，第二次返回 0"""
    updated = await repo.update_overdue_tasks()
    return {"updated": updated}


@router.get("/api/stats")
async def get_stats(
    start: int | None = Query(default=None, description="创建时间区间起点（毫秒，含）"),
    end: int | None = Query(default=None, description="创建时间区间终点（毫秒，含）"),
    repo: TaskRepository = Depends(get_repository),
):
    stats = await repo.review_stats(start, end)
    return stats.model_dump(mode="json")
