"""SSE 事件流路由

GET /api/stream/quadrants/{quadrant}: 推送象限任务列表的实时快照。
连接后先推送当前列表，之后每次提交触发重新查询，列表变化时推送新快照；
空闲时按 SSE_HEARTBEAT_INTERVAL 发送心跳注释。
"""

import asyncio
import json

from fastapi import APIRouter, Depends, Query
from quadrant.core.config import SSE_HEARTBEAT_INTERVAL
from quadrant.core.models import Quadrant
from quadrant.core.repository import TaskRepository
from quadrant.core.subscriptions import ChangeHub
from sse_starlette.sse import EventSourceResponse

from ..deps import get_change_hub, get_repository
from ..services.serializers import tasks_to_data

router = APIRouter()


def _snapshot_event(quadrant: Quadrant, seq: int, data: list[dict]) -> dict:
    return {
        "id": str(seq),
        "event": "QUADRANT_SNAPSHOT",
        "data": json.dumps(
            {"quadrant": quadrant.value, "seq": seq, "tasks": data},
            ensure_ascii=False,
        ),
    }


@router.get("/api/stream/quadrants/{quadrant}")
async def stream_quadrant(
    quadrant: Quadrant,
    max_events: int | None = Query(
        default=None,
        ge=1,
        description="推送多少个快照后结束流（默认不结束）",
    ),
    repo: TaskRepository = Depends(get_repository),
    hub: ChangeHub = Depends(get_change_hub),
):
    """象限快照流

    1. 注册到 ChangeHub
    2. 推送当前快照
    3. 收到变更通知后重新查询，结果变化才推送
    4. 15 秒心跳保活
    """

    async def event_generator():
        # 先订阅再读首个快照，避免两者之间的提交被漏掉；
        # 订阅放在生成器内，未开始迭代就断开的连接不会留下订阅
        queue = hub.subscribe()
        seq = 0
        try:
            last = await repo.list_quadrant(quadrant)
            seq += 1
            yield _snapshot_event(quadrant, seq, tasks_to_data(last, repo.now(), repo.tz))
            while max_events is None or seq < max_events:
                try:
                    await asyncio.wait_for(queue.get(), timeout=SSE_HEARTBEAT_INTERVAL)
                except TimeoutError:
                    yield {"comment": "heartbeat"}
                    continue
                # 合并积压的通知
                while not queue.empty():
                    queue.get_nowait()
                current = await repo.list_quadrant(quadrant)
                if current == last:
                    continue
                last = current
                seq += 1
                yield _snapshot_event(quadrant, seq, tasks_to_data(current, repo.now(), repo.tz))
        finally:
            hub.unsubscribe(queue)

    return EventSourceResponse(event_generator())
