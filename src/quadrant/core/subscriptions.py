"""ChangeHub -- 内存中的变更广播器

每个订阅者持有一个有界 asyncio.Queue；每次事务提交后广播一次"任务已变更"通知，
订阅方收到通知后重新查询自己的结果（push 失效 + 重新拉取）。
"""

import asyncio

from .config import SUBSCRIPTION_QUEUE_SIZE


class ChangeHub:
    """任务变更发布/订阅"""

    def __init__(self, queue_maxsize: int = SUBSCRIPTION_QUEUE_SIZE) -> None:
        self._subscribers: set[asyncio.Queue[str]] = set()
        self._queue_maxsize = queue_maxsize

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue[str]:
        """注册订阅

        Returns:
            asyncio.Queue 实例，每次提交会推送一条操作名
        """
        queue: asyncio.Queue[str] = asyncio.Queue(maxsize=self._queue_maxsize)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[str]) -> None:
        self._subscribers.discard(queue)

    def publish(self, operation: str) -> None:
        """向所有订阅者广播一次变更

        Args:
            operation: 触发变更的操作名
        """
        for queue in self._subscribers:
            try:
                queue.put_nowait(operation)
            except asyncio.QueueFull:
                # 队列里已有未消费的通知，订阅方重新查询时自然拿到最新结果
                continue
