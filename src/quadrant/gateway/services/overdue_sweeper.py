"""OverdueSweeper -- 后台周期性逾期扫描

启动时先扫描一次，之后每 interval 秒调用一次 TaskRepository.update_overdue_tasks()。
单次扫描失败只记录日志，不终止循环；停止时取消后台任务，
正在进行的事务随取消整体回滚。
"""

import asyncio
import contextlib

import structlog
from quadrant.core.exceptions import StoreError
from quadrant.core.repository import TaskRepository

log = structlog.get_logger()


class OverdueSweeper:
    """周期性逾期扫描器"""

    def __init__(self, repository: TaskRepository, interval_s: float) -> None:
        self._repository = repository
        self._interval_s = interval_s
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def sweep_once(self) -> int:
        """执行一次扫描，存储失败时返回 0"""
        try:
            return await self._repository.update_overdue_tasks()
        except StoreError:
            log.exception("overdue_sweep_failed")
            return 0

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="overdue-sweeper")
        log.info("overdue_sweeper_started", interval_s=self._interval_s)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        log.info("overdue_sweeper_stopped")

    async def _run(self) -> None:
        while True:
            count = await self.sweep_once()
            if count:
                log.info("overdue_tasks_marked", count=count)
            await asyncio.sleep(self._interval_s)
