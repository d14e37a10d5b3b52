"""TaskRepository -- 任务生命周期控制器

唯一的写入口：每个写操作都是一次完整的 SQLite 事务（读-检查-写），
提交后通过 ChangeHub 通知订阅方重新查询。

约定：
1. upsert 的标题去空白后不能为空，否则抛 ValidationError，不产生任何写入
2. 操作不存在的 id 是静默 no-op（与并发删除的良性竞争），不抛异常
3. 全库最多一个 MIT，且只能是未完成任务；设置 MIT 时"先清后设"在同一事务内
4. 逾期扫描只做 IN_PROGRESS -> OVERDUE，幂等，可与其他写者并发
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import date, timedelta, tzinfo
from typing import TypeVar

import structlog

from .exceptions import ValidationError
from .models.enums import Quadrant, TaskStatus
from .models.stats import ReviewStats
from .models.task import Task, TaskDraft, normalize_tags
from .ordering import (
    Direction,
    initial_sort_order,
    relocated_sort_order,
    swap_partner,
    toggled_pin,
)
from .reminder import active_reminders
from .schedule import (
    day_of,
    effective_due_timestamp,
    end_of_day_millis,
    now_millis,
    start_of_day_millis,
)
from .stats import review_stats
from .store import StoreGroup
from .subscriptions import ChangeHub

log = structlog.get_logger()

T = TypeVar("T")


class TaskRepository:
    """任务仓库（生命周期控制器）"""

    def __init__(
        self,
        store_group: StoreGroup,
        hub: ChangeHub | None = None,
        clock: Callable[[], int] = now_millis,
        tz: tzinfo | None = None,
    ) -> None:
        """
        Args:
            store_group: 共享连接的 Store 实例组
            hub: 变更广播器，None 时不支持 observe
            clock: 返回当前毫秒时间戳
            tz: 日历日折算所用时区，None 为本地时区
        """
        self._stores = store_group
        self._hub = hub
        self._clock = clock
        self._tz = tz

    @property
    def tz(self) -> tzinfo | None:
        return self._tz

    def now(self) -> int:
        return self._clock()

    def today(self) -> date:
        return day_of(self._clock(), self._tz)

    # ---- 写操作 ----

    async def upsert(self, draft: TaskDraft) -> int | None:
        """新建或更新任务

        Returns:
            任务 id；更新的任务已被并发删除时返回 None

        Raises:
            ValidationError: 标题为空
            StoreError: 存储失败
        """
        title = draft.title.strip()
        if not title:
            raise ValidationError("title cannot be empty", field="title")

        now = self._clock()
        normalized = draft.model_copy(
            update={
                "title": title,
                "description": draft.description.strip(),
                "tags": normalize_tags(draft.tags),
                "is_mit": draft.is_mit and draft.status != TaskStatus.COMPLETED,
            }
        )

        async with self._stores.transaction("upsert") as store:
            if draft.id is None:
                if normalized.is_mit:
                    await store.clear_all_mit()
                task_id = await store.create_task(
                    normalized,
                    sort_order=initial_sort_order(now),
                    now=now,
                )
                created = True
            else:
                existing = await store.get_task(draft.id)
                if existing is None:
                    log.info("task_upsert_lost", task_id=draft.id)
                    return None
                if normalized.is_mit:
                    await store.clear_all_mit()
                fields = normalized.model_dump(exclude={"id"})
                fields["updated_at"] = now
                await store.update_task(existing.model_copy(update=fields))
                task_id = existing.id
                created = False

        log.info(
            "task_created" if created else "task_updated",
            task_id=task_id,
            quadrant=normalized.quadrant,
        )
        self._notify("upsert")
        return task_id

    async def delete(self, task_id: int) -> bool:
        async with self._stores.transaction("delete") as store:
            deleted = await store.delete_task(task_id)
        if deleted:
            log.info("task_deleted", task_id=task_id)
            self._notify("delete")
        return deleted

    async def delete_and_return(self, task_id: int) -> Task | None:
        """删除并返回删除前的完整记录，供之后 restore 撤销"""
        async with self._stores.transaction("delete_and_return") as store:
            existing = await store.get_task(task_id)
            if existing is None:
                return None
            await store.delete_task(task_id)
        log.info("task_deleted", task_id=task_id)
        self._notify("delete")
        return existing

    async def restore(self, task: Task) -> None:
        """按完整记录重新插入（保留原 id 与全部字段）

        如果该记录带 MIT 标记而库里已有别的 MIT，或记录已完成，恢复后的记录不再持有 MIT。
        """
        if task.is_mit and task.status == TaskStatus.COMPLETED:
            task = task.model_copy(update={"is_mit": False})
        async with self._stores.transaction("restore") as store:
            if task.is_mit:
                holder = await store.get_mit()
                if holder is not None and holder.id != task.id:
                    task = task.model_copy(update={"is_mit": False})
            await store.restore_task(task)
        log.info("task_restored", task_id=task.id)
        self._notify("restore")

    async def move_to_quadrant(self, task_id: int, target: Quadrant) -> bool:
        """移动到其他象限，排到目标象限末尾，置顶状态保留"""
        now = self._clock()
        async with self._stores.transaction("move_to_quadrant") as store:
            existing = await store.get_task(task_id)
            if existing is None or existing.quadrant == target:
                return False
            await store.update_task(
                existing.model_copy(
                    update={
                        "quadrant": target,
                        "sort_order": relocated_sort_order(now),
                        "updated_at": now,
                    }
                )
            )
        log.info(
            "task_moved",
            task_id=task_id,
            from_quadrant=existing.quadrant,
            to_quadrant=target,
        )
        self._notify("move_to_quadrant")
        return True

    async def toggle_pinned(self, task_id: int) -> bool | None:
        """切换置顶

        Returns:
            切换后的置顶状态；任务不存在时为 None
        """
        now = self._clock()
        async with self._stores.transaction("toggle_pinned") as store:
            existing = await store.get_task(task_id)
            if existing is None:
                return None
            min_pinned = await store.min_pinned_sort_order(existing.quadrant)
            max_unpinned = await store.max_unpinned_sort_order(existing.quadrant)
            pinned, sort_order = toggled_pin(existing, min_pinned, max_unpinned)
            await store.update_task(
                existing.model_copy(
                    update={"is_pinned": pinned, "sort_order": sort_order, "updated_at": now}
                )
            )
        log.info("task_pin_toggled", task_id=task_id, pinned=pinned, sort_order=sort_order)
        self._notify("toggle_pinned")
        return pinned

    async def move_up(self, task_id: int) -> bool:
        return await self._move_relative(task_id, Direction.UP)

    async def move_down(self, task_id: int) -> bool:
        return await self._move_relative(task_id, Direction.DOWN)

    async def _move_relative(self, task_id: int, direction: Direction) -> bool:
        """在同一置顶分组内与相邻任务交换 sort_order"""
        now = self._clock()
        async with self._stores.transaction("move_relative") as store:
            target = await store.get_task(task_id)
            if target is None:
                return False
            ordered = await store.list_by_quadrant(target.quadrant)
            pair = swap_partner(ordered, task_id, direction)
            if pair is None:
                return False
            a, b = pair
            await store.update_task(
                a.model_copy(update={"sort_order": b.sort_order, "updated_at": now})
            )
            await store.update_task(
                b.model_copy(update={"sort_order": a.sort_order, "updated_at": now})
            )
        log.info("task_reordered", task_id=task_id, direction=direction.name, swapped_with=b.id)
        self._notify("move_relative")
        return True

    async def set_status(self, task_id: int, status: TaskStatus) -> bool:
        """手动设置状态（任意状态之间均可切换）

        完成的任务同时失去 MIT 标记。
        """
        now = self._clock()
        async with self._stores.transaction("set_status") as store:
            existing = await store.get_task(task_id)
            if existing is None:
                return False
            update: dict[str, object] = {"status": status, "updated_at": now}
            if status == TaskStatus.COMPLETED:
                update["is_mit"] = False
            await store.update_task(existing.model_copy(update=update))
        log.info("task_status_set", task_id=task_id, from_status=existing.status, to_status=status)
        self._notify("set_status")
        return True

    async def complete(self, task_id: int) -> bool:
        return await self.set_status(task_id, TaskStatus.COMPLETED)

    async def defer_due(self, task_id: int, days: int) -> date | None:
        """推迟按天截止日期

        原本没有截止日期时以今天为基准。只调整 due_date，不调整 due_timestamp：
        两者都存在时 due_timestamp 仍决定有效截止时间。

        Returns:
            新的截止日期；任务不存在时为 None
        """
        now = self._clock()
        async with self._stores.transaction("defer_due") as store:
            existing = await store.get_task(task_id)
            if existing is None:
                return None
            base = existing.due_date or day_of(now, self._tz)
            new_due = base + timedelta(days=days)
            await store.update_task(
                existing.model_copy(update={"due_date": new_due, "updated_at": now})
            )
        if existing.due_timestamp is not None:
            log.warning(
                "task_defer_shadowed",
                task_id=task_id,
                due_timestamp=existing.due_timestamp,
            )
        log.info("task_deferred", task_id=task_id, days=days, due_date=new_due.isoformat())
        self._notify("defer_due")
        return new_due

    # ---- MIT ----

    async def set_mit(self, task_id: int) -> bool:
        """把任务设为 MIT：同一事务内先清除现有 MIT 再设置

        目标不存在或已完成时不做任何修改。
        """
        async with self._stores.transaction("set_mit") as store:
            target = await store.get_task(task_id)
            if target is None or target.status == TaskStatus.COMPLETED:
                return False
            await store.clear_all_mit()
            await store.set_mit(task_id)
        log.info("mit_set", task_id=task_id)
        self._notify("set_mit")
        return True

    async def clear_mit(self) -> int:
        async with self._stores.transaction("clear_mit") as store:
            cleared = await store.clear_all_mit()
        if cleared:
            log.info("mit_cleared", count=cleared)
            self._notify("clear_mit")
        return cleared

    async def get_mit(self) -> Task | None:
        async with self._stores.read("get_mit") as store:
            return await store.get_mit()

    async def get_suggested_mit(self) -> Task | None:
        """建议的 MIT：重要不紧急象限中按展示顺序第一个未完成任务"""
        tasks = await self.list_quadrant(Quadrant.IMPORTANT_NOT_URGENT)
        return next((t for t in tasks if t.status != TaskStatus.COMPLETED), None)

    # ---- 逾期扫描 ----

    async def update_overdue_tasks(self) -> int:
        """把有效截止时间已过的进行中任务批量置为 OVERDUE

        Returns:
            本次更新的任务数；无新逾期任务时为 0
        """
        now = self._clock()
        async with self._stores.transaction("update_overdue_tasks") as store:
            candidates = await store.list_overdue_candidates()
            ids = [
                t.id
                for t in candidates
                if (due := effective_due_timestamp(t, self._tz)) is not None and due < now
            ]
            count = await store.mark_overdue(ids, now)

        if count:
            log.info("overdue_sweep_completed", updated=count, scanned=len(candidates))
            self._notify("update_overdue_tasks")
        return count

    # ---- 查询 ----

    async def get_task(self, task_id: int) -> Task | None:
        async with self._stores.read("get_task") as store:
            return await store.get_task(task_id)

    async def get_draft(self, task_id: int) -> TaskDraft | None:
        """读取任务并转为编辑草稿"""
        task = await self.get_task(task_id)
        return task.to_draft() if task else None

    async def list_quadrant(self, quadrant: Quadrant) -> list[Task]:
        async with self._stores.read("list_quadrant") as store:
            return await store.list_by_quadrant(quadrant)

    async def list_today_quadrant(
        self,
        quadrant: Quadrant,
        today: date | None = None,
    ) -> list[Task]:
        """象限内今天要处理的未完成任务"""
        day = today or self.today()
        async with self._stores.read("list_today_quadrant") as store:
            return await store.list_today_by_quadrant(
                quadrant,
                day,
                start_of_day_millis(day, self._tz),
                end_of_day_millis(day, self._tz),
            )

    async def list_all(self) -> list[Task]:
        async with self._stores.read("list_all") as store:
            return await store.list_all()

    async def list_active(self) -> list[Task]:
        async with self._stores.read("list_active") as store:
            return await store.list_active()

    async def list_by_due_range(self, start: date, end: date) -> list[Task]:
        async with self._stores.read("list_by_due_range") as store:
            return await store.list_by_due_range(
                start,
                end,
                start_of_day_millis(start, self._tz),
                end_of_day_millis(end, self._tz),
            )

    async def list_by_created_range(self, start_ms: int, end_ms: int) -> list[Task]:
        async with self._stores.read("list_by_created_range") as store:
            return await store.list_by_created_range(start_ms, end_ms)

    async def list_reminder_candidates(self) -> list[Task]:
        async with self._stores.read("list_reminder_candidates") as store:
            return await store.list_reminder_candidates()

    async def active_reminders(self, now: int | None = None) -> list[Task]:
        """此刻应提醒的任务，按有效截止时间升序"""
        candidates = await self.list_reminder_candidates()
        return active_reminders(candidates, self._clock() if now is None else now, self._tz)

    async def review_stats(
        self,
        start_ms: int | None = None,
        end_ms: int | None = None,
    ) -> ReviewStats:
        """复盘统计；给出区间时只统计区间内创建的任务"""
        if start_ms is None or end_ms is None:
            tasks = await self.list_all()
        else:
            tasks = await self.list_by_created_range(start_ms, end_ms)
        return review_stats(tasks)

    # ---- 订阅 ----

    async def observe(self, query: Callable[[], Awaitable[T]]) -> AsyncIterator[T]:
        """持续查询：先产出当前结果，之后每次提交后重新查询，结果变化时再产出

        Args:
            query: 无参查询，例如 lambda: repo.list_quadrant(q)
        """
        if self._hub is None:
            raise RuntimeError("TaskRepository was created without a ChangeHub")

        queue = self._hub.subscribe()
        try:
            last = await query()
            yield last
            while True:
                await queue.get()
                # 合并积压的通知，只重新查询一次
                while not queue.empty():
                    queue.get_nowait()
                current = await query()
                if current != last:
                    last = current
                    yield current
        finally:
            self._hub.unsubscribe(queue)

    def observe_quadrant(self, quadrant: Quadrant) -> AsyncIterator[list[Task]]:
        return self.observe(lambda: self.list_quadrant(quadrant))

    def observe_today_quadrant(self, quadrant: Quadrant) -> AsyncIterator[list[Task]]:
        return self.observe(lambda: self.list_today_quadrant(quadrant))

    def observe_mit(self) -> AsyncIterator[Task | None]:
        return self.observe(self.get_mit)

    def observe_reminders(self) -> AsyncIterator[list[Task]]:
        return self.observe(self.list_reminder_candidates)

    def observe_active_reminders(self) -> AsyncIterator[list[Task]]:
        """活跃提醒；只在写入后重新评估，时钟推进需调用方自行轮询 active_reminders"""
        return self.observe(self.active_reminders)

    def _notify(self, operation: str) -> None:
        if self._hub is not None:
            self._hub.publish(operation)
