"""Store Protocol 接口定义

定义生命周期控制器所依赖的 TaskStore 抽象接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from collections.abc import Sequence
from datetime import date
from typing import Protocol

from ..models.enums import Quadrant
from ..models.task import Task, TaskDraft


class TaskStore(Protocol):
    """Task 存储接口

    写方法不提交事务，由调用方在同一事务内组合多步读写。
    """

    async def get_task(self, task_id: int) -> Task | None:
        """根据 id 点查"""
        ...

    async def create_task(self, draft: TaskDraft, *, sort_order: int, now: int) -> int:
        """插入新任务，返回存储分配的 id"""
        ...

    async def restore_task(self, task: Task) -> None:
        """按完整记录重新插入（保留原 id）"""
        ...

    async def update_task(self, task: Task) -> None:
        """整行更新"""
        ...

    async def delete_task(self, task_id: int) -> bool:
        """删除任务"""
        ...

    async def list_by_quadrant(self, quadrant: Quadrant) -> list[Task]:
        """按 (is_pinned DESC, sort_order ASC, updated_at DESC) 有序扫描象限"""
        ...

    async def min_pinned_sort_order(self, quadrant: Quadrant) -> int | None:
        """置顶组最小 sort_order"""
        ...

    async def max_unpinned_sort_order(self, quadrant: Quadrant) -> int | None:
        """非置顶组最大 sort_order"""
        ...

    async def get_mit(self) -> Task | None:
        """当前 MIT"""
        ...

    async def clear_all_mit(self) -> int:
        """清除所有 MIT 标记"""
        ...

    async def set_mit(self, task_id: int) -> bool:
        """设置 MIT 标记"""
        ...

    async def list_overdue_candidates(self) -> list[Task]:
        """逾期扫描候选"""
        ...

    async def mark_overdue(self, task_ids: Sequence[int], now: int) -> int:
        """按 id 列表批量置为 OVERDUE"""
        ...

    async def list_reminder_candidates(self) -> list[Task]:
        """提醒候选"""
        ...

    async def list_active(self) -> list[Task]:
        """全部未完成任务"""
        ...

    async def list_today_by_quadrant(
        self,
        quadrant: Quadrant,
        today: date,
        day_start: int,
        day_end: int,
    ) -> list[Task]:
        """象限内今天要处理的任务"""
        ...

    async def list_by_due_range(
        self,
        start: date,
        end: date,
        start_ms: int,
        end_ms: int,
    ) -> list[Task]:
        """按截止区间查询"""
        ...

    async def list_by_created_range(self, start_ms: int, end_ms: int) -> list[Task]:
        """按创建时间区间查询"""
        ...

    async def list_all(self) -> list[Task]:
        """全部任务"""
        ...

    async def count_tasks(self) -> int:
        ...
