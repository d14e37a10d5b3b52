"""排序引擎 -- 象限内 sort_order 的分配与调整规则

展示顺序：(is_pinned DESC, sort_order ASC, updated_at DESC)，
即置顶在前，组内 sort_order 升序，相同时最近更新的在前。

sort_order 只表达相对位置：
- 新建任务取创建时刻，自然落在象限末尾
- 置顶时取 (置顶组最小值 - 1)，放到置顶组最前
- 取消置顶时取 (非置顶组最大值 + 1)，放到非置顶组末尾
- 上移/下移只在同一置顶分组内交换两条记录的 sort_order
- 跨象限移动时重置为当前时刻，放到目标象限末尾
以上均只改动 1~2 行，不对整个象限重新编号。
"""

from collections.abc import Iterable, Sequence
from enum import IntEnum

from .models.task import Task


class Direction(IntEnum):
    """相对移动方向"""

    UP = -1
    DOWN = 1


def display_key(task: Task) -> tuple[bool, int, int]:
    return (not task.is_pinned, task.sort_order, -task.updated_at)


def order_tasks(tasks: Iterable[Task]) -> list[Task]:
    """按展示顺序排序（与 SQL 的 ORDER BY 一致）"""
    return sorted(tasks, key=display_key)


def initial_sort_order(now: int) -> int:
    """新任务的默认 sort_order"""
    return now


def relocated_sort_order(now: int) -> int:
    """跨象限移动后的 sort_order"""
    return now


def toggled_pin(
    task: Task,
    min_pinned: int | None,
    max_unpinned: int | None,
) -> tuple[bool, int]:
    """计算切换置顶后的 (is_pinned, sort_order)

    Args:
        task: 当前任务快照
        min_pinned: 同象限置顶组的最小 sort_order，组为空时为 None
        max_unpinned: 同象限非置顶组的最大 sort_order，组为空时为 None
    """
    if not task.is_pinned:
        base = min_pinned if min_pinned is not None else task.sort_order
        return True, base - 1
    base = max_unpinned if max_unpinned is not None else task.sort_order
    return False, base + 1


def swap_partner(
    ordered: Sequence[Task],
    task_id: int,
    direction: Direction,
) -> tuple[Task, Task] | None:
    """在同一置顶分组内找到要交换 sort_order 的两条任务

    Args:
        ordered: 整个象限按展示顺序排好的任务
        task_id: 要移动的任务
        direction: 移动方向

    Returns:
        (目标任务, 交换对象)；任务不在列表中或已在组边界时返回 None
    """
    target = next((t for t in ordered if t.id == task_id), None)
    if target is None:
        return None
    same_group = [t for t in ordered if t.is_pinned == target.is_pinned]
    index = next(i for i, t in enumerate(same_group) if t.id == task_id)
    swap_index = index + int(direction)
    if swap_index < 0 or swap_index >= len(same_group):
        return None
    return same_group[index], same_group[swap_index]
