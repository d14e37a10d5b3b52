"""提醒评估 -- 从候选任务中筛出此刻应提醒的任务

纯过滤 + 排序，可在每个时钟 tick 重复调用而不积累状态。
"已通知过哪些任务" 属于展示层的状态，不在这里维护。
"""

import sys
from collections.abc import Iterable
from datetime import tzinfo

from .models.enums import TaskStatus
from .models.task import Task
from .schedule import effective_due_timestamp, should_show_reminder


def is_reminder_candidate(task: Task) -> bool:
    """是否属于提醒候选：开启提醒、未完成、有截止时间"""
    return (
        task.reminder_enabled
        and task.status != TaskStatus.COMPLETED
        and (task.due_timestamp is not None or task.due_date is not None)
    )


def active_reminders(
    tasks: Iterable[Task],
    now: int,
    tz: tzinfo | None = None,
) -> list[Task]:
    """返回此刻应提醒的任务，按有效截止时间升序

    Args:
        tasks: 候选任务快照
        now: 当前时间（毫秒）
        tz: 旧版按天截止日期折算所用时区，None 为本地时区
    """
    active = [t for t in tasks if should_show_reminder(t, now, tz)]
    active.sort(key=lambda t: _due_or_max(t, tz))
    return active


def _due_or_max(task: Task, tz: tzinfo | None) -> int:
    due = effective_due_timestamp(task, tz)
    return due if due is not None else sys.maxsize


def reminder_description(task: Task) -> str:
    """提醒设置的描述文字，例如 "提前 30 分钟提醒"；未开启提醒时为空串"""
    if not task.reminder_enabled or task.reminder_interval_value is None:
        return ""
    return f"提前 {task.reminder_interval_value} {task.reminder_interval_unit.display_name}提醒"
