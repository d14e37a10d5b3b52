"""截止时间派生计算 -- 纯函数，无副作用

- 有效截止时间：due_timestamp 优先；否则 due_date 当天 23:59:59（本地时区）；否则无
- 提醒时间：有效截止时间 - 提前量，仅在提醒开启且提前量存在时有定义
- 逾期：now > 有效截止时间
- 逾期超过宽限期：now > 有效截止时间 + 24h（此后不再提醒）
"""

import time
from datetime import date, datetime, tzinfo

from .config import END_OF_DAY, MILLIS_PER_HOUR, OVERDUE_GRACE_HOURS
from .models.enums import TaskStatus
from .models.task import Task

GRACE_MILLIS: int = OVERDUE_GRACE_HOURS * MILLIS_PER_HOUR


def end_of_day_millis(day: date, tz: tzinfo | None = None) -> int:
    """某天 23:59:59 对应的毫秒时间戳；tz 为 None 时使用本地时区"""
    moment = datetime.combine(day, END_OF_DAY)
    if tz is None:
        moment = moment.astimezone()
    else:
        moment = moment.replace(tzinfo=tz)
    return int(moment.timestamp() * 1000)


def start_of_day_millis(day: date, tz: tzinfo | None = None) -> int:
    """某天 00:00:00 对应的毫秒时间戳；tz 为 None 时使用本地时区"""
    moment = datetime(day.year, day.month, day.day)
    if tz is None:
        moment = moment.astimezone()
    else:
        moment = moment.replace(tzinfo=tz)
    return int(moment.timestamp() * 1000)


def effective_due_timestamp(task: Task, tz: tzinfo | None = None) -> int | None:
    if task.due_timestamp is not None:
        return task.due_timestamp
    if task.due_date is not None:
        return end_of_day_millis(task.due_date, tz)
    return None


def reminder_timestamp(task: Task, tz: tzinfo | None = None) -> int | None:
    """提醒时刻；提醒关闭、提前量缺失或无截止时间时返回 None"""
    if not task.reminder_enabled or task.reminder_interval_value is None:
        return None
    due = effective_due_timestamp(task, tz)
    if due is None:
        return None
    return due - task.reminder_interval_unit.to_millis(task.reminder_interval_value)


def should_show_reminder(task: Task, now: int, tz: tzinfo | None = None) -> bool:
    """当前是否应显示提醒

    条件：提醒开启、提前量存在、未完成、now >= 提醒时刻、now <= 截止 + 24h。
    已逾期（OVERDUE）的任务在宽限期内仍会提醒。
    """
    if not task.reminder_enabled or task.reminder_interval_value is None:
        return False
    if task.status == TaskStatus.COMPLETED:
        return False
    remind_at = reminder_timestamp(task, tz)
    due = effective_due_timestamp(task, tz)
    if remind_at is None or due is None:
        return False
    if now < remind_at:
        return False
    return now <= due + GRACE_MILLIS


def is_overdue(task: Task, now: int, tz: tzinfo | None = None) -> bool:
    due = effective_due_timestamp(task, tz)
    return due is not None and now > due


def is_overdue_expired(task: Task, now: int, tz: tzinfo | None = None) -> bool:
    """是否已逾期超过宽限期"""
    due = effective_due_timestamp(task, tz)
    return due is not None and now > due + GRACE_MILLIS


def overdue_hours(task: Task, now: int, tz: tzinfo | None = None) -> int:
    """逾期整小时数（向下取整），未逾期为 0"""
    due = effective_due_timestamp(task, tz)
    if due is None or now <= due:
        return 0
    return (now - due) // MILLIS_PER_HOUR


def now_millis() -> int:
    """当前时间（毫秒时间戳）"""
    return int(time.time() * 1000)


def day_of(millis: int, tz: tzinfo | None = None) -> date:
    """毫秒时间戳所在的日历日；tz 为 None 时使用本地时区"""
    return datetime.fromtimestamp(millis / 1000, tz).date()
