"""Task 序列化 -- 把实体与派生字段转换为 JSON 友好的 dict"""

from datetime import tzinfo
from typing import Any

from quadrant.core.models import Task
from quadrant.core.reminder import reminder_description
from quadrant.core.schedule import (
    effective_due_timestamp,
    is_overdue,
    is_overdue_expired,
    overdue_hours,
    reminder_timestamp,
)


def task_to_data(task: Task, now: int, tz: tzinfo | None = None) -> dict[str, Any]:
    """Task 完整字段 + 派生的截止/提醒信息，tz 需与仓库折算日历日的时区一致"""
    data = task.model_dump(mode="json")
    data["quadrant_number"] = task.quadrant.number
    data["effective_due_timestamp"] = effective_due_timestamp(task, tz)
    data["reminder_timestamp"] = reminder_timestamp(task, tz)
    data["reminder_description"] = reminder_description(task)
    data["is_overdue"] = is_overdue(task, now, tz)
    data["overdue_hours"] = overdue_hours(task, now, tz)
    data["overdue_expired"] = is_overdue_expired(task, now, tz)
    return data


def tasks_to_data(
    tasks: list[Task], now: int, tz: tzinfo | None = None
) -> list[dict[str, Any]]:
    return [task_to_data(t, now, tz) for t in tasks]
