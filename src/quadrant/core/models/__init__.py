"""Quadrant Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    SWEEP_EXCLUDED_STATES,
    Quadrant,
    ReminderUnit,
    RepeatType,
    TaskStatus,
)
from .stats import QuadrantStats, ReviewStats, TagCount
from .task import Task, TaskDraft, normalize_tags, split_tags

__all__ = [
    # 枚举
    "Quadrant",
    "TaskStatus",
    "RepeatType",
    "ReminderUnit",
    "SWEEP_EXCLUDED_STATES",
    # Task
    "Task",
    "TaskDraft",
    "normalize_tags",
    "split_tags",
    # 统计
    "ReviewStats",
    "QuadrantStats",
    "TagCount",
]
