"""枚举定义 -- 象限、任务状态、重复类型、提醒单位

持久化使用枚举名称字符串。旧数据中未知的值按文档约定回落到默认值：
Quadrant -> IMPORTANT_URGENT，TaskStatus -> IN_PROGRESS，
RepeatType -> ONCE，ReminderUnit -> MINUTES。
"""

from enum import StrEnum


class Quadrant(StrEnum):
    """艾森豪威尔四象限"""

    IMPORTANT_URGENT = "IMPORTANT_URGENT"
    IMPORTANT_NOT_URGENT = "IMPORTANT_NOT_URGENT"
    URGENT_NOT_IMPORTANT = "URGENT_NOT_IMPORTANT"
    NOT_IMPORTANT_NOT_URGENT = "NOT_IMPORTANT_NOT_URGENT"

    @property
    def number(self) -> int:
        """象限编号 1..4"""
        return _QUADRANT_NUMBERS[self]

    @classmethod
    def from_number(cls, value: int) -> "Quadrant":
        """从 1..4 的编号解析象限（AI 建议返回的是编号），未知编号回落到重要紧急"""
        for quadrant, number in _QUADRANT_NUMBERS.items():
            if number == value:
                return quadrant
        return cls.IMPORTANT_URGENT

    @classmethod
    def from_db(cls, raw: str | None) -> "Quadrant":
        if not raw:
            return cls.IMPORTANT_URGENT
        try:
            return cls(raw)
        except ValueError:
            return cls.IMPORTANT_URGENT


_QUADRANT_NUMBERS: dict[Quadrant, int] = {
    Quadrant.IMPORTANT_URGENT: 1,
    Quadrant.IMPORTANT_NOT_URGENT: 2,
    Quadrant.URGENT_NOT_IMPORTANT: 3,
    Quadrant.NOT_IMPORTANT_NOT_URGENT: 4,
}


class TaskStatus(StrEnum):
    """任务状态

    手动 set_status 允许任意状态之间切换；
    自动逾期扫描只做 IN_PROGRESS -> OVERDUE 单向流转。
    """

    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    OVERDUE = "OVERDUE"

    @classmethod
    def from_db(cls, raw: str | None) -> "TaskStatus":
        if not raw:
            return cls.IN_PROGRESS
        try:
            return cls(raw)
        except ValueError:
            return cls.IN_PROGRESS


# 逾期扫描不会触碰的状态
SWEEP_EXCLUDED_STATES: frozenset[TaskStatus] = frozenset(
    {TaskStatus.COMPLETED, TaskStatus.OVERDUE}
)


class RepeatType(StrEnum):
    """重复类型（本层只做分类，不展开重复实例）"""

    ONCE = "ONCE"
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"

    @classmethod
    def from_db(cls, raw: str | None) -> "RepeatType":
        if not raw:
            return cls.ONCE
        try:
            return cls(raw)
        except ValueError:
            return cls.ONCE


class ReminderUnit(StrEnum):
    """提醒提前量的单位"""

    MINUTES = "MINUTES"
    HOURS = "HOURS"
    DAYS = "DAYS"

    @property
    def display_name(self) -> str:
        return _UNIT_NAMES[self]

    def to_millis(self, value: int) -> int:
        """把提前量换算为毫秒"""
        return value * _UNIT_MILLIS[self]

    @classmethod
    def from_db(cls, raw: str | None) -> "ReminderUnit":
        if not raw:
            return cls.MINUTES
        try:
            return cls(raw)
        except ValueError:
            return cls.MINUTES


_UNIT_MILLIS: dict[ReminderUnit, int] = {
    ReminderUnit.MINUTES: 60 * 1000,
    ReminderUnit.HOURS: 60 * 60 * 1000,
    ReminderUnit.DAYS: 24 * 60 * 60 * 1000,
}

_UNIT_NAMES: dict[ReminderUnit, str] = {
    ReminderUnit.MINUTES: "分钟",
    ReminderUnit.HOURS: "小时",
    ReminderUnit.DAYS: "天",
}
