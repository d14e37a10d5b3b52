"""Task / TaskDraft / 枚举 单元测试

测试内容：
1. 标签规范化（去空白、去重、幂等）
2. 枚举解析与旧值回落
3. 草稿校验与回填
"""

from datetime import date

import pytest
from pydantic import ValidationError as PydanticValidationError
from quadrant.core.models import (
    Quadrant,
    ReminderUnit,
    RepeatType,
    Task,
    TaskDraft,
    TaskStatus,
    normalize_tags,
    split_tags,
)


class TestNormalizeTags:
    def test_trims_and_drops_empty(self):
        assert normalize_tags(" work ,, home ,") == "work, home"

    def test_deduplicates_preserving_first_seen_order(self):
        assert normalize_tags("b, a, b, c, a") == "b, a, c"

    def test_empty_input(self):
        assert normalize_tags("") == ""
        assert normalize_tags(" , ,") == ""

    @pytest.mark.parametrize(
        "raw",
        ["a,b", " x , y ,x", "单,  双 ,单", ",,,", "one", "a , , b , a , c"],
    )
    def test_idempotent(self, raw: str):
        once = normalize_tags(raw)
        assert normalize_tags(once) == once

    def test_split_tags(self):
        assert split_tags("work, home") == ["work", "home"]
        assert split_tags("") == []


class TestEnums:
    def test_quadrant_numbers(self):
        assert [q.number for q in Quadrant] == [1, 2, 3, 4]

    def test_quadrant_from_number(self):
        assert Quadrant.from_number(2) == Quadrant.IMPORTANT_NOT_URGENT
        assert Quadrant.from_number(4) == Quadrant.NOT_IMPORTANT_NOT_URGENT

    def test_quadrant_from_unknown_number(self):
        assert Quadrant.from_number(0) == Quadrant.IMPORTANT_URGENT
        assert Quadrant.from_number(9) == Quadrant.IMPORTANT_URGENT

    def test_from_db_defaults(self):
        """旧库中的未知值回落到约定默认值"""
        assert Quadrant.from_db("LEGACY") == Quadrant.IMPORTANT_URGENT
        assert TaskStatus.from_db(None) == TaskStatus.IN_PROGRESS
        assert TaskStatus.from_db("CANCELLED") == TaskStatus.IN_PROGRESS
        assert RepeatType.from_db("") == RepeatType.ONCE
        assert ReminderUnit.from_db("WEEKS") == ReminderUnit.MINUTES

    def test_from_db_known_values(self):
        assert TaskStatus.from_db("OVERDUE") == TaskStatus.OVERDUE
        assert RepeatType.from_db("WEEKLY") == RepeatType.WEEKLY

    def test_reminder_unit_to_millis(self):
        assert ReminderUnit.MINUTES.to_millis(30) == 30 * 60 * 1000
        assert ReminderUnit.HOURS.to_millis(2) == 2 * 60 * 60 * 1000
        assert ReminderUnit.DAYS.to_millis(1) == 24 * 60 * 60 * 1000

    def test_reminder_unit_display_name(self):
        assert ReminderUnit.HOURS.display_name == "小时"


class TestTaskDraft:
    def test_defaults(self):
        draft = TaskDraft(title="写周报")
        assert draft.id is None
        assert draft.quadrant == Quadrant.IMPORTANT_URGENT
        assert draft.status == TaskStatus.IN_PROGRESS
        assert draft.repeat_type == RepeatType.ONCE
        assert draft.reminder_interval_unit == ReminderUnit.MINUTES
        assert draft.is_mit is False

    def test_rejects_non_positive_reminder_interval(self):
        with pytest.raises(PydanticValidationError):
            TaskDraft(title="x", reminder_enabled=True, reminder_interval_value=0)

    def test_rejects_negative_estimate(self):
        with pytest.raises(PydanticValidationError):
            TaskDraft(title="x", estimated_minutes=-5)

    def test_task_to_draft_round_trip_fields(self):
        task = Task(
            id=7,
            title="准备演示",
            tags="work, demo",
            quadrant=Quadrant.IMPORTANT_NOT_URGENT,
            due_date=date(2026, 3, 12),
            reminder_enabled=True,
            reminder_interval_value=2,
            reminder_interval_unit=ReminderUnit.HOURS,
            is_pinned=True,
            sort_order=100,
            created_at=100,
            updated_at=200,
        )
        draft = task.to_draft()
        assert draft.id == 7
        assert draft.title == "准备演示"
        assert draft.quadrant == Quadrant.IMPORTANT_NOT_URGENT
        assert draft.due_date == date(2026, 3, 12)
        assert draft.reminder_interval_unit == ReminderUnit.HOURS
        assert draft.is_pinned is True
        assert "sort_order" not in draft.model_dump()
