"""复盘统计测试"""

from quadrant.core.models import Quadrant, Task, TaskStatus
from quadrant.core.stats import review_stats, tag_counts


def make_task(task_id: int, quadrant: Quadrant, status: TaskStatus, tags: str = "") -> Task:
    return Task(
        id=task_id,
        title=f"t{task_id}",
        quadrant=quadrant,
        status=status,
        tags=tags,
        sort_order=0,
        created_at=0,
        updated_at=0,
    )


class TestReviewStats:
    def test_empty(self):
        stats = review_stats([])
        assert stats.total == 0
        assert stats.completion_rate == 0.0
        assert stats.important_completion_rate == 0.0
        assert len(stats.quadrants) == 4

    def test_counts_and_rates(self):
        tasks = [
            make_task(1, Quadrant.IMPORTANT_URGENT, TaskStatus.COMPLETED, "work"),
            make_task(2, Quadrant.IMPORTANT_NOT_URGENT, TaskStatus.IN_PROGRESS, "work, home"),
            make_task(3, Quadrant.URGENT_NOT_IMPORTANT, TaskStatus.COMPLETED, "home"),
            make_task(4, Quadrant.NOT_IMPORTANT_NOT_URGENT, TaskStatus.OVERDUE, "work"),
        ]
        stats = review_stats(tasks)
        assert (stats.total, stats.completed, stats.in_progress, stats.overdue) == (4, 2, 1, 1)
        assert stats.completion_rate == 0.5
        assert stats.important_completion_rate == 0.5

        by_quadrant = {q.quadrant: q for q in stats.quadrants}
        assert by_quadrant[Quadrant.IMPORTANT_URGENT].completion_rate == 1.0
        assert by_quadrant[Quadrant.IMPORTANT_NOT_URGENT].completed == 0

    def test_tag_counts_sorted_by_count_then_name(self):
        tasks = [
            make_task(1, Quadrant.IMPORTANT_URGENT, TaskStatus.IN_PROGRESS, "b, a"),
            make_task(2, Quadrant.IMPORTANT_URGENT, TaskStatus.IN_PROGRESS, "a, c"),
            make_task(3, Quadrant.IMPORTANT_URGENT, TaskStatus.IN_PROGRESS, "c, b"),
            make_task(4, Quadrant.IMPORTANT_URGENT, TaskStatus.IN_PROGRESS, "c"),
        ]
        assert [(t.name, t.count) for t in tag_counts(tasks)] == [("c", 3), ("a", 2), ("b", 2)]
