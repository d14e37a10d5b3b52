"""复盘统计 -- 对一批任务快照做纯计算"""

from collections import Counter
from collections.abc import Iterable

from .models.enums import Quadrant, TaskStatus
from .models.stats import QuadrantStats, ReviewStats, TagCount
from .models.task import Task, split_tags

IMPORTANT_QUADRANTS: frozenset[Quadrant] = frozenset(
    {Quadrant.IMPORTANT_URGENT, Quadrant.IMPORTANT_NOT_URGENT}
)


def tag_counts(tasks: Iterable[Task]) -> list[TagCount]:
    """标签出现次数，按次数倒序、名称升序"""
    counter: Counter[str] = Counter()
    for task in tasks:
        counter.update(split_tags(task.tags))
    ordered = sorted(counter.items(), key=lambda item: (-item[1], item[0]))
    return [TagCount(name=name, count=count) for name, count in ordered]


def review_stats(tasks: Iterable[Task]) -> ReviewStats:
    snapshot = list(tasks)
    total = len(snapshot)
    by_status = Counter(t.status for t in snapshot)
    completed = by_status[TaskStatus.COMPLETED]

    important = [t for t in snapshot if t.quadrant in IMPORTANT_QUADRANTS]
    important_completed = sum(1 for t in important if t.status == TaskStatus.COMPLETED)

    quadrants = []
    for quadrant in Quadrant:
        members = [t for t in snapshot if t.quadrant == quadrant]
        quadrants.append(
            QuadrantStats(
                quadrant=quadrant,
                total=len(members),
                completed=sum(1 for t in members if t.status == TaskStatus.COMPLETED),
            )
        )

    return ReviewStats(
        total=total,
        in_progress=by_status[TaskStatus.IN_PROGRESS],
        completed=completed,
        overdue=by_status[TaskStatus.OVERDUE],
        completion_rate=completed / total if total else 0.0,
        important_completion_rate=(
            important_completed / len(important) if important else 0.0
        ),
        quadrants=quadrants,
        tags=tag_counts(snapshot),
    )
