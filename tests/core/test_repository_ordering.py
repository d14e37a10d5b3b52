"""TaskRepository 排序测试 -- 置顶、上下移动、跨象限移动"""

from quadrant.core.models import Quadrant, TaskDraft
from quadrant.core.repository import TaskRepository

Q1 = Quadrant.IMPORTANT_URGENT
Q2 = Quadrant.IMPORTANT_NOT_URGENT


async def create_many(repo: TaskRepository, clock, titles, quadrant=Q1) -> list[int]:
    ids = []
    for title in titles:
        ids.append(await repo.upsert(TaskDraft(title=title, quadrant=quadrant)))
        clock.advance(1000)
    return ids


async def listing_ids(repo: TaskRepository, quadrant=Q1) -> list[int]:
    return [t.id for t in await repo.list_quadrant(quadrant)]


class TestCreationOrder:
    async def test_new_task_goes_last(self, repo: TaskRepository, clock):
        ids = await create_many(repo, clock, ["x", "y"])
        a = await repo.upsert(TaskDraft(title="Draft report", quadrant=Q1))
        assert (await repo.get_task(a)).sort_order == clock.now
        assert await listing_ids(repo) == [*ids, a]

    async def test_pinned_precedes_later_unpinned(self, repo: TaskRepository, clock):
        [a] = await create_many(repo, clock, ["A"])
        await repo.toggle_pinned(a)
        [b] = await create_many(repo, clock, ["B"])
        assert await listing_ids(repo) == [a, b]


class TestTogglePinned:
    async def test_pinned_task_gets_lowest_sort_order(self, repo: TaskRepository, clock):
        ids = await create_many(repo, clock, ["a", "b", "c", "d"])
        for task_id in ids:
            assert await repo.toggle_pinned(task_id) is True
            tasks = await repo.list_quadrant(Q1)
            pinned = [t for t in tasks if t.is_pinned]
            me = next(t for t in pinned if t.id == task_id)
            assert all(me.sort_order < t.sort_order for t in pinned if t.id != task_id)
            assert tasks[0].id == task_id

    async def test_only_pinned_task_is_first(self, repo: TaskRepository, clock):
        ids = await create_many(repo, clock, ["a", "b"])
        await repo.toggle_pinned(ids[1])
        assert await listing_ids(repo) == [ids[1], ids[0]]

    async def test_unpin_goes_to_end_of_unpinned(self, repo: TaskRepository, clock):
        ids = await create_many(repo, clock, ["a", "b", "c"])
        await repo.toggle_pinned(ids[0])
        assert await repo.toggle_pinned(ids[0]) is False
        assert await listing_ids(repo) == [ids[1], ids[2], ids[0]]

    async def test_pin_is_scoped_to_quadrant(self, repo: TaskRepository, clock):
        [other] = await create_many(repo, clock, ["other"], quadrant=Q2)
        await repo.toggle_pinned(other)
        [mine] = await create_many(repo, clock, ["mine"])
        before = (await repo.get_task(mine)).sort_order
        await repo.toggle_pinned(mine)
        # Q1 没有其他置顶任务，取自身 sort_order - 1
        assert (await repo.get_task(mine)).sort_order == before - 1


class TestMoveRelative:
    async def test_move_up_swaps_sort_order(self, repo: TaskRepository, clock):
        ids = await create_many(repo, clock, ["a", "b", "c"])
        before = {t.id: t.sort_order for t in await repo.list_quadrant(Q1)}
        assert await repo.move_up(ids[2]) is True
        assert await listing_ids(repo) == [ids[0], ids[2], ids[1]]
        after = {t.id: t.sort_order for t in await repo.list_quadrant(Q1)}
        assert after[ids[2]] == before[ids[1]]
        assert after[ids[1]] == before[ids[2]]
        assert after[ids[0]] == before[ids[0]]

    async def test_move_down(self, repo: TaskRepository, clock):
        ids = await create_many(repo, clock, ["a", "b", "c"])
        assert await repo.move_down(ids[0]) is True
        assert await listing_ids(repo) == [ids[1], ids[0], ids[2]]

    async def test_edges_are_noops(self, repo: TaskRepository, clock):
        ids = await create_many(repo, clock, ["a", "b"])
        assert await repo.move_up(ids[0]) is False
        assert await repo.move_down(ids[1]) is False
        assert await listing_ids(repo) == ids

    async def test_does_not_cross_pin_group(self, repo: TaskRepository, clock):
        ids = await create_many(repo, clock, ["a", "b"])
        await repo.toggle_pinned(ids[0])
        assert await repo.move_up(ids[1]) is False
        assert await repo.move_down(ids[0]) is False
        assert await listing_ids(repo) == ids


class TestMoveToQuadrant:
    async def test_goes_to_end_of_target(self, repo: TaskRepository, clock):
        [moving] = await create_many(repo, clock, ["moving"])
        targets = await create_many(repo, clock, ["t1", "t2"], quadrant=Q2)
        assert await repo.move_to_quadrant(moving, Q2) is True
        task = await repo.get_task(moving)
        assert task.quadrant == Q2
        assert task.sort_order == clock.now
        assert await listing_ids(repo, Q2) == [*targets, moving]
        assert await listing_ids(repo, Q1) == []

    async def test_keeps_pin_state(self, repo: TaskRepository, clock):
        [moving] = await create_many(repo, clock, ["moving"])
        await repo.toggle_pinned(moving)
        await repo.move_to_quadrant(moving, Q2)
        assert (await repo.get_task(moving)).is_pinned is True

    async def test_same_quadrant_is_noop(self, repo: TaskRepository, clock):
        [task_id] = await create_many(repo, clock, ["a"])
        before = await repo.get_task(task_id)
        assert await repo.move_to_quadrant(task_id, Q1) is False
        assert await repo.get_task(task_id) == before
