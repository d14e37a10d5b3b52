"""最近删除缓冲区 -- 支持撤销删除

固定容量（默认 8）的 LRU：槽位数组存放记录，id -> 槽位下标做索引，
每次写入/访问刷新槽位的访问序号，满了以后淘汰序号最小（最久未访问）的槽位。
"""

from dataclasses import dataclass

from .config import UNDO_BUFFER_CAPACITY
from .models.task import Task


@dataclass(slots=True)
class _Slot:
    task: Task
    touched: int


class UndoBuffer:
    """有界的已删除任务缓冲区"""

    def __init__(self, capacity: int = UNDO_BUFFER_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._slots: list[_Slot | None] = [None] * capacity
        self._index: dict[int, int] = {}
        self._clock = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._index

    def put(self, task: Task) -> Task | None:
        """放入一条已删除记录

        Returns:
            因容量不足被淘汰的记录，没有淘汰时为 None
        """
        evicted: Task | None = None
        slot_no = self._index.get(task.id)
        if slot_no is None:
            slot_no = self._free_slot()
            if slot_no is None:
                slot_no, old = self._oldest_slot()
                evicted = old.task
                del self._index[old.task.id]
            self._index[task.id] = slot_no
        self._slots[slot_no] = _Slot(task=task, touched=self._tick())
        return evicted

    def get(self, task_id: int) -> Task | None:
        """读取记录（刷新访问序号）"""
        slot_no = self._index.get(task_id)
        slot = None if slot_no is None else self._slots[slot_no]
        if slot is None:
            return None
        slot.touched = self._tick()
        return slot.task

    def pop(self, task_id: int) -> Task | None:
        """取出并移除记录（撤销删除时使用）"""
        slot_no = self._index.pop(task_id, None)
        if slot_no is None:
            return None
        slot = self._slots[slot_no]
        self._slots[slot_no] = None
        return slot.task if slot else None

    def ids(self) -> list[int]:
        """按最近访问在前列出缓冲区中的 id"""
        live = [s for s in self._slots if s is not None]
        live.sort(key=lambda s: s.touched, reverse=True)
        return [s.task.id for s in live]

    def _tick(self) -> int:
        self._clock += 1
        return self._clock

    def _free_slot(self) -> int | None:
        for i, slot in enumerate(self._slots):
            if slot is None:
                return i
        return None

    def _oldest_slot(self) -> tuple[int, _Slot]:
        """最久未访问的槽位，只在槽位全满时调用"""
        live = [(i, s) for i, s in enumerate(self._slots) if s is not None]
        return min(live, key=lambda pair: pair[1].touched)
