"""TaskStore SQLite 实现

只提供数据库读写，不提交事务：写操作必须在 StoreGroup.transaction() 内调用，
由调用方统一 commit / rollback。
"""

from collections.abc import Sequence
from datetime import date
from typing import Any

import aiosqlite

from ..models.enums import (
    SWEEP_EXCLUDED_STATES,
    Quadrant,
    ReminderUnit,
    RepeatType,
    TaskStatus,
)
from ..models.task import Task, TaskDraft

_COLUMNS: tuple[str, ...] = (
    "id",
    "title",
    "description",
    "estimated_minutes",
    "due_date",
    "due_timestamp",
    "tags",
    "quadrant",
    "status",
    "is_pinned",
    "reminder_enabled",
    "reminder_interval_value",
    "reminder_interval_unit",
    "sort_order",
    "created_at",
    "updated_at",
    "is_mit",
    "audio_path",
    "repeat_type",
)

_SELECT = f"SELECT {', '.join(_COLUMNS)} FROM tasks"

# 象限内展示顺序：置顶在前，sort_order 升序，最近更新在前
_DISPLAY_ORDER = "ORDER BY is_pinned DESC, sort_order ASC, updated_at DESC"

_COMPLETED = TaskStatus.COMPLETED.value


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    # ---- 单行读写 ----

    async def get_task(self, task_id: int) -> Task | None:
        """根据 id 查询任务"""
        return await self._fetch_one(f"{_SELECT} WHERE id = ?", (task_id,))

    async def create_task(self, draft: TaskDraft, *, sort_order: int, now: int) -> int:
        """插入新任务，id 由存储分配

        Args:
            draft: 已规范化的草稿（draft.id 被忽略）
            sort_order: 初始排序权重
            now: created_at / updated_at

        Returns:
            新任务 id
        """
        values = _draft_values(draft)
        values.update(sort_order=sort_order, created_at=now, updated_at=now)
        columns = list(values)
        cursor = await self._conn.execute(
            f"INSERT INTO tasks ({', '.join(columns)}) "
            f"VALUES ({', '.join('?' for _ in columns)})",
            tuple(values.values()),
        )
        if cursor.lastrowid is None:
            raise RuntimeError("SQLite did not return lastrowid for tasks insert")
        return int(cursor.lastrowid)

    async def restore_task(self, task: Task) -> None:
        """按完整记录重新插入（保留原 id 与所有字段），同 id 存在时整行覆盖"""
        values = _task_values(task)
        await self._conn.execute(
            f"INSERT OR REPLACE INTO tasks ({', '.join(_COLUMNS)}) "
            f"VALUES ({', '.join('?' for _ in _COLUMNS)})",
            tuple(values[c] for c in _COLUMNS),
        )

    async def update_task(self, task: Task) -> None:
        """整行更新（created_at 与 id 不变）"""
        values = _task_values(task)
        columns = [c for c in _COLUMNS if c not in ("id", "created_at")]
        await self._conn.execute(
            f"UPDATE tasks SET {', '.join(f'{c} = ?' for c in columns)} WHERE id = ?",
            (*(values[c] for c in columns), task.id),
        )

    async def delete_task(self, task_id: int) -> bool:
        """删除任务，返回是否确实删除了一行"""
        cursor = await self._conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        return cursor.rowcount == 1

    # ---- 排序相关 ----

    async def list_by_quadrant(self, quadrant: Quadrant) -> list[Task]:
        """象限内全部任务，按展示顺序"""
        return await self._fetch_all(
            f"{_SELECT} WHERE quadrant = ? {_DISPLAY_ORDER}",
            (quadrant.value,),
        )

    async def min_pinned_sort_order(self, quadrant: Quadrant) -> int | None:
        return await self._scalar(
            "SELECT MIN(sort_order) FROM tasks WHERE quadrant = ? AND is_pinned = 1",
            (quadrant.value,),
        )

    async def max_unpinned_sort_order(self, quadrant: Quadrant) -> int | None:
        return await self._scalar(
            "SELECT MAX(sort_order) FROM tasks WHERE quadrant = ? AND is_pinned = 0",
            (quadrant.value,),
        )

    # ---- MIT ----

    async def get_mit(self) -> Task | None:
        """当前 MIT（已完成的任务不算）"""
        return await self._fetch_one(
            f"{_SELECT} WHERE is_mit = 1 AND status != ? LIMIT 1",
            (_COMPLETED,),
        )

    async def clear_all_mit(self) -> int:
        cursor = await self._conn.execute("UPDATE tasks SET is_mit = 0 WHERE is_mit = 1")
        return cursor.rowcount

    async def set_mit(self, task_id: int) -> bool:
        """把 MIT 标记设到指定任务上；任务不存在或已完成时不生效"""
        cursor = await self._conn.execute(
            "UPDATE tasks SET is_mit = 1 WHERE id = ? AND status != ?",
            (task_id, _COMPLETED),
        )
        return cursor.rowcount == 1

    # ---- 逾期扫描 ----

    async def list_overdue_candidates(self) -> list[Task]:
        """有截止信息且状态不在 COMPLETED / OVERDUE 的任务

        有效截止时间涉及本地时区折算，由调用方在 Python 侧比较。
        """
        excluded = [s.value for s in SWEEP_EXCLUDED_STATES]
        return await self._fetch_all(
            f"""
            {_SELECT}
            WHERE status NOT IN ({', '.join('?' for _ in excluded)})
              AND (due_timestamp IS NOT NULL OR due_date IS NOT NULL)
            ORDER BY id ASC
            """,
            tuple(excluded),
        )

    async def mark_overdue(self, task_ids: Sequence[int], now: int) -> int:
        """批量把任务置为 OVERDUE，已是 COMPLETED / OVERDUE 的行不会被触碰

        Returns:
            实际更新的行数
        """
        if not task_ids:
            return 0
        excluded = [s.value for s in SWEEP_EXCLUDED_STATES]
        cursor = await self._conn.execute(
            f"""
            UPDATE tasks
            SET status = ?, updated_at = ?
            WHERE id IN ({', '.join('?' for _ in task_ids)})
              AND status NOT IN ({', '.join('?' for _ in excluded)})
            """,
            (TaskStatus.OVERDUE.value, now, *task_ids, *excluded),
        )
        return cursor.rowcount

    # ---- 查询 ----

    async def list_reminder_candidates(self) -> list[Task]:
        """开启提醒、未完成、有截止信息的任务"""
        return await self._fetch_all(
            f"""
            {_SELECT}
            WHERE status != ?
              AND reminder_enabled = 1
              AND (due_timestamp IS NOT NULL OR due_date IS NOT NULL)
            ORDER BY due_timestamp ASC, due_date ASC
            """,
            (_COMPLETED,),
        )

    async def list_active(self) -> list[Task]:
        """全部未完成任务"""
        return await self._fetch_all(
            f"{_SELECT} WHERE status != ? ORDER BY quadrant ASC, is_pinned DESC, sort_order ASC",
            (_COMPLETED,),
        )

    async def list_today_by_quadrant(
        self,
        quadrant: Quadrant,
        today: date,
        day_start: int,
        day_end: int,
    ) -> list[Task]:
        """象限内"今天"要处理的未完成任务

        截止日期为今天或之前、没有截止日期、精确截止时间不晚于今天结束、
        或今天创建的任务。
        """
        return await self._fetch_all(
            f"""
            {_SELECT}
            WHERE quadrant = ?
              AND status != ?
              AND (
                due_date IS NULL
                OR due_date <= ?
                OR (due_timestamp IS NOT NULL AND due_timestamp <= ?)
                OR (created_at >= ? AND created_at <= ?)
              )
            {_DISPLAY_ORDER}
            """,
            (quadrant.value, _COMPLETED, today.isoformat(), day_end, day_start, day_end),
        )

    async def list_by_due_range(
        self,
        start: date,
        end: date,
        start_ms: int,
        end_ms: int,
    ) -> list[Task]:
        """截止日期或精确截止时间落在区间内的任务（闭区间）"""
        return await self._fetch_all(
            f"""
            {_SELECT}
            WHERE (due_date IS NOT NULL AND due_date >= ? AND due_date <= ?)
               OR (due_timestamp IS NOT NULL AND due_timestamp >= ? AND due_timestamp <= ?)
            ORDER BY due_timestamp ASC, due_date ASC, quadrant ASC
            """,
            (start.isoformat(), end.isoformat(), start_ms, end_ms),
        )

    async def list_by_created_range(self, start_ms: int, end_ms: int) -> list[Task]:
        return await self._fetch_all(
            f"{_SELECT} WHERE created_at >= ? AND created_at <= ? ORDER BY created_at ASC",
            (start_ms, end_ms),
        )

    async def list_all(self) -> list[Task]:
        return await self._fetch_all(
            f"{_SELECT} ORDER BY due_timestamp ASC, due_date ASC, quadrant ASC, updated_at DESC"
        )

    async def count_tasks(self) -> int:
        return await self._scalar("SELECT COUNT(*) FROM tasks") or 0

    # ---- 内部工具 ----

    async def _fetch_one(self, sql: str, params: tuple[Any, ...] = ()) -> Task | None:
        cursor = await self._conn.execute(sql, params)
        row = await cursor.fetchone()
        if row is None:
            return None
        return _row_to_task(row)

    async def _fetch_all(self, sql: str, params: tuple[Any, ...] = ()) -> list[Task]:
        cursor = await self._conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [_row_to_task(row) for row in rows]

    async def _scalar(self, sql: str, params: tuple[Any, ...] = ()) -> int | None:
        cursor = await self._conn.execute(sql, params)
        row = await cursor.fetchone()
        if row is None or row[0] is None:
            return None
        return int(row[0])


def _draft_values(draft: TaskDraft) -> dict[str, Any]:
    """草稿中可写入的列"""
    return {
        "title": draft.title,
        "description": draft.description,
        "estimated_minutes": draft.estimated_minutes,
        "due_date": draft.due_date.isoformat() if draft.due_date else None,
        "due_timestamp": draft.due_timestamp,
        "tags": draft.tags,
        "quadrant": draft.quadrant.value,
        "status": draft.status.value,
        "is_pinned": int(draft.is_pinned),
        "reminder_enabled": int(draft.reminder_enabled),
        "reminder_interval_value": draft.reminder_interval_value,
        "reminder_interval_unit": draft.reminder_interval_unit.value,
        "is_mit": int(draft.is_mit),
        "audio_path": draft.audio_path,
        "repeat_type": draft.repeat_type.value,
    }


def _task_values(task: Task) -> dict[str, Any]:
    values = _draft_values(task.to_draft())
    values.update(
        id=task.id,
        sort_order=task.sort_order,
        created_at=task.created_at,
        updated_at=task.updated_at,
    )
    return values


def _row_to_task(row: Sequence[Any]) -> Task:
    """将数据库行转换为 Task 模型（列顺序与 _COLUMNS 一致）"""
    data = dict(zip(_COLUMNS, row, strict=True))
    return Task(
        id=data["id"],
        title=data["title"],
        description=data["description"] or "",
        estimated_minutes=data["estimated_minutes"],
        due_date=date.fromisoformat(data["due_date"]) if data["due_date"] else None,
        due_timestamp=data["due_timestamp"],
        tags=data["tags"] or "",
        quadrant=Quadrant.from_db(data["quadrant"]),
        status=TaskStatus.from_db(data["status"]),
        is_pinned=bool(data["is_pinned"]),
        reminder_enabled=bool(data["reminder_enabled"]),
        reminder_interval_value=data["reminder_interval_value"],
        reminder_interval_unit=ReminderUnit.from_db(data["reminder_interval_unit"]),
        sort_order=data["sort_order"],
        created_at=data["created_at"],
        updated_at=data["updated_at"],
        is_mit=bool(data["is_mit"]),
        audio_path=data["audio_path"],
        repeat_type=RepeatType.from_db(data["repeat_type"]),
    )
