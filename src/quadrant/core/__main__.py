"""CLI 入口模块 -- python -m quadrant.core <command>

支持的命令：
  sweep-overdue  扫描并标记已逾期的任务
  reminders      列出此刻应提醒的任务
"""

import asyncio
import sys

from .config import get_db_path


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print("用法: python -m quadrant.core <command>")
        print("命令:")
        print("  sweep-overdue  扫描并标记已逾期的任务")
        print("  reminders      列出此刻应提醒的任务")
        sys.exit(1)

    command = sys.argv[1]

    if command == "sweep-overdue":
        asyncio.run(sweep_overdue())
    elif command == "reminders":
        asyncio.run(list_reminders())
    else:
        print(f"未知命令: {command}")
        print("可用命令: sweep-overdue, reminders")
        sys.exit(1)


async def sweep_overdue() -> None:
    """执行一次逾期扫描"""
    from .repository import TaskRepository
    from .store import create_store_group

    db_path = get_db_path()
    print(f"数据库路径: {db_path}")

    store_group = await create_store_group(db_path)
    try:
        count = await TaskRepository(store_group).update_overdue_tasks()
        print(f"已将 {count} 个超期任务标记为已过期")
    finally:
        await store_group.close()


async def list_reminders() -> None:
    """打印此刻应提醒的任务"""
    from .repository import TaskRepository
    from .schedule import effective_due_timestamp, now_millis, overdue_hours
    from .store import create_store_group

    store_group = await create_store_group(get_db_path())
    try:
        now = now_millis()
        reminders = await TaskRepository(store_group).active_reminders(now)
        if not reminders:
            print("当前没有需要提醒的任务")
            return
        for task in reminders:
            hours = overdue_hours(task, now)
            suffix = f"（已过期 {hours} 小时）" if hours else ""
            print(f"#{task.id} [{task.quadrant.number}] {task.title} "
                  f"due={effective_due_timestamp(task)}{suffix}")
    finally:
        await store_group.close()


if __name__ == "__main__":
    main()
