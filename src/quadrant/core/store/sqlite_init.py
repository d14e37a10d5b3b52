"""SQLite 数据库初始化 -- PRAGMA 配置 + tasks 表 DDL + 增量迁移 + 索引

schema 演进只允许"加列"：旧库缺失的列通过 PRAGMA table_info 检测后
ALTER TABLE ADD COLUMN 补齐，并带上文档约定的默认值。
使用 aiosqlite 异步操作。
"""

import aiosqlite
import structlog

log = structlog.get_logger()

# tasks 表 DDL（首个版本的列）
_TASKS_DDL = """
CREATE TABLE IF NOT EXISTS tasks (
    id                 INTEGER PRIMARY KEY AUTOINCREMENT,
    title              TEXT NOT NULL,
    description        TEXT NOT NULL DEFAULT '',
    estimated_minutes  INTEGER,
    due_date           TEXT,
    tags               TEXT NOT NULL DEFAULT '',
    quadrant           TEXT NOT NULL DEFAULT 'IMPORTANT_URGENT',
    status             TEXT NOT NULL DEFAULT 'IN_PROGRESS',
    is_pinned          INTEGER NOT NULL DEFAULT 0,
    sort_order         INTEGER NOT NULL,
    created_at         INTEGER NOT NULL,
    updated_at         INTEGER NOT NULL
);
"""

# 后续版本新增的列：(列名, 声明)。新列必须可空或带默认值
_ADDED_COLUMNS: list[tuple[str, str]] = [
    ("reminder_enabled", "INTEGER NOT NULL DEFAULT 0"),
    ("reminder_interval_value", "INTEGER"),
    ("reminder_interval_unit", "TEXT NOT NULL DEFAULT 'MINUTES'"),
    ("is_mit", "INTEGER NOT NULL DEFAULT 0"),
    ("due_timestamp", "INTEGER"),
    ("audio_path", "TEXT"),
    ("repeat_type", "TEXT NOT NULL DEFAULT 'ONCE'"),
]

_TASKS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_tasks_quadrant ON tasks(quadrant);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_quadrant_pinned ON tasks(quadrant, is_pinned);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_quadrant_sort ON tasks(quadrant, sort_order);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_status_due ON tasks(status, due_timestamp);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_mit ON tasks(is_mit);",
]


async def migrate_columns(conn: aiosqlite.Connection) -> list[str]:
    """补齐旧库缺失的列

    Returns:
        本次新增的列名
    """
    cursor = await conn.execute("PRAGMA table_info(tasks)")
    existing = {row[1] for row in await cursor.fetchall()}

    added: list[str] = []
    for name, decl in _ADDED_COLUMNS:
        if name in existing:
            continue
        await conn.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
        added.append(name)
        log.info("tasks_column_added", column=name)
    return added


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 迁移 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 创建表并补齐新增列
    await conn.execute(_TASKS_DDL)
    await migrate_columns(conn)

    # 创建索引
    for idx_sql in _TASKS_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
