"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、逾期扫描周期、订阅队列大小等可配置常量。
"""

import os
from datetime import time
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("QUADRANT_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "QUADRANT_DB_PATH",
        str(_get_base_dir() / "sqlite" / "quadrant.db"),
    )


def get_sweep_interval() -> float:
    """获取后台逾期扫描间隔（秒），0 表示关闭后台扫描"""
    return float(os.environ.get("QUADRANT_SWEEP_INTERVAL_S", "60"))


# SSE 心跳间隔（秒）
SSE_HEARTBEAT_INTERVAL: int = int(
    os.environ.get("QUADRANT_SSE_HEARTBEAT_INTERVAL", "15")
)

# 每个订阅者的通知队列容量
SUBSCRIPTION_QUEUE_SIZE: int = int(
    os.environ.get("QUADRANT_SUBSCRIPTION_QUEUE_SIZE", "100")
)

# 过期后继续显示提醒的宽限时长
OVERDUE_GRACE_HOURS: int = 24

# 最近删除缓冲区容量（撤销删除）
UNDO_BUFFER_CAPACITY: int = 8

# 标签规范化后的连接符
TAG_SEPARATOR: str = ", "

# 旧版按天截止日期折算为当天的这个时刻（本地时区）
END_OF_DAY: time = time(23, 59, 59)

MILLIS_PER_HOUR: int = 60 * 60 * 1000
