"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，包含 SQLite 连通性、数据库目录、磁盘空间、逾期扫描器状态。
"""

import shutil
from pathlib import Path

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. sqlite: 数据库连通性
    2. db_dir: 数据库所在目录可访问性
    3. disk_space_mb: 磁盘剩余空间
    4. overdue_sweeper: 后台扫描器是否在运行（未启用时为 disabled，不影响就绪）
    """
    checks = {}
    all_ok = True

    # 1. SQLite 连通性检查
    try:
        store_group = request.app.state.store_group
        async with store_group.read("ready_check"):
            cursor = await store_group.conn.execute("SELECT 1")
            await cursor.fetchone()
        checks["sqlite"] = "ok"
    except Exception as e:
        log.warning("ready_check_failed", check="sqlite", error=str(e))
        checks["sqlite"] = f"error: {str(e)}"
        all_ok = False

    # 2. 数据库目录检查
    db_path = getattr(request.app.state, "db_path", None)
    if db_path is None:
        checks["db_dir"] = "skipped"
    else:
        db_dir = Path(db_path).parent
        if db_dir.exists() and db_dir.is_dir():
            checks["db_dir"] = "ok"
        else:
            checks["db_dir"] = "error: directory does not exist"
            all_ok = False

    # 3. 磁盘空间检查
    try:
        disk_usage = shutil.disk_usage("/")
        checks["disk_space_mb"] = disk_usage.free // (1024 * 1024)
    except OSError:
        checks["disk_space_mb"] = 0
        all_ok = False

    # 4. 逾期扫描器
    sweeper = getattr(request.app.state, "overdue_sweeper", None)
    if sweeper is None:
        checks["overdue_sweeper"] = "disabled"
    else:
        checks["overdue_sweeper"] = "running" if sweeper.running else "stopped"

    status_code = 200 if all_ok else 503
    return JSONResponse(
        status_code=status_code,
        content={
            "status": "ready" if all_ok else "not_ready",
            "checks": checks,
        },
    )
