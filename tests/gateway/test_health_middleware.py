"""健康检查 + 中间件测试

测试内容：
1. GET /health 返回 200 + ok
2. GET /ready 正常 200，SQLite 不可用 503
3. X-Request-ID 响应头 + task_id 提取
4. StoreError 映射为 503 STORE_UNAVAILABLE
"""

from httpx import AsyncClient
from quadrant.gateway.middleware.trace_mw import extract_task_id


class TestHealthCheck:
    async def test_health_returns_200(self, client: AsyncClient):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    async def test_ready_returns_200(self, client: AsyncClient):
        resp = await client.get("/ready")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ready"
        assert data["checks"]["sqlite"] == "ok"
        assert data["checks"]["db_dir"] == "ok"
        assert data["checks"]["overdue_sweeper"] == "disabled"
        assert isinstance(data["checks"]["disk_space_mb"], int)

    async def test_ready_503_when_db_closed(self, client: AsyncClient, test_app):
        await test_app.state.store_group.conn.close()
        resp = await client.get("/ready")
        assert resp.status_code == 503
        assert resp.json()["status"] == "not_ready"
        assert resp.json()["checks"]["sqlite"].startswith("error")


class TestMiddleware:
    async def test_request_id_header(self, client: AsyncClient):
        first = await client.get("/health")
        second = await client.get("/health")
        assert len(first.headers["X-Request-ID"]) == 26
        assert first.headers["X-Request-ID"] != second.headers["X-Request-ID"]

    def test_extract_task_id(self):
        assert extract_task_id("/api/tasks/12/pin") == 12
        assert extract_task_id("/api/mit/7") == 7
        assert extract_task_id("/api/tasks") is None
        assert extract_task_id("/api/mit/suggested") is None
        assert extract_task_id("/api/quadrants/IMPORTANT_URGENT/tasks") is None


class TestStoreErrors:
    async def test_store_failure_maps_to_503(self, client: AsyncClient, test_app):
        await test_app.state.store_group.conn.execute("DROP TABLE tasks")
        resp = await client.post("/api/tasks", json={"title": "a"})
        assert resp.status_code == 503
        assert resp.json()["error"]["code"] == "STORE_UNAVAILABLE"
