"""MIT / 提醒 / 逾期扫描 / 统计 API 测试"""

from httpx import AsyncClient

MINUTE = 60 * 1000


async def create(client: AsyncClient, **fields) -> int:
    resp = await client.post("/api/tasks", json=fields)
    return resp.json()["task_id"]


class TestMitApi:
    async def test_set_get_clear(self, client: AsyncClient):
        assert (await client.get("/api/mit")).json() == {"task": None}
        a = await create(client, title="A")
        b = await create(client, title="B")

        assert (await client.put(f"/api/mit/{a}")).json()["applied"] is True
        assert (await client.put(f"/api/mit/{b}")).json()["applied"] is True
        assert (await client.get("/api/mit")).json()["task"]["id"] == b
        assert (await client.get(f"/api/tasks/{a}")).json()["task"]["is_mit"] is False

        assert (await client.delete("/api/mit")).json() == {"cleared": 1}
        assert (await client.get("/api/mit")).json() == {"task": None}

    async def test_set_missing_keeps_current(self, client: AsyncClient):
        a = await create(client, title="A")
        await client.put(f"/api/mit/{a}")
        assert (await client.put("/api/mit/999")).json()["applied"] is False
        assert (await client.get("/api/mit")).json()["task"]["id"] == a

    async def test_suggested(self, client: AsyncClient):
        await create(client, title="urgent", quadrant="IMPORTANT_URGENT")
        plan = await create(client, title="plan", quadrant="IMPORTANT_NOT_URGENT")
        resp = await client.get("/api/mit/suggested")
        assert resp.json()["task"]["id"] == plan


class TestRemindersApi:
    async def test_active_reminders(self, client: AsyncClient, clock):
        due = clock.now + 10 * MINUTE
        task_id = await create(
            client,
            title="开会",
            due_timestamp=due,
            reminder_enabled=True,
            reminder_interval_value=30,
        )
        await create(client, title="no reminder", due_timestamp=due)
        body = (await client.get("/api/reminders")).json()
        assert body["now"] == clock.now
        assert [t["id"] for t in body["tasks"]] == [task_id]
        assert body["tasks"][0]["reminder_timestamp"] == due - 30 * MINUTE
        assert body["tasks"][0]["reminder_description"] == "提前 30 分钟提醒"

    async def test_overdue_sweep(self, client: AsyncClient, clock):
        task_id = await create(client, title="C", due_timestamp=clock.now - 1000)
        assert (await client.post("/api/overdue/sweep")).json() == {"updated": 1}
        assert (await client.post("/api/overdue/sweep")).json() == {"updated": 0}
        task = (await client.get(f"/api/tasks/{task_id}")).json()["task"]
        assert task["status"] == "OVERDUE"
        assert task["is_overdue"] is True

    async def test_stats(self, client: AsyncClient, clock):
        a = await create(client, title="a", tags="work", quadrant="IMPORTANT_URGENT")
        await create(client, title="b", tags="home", quadrant="NOT_IMPORTANT_NOT_URGENT")
        await client.post(f"/api/tasks/{a}/complete")
        body = (await client.get("/api/stats")).json()
        assert body["total"] == 2
        assert body["completed"] == 1
        assert body["important_completion_rate"] == 1.0
        assert {t["name"] for t in body["tags"]} == {"work", "home"}

        ranged = (await client.get("/api/stats", params={"start": 0, "end": 1})).json()
        assert ranged["total"] == 0
