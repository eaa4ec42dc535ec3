"""规划 API 测试

测试内容：
1. 生成 -> 列表 -> 详情
2. mini-assessment 级联
3. 错误映射（400 / 404 / 503）
"""

from peezy.planner.exceptions import TaskWriteError

GENERATE_BODY = {
    "assessment": {"hireMovers": "Get me quotes", "childrenCount": 1, "petType": None},
    "move_date": "2025-01-31",
    "today": "2025-01-01",
}


class TestGenerateRoute:
    """POST /api/users/{user_id}/tasks/generate"""

    async def test_generate_and_list(self, client):
        resp = await client.post("/api/users/u1/tasks/generate", json=GENERATE_BODY)
        assert resp.status_code == 200
        body = resp.json()
        assert "book_movers" in body["task_ids"]
        assert "school_records" in body["task_ids"]
        assert body["count"] == len(body["task_ids"])

        resp = await client.get("/api/users/u1/tasks")
        tasks = resp.json()["tasks"]
        assert len(tasks) == body["count"]
        due_dates = [t["due_date"] for t in tasks]
        assert due_dates == sorted(due_dates)

    async def test_geography_derives_fields(self, client):
        """地理信息推导 moveDistance"""
        body = {**GENERATE_BODY, "geography": {"distance_miles": 5, "from_state": "CA", "to_state": "CA"}}
        resp = await client.post("/api/users/u1/tasks/generate", json=body)
        assert resp.status_code == 200

    async def test_blank_user_rejected(self, client):
        resp = await client.post("/api/users/%20/tasks/generate", json=GENERATE_BODY)
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "MISSING_USER"

    async def test_invalid_body(self, client):
        resp = await client.post("/api/users/u1/tasks/generate", json={"assessment": {}})
        assert resp.status_code == 422

    async def test_write_failure_is_503(self, client, gateway_app, monkeypatch):
        service = gateway_app.state.planner_service

        async def failing_generate(*args, **kwargs):
            raise TaskWriteError("u1", OSError("disk full"))

        monkeypatch.setattr(service, "generate", failing_generate)
        resp = await client.post("/api/users/u1/tasks/generate", json=GENERATE_BODY)
        assert resp.status_code == 503
        assert resp.json()["error"]["code"] == "TASK_WRITE_FAILED"


class TestMiniAssessmentRoute:
    """POST /api/users/{user_id}/mini-assessments/{parent_id}"""

    async def test_cascade(self, client):
        await client.post("/api/users/u1/tasks/generate", json=GENERATE_BODY)
        resp = await client.post(
            "/api/users/u1/mini-assessments/address_change_financial",
            json={
                "answers": {"hasBankAccount": "Yes", "creditCards": 3},
                "move_date": "2025-01-31",
                "today": "2025-01-01",
            },
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["parent_task_found"] is True
        assert body["task_ids"] == ["update_bank_address", "update_credit_card_address"]

        resp = await client.get(
            "/api/users/u1/tasks", params={"parent_id": "address_change_financial"}
        )
        assert len(resp.json()["tasks"]) == 2

        resp = await client.get("/api/users/u1/tasks", params={"status": "Completed"})
        assert [t["task_id"] for t in resp.json()["tasks"]] == ["address_change_financial"]


class TestTaskDetailRoute:
    """GET /api/users/{user_id}/tasks/{task_id}"""

    async def test_detail(self, client):
        await client.post("/api/users/u1/tasks/generate", json=GENERATE_BODY)
        resp = await client.get("/api/users/u1/tasks/assessment_complete")
        assert resp.status_code == 200
        task = resp.json()["task"]
        assert task["urgency_percentage"] == 100
        assert task["source"] == "system"

    async def test_not_found(self, client):
        resp = await client.get("/api/users/u1/tasks/missing")
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "TASK_NOT_FOUND"

    async def test_other_user_cannot_see(self, client):
        await client.post("/api/users/u1/tasks/generate", json=GENERATE_BODY)
        resp = await client.get("/api/users/u2/tasks/book_movers")
        assert resp.status_code == 404

    async def test_invalid_status_filter(self, client):
        resp = await client.get("/api/users/u1/tasks", params={"status": "Bogus"})
        assert resp.status_code == 422


class TestTaskListIsolation:
    """列表接口只返回已提交的任务"""

    async def test_uncommitted_batch_not_listed(self, client, gateway_app):
        from datetime import UTC, date, datetime

        from peezy.planner.models import GeneratedTask

        now = datetime(2025, 1, 1, tzinfo=UTC)
        store_group = gateway_app.state.store_group
        task = GeneratedTask(
            task_id="pending_task",
            user_id="u1",
            title="Pending",
            urgency_percentage=50,
            due_date=date(2025, 1, 10),
            created_at=now,
            updated_at=now,
        )

        async with store_group.atomic():
            await store_group.task_store.upsert_tasks([task])
            resp = await client.get("/api/users/u1/tasks")
            assert resp.status_code == 200
            assert resp.json()["tasks"] == []
            resp = await client.get("/api/users/u1/tasks/pending_task")
            assert resp.status_code == 404

        resp = await client.get("/api/users/u1/tasks")
        assert [t["task_id"] for t in resp.json()["tasks"]] == ["pending_task"]
