"""Integration tests for API endpoints.

These tests verify API endpoints work correctly end-to-end.
"""

from datetime import timedelta


class TestHealth:
    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestTaskEndpoints:
    """Test task CRUD API endpoints."""

    def _create(self, test_client, today, **overrides):
        payload = {
            "section_id": "official",
            "title": "Write design doc",
            "due_date": today.isoformat(),
            "category": "Projects",
        }
        payload.update(overrides)
        return test_client.post("/api/tasks", json=payload)

    def test_create_task(self, test_client, today):
        """Test POST /api/tasks endpoint."""
        response = self._create(test_client, today)

        assert response.status_code == 201
        task = response.json()["task"]
        assert task["title"] == "Write design doc"
        assert task["status"] == "todo"
        assert task["section_id"] == "official"

    def test_create_task_with_sub_goals(self, test_client, today):
        response = self._create(
            test_client,
            today,
            section_id="personal",
            sub_goals=[
                {"title": "Outline", "due_date": today.isoformat(), "status": "completed"},
                {"title": "Draft", "due_date": today.isoformat()},
            ],
        )
        task = response.json()["task"]
        assert task["progress"] == 50
        assert [sg["completed"] for sg in task["sub_goals"]] == [True, False]

    def test_create_task_validation_error(self, test_client, today):
        """Missing title returns 400 with details."""
        response = test_client.post("/api/tasks", json={"section_id": "official", "due_date": today.isoformat()})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request data"
        assert body["details"]

    def test_unknown_section_is_rejected(self, test_client):
        assert test_client.get("/api/tasks/garage").status_code == 400

    def test_blog_section_rejected(self, test_client, today):
        assert self._create(test_client, today, section_id="blog").status_code == 400

    def test_list_tasks(self, test_client, today):
        self._create(test_client, today)
        self._create(test_client, today, title="Second")

        response = test_client.get("/api/tasks/official")

        assert response.status_code == 200
        assert response.json()["count"] == 2

    def test_update_task(self, test_client, today):
        task_id = self._create(test_client, today).json()["task"]["id"]

        response = test_client.patch(f"/api/tasks/{task_id}", json={"title": "Rewrite design doc"})

        assert response.status_code == 200
        task = response.json()["task"]
        assert task["title"] == "Rewrite design doc"
        assert task["category"] == "Projects"

    def test_update_with_null_clears_optional_field(self, test_client, today):
        task_id = self._create(test_client, today).json()["task"]["id"]
        test_client.patch(f"/api/tasks/{task_id}", json={"class_start_date": today.isoformat()})

        response = test_client.patch(f"/api/tasks/{task_id}", json={"class_start_date": None})

        assert response.status_code == 200
        task = response.json()["task"]
        assert task["class_start_date"] is None
        assert task["title"] == "Write design doc"

    def test_update_status(self, test_client, today):
        task_id = self._create(test_client, today).json()["task"]["id"]

        response = test_client.patch(f"/api/tasks/{task_id}/status", json={"status": "completed"})

        assert response.status_code == 200
        assert response.json()["task"]["completed_at"] is not None

    def test_invalid_status(self, test_client, today):
        task_id = self._create(test_client, today).json()["task"]["id"]
        assert test_client.patch(f"/api/tasks/{task_id}/status", json={"status": "done"}).status_code == 400

    def test_delete_task(self, test_client, today):
        task_id = self._create(test_client, today).json()["task"]["id"]

        assert test_client.delete(f"/api/tasks/{task_id}").status_code == 200
        assert test_client.delete(f"/api/tasks/{task_id}").status_code == 404

    def test_not_found(self, test_client):
        assert test_client.patch("/api/tasks/nope", json={"title": "x"}).status_code == 404
        assert test_client.patch("/api/tasks/nope/status", json={"status": "todo"}).status_code == 404


class TestRecurringTaskEndpoints:
    def test_create_and_list(self, test_client, today):
        response = test_client.post(
            "/api/recurring-tasks",
            json={
                "section_id": "household",
                "title": "Water plants",
                "start_date": (today - timedelta(days=1)).isoformat(),
                "recurrence_value": "abc",
                "recurrence_unit": "days",
            },
        )

        assert response.status_code == 201
        task = response.json()["recurring_task"]
        assert task["status"] == "in-progress"
        assert task["recurrence_value"] == 1
        assert task["next_occurrence"].startswith(today.isoformat())

        listed = test_client.get("/api/recurring-tasks/household").json()
        assert listed["count"] == 1

    def test_update_status_and_delete(self, test_client, today):
        task_id = test_client.post(
            "/api/recurring-tasks",
            json={"section_id": "official", "title": "Timesheet", "start_date": (today + timedelta(days=3)).isoformat()},
        ).json()["recurring_task"]["id"]

        patched = test_client.patch(f"/api/recurring-tasks/{task_id}", json={"recurrence_unit": "weeks"})
        assert patched.status_code == 200
        assert patched.json()["recurring_task"]["status"] == "todo"

        status = test_client.patch(f"/api/recurring-tasks/{task_id}/status", json={"status": "completed"})
        assert status.json()["recurring_task"]["status"] == "completed"

        assert test_client.delete(f"/api/recurring-tasks/{task_id}").status_code == 200
        assert test_client.delete(f"/api/recurring-tasks/{task_id}").status_code == 404

    def test_refresh_status(self, test_client):
        response = test_client.post("/api/recurring-tasks/refresh-status")
        assert response.status_code == 200
        assert response.json()["updated"] == 0


class TestSubGoalEndpoints:
    def test_sub_goal_progress(self, test_client, today):
        task_id = test_client.post(
            "/api/tasks", json={"section_id": "personal", "title": "Learn Rust", "due_date": today.isoformat()}
        ).json()["task"]["id"]
        sub_goal_ids = [
            test_client.post(
                "/api/sub-goals", json={"task_id": task_id, "title": f"Step {i}", "due_date": today.isoformat()}
            ).json()["sub_goal"]["id"]
            for i in range(4)
        ]

        for sub_goal_id in sub_goal_ids[:3]:
            response = test_client.patch(f"/api/sub-goals/{sub_goal_id}/status", json={"status": "completed"})

        assert response.json()["task"]["progress"] == 75
        assert test_client.get(f"/api/sub-goals/{task_id}").json()["count"] == 4

        assert test_client.delete(f"/api/sub-goals/{sub_goal_ids[3]}").status_code == 200
        assert test_client.get("/api/tasks/personal").json()["tasks"][0]["progress"] == 100

    def test_sub_goal_requires_task(self, test_client, today):
        response = test_client.post(
            "/api/sub-goals", json={"task_id": "nope", "title": "Orphan", "due_date": today.isoformat()}
        )
        assert response.status_code == 404


class TestCategoryEndpoints:
    def test_add_and_remove(self, test_client):
        response = test_client.post("/api/categories", json={"section_id": "household", "name": "Garden"})
        assert response.status_code == 201
        assert "Garden" in response.json()["categories"]

        assert test_client.post("/api/categories", json={"section_id": "household", "name": "Garden"}).status_code == 409

        assert test_client.delete("/api/categories/household/Garden").status_code == 200
        assert test_client.delete("/api/categories/household/Garden").status_code == 404

    def test_remove_keeps_tasks(self, test_client, today):
        test_client.post(
            "/api/tasks",
            json={"section_id": "household", "title": "Scrub", "due_date": today.isoformat(), "category": "Cleaning"},
        )
        test_client.delete("/api/categories/household/Cleaning")

        assert test_client.get("/api/tasks/household").json()["tasks"][0]["category"] == "Cleaning"


class TestBlogEndpoints:
    def test_lifecycle(self, test_client, today):
        response = test_client.post("/api/blog-entries", json={"title": "PEP 8", "due_date": today.isoformat()})
        assert response.status_code == 201
        entry_id = response.json()["entry"]["id"]

        assert test_client.post(f"/api/blog-entries/{entry_id}/advance").json()["entry"]["status"] == "reading"
        assert (
            test_client.patch(f"/api/blog-entries/{entry_id}/status", json={"status": "expert"}).json()["entry"]["status"]
            == "expert"
        )
        assert test_client.patch(f"/api/blog-entries/{entry_id}", json={"title": "PEP 20"}).json()["entry"]["title"] == "PEP 20"
        assert test_client.get("/api/blog-entries").json()["count"] == 1

        assert test_client.delete(f"/api/blog-entries/{entry_id}").status_code == 200
        assert test_client.post(f"/api/blog-entries/{entry_id}/advance").status_code == 404

    def test_invalid_blog_status(self, test_client, today):
        entry_id = test_client.post(
            "/api/blog-entries", json={"title": "PEP 8", "due_date": today.isoformat()}
        ).json()["entry"]["id"]
        assert test_client.patch(f"/api/blog-entries/{entry_id}/status", json={"status": "done"}).status_code == 400


class TestSectionAndAnalyticsEndpoints:
    def test_section(self, test_client):
        section = test_client.get("/api/sections/blog").json()["section"]
        assert section["name"] == "Blog & Learning"
        assert section["categories"][0] == "Writing"

    def test_analytics(self, test_client, today):
        test_client.post("/api/tasks", json={"section_id": "official", "title": "A", "due_date": today.isoformat()})
        analytics = test_client.get("/api/analytics").json()
        assert analytics["total_tasks"] == 1
        assert analytics["completion_rate"] == 0.0

        assert test_client.get("/api/analytics/blog").json()["total_entries"] == 0


class TestNotificationEndpoints:
    def test_due_tasks(self, test_client, today):
        test_client.post("/api/tasks", json={"section_id": "official", "title": "Due", "due_date": today.isoformat()})
        test_client.post(
            "/api/tasks",
            json={"section_id": "official", "title": "Later", "due_date": (today + timedelta(days=1)).isoformat()},
        )

        response = test_client.get("/api/due-tasks")

        assert response.json()["count"] == 1
        assert response.json()["due_tasks"][0]["title"] == "Due"

    def test_settings_roundtrip_rebuilds_timers(self, test_client, scheduler):
        settings = {
            "sections": {
                "household": {
                    "enabled": True,
                    "interval": 30,
                    "unit": "minutes",
                    "categories": {"Cleaning": {"enabled": True, "interval": 2, "unit": "hours"}},
                }
            }
        }

        response = test_client.put("/api/notification-settings", json=settings)

        assert response.status_code == 200
        assert test_client.get("/api/notification-settings").json()["sections"]["household"]["interval"] == 30
        keys = {t["key"] for t in test_client.get("/api/notifications/status").json()["timers"]}
        assert {"household", "household-Cleaning"} <= keys

    def test_invalid_settings(self, test_client):
        bad = {"sections": {"household": {"enabled": True, "interval": 0}}}
        assert test_client.put("/api/notification-settings", json=bad).status_code == 400

    def test_check_and_show(self, test_client, notifier, today):
        test_client.post("/api/tasks", json={"section_id": "official", "title": "Due", "due_date": today.isoformat()})
        notifier.sent.clear()

        assert test_client.post("/api/notifications/check").json()["count"] == 1
        test_client.post("/api/notifications/show", json={"title": "Hi", "body": "there"})

        assert notifier.sent == [("1 Task Due Today", "• Due"), ("Hi", "there")]

    def test_suspend_and_resume(self, test_client):
        assert test_client.post("/api/system/suspend").json()["sleeping"] is True
        assert test_client.get("/api/notifications/status").json()["sleeping"] is True

        resumed = test_client.post("/api/system/resume").json()
        assert resumed["sleeping"] is False
        assert resumed["caught_up"] == 0
