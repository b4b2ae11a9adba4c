"""
HTTP-level tests: each router end to end through TestClient.
"""
import json

import pytest


@pytest.fixture()
def standup(client, headers):
    r = client.post(
        "/standup",
        json={"session_date": "2030-05-20", "what_doing_today": "Migrate billing"},
        headers=headers,
    )
    assert r.status_code == 201
    return r.json()


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["db"] == "ok"


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------

class TestGoals:
    def test_create_and_list_active(self, client, headers):
        r = client.post(
            "/goals",
            json={"title": "  Improve Code Quality ", "priority": 2, "stakeholders": ["kim", "ade"]},
            headers=headers,
        )
        assert r.status_code == 201
        body = r.json()
        assert body["title"] == "Improve Code Quality"
        assert body["status"] == "active"
        assert body["stakeholders"] == ["ade", "kim"]

        active = client.get("/goals/active", headers=headers).json()
        assert active["total"] == 1
        assert active["items"][0]["id"] == body["id"]

    def test_patch_and_archive(self, client, headers):
        goal = client.post("/goals", json={"title": "Read more"}, headers=headers).json()
        r = client.patch(f"/goals/{goal['id']}", json={"priority": 1}, headers=headers)
        assert r.json()["priority"] == 1

        r = client.post(f"/goals/{goal['id']}/archive", headers=headers)
        assert r.json()["status"] == "archived"
        assert client.get("/goals/active", headers=headers).json()["total"] == 0
        assert client.get("/goals?status=archived", headers=headers).json()["total"] == 1

    def test_goals_are_scoped_by_user_header(self, client, headers):
        goal = client.post("/goals", json={"title": "Private"}, headers=headers).json()
        r = client.patch(
            f"/goals/{goal['id']}", json={"priority": 1}, headers={"X-User-Id": "stranger"},
        )
        assert r.status_code == 404
        assert r.json()["code"] == "NOT_FOUND"


# ---------------------------------------------------------------------------
# Standup + checklist
# ---------------------------------------------------------------------------

class TestStandup:
    def test_create_and_get(self, client, headers, standup):
        r = client.get(f"/standup/{standup['id']}", headers=headers)
        assert r.status_code == 200
        assert r.json()["what_doing_today"] == "Migrate billing"
        assert r.json()["mode"] == "cadence"
        assert r.json()["session_date"] == "2030-05-20"

    def test_missing_header_means_guest(self, client, standup):
        assert client.get(f"/standup/{standup['id']}").status_code == 404


class TestChecklist:
    def test_generate_with_items_links_goals(self, client, headers, standup):
        goal = client.post("/goals", json={"title": "Finish billing migration"}, headers=headers).json()
        r = client.post(
            "/checklist/generate",
            json={
                "session_id": standup["id"],
                "items": [
                    {"title": "Move invoices", "priority": 1, "goalAlignment": ["billing"]},
                    {"title": "Lunch", "estimatedTimeMinutes": 45},
                ],
            },
            headers=headers,
        )
        assert r.status_code == 201
        body = r.json()
        assert body["mode"] == "append"
        assert [i["title"] for i in body["items"]] == ["Move invoices", "Lunch"]
        assert body["items"][0]["goal_id"] == goal["id"]
        assert body["items"][1]["goal_id"] is None
        assert body["items"][0]["goal_title"] == "Finish billing migration"
        assert body["items"][0]["goal_type"] == "goal"
        assert body["items"][1]["goal_title"] is None
        assert body["items"][1]["estimated_minutes"] == 45

        listing = client.get(f"/checklist?session_id={standup['id']}", headers=headers).json()
        assert listing["total"] == 2
        assert [i["goal_title"] for i in listing["items"]] == ["Finish billing migration", None]

    def test_generate_from_raw_response(self, client, headers, standup):
        raw = "```json\n" + json.dumps({"items": [{"title": "Plan"}], "insights": "Go"}) + "\n```"
        r = client.post(
            "/checklist/generate",
            json={"session_id": standup["id"], "raw_response": raw},
            headers=headers,
        )
        assert r.status_code == 201
        assert r.json()["insights"] == "Go"
        assert r.json()["items"][0]["title"] == "Plan"

    def test_generate_unparseable_raw_falls_back(self, client, headers, standup):
        r = client.post(
            "/checklist/generate",
            json={"session_id": standup["id"], "raw_response": "oops"},
            headers=headers,
        )
        [item] = r.json()["items"]
        assert item["title"] == "Review and prioritize today's tasks"
        assert item["priority"] == 1

    def test_generate_replace_mode(self, client, headers, standup):
        base = {"session_id": standup["id"]}
        client.post("/checklist/generate", json={**base, "items": [{"title": "old"}]}, headers=headers)
        r = client.post(
            "/checklist/generate",
            json={**base, "mode": "replace", "items": [{"title": "new"}]},
            headers=headers,
        )
        assert r.json()["mode"] == "replace"
        listing = client.get(f"/checklist?session_id={standup['id']}", headers=headers).json()
        assert [i["title"] for i in listing["items"]] == ["new"]

    def test_generate_requires_exactly_one_source(self, client, headers, standup):
        r = client.post("/checklist/generate", json={"session_id": standup["id"]}, headers=headers)
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_generate_unknown_session(self, client, headers):
        r = client.post(
            "/checklist/generate", json={"session_id": "nope", "items": []}, headers=headers,
        )
        assert r.status_code == 404

    def test_checklist_by_date_uses_latest_standup(self, client, headers, standup):
        client.post(
            "/checklist/generate",
            json={"session_id": standup["id"], "items": [{"title": "by date"}]},
            headers=headers,
        )
        listing = client.get("/checklist?date=2030-05-20", headers=headers).json()
        assert [i["title"] for i in listing["items"]] == ["by date"]
        assert client.get("/checklist?date=2030-05-21", headers=headers).json()["total"] == 0

    def test_item_lifecycle(self, client, headers, standup):
        [item] = client.post(
            "/checklist/generate",
            json={"session_id": standup["id"], "items": [{"title": "Write tests"}]},
            headers=headers,
        ).json()["items"]
        item_id = item["id"]

        r = client.post(
            f"/checklist/{item_id}/check-ins",
            json={"status": "blocked", "progress_percentage": 40, "blockers": "no staging env"},
            headers=headers,
        )
        assert r.status_code == 201
        assert r.json()["progress_percentage"] == 40

        history = client.get(f"/checklist/{item_id}/check-ins", headers=headers).json()
        assert history["total"] == 1
        assert history["items"][0]["status"] == "blocked"

        r = client.put(f"/checklist/{item_id}/clarity", json={"clarity_score": 6}, headers=headers)
        assert r.json()["clarity_score"] == 6
        assert r.json()["status"] == "blocked"

        for _ in range(3):
            r = client.post(f"/checklist/{item_id}/strike", headers=headers)
        assert r.json()["strikes"] == 3
        assert r.json()["status"] == "blocked"

    def test_strikes_escalate_pending_item(self, client, headers, standup):
        [item] = client.post(
            "/checklist/generate",
            json={"session_id": standup["id"], "items": [{"title": "Call vendor"}]},
            headers=headers,
        ).json()["items"]
        for _ in range(4):
            r = client.post(f"/checklist/{item['id']}/strike", headers=headers)
        assert r.json()["strikes"] == 3
        assert r.json()["status"] == "at_risk"


# ---------------------------------------------------------------------------
# Analytics + metrics
# ---------------------------------------------------------------------------

class TestAnalytics:
    def test_daily_metric_upsert_merges(self, client, headers):
        client.post(
            "/analytics/daily-metrics", json={"date": "2030-06-01", "focus_score": 87}, headers=headers,
        )
        r = client.post(
            "/analytics/daily-metrics", json={"date": "2030-06-01", "tasks_planned": 4}, headers=headers,
        )
        assert r.status_code == 200
        assert r.json()["focus_score"] == 87
        assert r.json()["tasks_planned"] == 4
        assert r.json()["date"] == "2030-06-01"

        listing = client.get(
            "/analytics/daily-metrics?days=3&end_date=2030-06-02", headers=headers,
        ).json()
        assert listing["total"] == 1

    def test_sync_checklist(self, client, headers, standup):
        client.post(
            "/checklist/generate",
            json={"session_id": standup["id"], "items": [{"title": "a"}, {"title": "b"}]},
            headers=headers,
        )
        r = client.post(
            "/analytics/daily-metrics/sync-checklist", json={"date": "2030-05-20"}, headers=headers,
        )
        assert r.json()["tasks_planned"] == 2
        assert r.json()["tasks_completed"] == 0

    def test_task_crud(self, client, headers):
        r = client.post("/analytics/tasks", json={"title": "File taxes", "priority": "high"}, headers=headers)
        assert r.status_code == 201
        task = r.json()
        assert task["completed_at"] is None

        r = client.patch(f"/analytics/tasks/{task['id']}", json={"status": "completed"}, headers=headers)
        assert r.json()["completed_at"] is not None

        assert client.get("/analytics/tasks?status=completed", headers=headers).json()["total"] == 1
        assert client.delete(f"/analytics/tasks/{task['id']}", headers=headers).status_code == 204
        assert client.get("/analytics/tasks", headers=headers).json()["total"] == 0

    def test_focus_session_start_and_end(self, client, headers):
        r = client.post(
            "/analytics/focus-sessions",
            json={"start_time": "2030-06-03T09:00:00+00:00", "session_type": "meetings"},
            headers=headers,
        )
        assert r.status_code == 201
        fs = r.json()
        assert fs["is_open"] is True

        r = client.post(
            f"/analytics/focus-sessions/{fs['id']}/end",
            json={"end_time": "2030-06-03T10:30:00+00:00"},
            headers=headers,
        )
        assert r.json()["duration_minutes"] == 90
        assert r.json()["is_open"] is False

    def test_focus_session_offset_times(self, client, headers):
        r = client.post(
            "/analytics/focus-sessions",
            json={"start_time": "2031-01-01T23:30:00-05:00"},
            headers=headers,
        )
        fs = r.json()
        r = client.post(
            f"/analytics/focus-sessions/{fs['id']}/end",
            json={"end_time": "2031-01-02T00:30:00-05:00"},
            headers=headers,
        )
        assert r.json()["duration_minutes"] == 60

    def test_objective_crud(self, client, headers):
        r = client.post(
            "/analytics/objectives",
            json={"title": "Launch v2", "target_date": "2030-09-01"},
            headers=headers,
        )
        assert r.status_code == 201
        objective = r.json()
        assert objective["progress_percentage"] == 0
        assert objective["status"] == "active"

        r = client.patch(
            f"/analytics/objectives/{objective['id']}",
            json={"progress_percentage": 75},
            headers=headers,
        )
        assert r.json()["progress_percentage"] == 75
        assert r.json()["target_date"] == "2030-09-01"

        bad = client.post(
            "/analytics/objectives", json={"title": "x", "progress_percentage": 120}, headers=headers,
        )
        assert bad.status_code == 422

        assert client.get("/analytics/objectives", headers=headers).json()["total"] == 1
        assert client.delete(f"/analytics/objectives/{objective['id']}", headers=headers).status_code == 204
        assert client.delete(f"/analytics/objectives/{objective['id']}", headers=headers).status_code == 404


class TestPeople:
    def test_crud(self, client, headers):
        r = client.post("/people", json={"name": "Ade", "relationship_type": "manager"}, headers=headers)
        assert r.status_code == 201
        person = r.json()

        r = client.patch(f"/people/{person['id']}", json={"work_function": "Finance"}, headers=headers)
        assert r.json()["work_function"] == "Finance"
        assert r.json()["relationship_type"] == "manager"

        assert [p["name"] for p in client.get("/people", headers=headers).json()["items"]] == ["Ade"]
        assert client.delete(f"/people/{person['id']}", headers=headers).status_code == 204
        assert client.get(f"/people/{person['id']}", headers=headers).status_code == 404

    def test_blank_name_is_validation_error(self, client, headers):
        r = client.post("/people", json={"name": "   "}, headers=headers)
        assert r.status_code == 422
        assert r.json()["code"] == "VALIDATION_ERROR"

    def test_scoped_by_user_header(self, client, headers):
        person = client.post("/people", json={"name": "Kim"}, headers=headers).json()
        other = {"X-User-Id": headers["X-User-Id"] + "-other"}
        assert client.get(f"/people/{person['id']}", headers=other).status_code == 404


class TestMetricsSnapshot:
    def test_snapshot_shape(self, client, headers):
        client.post(
            "/analytics/daily-metrics", json={"date": "2030-07-10", "focus_score": 87}, headers=headers,
        )
        r = client.get("/metrics/snapshot?as_of=2030-07-10", headers=headers)
        assert r.status_code == 200
        body = r.json()
        assert body["as_of"] == "2030-07-10"
        assert body["current"]["focus_score"] == 87
        assert body["current"]["has_record"] is True
        assert len(body["weekly"]) == 7
        assert len(body["calendar"]) == 28
        assert body["weekly"][-1]["date"] == "2030-07-10"
        assert body["calendar"][0]["date"] == "2030-06-13"
        assert body["calendar"][-1]["focus_percentage"] == 87
