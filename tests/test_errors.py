"""
Tests for error handling: structured error responses, HTTP status codes,
and the custom exception classes.
"""
from fastapi import APIRouter
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.core.errors import (
    InvalidArgumentError,
    NotFoundError,
    StandupException,
    UpstreamUnavailableError,
)
from app.main import app


# ---------------------------------------------------------------------------
# Unit tests on exception classes
# ---------------------------------------------------------------------------

class TestExceptionClasses:
    def test_not_found(self):
        err = NotFoundError("Goal", "abc")
        assert err.http_status == 404
        assert err.code == "NOT_FOUND"
        assert err.to_dict()["details"] == {"entity": "Goal", "id": "abc"}

    def test_invalid_argument_with_value(self):
        err = InvalidArgumentError("clarity_score", "out of range", 11)
        assert err.http_status == 422
        assert err.code == "INVALID_ARGUMENT"
        assert err.details == {"field": "clarity_score", "value": 11}

    def test_invalid_argument_without_value(self):
        err = InvalidArgumentError("days", "must be positive")
        assert err.details == {"field": "days"}

    def test_upstream_unavailable(self):
        err = UpstreamUnavailableError("text-generation")
        assert err.http_status == 503
        assert err.code == "UPSTREAM_UNAVAILABLE"
        assert "text-generation" in err.message

    def test_to_dict_without_details(self):
        d = StandupException("boom").to_dict()
        assert d == {"code": "INTERNAL_ERROR", "message": "boom"}


# ---------------------------------------------------------------------------
# Integration tests on HTTP error responses
# ---------------------------------------------------------------------------

class TestHttpEnvelope:
    def test_invalid_argument_from_service(self, client, headers):
        r = client.post("/standup", json={}, headers=headers)
        session_id = r.json()["id"]
        [item] = client.post(
            "/checklist/generate",
            json={"session_id": session_id, "items": [{"title": "x"}]},
            headers=headers,
        ).json()["items"]

        r = client.post(
            f"/checklist/{item['id']}/check-ins",
            json={"status": "in_progress", "progress_percentage": 140},
            headers=headers,
        )
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "INVALID_ARGUMENT"
        assert body["details"]["field"] == "progress_percentage"

    def test_unknown_status_is_invalid_argument(self, client, headers):
        r = client.post("/standup", json={}, headers=headers)
        [item] = client.post(
            "/checklist/generate",
            json={"session_id": r.json()["id"], "items": [{"title": "x"}]},
            headers=headers,
        ).json()["items"]
        r = client.post(f"/checklist/{item['id']}/check-ins", json={"status": "done"}, headers=headers)
        assert r.status_code == 422
        assert r.json()["details"] == {"field": "status", "value": "done"}

    def test_request_validation_error(self, client, headers):
        r = client.post("/goals", json={"title": "   "}, headers=headers)
        assert r.status_code == 422
        body = r.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert body["details"]["errors"][0]["field"] == "title"

    def test_not_found(self, client, headers):
        r = client.get("/standup/does-not-exist", headers=headers)
        assert r.status_code == 404
        assert r.json() == {
            "code": "NOT_FOUND",
            "message": "StandupSession does-not-exist not found.",
            "details": {"entity": "StandupSession", "id": "does-not-exist"},
        }

    def test_invalid_clarity(self, client, headers):
        r = client.put("/checklist/whatever/clarity", json={"clarity_score": 0}, headers=headers)
        assert r.status_code == 422
        assert r.json()["code"] == "INVALID_ARGUMENT"


class TestStoreAndUnhandledErrors:
    def test_store_failure_is_upstream_unavailable(self):
        failing = APIRouter()

        @failing.get("/_failing/store-down")
        def store_down():
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        app.include_router(failing)
        with TestClient(app, raise_server_exceptions=False) as c:
            r = c.get("/_failing/store-down")
        assert r.status_code == 503
        assert r.json()["code"] == "UPSTREAM_UNAVAILABLE"
        assert r.json()["details"] == {"upstream": "store"}

    def test_unhandled_is_internal_error(self):
        failing = APIRouter()

        @failing.get("/_failing/crash")
        def crash():
            raise RuntimeError("unexpected")

        app.include_router(failing)
        with TestClient(app, raise_server_exceptions=False) as c:
            r = c.get("/_failing/crash")
        assert r.status_code == 500
        assert r.json()["code"] == "INTERNAL_ERROR"
