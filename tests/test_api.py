"""Tests for the HTTP surface."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

import routes
from core.poller import Poller

PAST = "2020-01-01T00:00:00Z"
PAST_TS = 1577836800


def body(at: str = PAST, action: str = "send") -> dict:
    return {"namespace": "jobs", "scheduledAt": at, "actionReference": action}


@pytest.fixture
def app(service, discovery, retrieval) -> FastAPI:
    app = FastAPI()
    routes.register_routes(app)
    app.state.trigger_service = service
    app.state.poller = Poller(discovery, retrieval, pattern="jobs")
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestTriggerRoutes:
    def test_add(self, client, redis):
        res = client.post("/api/v1/triggers", json=body())
        assert res.status_code == 201
        assert res.json() == {"key": f"jobs-{PAST_TS}"}
        assert f"jobs-{PAST_TS}" in redis.sets

    def test_add_validates_body(self, client):
        res = client.post("/api/v1/triggers", json=body(action=""))
        assert res.status_code == 422

    def test_ready_then_cancel(self, client):
        client.post("/api/v1/triggers", json=body())
        client.post("/api/v1/triggers", json=body(at="2999-01-01T00:00:00Z"))

        ready = client.get("/api/v1/triggers/ready", params={"namespace": "jobs"}).json()
        assert len(ready) == 1
        assert ready[0]["key"] == f"jobs-{PAST_TS}"
        assert ready[0]["scheduledAt"] == PAST_TS
        assert ready[0]["triggers"][0]["actionReference"] == "send"

        res = client.post("/api/v1/triggers/cancel", json=body())
        assert res.json() == {"removed": True}
        assert client.get("/api/v1/triggers/ready", params={"namespace": "jobs"}).json() == []

    def test_reschedule(self, client, redis):
        client.post("/api/v1/triggers", json=body())
        res = client.post(
            "/api/v1/triggers/reschedule",
            json={"trigger": body(), "scheduledAt": "2020-01-01T00:01:00Z"},
        )
        assert res.status_code == 200
        assert res.json()["key"] == f"jobs-{PAST_TS + 60}"
        assert f"jobs-{PAST_TS}" not in redis.sets
        assert f"jobs-{PAST_TS + 60}" in redis.sets

    def test_backend_down_is_503(self, client, redis):
        redis.down = True
        res = client.post("/api/v1/triggers", json=body())
        assert res.status_code == 503
        assert client.get("/api/v1/triggers/ready").status_code == 503


class TestPollerStats:
    def test_stats(self, client):
        res = client.get("/api/v1/poller/stats")
        assert res.status_code == 200
        data = res.json()
        assert data["pattern"] == "jobs"
        assert data["running"] is False
        assert data["cycles"] == 0

    def test_disabled_poller_is_404(self, app, client):
        app.state.poller = None
        assert client.get("/api/v1/poller/stats").status_code == 404


class TestMainApp:
    def test_builtin_actions_registered(self):
        import main

        assert main.registry.names() == ["log"]

    def test_healthz_without_poller(self):
        import main

        # No context manager: lifespan (and Redis) never starts.
        res = TestClient(main.app).get("/healthz")
        assert res.status_code == 200
        assert res.json() == {"ok": True, "poller": False}
