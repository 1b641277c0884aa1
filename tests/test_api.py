"""
Tests for API endpoints
"""
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.api.store_server import create_store_app
from src.core.exceptions import StoreUnavailable
from src.database.memory import InMemoryReportStore, InMemorySensorStore
from src.ingestion.sensors import SensorSimulator


SUBMISSION = {
    "location": "Ikorodu",
    "water_level": 1.5,
    "description": "Heavy flooding near the market",
}


@pytest.fixture
def client(service):
    app = create_app(service=service, enable_refresher=False)
    return TestClient(app)


class TestSystemEndpoints:
    """Test suite for root and health endpoints."""

    def test_root_page(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "FloodDataSync" in response.text

    def test_health(self, client):
        data = client.get("/health").json()

        assert data["status"] == "healthy"
        assert data["store_reachable"] is True
        assert data["report_count"] == 0

    def test_health_degraded_when_store_down(self, client, service):
        service.report_store = MagicMock()
        service.report_store.list.side_effect = StoreUnavailable("list reports")

        data = client.get("/health").json()

        assert data["status"] == "degraded"
        assert data["store_reachable"] is False


class TestReportEndpoints:
    """Test suite for report submission and lookup."""

    def test_submit_report(self, client):
        response = client.post("/api/v1/reports", json=SUBMISSION)

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == "1"
        assert data["status"] == "pending"
        assert data["upvotes"] == 0
        assert data["validated"] is False
        assert data["timestamp"].endswith("Z")

    @pytest.mark.parametrize("payload", [
        {**SUBMISSION, "location": ""},
        {**SUBMISSION, "water_level": -1},
        {**SUBMISSION, "latitude": 120.0, "longitude": 3.3},
        {"location": "Yaba"},
    ])
    def test_submit_invalid_report(self, client, payload):
        assert client.post("/api/v1/reports", json=payload).status_code == 422

    def test_submit_blank_description(self, client):
        response = client.post("/api/v1/reports", json={**SUBMISSION, "description": "   "})
        assert response.status_code == 422

    def test_submit_store_unavailable(self, client, service):
        service.report_store = MagicMock()
        service.report_store.create.side_effect = StoreUnavailable("create report")

        response = client.post("/api/v1/reports", json=SUBMISSION)

        assert response.status_code == 503

    def test_get_report(self, client):
        client.post("/api/v1/reports", json=SUBMISSION)

        assert client.get("/api/v1/reports/1").json()["location"] == "Ikorodu"
        assert client.get("/api/v1/reports/99").status_code == 404

    def test_list_with_status_filter(self, client):
        client.post("/api/v1/reports", json=SUBMISSION)
        client.post("/api/v1/reports", json={**SUBMISSION, "location": "Lekki"})
        for _ in range(3):
            client.post("/api/v1/validation/vote", json={"vote": "up"})

        everything = client.get("/api/v1/reports").json()
        pending = client.get("/api/v1/reports", params={"status": "pending"}).json()

        assert everything["count"] == 2
        assert pending["count"] == 2
        assert pending["pending_count"] == 2

    def test_stats_summary(self, client):
        client.post("/api/v1/reports", json=SUBMISSION)
        data = client.get("/api/v1/reports/stats/summary").json()

        assert data["total_reports"] == 1
        assert data["by_status"]["pending"] == 1


class TestValidationEndpoints:
    """Test suite for the peer validation flow."""

    def test_next_with_empty_pool(self, client):
        assert client.get("/api/v1/validation/next").status_code == 204

    def test_vote_with_empty_pool(self, client):
        assert client.post("/api/v1/validation/vote", json={"vote": "up"}).status_code == 409

    def test_invalid_vote_value(self, client):
        client.post("/api/v1/reports", json=SUBMISSION)
        assert client.post("/api/v1/validation/vote", json={"vote": "maybe"}).status_code == 422

    def test_three_upvotes_validate(self, client):
        client.post("/api/v1/reports", json=SUBMISSION)

        responses = [client.post("/api/v1/validation/vote", json={"vote": "up"}).json() for _ in range(3)]

        assert [r["outcome"] for r in responses] == ["pending", "pending", "validated"]
        final = responses[-1]
        assert final["report"]["validated"] is True
        assert final["report"]["status"] == "validated"
        assert final["next_report"] is None
        assert final["message"].startswith("Report validated successfully!")

        dashboard = client.get("/api/v1/dashboard").json()
        assert [r["id"] for r in dashboard["validated_reports"]] == ["1"]
        assert dashboard["validated_reports"][0]["waterLevel"] == 1.5

    def test_three_downvotes_reject(self, client):
        client.post("/api/v1/reports", json=SUBMISSION)

        for _ in range(3):
            response = client.post("/api/v1/validation/vote", json={"vote": "down"})

        data = response.json()
        assert data["outcome"] == "rejected"
        assert data["report"]["validated"] is False
        assert data["message"].startswith("Report rejected by peer validation!")
        assert client.get("/api/v1/validation/next").status_code == 204

        dashboard = client.get("/api/v1/dashboard").json()
        assert dashboard["validated_reports"] == []
        assert dashboard["reports"][0]["status"] == "rejected"
        assert dashboard["counts"]["rejected"] == 1

    def test_vote_moves_to_next_report(self, client):
        client.post("/api/v1/reports", json=SUBMISSION)
        client.post("/api/v1/reports", json={**SUBMISSION, "location": "Lekki"})

        assert client.get("/api/v1/validation/next").json()["id"] == "1"
        data = client.post("/api/v1/validation/vote", json={"vote": "up"}).json()

        assert data["next_report"]["id"] == "2"
        assert data["exhausted_round"] is False
        assert client.get("/api/v1/validation/next").json()["id"] == "2"

    def test_vote_store_unavailable(self, client, service):
        client.post("/api/v1/reports", json=SUBMISSION)
        store = service.report_store
        service.report_store = MagicMock(wraps=store)
        service.report_store.update.side_effect = StoreUnavailable("update report")

        response = client.post("/api/v1/validation/vote", json={"vote": "up"})

        assert response.status_code == 503
        assert client.get("/api/v1/reports/1").json()["upvotes"] == 0

    def test_concurrent_update_conflict(self, client, memory_store):
        client.post("/api/v1/reports", json=SUBMISSION)
        current = memory_store.get("1")
        memory_store.update("1", current)

        assert client.post("/api/v1/validation/vote", json={"vote": "up"}).status_code == 409


class TestDashboardEndpoints:
    """Test suite for dashboard, sensors and map."""

    def test_sensors_after_refresh(self, client):
        client.get("/health")
        sensors = client.get("/api/v1/sensors").json()

        assert len(sensors) == 3
        assert {s["location"] for s in sensors} == {"Lagos Island", "Ikorodu", "Ajegunle"}

    def test_dashboard_chart(self, client):
        client.get("/health")
        chart = client.get("/api/v1/dashboard").json()["chart"]

        assert chart["station"] == "Lagos Island"
        assert len(chart["data"]) == 1
        assert chart["y_range"] == [0.0, 2.5]

    def test_map_html(self, client):
        client.post("/api/v1/reports", json=SUBMISSION)
        for _ in range(3):
            client.post("/api/v1/validation/vote", json={"vote": "up"})

        response = client.get("/api/v1/map/reports")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "leaflet" in response.text.lower()
        assert "1 validated reports" in response.text


class TestStoreServer:
    """Test suite for the json-server style store app."""

    def setup_method(self):
        self.reports = InMemoryReportStore()
        app = create_store_app(self.reports, InMemorySensorStore(SensorSimulator(seed=3)))
        self.client = TestClient(app)

    def test_create_and_list(self, sample_store_payload):
        payload = dict(sample_store_payload[0])
        response = self.client.post("/reports", json=payload)

        assert response.status_code == 201
        assert response.json()["id"] == "1"
        assert [r["location"] for r in self.client.get("/reports").json()] == ["Ikorodu"]

    def test_get_missing_report(self):
        assert self.client.get("/reports/5").status_code == 404

    def test_put_replaces_record(self, sample_store_payload):
        created = self.client.post("/reports", json=sample_store_payload[0]).json()
        created["upvotes"] = 1

        response = self.client.put("/reports/1", json=created)

        assert response.status_code == 200
        assert response.json()["upvotes"] == 1
        assert response.json()["version"] == 1

    def test_put_stale_record(self, sample_store_payload):
        created = self.client.post("/reports", json=sample_store_payload[0]).json()
        self.client.put("/reports/1", json=created)

        response = self.client.put("/reports/1", json=created)

        assert response.status_code == 409
        assert response.json()["version"] == 1

    def test_put_missing_record(self, sample_store_payload):
        assert self.client.put("/reports/8", json=sample_store_payload[0]).status_code == 404

    def test_sensors(self):
        data = self.client.get("/sensors").json()

        assert len(data) == 3
        assert "currentWaterLevel" in data[0]
