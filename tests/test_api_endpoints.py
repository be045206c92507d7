"""
Tests for the API endpoints.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import Mock
from memsync.main import create_app
from memsync.models import ObservationRecord


class TestAPIEndpoints:
    """Test cases for API endpoints."""

    @pytest.fixture
    def store(self):
        store = Mock()
        store.get_observations_by_ids.return_value = [
            ObservationRecord(id=1, narrative="one", facts='["a"]'),
            ObservationRecord(id=3, narrative="three", facts=["b"]),
        ]
        return store

    @pytest.fixture
    def client(self, store, mock_indexer):
        """Create a test client around mocked collaborators."""
        return TestClient(create_app(store=store, indexer=mock_indexer))

    def test_health_endpoint(self, client):
        response = client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data

    def test_sync_success(self, client):
        response = client.post("/api/sync/observations", json={"ids": [1, 2, 3]})

        assert response.status_code == 200
        assert response.json() == {"success": True, "embeddedCount": 2}
        assert "X-Process-Time" in response.headers

    def test_sync_no_matches(self, client, store, mock_indexer):
        store.get_observations_by_ids.return_value = []

        response = client.post("/api/sync/observations", json={"ids": [10]})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["embeddedCount"] == 0
        assert data["message"] == "No observations found for given IDs"
        mock_indexer.sync_stored_observations.assert_not_called()

    @pytest.mark.parametrize("body", [{}, {"ids": []}, {"ids": "1"}, [1, 2]])
    def test_sync_bad_request(self, client, store, body):
        response = client.post("/api/sync/observations", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["errorKind"] == "invalid_input"
        assert data["errorMessage"] == "ids array is required"
        store.get_observations_by_ids.assert_not_called()

    def test_sync_malformed_body(self, client, store):
        response = client.post(
            "/api/sync/observations",
            content="not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False
        store.get_observations_by_ids.assert_not_called()

    def test_sync_lookup_failure(self, client, store, mock_indexer):
        store.get_observations_by_ids.side_effect = RuntimeError("disk I/O error")

        response = client.post("/api/sync/observations", json={"ids": [1]})

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["errorKind"] == "lookup_failure"
        assert data["errorMessage"] == "Sync failed: disk I/O error"
        mock_indexer.sync_stored_observations.assert_not_called()

    def test_sync_delegation_failure(self, client, mock_indexer):
        mock_indexer.sync_stored_observations.side_effect = RuntimeError("collection unavailable")

        response = client.post("/api/sync/observations", json={"ids": [1, 3]})

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["errorKind"] == "delegation_failure"
        assert "collection unavailable" in data["errorMessage"]

    def test_sync_partial_embed(self, client, mock_indexer):
        mock_indexer.sync_stored_observations.side_effect = None
        mock_indexer.sync_stored_observations.return_value = 1

        response = client.post("/api/sync/observations", json={"ids": [1, 3]})

        assert response.status_code == 200
        assert response.json() == {"success": True, "embeddedCount": 1}

    def test_sync_without_initialized_service(self):
        """Startup never ran, so there is no service to delegate to."""
        client = TestClient(create_app())

        response = client.post("/api/sync/observations", json={"ids": [1]})

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["errorKind"] == "service_unavailable"
        assert "not initialized" in data["errorMessage"]

    def test_sync_off_type_record_is_structured(self, client, store):
        store.get_observations_by_ids.return_value = [
            ObservationRecord(id=1, narrative="one", project=99, created_at_epoch=float("inf")),
        ]

        response = client.post("/api/sync/observations", json={"ids": [1]})

        assert response.status_code == 200
        assert response.json() == {"success": True, "embeddedCount": 1}
