"""Tests for liveness, health and notification endpoints."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from fitlink.dependencies import get_notification_hub
from fitlink.errors import NotificationDeliveryError
from fitlink.main import app


def test_root(client: TestClient) -> None:
    response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Server is running!"


def test_health_degraded_without_database(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "degraded"
    assert data["database"] == "unreachable"


def test_health_with_database(client: TestClient) -> None:
    db = MagicMock()
    db.ping = AsyncMock(return_value=True)
    app.state.db = db
    try:
        data = client.get("/health").json()
    finally:
        del app.state.db
    assert data["status"] == "healthy"
    assert data["database"] == "connected"


class TestNotifications:
    def test_register_installation(
        self, client: TestClient, db: MagicMock, hub: MagicMock
    ) -> None:
        db.fetchrow.return_value = {
            "installation_id": "inst-1",
            "user_id": "A",
            "platform": "fcm",
            "push_channel": "token",
        }
        response = client.put(
            "/api/v1/users/A/notifications/installations/inst-1",
            json={"platform": "fcm", "push_channel": "token"},
        )
        assert response.status_code == 200
        hub.upsert_installation.assert_awaited_once()
        assert hub.upsert_installation.await_args.args[:2] == ("inst-1", "A")

    def test_register_rolled_back_when_hub_rejects(
        self, client: TestClient, db: MagicMock, hub: MagicMock
    ) -> None:
        db.fetchrow.return_value = {"installation_id": "inst-1"}
        hub.upsert_installation.side_effect = NotificationDeliveryError(
            "Notification hub returned 400"
        )
        response = client.put(
            "/api/v1/users/A/notifications/installations/inst-1",
            json={"platform": "apns", "push_channel": "token"},
        )
        assert response.status_code == 502
        assert db.outcomes == ["rollback"]

    def test_delete_installation(
        self, client: TestClient, db: MagicMock, hub: MagicMock
    ) -> None:
        response = client.delete("/api/v1/users/A/notifications/installations/inst-1")
        assert response.status_code == 204
        hub.delete_installation.assert_awaited_once_with("inst-1")
        assert db.outcomes == ["commit"]

    def test_delete_retry_reaches_hub_after_hub_failure(
        self, client: TestClient, db: MagicMock, hub: MagicMock
    ) -> None:
        hub.delete_installation.side_effect = [
            NotificationDeliveryError("Notification hub unreachable"),
            None,
        ]
        url = "/api/v1/users/A/notifications/installations/inst-1"

        first = client.delete(url)
        assert first.status_code == 502
        assert db.outcomes == ["rollback"]

        # The local row survived the rollback, so the retry deletes it again.
        retry = client.delete(url)
        assert retry.status_code == 204
        assert hub.delete_installation.await_count == 2
        assert db.outcomes == ["rollback", "commit"]

    def test_delete_missing_installation(
        self, client: TestClient, db: MagicMock, hub: MagicMock
    ) -> None:
        db.execute.return_value = "DELETE 0"
        response = client.delete("/api/v1/users/A/notifications/installations/inst-1")
        assert response.status_code == 404
        hub.delete_installation.assert_not_awaited()

    def test_send_to_each_platform_once(self, client: TestClient, hub: MagicMock) -> None:
        response = client.post(
            "/api/v1/users/A/notifications",
            json={"title": "Goal reached", "body": "10k steps", "platforms": ["fcm", "fcm", "apns"]},
        )
        assert response.status_code == 202
        data = response.json()
        assert data["delivered"] == ["fcm", "apns"]
        assert data["tracking_ids"] == ["trk-1", "trk-1"]
        assert hub.send_to_user.await_count == 2

    def test_hub_failure_is_502(self, client: TestClient, hub: MagicMock) -> None:
        hub.send_to_user.side_effect = NotificationDeliveryError("Notification hub returned 403")
        response = client.post(
            "/api/v1/users/A/notifications", json={"title": "t", "body": "b"}
        )
        assert response.status_code == 502
        assert response.json()["detail"] == "Notification hub returned 403"

    def test_hub_not_configured_is_503(self, client: TestClient) -> None:
        app.dependency_overrides[get_notification_hub] = lambda: None
        response = client.post(
            "/api/v1/users/A/notifications", json={"title": "t", "body": "b"}
        )
        assert response.status_code == 503
