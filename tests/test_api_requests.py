"""Tests for the request API endpoints."""

from pathlib import Path

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from mediadesk.core.config import Settings
from mediadesk.core.errors import StorageError
from mediadesk.db.schema import Base
from mediadesk.lifecycle.manager import RequestLifecycleManager
from mediadesk.lifecycle.memory import InMemoryRequestStore
from mediadesk.models.domain import OPEN

DUNE = {"name": "Alice", "media": "book", "title": "Dune", "mediaLink": "http://x"}


def create_test_app_and_client(public_dir: Path | None = None):
    """Create app with test database and return (client, engine)."""
    from mediadesk.api.app import create_app, get_db_session

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    settings = Settings(public_dir=public_dir or Path("/nonexistent/public"))
    app = create_app(settings)

    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db
    client = TestClient(app)

    return client, engine


class OpenDeleteFailingStore(InMemoryRequestStore):
    """Non-atomic store whose open-set deletes can be switched to fail."""

    def __init__(self):
        super().__init__(atomic=False)
        self.fail_deletes = False

    def delete(self, request_set, request_id):
        if self.fail_deletes and request_set == OPEN:
            raise StorageError("delete failed")
        return super().delete(request_set, request_id)


def submit(client, **overrides) -> dict:
    response = client.post("/api/requests", json={**DUNE, **overrides})
    assert response.status_code == 201
    return response.json()


class TestSubmitEndpoint:
    """Test POST /api/requests."""

    def test_returns_created_record(self):
        client, _ = create_test_app_and_client()
        response = client.post("/api/requests", json={**DUNE, "author": "Frank Herbert"})

        assert response.status_code == 201
        data = response.json()
        assert isinstance(data["id"], int)
        assert data["mediaLink"] == "http://x"
        assert data["author"] == "Frank Herbert"
        assert data["status"] is None
        assert data["created_at"] is not None
        assert data["closed_at"] is None

    def test_missing_field_returns_400(self):
        client, _ = create_test_app_and_client()
        body = {k: v for k, v in DUNE.items() if k != "mediaLink"}

        response = client.post("/api/requests", json=body)

        assert response.status_code == 400
        assert response.json()["fields"] == ["media_link"]
        assert client.get("/api/requests").json() == []

    def test_empty_field_returns_400(self):
        client, _ = create_test_app_and_client()
        response = client.post("/api/requests", json={**DUNE, "name": ""})
        assert response.status_code == 400

    def test_malformed_body_returns_400(self):
        client, _ = create_test_app_and_client()
        response = client.post(
            "/api/requests", content=b"{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400


class TestListEndpoints:
    """Test GET /api/requests and GET /api/closed-requests."""

    def test_empty_lists(self):
        client, _ = create_test_app_and_client()
        assert client.get("/api/requests").json() == []
        assert client.get("/api/closed-requests").json() == []

    def test_open_newest_first(self):
        client, _ = create_test_app_and_client()
        first = submit(client, title="a")
        second = submit(client, title="b")

        ids = [r["id"] for r in client.get("/api/requests").json()]
        assert ids == [second["id"], first["id"]]

    def test_closed_newest_first(self):
        client, _ = create_test_app_and_client()
        a, b, c = (submit(client, title=t) for t in "abc")
        for record in (b, a, c):
            client.delete(f"/api/requests/{record['id']}")

        ids = [r["id"] for r in client.get("/api/closed-requests").json()]
        assert ids == [c["id"], a["id"], b["id"]]


class TestCloseEndpoints:
    """Test the three ways to close a request."""

    def test_close_with_status(self):
        client, _ = create_test_app_and_client()
        record = submit(client)

        response = client.post(f"/api/requests/{record['id']}/close", json={"status": "Approved"})

        assert response.status_code == 200
        assert "Approved" in response.json()["message"]
        closed = client.get("/api/closed-requests").json()
        assert [(r["id"], r["status"]) for r in closed] == [(record["id"], "Approved")]
        assert closed[0]["closed_at"] is not None

    def test_close_without_body_keeps_status(self):
        client, _ = create_test_app_and_client()
        record = submit(client)
        client.post("/api/update-status", json={"id": record["id"], "status": "Approved"})

        response = client.post(f"/api/requests/{record['id']}/close")

        assert response.status_code == 200
        assert client.get("/api/closed-requests").json()[0]["status"] == "Approved"

    def test_delete_route_closes(self):
        client, _ = create_test_app_and_client()
        record = submit(client)

        response = client.delete(f"/api/requests/{record['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Request moved to closed successfully."}
        assert client.get("/api/requests").json() == []
        assert len(client.get("/api/closed-requests").json()) == 1

    def test_move_to_closed(self):
        client, _ = create_test_app_and_client()
        record = submit(client)

        body = {"id": record["id"], "status": "Declined"}
        response = client.post("/api/move-to-closed", json=body)

        assert response.status_code == 200
        assert client.get("/api/closed-requests").json()[0]["status"] == "Declined"

    def test_move_to_closed_requires_status(self):
        client, _ = create_test_app_and_client()
        record = submit(client)

        response = client.post("/api/move-to-closed", json={"id": record["id"]})

        assert response.status_code == 400
        assert len(client.get("/api/requests").json()) == 1

    def test_unknown_id_returns_404(self):
        client, _ = create_test_app_and_client()
        assert client.delete("/api/requests/999").status_code == 404
        assert client.post("/api/requests/999/close").status_code == 404
        response = client.post("/api/move-to-closed", json={"id": 999, "status": "Approved"})
        assert response.status_code == 404
        assert response.json()["detail"] == "Request not found."


class TestReopenEndpoint:
    """Test POST /api/reopen-request/{id}."""

    def test_reopen_with_status(self):
        client, _ = create_test_app_and_client()
        record = submit(client)
        client.delete(f"/api/requests/{record['id']}")

        response = client.post(f"/api/reopen-request/{record['id']}", json={"status": "Approved"})

        assert response.status_code == 200
        assert response.json() == {"message": "Request reopened with status: Approved"}
        reopened = client.get("/api/requests").json()
        assert [(r["id"], r["status"]) for r in reopened] == [(record["id"], "Approved")]
        assert reopened[0]["created_at"] == record["created_at"]
        assert client.get("/api/closed-requests").json() == []

    def test_reopen_defaults_to_pending(self):
        client, _ = create_test_app_and_client()
        record = submit(client)
        client.post(f"/api/requests/{record['id']}/close", json={"status": "Declined"})

        client.post(f"/api/reopen-request/{record['id']}")

        assert client.get("/api/requests").json()[0]["status"] == "Pending"

    def test_unknown_id_returns_404(self):
        client, _ = create_test_app_and_client()
        response = client.post("/api/reopen-request/999")
        assert response.status_code == 404
        assert response.json()["detail"] == "Closed request not found."


class TestStatusEndpoints:
    """Test POST /api/update-status and /api/update-closed-status."""

    def test_update_status(self):
        client, _ = create_test_app_and_client()
        record = submit(client)

        body = {"id": record["id"], "status": "Approved"}
        response = client.post("/api/update-status", json=body)

        assert response.status_code == 200
        updated = client.get("/api/requests").json()[0]
        assert updated["status"] == "Approved"
        assert updated["title"] == "Dune"

    def test_update_status_missing_fields_returns_400(self):
        client, _ = create_test_app_and_client()
        assert client.post("/api/update-status", json={"status": "Approved"}).status_code == 400
        assert client.post("/api/update-status", json={"id": 1}).status_code == 400

    def test_update_status_unknown_id_succeeds(self):
        client, _ = create_test_app_and_client()
        response = client.post("/api/update-status", json={"id": 999, "status": "Approved"})
        assert response.status_code == 200

    def test_update_closed_status(self):
        client, _ = create_test_app_and_client()
        record = submit(client)
        client.delete(f"/api/requests/{record['id']}")

        response = client.post(
            "/api/update-closed-status", json={"id": record["id"], "status": "Fulfilled"}
        )

        assert response.status_code == 200
        assert client.get("/api/closed-requests").json()[0]["status"] == "Fulfilled"

    def test_update_closed_status_missing_status_returns_400(self):
        client, _ = create_test_app_and_client()
        response = client.post("/api/update-closed-status", json={"id": 1, "status": ""})
        assert response.status_code == 400


class TestDeleteClosedEndpoint:
    """Test DELETE /api/closed-requests/{id}."""

    def test_delete_is_permanent_and_idempotent(self):
        client, _ = create_test_app_and_client()
        record = submit(client)
        client.delete(f"/api/requests/{record['id']}")

        assert client.delete(f"/api/closed-requests/{record['id']}").status_code == 200
        assert client.get("/api/closed-requests").json() == []
        assert client.delete(f"/api/closed-requests/{record['id']}").status_code == 200


class TestOutOfRangeIds:
    """Ids too large for SQLite behave like any unknown id."""

    HUGE_ID = 99999999999999999999999

    def test_close_returns_404(self):
        client, _ = create_test_app_and_client()
        assert client.delete(f"/api/requests/{self.HUGE_ID}").status_code == 404

    def test_reopen_returns_404(self):
        client, _ = create_test_app_and_client()
        assert client.post(f"/api/reopen-request/{self.HUGE_ID}").status_code == 404

    def test_update_status_is_permissive(self):
        client, _ = create_test_app_and_client()
        body = {"id": self.HUGE_ID, "status": "Approved"}
        assert client.post("/api/update-status", json=body).status_code == 200
        assert client.post("/api/update-closed-status", json=body).status_code == 200

    def test_delete_closed_is_permissive(self):
        client, _ = create_test_app_and_client()
        assert client.delete(f"/api/closed-requests/{self.HUGE_ID}").status_code == 200


class TestStorageFailures:
    """Storage faults surface as 500."""

    def test_partial_move_reported_as_duplicate(self):
        """A close whose delete fails on a non-atomic store is flagged distinctly."""
        from mediadesk.api.app import create_app, get_manager

        store = OpenDeleteFailingStore()
        manager = RequestLifecycleManager(store)
        app = create_app(Settings(public_dir=Path("/nonexistent/public")))
        app.dependency_overrides[get_manager] = lambda: manager
        client = TestClient(app)
        record = submit(client)
        store.fail_deletes = True

        response = client.delete(f"/api/requests/{record['id']}")

        assert response.status_code == 500
        body = response.json()
        assert body["duplicated"] is True
        assert body["request_id"] == record["id"]
        assert [r["id"] for r in client.get("/api/requests").json()] == [record["id"]]
        assert [r["id"] for r in client.get("/api/closed-requests").json()] == [record["id"]]

    def test_storage_error_returns_500(self, monkeypatch):
        from mediadesk.db.store import SqlRequestStore

        def broken(self, request_set):
            raise StorageError("disk I/O error")

        monkeypatch.setattr(SqlRequestStore, "list", broken)
        client, _ = create_test_app_and_client()

        response = client.get("/api/requests")
        assert response.status_code == 500
        assert response.json() == {"detail": "Storage failure."}


class TestAppSurface:
    """Health check and static files."""

    def test_health(self):
        client, _ = create_test_app_and_client()
        assert client.get("/health").json() == {"status": "ok"}

    def test_serves_public_dir(self, tmp_path):
        (tmp_path / "index.html").write_text("<h1>requests</h1>")
        client, _ = create_test_app_and_client(public_dir=tmp_path)

        response = client.get("/")
        assert response.status_code == 200
        assert "requests" in response.text
        assert client.get("/api/requests").status_code == 200
