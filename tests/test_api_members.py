"""Tests for members API endpoints."""

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from shoplab.db.schema import Base, Member


def create_test_app_and_client():
    """Create app with test database and return (client, engine)."""
    from shoplab.api.app import create_app, get_db_session

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    app = create_app()

    def override_get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db
    client = TestClient(app)

    return client, engine


class TestCreateMember:
    """POST /api/members."""

    def test_create_returns_id(self):
        """Registration returns the new member ID."""
        client, engine = create_test_app_and_client()

        response = client.post("/api/members", json={"name": "kim"})

        assert response.status_code == 200
        member_id = response.json()["id"]
        with Session(engine) as session:
            assert session.get(Member, member_id).name == "kim"

    def test_duplicate_is_conflict(self):
        """Second registration of the same name is a 409."""
        client, engine = create_test_app_and_client()
        client.post("/api/members", json={"name": "kim"})

        response = client.post("/api/members", json={"name": "kim"})

        assert response.status_code == 409
        with Session(engine) as session:
            assert session.query(Member).count() == 1

    def test_missing_name_is_unprocessable(self):
        """Body without name fails request validation."""
        client, _ = create_test_app_and_client()

        response = client.post("/api/members", json={})

        assert response.status_code == 422

    def test_empty_name_is_unprocessable(self):
        """Empty name fails request validation."""
        client, _ = create_test_app_and_client()

        response = client.post("/api/members", json={"name": ""})

        assert response.status_code == 422

    def test_blank_name_is_bad_request(self):
        """Whitespace-only name passes the schema but fails the service."""
        client, _ = create_test_app_and_client()

        response = client.post("/api/members", json={"name": "   "})

        assert response.status_code == 400


class TestUpdateMember:
    """PUT /api/members/{member_id}."""

    def test_update_returns_id_and_name(self):
        """Rename responds with the stored values."""
        client, _ = create_test_app_and_client()
        member_id = client.post("/api/members", json={"name": "kim"}).json()["id"]

        response = client.put(f"/api/members/{member_id}", json={"name": "park"})

        assert response.status_code == 200
        assert response.json() == {"id": member_id, "name": "park"}

    def test_update_unknown_is_not_found(self):
        """Unknown member ID is a 404."""
        client, _ = create_test_app_and_client()

        response = client.put("/api/members/999", json={"name": "park"})

        assert response.status_code == 404


class TestListMembers:
    """GET /api/members."""

    def test_envelope(self):
        """List uses the responseInfo/count/data envelope."""
        client, _ = create_test_app_and_client()
        for name in ["kim", "lee"]:
            client.post("/api/members", json={"name": name})

        response = client.get("/api/members")

        assert response.status_code == 200
        assert response.json() == {
            "responseInfo": "Member Name",
            "count": 2,
            "data": [{"name": "kim"}, {"name": "lee"}],
        }

    def test_empty(self):
        """No members gives an empty list."""
        client, _ = create_test_app_and_client()

        data = client.get("/api/members").json()

        assert data["count"] == 0
        assert data["data"] == []


class TestHealth:
    """GET /health."""

    def test_health(self):
        client, _ = create_test_app_and_client()

        assert client.get("/health").json() == {"status": "ok"}
