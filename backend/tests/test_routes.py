"""
Campus Roster Backend — HTTP Endpoint Tests
============================================

What:  End-to-end tests of the FastAPI routes over an in-process ASGI client.
How:   `test_client` routes sessions to a per-test SQLite database;
       `broken_client` hands every request a session whose queries fail.
"""

import logging
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from roster.database import get_db_session
from roster.middleware.logging import level_for_status


def _store_down() -> OperationalError:
    return OperationalError("SELECT 1", {}, Exception("connection refused"))


@pytest_asyncio.fixture
async def broken_client(mock_db_session):
    """Client whose database session fails on every query."""
    from roster.main import create_app

    mock_db_session.execute.side_effect = _store_down()
    app = create_app()

    async def override_db_session():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = override_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestHealthRoutes:
    """Liveness and readiness probes."""

    @pytest.mark.asyncio
    async def test_healthz_always_ok(self, test_client):
        with patch("roster.routes.health.ping_database", AsyncMock(side_effect=_store_down())):
            response = await test_client.get("/healthz")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    @pytest.mark.asyncio
    async def test_readyz_ready(self, test_client):
        with patch("roster.routes.health.ping_database", AsyncMock()) as ping:
            response = await test_client.get("/readyz")

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}
        ping.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_readyz_not_ready_when_store_down(self, test_client):
        with patch("roster.routes.health.ping_database", AsyncMock(side_effect=_store_down())):
            response = await test_client.get("/readyz")

        assert response.status_code == 503
        assert response.json() == {"status": "not ready"}


class TestStudentRoutes:
    """GET/POST/DELETE for students."""

    @pytest.mark.asyncio
    async def test_add_and_list(self, test_client):
        response = await test_client.post(
            "/api/addstudent", json={"name": "Asha", "rollNo": 12, "class": "10A"}
        )

        assert response.status_code == 200
        assert response.json() == {"message": "Student inserted successfully", "id": 1}

        listing = await test_client.get("/api/student")
        assert listing.status_code == 200
        assert listing.json() == [
            {"id": 1, "name": "Asha", "roll_number": "12", "class": "10A"}
        ]

    @pytest.mark.asyncio
    async def test_empty_body_fields_stored_as_null(self, test_client):
        response = await test_client.post("/api/addstudent", json={})
        assert response.status_code == 200

        listing = await test_client.get("/api/student")
        assert listing.json() == [{"id": 1, "name": None, "roll_number": None, "class": None}]

    @pytest.mark.asyncio
    async def test_delete_renumbers_remaining(self, test_client):
        for name in ["A", "B", "C", "D"]:
            await test_client.post("/api/addstudent", json={"name": name})

        response = await test_client.delete("/api/student/2")

        assert response.status_code == 200
        assert response.json() == {"message": "Student deleted successfully"}

        rows = (await test_client.get("/api/student")).json()
        assert [(row["id"], row["name"]) for row in rows] == [(1, "A"), (2, "C"), (3, "D")]

        # next create continues the dense sequence
        created = await test_client.post("/api/addstudent", json={"name": "E"})
        assert created.json()["id"] == 4

    @pytest.mark.asyncio
    async def test_delete_unknown_id_succeeds(self, test_client):
        await test_client.post("/api/addstudent", json={"name": "A"})

        response = await test_client.delete("/api/student/99")

        assert response.status_code == 200
        rows = (await test_client.get("/api/student")).json()
        assert [row["id"] for row in rows] == [1]

    @pytest.mark.asyncio
    async def test_delete_id_beyond_integer_range_succeeds(self, test_client):
        await test_client.post("/api/addstudent", json={"name": "A"})

        response = await test_client.delete("/api/student/99999999999")

        assert response.status_code == 200
        assert response.json() == {"message": "Student deleted successfully"}
        rows = (await test_client.get("/api/student")).json()
        assert [row["id"] for row in rows] == [1]

    @pytest.mark.asyncio
    async def test_non_integer_id_rejected(self, test_client):
        response = await test_client.delete("/api/student/abc")
        assert response.status_code == 422


class TestTeacherRoutes:
    """GET/POST/DELETE for teachers."""

    @pytest.mark.asyncio
    async def test_teacher_lifecycle(self, test_client):
        await test_client.post(
            "/api/addteacher", json={"name": "Ravi", "subject": "Maths", "class": "9B"}
        )
        await test_client.post(
            "/api/addteacher", json={"name": "Meera", "subject": "Physics", "class": "10A"}
        )

        deleted = await test_client.delete("/api/teacher/1")
        assert deleted.json() == {"message": "Teacher deleted successfully"}

        rows = (await test_client.get("/api/teacher")).json()
        assert rows == [{"id": 1, "name": "Meera", "subject": "Physics", "class": "10A"}]

    @pytest.mark.asyncio
    async def test_collections_are_independent(self, test_client):
        await test_client.post("/api/addstudent", json={"name": "Asha"})
        created = await test_client.post("/api/addteacher", json={"name": "Ravi"})

        assert created.json()["id"] == 1


class TestLandingRoute:
    """GET / greeting."""

    @pytest.mark.asyncio
    async def test_landing_includes_students(self, test_client):
        await test_client.post("/api/addstudent", json={"name": "Asha", "class": "10A"})

        response = await test_client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "From Backend!!!"
        assert body["studentData"] == [
            {"id": 1, "name": "Asha", "roll_number": None, "class": "10A"}
        ]


class TestStoreFailures:
    """Every store failure becomes HTTP 500 with an `error` message."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method, path, expected",
        [
            ("GET", "/api/student", "Fetch students failed"),
            ("POST", "/api/addstudent", "Insert student failed"),
            ("DELETE", "/api/student/1", "Delete student failed"),
            ("GET", "/api/teacher", "Fetch teachers failed"),
            ("POST", "/api/addteacher", "Insert teacher failed"),
            ("DELETE", "/api/teacher/1", "Delete teacher failed"),
            ("GET", "/", "Error fetching student data"),
        ],
    )
    async def test_store_failure_returns_500(self, broken_client, method, path, expected):
        kwargs = {"json": {"name": "Asha"}} if method == "POST" else {}

        response = await broken_client.request(method, path, **kwargs)

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == expected
        assert body["request_id"] == response.headers["X-Request-ID"]


class TestRequestId:
    """Correlation header handling."""

    @pytest.mark.asyncio
    async def test_client_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api/student", headers={"X-Request-ID": "abc12345"})
        assert response.headers["X-Request-ID"] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/api/teacher")
        assert len(response.headers["X-Request-ID"]) == 8


class TestAccessLog:
    """One access line per request, probes excluded."""

    @pytest.mark.parametrize(
        "status, level",
        [(200, logging.INFO), (307, logging.INFO), (422, logging.WARNING), (500, logging.ERROR)],
    )
    def test_level_for_status(self, status, level):
        assert level_for_status(status) == level

    @pytest.mark.asyncio
    async def test_client_error_logged_as_warning(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="roster.access"):
            await test_client.delete("/api/student/abc", headers={"X-Request-ID": "feedbeef"})

        records = [r for r in caplog.records if r.name == "roster.access"]
        assert len(records) == 1
        assert records[0].levelno == logging.WARNING
        assert records[0].request_id == "feedbeef"

    @pytest.mark.asyncio
    async def test_probes_not_logged(self, test_client, caplog):
        with caplog.at_level(logging.INFO, logger="roster.access"):
            await test_client.get("/healthz")

        assert not [r for r in caplog.records if r.name == "roster.access"]
