"""
Integration Test Fixtures.

The real app, service and repository run against a notes file under
tmp_path. ``api`` unwraps the response envelope; ``create_note`` posts a
note and returns it.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient, Response

from notekeeper.backend.core.dependencies import get_note_repository
from notekeeper.backend.repositories.note import NoteRepository

NOTES = "/api/v1/notes"


@pytest.fixture
async def client(
    note_repository: NoteRepository,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client whose requests all use the per-test notes file.

    Usage:
        async def test_list_notes(client: AsyncClient):
            response = await client.get("/api/v1/notes")
            assert response.status_code == 200
    """
    from notekeeper.backend.main import create_app

    app = create_app()
    app.dependency_overrides[get_note_repository] = lambda: note_repository

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


class ApiAssertions:
    """Envelope checks that hand back the part of the body a test cares about."""

    @staticmethod
    def _body(response: Response, status: int) -> dict[str, Any]:
        assert response.status_code == status, (
            f"Expected status {status}, got {response.status_code}: {response.text}"
        )
        body = response.json()
        assert set(body) == {"success", "data", "error", "metadata"}, body
        assert body["metadata"]["timestamp"], body
        return body

    @classmethod
    def assert_ok(cls, response: Response, status: int = 200) -> Any:
        """Successful envelope; returns ``data``."""
        body = cls._body(response, status)
        assert body["success"] is True and body["error"] is None, body
        return body["data"]

    @classmethod
    def assert_error(cls, response: Response, status: int, code: str) -> dict[str, Any]:
        """Failed envelope with the given code; returns ``error``."""
        body = cls._body(response, status)
        assert body["success"] is False and body["data"] is None, body
        assert body["error"]["code"] == code, body["error"]
        return body["error"]

    @classmethod
    def assert_rejected(cls, response: Response, *fields: str) -> list[str]:
        """
        Note payload rejected with 400; every name in ``fields`` must be among
        the rejected wire fields. Returns the per-field messages.
        """
        error = cls.assert_error(response, 400, "VAL_VALIDATION_ERROR")
        rejected = error["details"]["fields"]
        for field in fields:
            assert field in rejected, f"'{field}' not rejected, got {rejected}"
        assert len(error["errors"]) >= len(fields), error
        return error["errors"]


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()


@pytest.fixture
def create_note(client: AsyncClient) -> Callable[..., Awaitable[dict[str, Any]]]:
    """
    POST a note and return the created record.

    Usage:
        async def test_something(create_note):
            note = await create_note(title="Groceries", type="checklist")
    """

    async def _create(**fields: Any) -> dict[str, Any]:
        return ApiAssertions.assert_ok(await client.post(NOTES, json=fields), 201)

    return _create
