"""
Root Pytest Fixtures.

Shared fixtures available to all test types.

Test Storage Configuration:
    Every test gets its own notes file under pytest's tmp_path, so no test
    can see another's notes and the configured data/notes.json is never
    touched. Configuration YAML is read from the real config/settings/.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from notekeeper.backend.core.config_schema import PreferencesSchema
from notekeeper.backend.models.note import Note, new_id
from notekeeper.backend.repositories.note import NoteRepository
from notekeeper.backend.services.note import NoteService

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    """Path of a notes file that does not exist yet."""
    return tmp_path / "data" / "notes.json"


@pytest.fixture
def note_repository(data_file: Path) -> NoteRepository:
    """Repository bound to the per-test notes file."""
    return NoteRepository(data_file, indent=2)


@pytest.fixture
def preferences() -> PreferencesSchema:
    """Preference defaults used when seeding new notes."""
    return PreferencesSchema(
        view_mode="grid",
        dark_mode=False,
        font_size="medium",
        font_family="sans",
    )


@pytest.fixture
def note_service(
    note_repository: NoteRepository,
    preferences: PreferencesSchema,
) -> NoteService:
    """NoteService over the per-test notes file."""
    return NoteService(note_repository, preferences)


# =============================================================================
# Note Factories
# =============================================================================


@pytest.fixture
def make_note() -> Callable[..., Note]:
    """
    Build a Note with sensible defaults.

    ``minutes`` offsets both timestamps from a fixed base time, which makes
    ordering by updated_at easy to control.

    Usage:
        def test_something(make_note):
            note = make_note(title="Groceries", is_archived=True, minutes=5)
    """

    def _make(minutes: int = 0, **fields: Any) -> Note:
        stamp = BASE_TIME + timedelta(minutes=minutes)
        fields.setdefault("id", new_id())
        fields.setdefault("created_at", stamp)
        fields.setdefault("updated_at", stamp)
        return Note(**fields)

    return _make


# =============================================================================
# Utility Fixtures
# =============================================================================


@pytest.fixture
def anyio_backend() -> str:
    """Specify the async backend for anyio."""
    return "asyncio"
