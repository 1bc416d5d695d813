"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header

from notekeeper.backend.core.config import get_app_config, get_data_file
from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.repositories.note import NoteRepository
from notekeeper.backend.services.note import NoteService

logger = get_logger(__name__)


def get_note_repository() -> NoteRepository:
    """
    Repository bound to the configured notes file.

    Cheap to build per request; the write lock is shared per file.
    """
    return NoteRepository(get_data_file(), indent=get_app_config().storage.indent)


def get_note_service(
    repo: Annotated[NoteRepository, Depends(get_note_repository)],
) -> NoteService:
    """Note service wired with the repository and preference defaults."""
    return NoteService(repo, get_app_config().preferences)


NoteServiceDep = Annotated[NoteService, Depends(get_note_service)]


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """
    Extract or generate request ID from headers.

    Used for request tracing and correlation.
    """
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]
