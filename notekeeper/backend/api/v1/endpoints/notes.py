"""
Notes API Endpoints.

REST API endpoints for note management. Request bodies are taken as raw
objects so the service can report every invalid field in one
VAL_VALIDATION_ERROR response.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Query

from notekeeper.backend.core.dependencies import NoteServiceDep, RequestId
from notekeeper.backend.models.note import Note
from notekeeper.backend.schemas.base import ApiResponse
from notekeeper.backend.schemas.note import (
    EmptyTrashResponse,
    MessageResponse,
    NoteCounts,
    NoteView,
    NoteViewResponse,
)

router = APIRouter()

NotePayload = Annotated[dict[str, Any] | None, Body(description="Note fields")]


@router.get(
    "",
    response_model=ApiResponse[list[Note]],
    summary="List notes",
    description="Get every note, including archived and trashed, in stored order.",
)
async def list_notes(
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[list[Note]]:
    """List all notes."""
    notes = await service.list_notes()
    return ApiResponse.wrap(notes, request_id)


@router.get(
    "/view",
    response_model=ApiResponse[NoteViewResponse],
    summary="Project notes for a view",
    description=(
        "Notes in the given view matching the search query, most recently "
        "updated first, together with the per-view counts."
    ),
)
async def view_notes(
    service: NoteServiceDep,
    request_id: RequestId,
    view: NoteView = Query(default="all", description="all, archive, or trash"),
    q: str = Query(default="", description="Search text"),
) -> ApiResponse[NoteViewResponse]:
    """Project the collection for one view."""
    notes, counts = await service.view_notes(view, q)
    return ApiResponse.wrap(
        NoteViewResponse(view=view, query=q, notes=notes, counts=counts),
        request_id,
    )


@router.get(
    "/counts",
    response_model=ApiResponse[NoteCounts],
    summary="Count notes per view",
)
async def count_notes(
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[NoteCounts]:
    """Per-view note counts."""
    counts = await service.count_notes()
    return ApiResponse.wrap(counts, request_id)


@router.post(
    "",
    response_model=ApiResponse[Note],
    status_code=201,
    summary="Create a note",
    description="Create a new note. Every field is optional.",
)
async def create_note(
    service: NoteServiceDep,
    request_id: RequestId,
    payload: NotePayload = None,
) -> ApiResponse[Note]:
    """Create a new note."""
    note = await service.create_note(payload or {})
    return ApiResponse.wrap(note, request_id)


@router.delete(
    "/trash/empty",
    response_model=ApiResponse[EmptyTrashResponse],
    summary="Empty the trash",
    description="Permanently delete every trashed note.",
)
async def empty_trash(
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[EmptyTrashResponse]:
    """Empty the trash."""
    deleted_count = await service.empty_trash()
    return ApiResponse.wrap(
        EmptyTrashResponse(
            message="Trash emptied successfully",
            deleted_count=deleted_count,
        ),
        request_id,
    )


@router.get(
    "/{note_id}",
    response_model=ApiResponse[Note],
    summary="Get a note",
)
async def get_note(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[Note]:
    """Get a note by ID."""
    note = await service.get_note(note_id)
    return ApiResponse.wrap(note, request_id)


@router.api_route(
    "/{note_id}",
    methods=["PUT", "PATCH"],
    response_model=ApiResponse[Note],
    summary="Update a note",
    description="Update an existing note. Only provided fields are updated.",
)
async def update_note(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
    payload: NotePayload = None,
) -> ApiResponse[Note]:
    """Update a note."""
    note = await service.update_note(note_id, payload or {})
    return ApiResponse.wrap(note, request_id)


@router.delete(
    "/{note_id}",
    response_model=ApiResponse[MessageResponse],
    summary="Move a note to the trash",
)
async def delete_note(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[MessageResponse]:
    """Soft-delete a note."""
    await service.delete_note(note_id)
    return ApiResponse.wrap(
        MessageResponse(message="Note moved to trash"),
        request_id,
    )


@router.delete(
    "/{note_id}/permanent",
    response_model=ApiResponse[MessageResponse],
    summary="Permanently delete a note",
)
async def permanently_delete_note(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[MessageResponse]:
    """Permanently delete a note."""
    await service.permanently_delete_note(note_id)
    return ApiResponse.wrap(
        MessageResponse(message="Note permanently deleted"),
        request_id,
    )


@router.api_route(
    "/{note_id}/restore",
    methods=["PUT", "POST"],
    response_model=ApiResponse[Note],
    summary="Restore a note",
    description="Move a note out of the trash (and out of the archive).",
)
async def restore_note(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[Note]:
    """Restore a trashed note."""
    note = await service.restore_note(note_id)
    return ApiResponse.wrap(note, request_id)


@router.api_route(
    "/{note_id}/archive",
    methods=["PUT", "POST"],
    response_model=ApiResponse[Note],
    summary="Archive a note",
)
async def archive_note(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[Note]:
    """Archive a note."""
    note = await service.archive_note(note_id)
    return ApiResponse.wrap(note, request_id)


@router.api_route(
    "/{note_id}/unarchive",
    methods=["PUT", "POST"],
    response_model=ApiResponse[Note],
    summary="Unarchive a note",
)
async def unarchive_note(
    note_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[Note]:
    """Unarchive a note."""
    note = await service.unarchive_note(note_id)
    return ApiResponse.wrap(note, request_id)


@router.api_route(
    "/{note_id}/checklist/{item_id}/toggle",
    methods=["PUT", "POST"],
    response_model=ApiResponse[Note],
    summary="Toggle a checklist item",
)
async def toggle_checklist_item(
    note_id: str,
    item_id: str,
    service: NoteServiceDep,
    request_id: RequestId,
) -> ApiResponse[Note]:
    """Flip one checklist item's completed state."""
    note = await service.toggle_checklist_item(note_id, item_id)
    return ApiResponse.wrap(note, request_id)
