"""
Note Service.

Business logic layer for notes. Orchestrates the repository,
handles validation, and implements the note lifecycle:

    create ──► active ──archive──► archived ──unarchive──► active
                 │                    │
                 └──delete──► trashed ◄┘ (archive flag kept)
                               │
                 restore ◄─────┤ (clears both flags)
                               └── permanent delete / empty trash
"""

from typing import Any

from notekeeper.backend.core.config_schema import PreferencesSchema
from notekeeper.backend.core.exceptions import NotFoundError
from notekeeper.backend.core.utils import next_timestamp, utc_now
from notekeeper.backend.models.note import (
    DEFAULT_NOTE_COLOR,
    DEFAULT_NOTE_TYPE,
    Note,
    new_id,
)
from notekeeper.backend.repositories.note import NoteRepository
from notekeeper.backend.schemas.note import (
    FIELD_ERROR_MESSAGES,
    NoteCounts,
    NoteCreate,
    NoteUpdate,
    NoteView,
)
from notekeeper.backend.services.base import BaseService
from notekeeper.backend.services.projection import count_notes, project_notes


def _touch(note: Note) -> None:
    note.updated_at = next_timestamp(note.updated_at)


class NoteService(BaseService):
    """
    Service for note business logic.

    Every mutation is one locked load→change→save cycle through
    NoteRepository.mutate(); a failed operation writes nothing.
    """

    field_messages = FIELD_ERROR_MESSAGES

    def __init__(self, repo: NoteRepository, preferences: PreferencesSchema) -> None:
        super().__init__(repo)
        self.preferences = preferences

    @property
    def repo(self) -> NoteRepository:
        """Get the note repository."""
        return self._repo

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def list_notes(self) -> list[Note]:
        """Return the whole collection in stored order."""
        notes = await self.repo.load_all()
        self._log_debug("Loaded notes", count=len(notes))
        return notes

    async def get_note(self, note_id: str) -> Note:
        """
        Get a note by ID.

        Raises:
            NotFoundError: If note not found
        """
        return await self.repo.get_by_id(note_id)

    async def view_notes(
        self,
        view: NoteView,
        query: str = "",
    ) -> tuple[list[Note], NoteCounts]:
        """
        Project the collection for one view.

        Args:
            view: all, archive, or trash
            query: Free-text search, ignored when blank

        Returns:
            Tuple of (visible notes, per-view counts)
        """
        notes = await self.repo.load_all()
        return project_notes(notes, view, query), count_notes(notes)

    async def count_notes(self) -> NoteCounts:
        """Per-view note counts."""
        return count_notes(await self.repo.load_all())

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    async def create_note(self, payload: dict[str, Any] | NoteCreate) -> Note:
        """
        Create a new note at the front of the collection.

        Args:
            payload: Note fields; omitted fields take defaults

        Returns:
            Created note

        Raises:
            ValidationError: If any field is invalid
        """
        data = self._parse_payload(NoteCreate, payload)
        self._log_operation("Creating note", title=data.title, type=data.type)

        async with self.repo.mutate() as notes:
            taken = {note.id for note in notes}
            note_id = new_id()
            while note_id in taken:
                note_id = new_id()

            now = utc_now()
            note = Note(
                id=note_id,
                title=data.title,
                content=data.content,
                color=data.color or DEFAULT_NOTE_COLOR,
                type=data.type or DEFAULT_NOTE_TYPE,
                checklist=data.checklist_items(),
                font_size=data.font_size or self.preferences.font_size,
                font_family=data.font_family or self.preferences.font_family,
                is_archived=False,
                is_deleted=False,
                created_at=now,
                updated_at=now,
            )
            self.repo.prepend(notes, note)

        self._log_debug("Note created", note_id=note.id)
        return note

    async def update_note(
        self,
        note_id: str,
        payload: dict[str, Any] | NoteUpdate,
    ) -> Note:
        """
        Apply a partial update.

        Fields absent from the payload keep their value. ``id`` and
        ``created_at`` never change; ``updated_at`` always advances.

        Raises:
            ValidationError: If any field is invalid (checked before loading)
            NotFoundError: If note not found
        """
        data = self._parse_payload(NoteUpdate, payload)
        changes = data.changes()

        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=sorted(changes),
        )

        async with self.repo.mutate() as notes:
            note = self.repo.find(notes, note_id)
            for name, value in changes.items():
                setattr(note, name, value)
            _touch(note)

        return note

    async def delete_note(self, note_id: str) -> Note:
        """
        Move a note to the trash. The archive flag is left as it was.

        Raises:
            NotFoundError: If note not found
        """
        self._log_operation("Moving note to trash", note_id=note_id)
        return await self._set_flags(note_id, is_deleted=True)

    async def restore_note(self, note_id: str) -> Note:
        """
        Bring a note back to the active view, clearing trash and archive.

        Raises:
            NotFoundError: If note not found
        """
        self._log_operation("Restoring note", note_id=note_id)
        return await self._set_flags(note_id, is_deleted=False, is_archived=False)

    async def archive_note(self, note_id: str) -> Note:
        """
        Archive a note.

        Raises:
            NotFoundError: If note not found
        """
        self._log_operation("Archiving note", note_id=note_id)
        return await self._set_flags(note_id, is_archived=True)

    async def unarchive_note(self, note_id: str) -> Note:
        """
        Unarchive a note.

        Raises:
            NotFoundError: If note not found
        """
        self._log_operation("Unarchiving note", note_id=note_id)
        return await self._set_flags(note_id, is_archived=False)

    async def permanently_delete_note(self, note_id: str) -> None:
        """
        Remove a note from the collection for good.

        Raises:
            NotFoundError: If no note had this ID
        """
        self._log_operation("Permanently deleting note", note_id=note_id)

        async with self.repo.mutate() as notes:
            if not self.repo.remove(notes, note_id):
                raise NotFoundError("Note not found")

    async def empty_trash(self) -> int:
        """
        Permanently delete every trashed note.

        Returns:
            Number of notes removed (0 when the trash was already empty)
        """
        async with self.repo.mutate() as notes:
            removed = self.repo.remove_deleted(notes)

        self._log_operation("Emptied trash", deleted_count=removed)
        return removed

    async def toggle_checklist_item(self, note_id: str, item_id: str) -> Note:
        """
        Flip the completed state of one checklist item.

        Raises:
            NotFoundError: If the note or the item is not found
        """
        self._log_operation("Toggling checklist item", note_id=note_id, item_id=item_id)

        async with self.repo.mutate() as notes:
            note = self.repo.find(notes, note_id)
            for item in note.checklist:
                if item.id == item_id:
                    item.completed = not item.completed
                    break
            else:
                raise NotFoundError("Checklist item not found")
            _touch(note)

        return note

    async def _set_flags(self, note_id: str, **flags: bool) -> Note:
        async with self.repo.mutate() as notes:
            note = self.repo.find(notes, note_id)
            for name, value in flags.items():
                setattr(note, name, value)
            _touch(note)
        return note
