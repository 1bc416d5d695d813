"""
Note Repository.

Data access layer for notes. Handles all file operations
for the Note model.
"""

from pathlib import Path

from notekeeper.backend.models.note import Note
from notekeeper.backend.repositories.base import JsonFileRepository


class NoteRepository(JsonFileRepository[Note]):
    """
    Repository for Note model.

    Inherits whole-collection load/save from JsonFileRepository and adds
    note-specific collection edits. The stored order is newest-created first.
    """

    model = Note

    def __init__(self, path: Path, indent: int = 2) -> None:
        super().__init__(path, indent=indent)

    @staticmethod
    def prepend(notes: list[Note], note: Note) -> None:
        """Insert a newly created note at the front of the collection."""
        notes.insert(0, note)

    @staticmethod
    def remove(notes: list[Note], note_id: str) -> int:
        """
        Remove every note with ``note_id``.

        Returns:
            Number of notes removed
        """
        before = len(notes)
        notes[:] = [note for note in notes if note.id != note_id]
        return before - len(notes)

    @staticmethod
    def remove_deleted(notes: list[Note]) -> int:
        """
        Remove every trashed note.

        Returns:
            Number of notes removed
        """
        before = len(notes)
        notes[:] = [note for note in notes if not note.is_deleted]
        return before - len(notes)
