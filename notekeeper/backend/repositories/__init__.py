# Repositories package
from notekeeper.backend.repositories.base import JsonFileRepository
from notekeeper.backend.repositories.note import NoteRepository

__all__ = ["JsonFileRepository", "NoteRepository"]
