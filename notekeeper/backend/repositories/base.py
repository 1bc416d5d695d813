"""
Base Repository.

Whole-collection persistence of pydantic models in a single JSON file.
Every read loads the full array; every write replaces the file.
"""

import asyncio
import contextlib
import os
import tempfile
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Generic, TypeVar

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from notekeeper.backend.core.concurrency import get_io_pool, get_write_lock
from notekeeper.backend.core.exceptions import NotFoundError, PersistenceError
from notekeeper.backend.core.logging import get_logger

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=BaseModel)


class JsonFileRepository(Generic[ModelType]):
    """
    Base repository over a JSON array file.

    Subclasses should set the model class:

        class NoteRepository(JsonFileRepository[Note]):
            model = Note

    A missing file reads as an empty collection. A file that exists but
    does not hold a valid array of records raises PersistenceError.
    """

    model: type[ModelType]

    def __init__(self, path: Path, indent: int = 2) -> None:
        self.path = Path(path)
        self.indent = indent
        self._adapter = TypeAdapter(list[self.model])

    async def load_all(self) -> list[ModelType]:
        """Read the whole collection."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(get_io_pool(), self._read)

    async def save_all(self, items: list[ModelType]) -> None:
        """Overwrite the stored collection with ``items``."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(get_io_pool(), self._write, list(items))

    @asynccontextmanager
    async def mutate(self) -> AsyncIterator[list[ModelType]]:
        """
        Read-modify-write cycle under the file's write lock.

        Yields the loaded collection for in-place changes and saves it when
        the block exits normally. If the block raises, nothing is written.
        """
        async with get_write_lock(self.path):
            items = await self.load_all()
            yield items
            await self.save_all(items)

    def find(self, items: list[ModelType], id: str) -> ModelType:
        """
        Get a single record by ID from a loaded collection.

        Raises:
            NotFoundError: If record not found
        """
        for item in items:
            if getattr(item, "id", None) == id:
                return item
        raise NotFoundError(f"{self.model.__name__} not found")

    async def get_by_id(self, id: str) -> ModelType:
        """
        Load the collection and return one record.

        Raises:
            NotFoundError: If record not found
        """
        return self.find(await self.load_all(), id)

    def _read(self) -> list[ModelType]:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            logger.info(
                "No data file found, starting with empty collection",
                extra={"path": str(self.path)},
            )
            return []
        except OSError as e:
            logger.error(
                "Failed to read data file",
                extra={"path": str(self.path), "error": str(e)},
            )
            raise PersistenceError(f"Failed to read {self.path.name}", path=self.path) from e

        if not raw.strip():
            return []

        try:
            return self._adapter.validate_json(raw)
        except PydanticValidationError as e:
            logger.error(
                "Data file is corrupt",
                extra={"path": str(self.path), "error_count": e.error_count()},
            )
            raise PersistenceError(f"Corrupt data in {self.path.name}", path=self.path) from e

    def _write(self, items: list[ModelType]) -> None:
        payload = self._adapter.dump_json(
            items,
            by_alias=True,
            indent=self.indent or None,
        )
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "wb") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
            logger.error(
                "Failed to write data file",
                extra={"path": str(self.path), "error": str(e)},
            )
            raise PersistenceError(f"Failed to write {self.path.name}", path=self.path) from e

        logger.debug(
            "Saved collection",
            extra={"path": str(self.path), "count": len(items)},
        )
