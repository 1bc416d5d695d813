"""
Note Model.

The persisted note entity and its checklist items. Records are stored and
sent over the wire with camelCase keys (``fontSize``, ``isArchived``,
``createdAt``); Python code uses the snake_case attribute names.
"""

from datetime import datetime, timezone
from typing import Any, Literal, get_args
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

NoteType = Literal["text", "checklist"]
NoteColor = Literal["default", "red", "orange", "yellow", "green", "blue", "purple", "pink"]
FontSize = Literal["small", "medium", "large"]
FontFamily = Literal["sans", "serif", "mono"]

NOTE_TYPES: tuple[str, ...] = get_args(NoteType)
NOTE_COLORS: tuple[str, ...] = get_args(NoteColor)
FONT_SIZES: tuple[str, ...] = get_args(FontSize)
FONT_FAMILIES: tuple[str, ...] = get_args(FontFamily)

DEFAULT_NOTE_COLOR = "default"
DEFAULT_NOTE_TYPE = "text"


def new_id() -> str:
    """Generate an identifier for a note or checklist item."""
    return str(uuid4())


class CamelModel(BaseModel):
    """Base for models exchanged with clients and the notes file."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ChecklistItem(CamelModel):
    """One line of a checklist note."""

    id: str = Field(default_factory=new_id)
    text: str = ""
    completed: bool = False


class Note(CamelModel):
    """
    Note entity.

    Represents a text or checklist note. ``checklist`` is authoritative only
    when ``type`` is ``checklist`` and ``content`` only when it is ``text``;
    both are kept so switching views never loses data.

    ``color`` is a plain string here so records written by older clients
    with colors outside the palette still load. Input validation restricts
    new values to the palette.
    """

    id: str
    title: str = ""
    content: str = ""
    color: str = DEFAULT_NOTE_COLOR
    type: NoteType = DEFAULT_NOTE_TYPE
    checklist: list[ChecklistItem] = Field(default_factory=list)
    font_size: FontSize = "medium"
    font_family: FontFamily = "sans"
    is_archived: bool = False
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime

    @field_validator("checklist", mode="before")
    @classmethod
    def _null_checklist(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("created_at", "updated_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"
