"""
Note Schemas.

Pydantic schemas for note API request/response validation.
"""

from typing import Any, Literal

from pydantic import Field, StrictBool, StrictStr, field_validator

from notekeeper.backend.models.note import (
    NOTE_COLORS,
    CamelModel,
    ChecklistItem,
    FontFamily,
    FontSize,
    Note,
    NoteColor,
    NoteType,
    new_id,
)

NoteView = Literal["all", "archive", "trash"]

# One message per rejected field, keyed by wire name
FIELD_ERROR_MESSAGES: dict[str, str] = {
    "title": "Title must be a string",
    "content": "Content must be a string",
    "type": 'Type must be either "text" or "checklist"',
    "fontSize": 'Font size must be "small", "medium", or "large"',
    "fontFamily": 'Font family must be "sans", "serif", or "mono"',
    "color": "Color must be one of: " + ", ".join(NOTE_COLORS),
    "checklist": "Checklist must be a list of items with text and completed fields",
}


class ChecklistItemInput(CamelModel):
    """
    Checklist item as sent by clients.

    Strict types: ``"yes"`` or ``1`` is not a ``completed`` value here,
    though the stored model stays lenient when loading old files.
    """

    id: StrictStr = Field(default_factory=new_id)
    text: StrictStr = ""
    completed: StrictBool = False

    def to_item(self) -> ChecklistItem:
        return ChecklistItem(id=self.id, text=self.text, completed=self.completed)


def _to_items(items: list[ChecklistItemInput] | None) -> list[ChecklistItem] | None:
    if items is None:
        return None
    return [item.to_item() for item in items]


class NoteCreate(CamelModel):
    """
    Schema for creating a new note.

    Null ``type``, ``color``, ``checklist`` and font fields mean "use the
    default"; font defaults come from the configured preferences.
    """

    title: str = Field(default="", description="Note title")
    content: str = Field(default="", description="Note body for text notes")
    color: NoteColor | None = Field(default=None, description="Palette color")
    type: NoteType | None = Field(default=None, description="text or checklist")
    checklist: list[ChecklistItemInput] | None = Field(
        default=None,
        description="Checklist items for checklist notes",
    )
    font_size: FontSize | None = Field(default=None, description="Font size")
    font_family: FontFamily | None = Field(default=None, description="Font family")

    def checklist_items(self) -> list[ChecklistItem]:
        """Checklist as stored items; empty when none was sent."""
        return _to_items(self.checklist) or []


class NoteUpdate(CamelModel):
    """
    Schema for a partial note update.

    Only fields present in the payload are applied. A null value leaves the
    field unchanged, except for ``title`` and ``content`` where null is
    rejected. ``id``, timestamps and lifecycle flags are not patchable.
    """

    title: str | None = Field(default=None, description="Note title")
    content: str | None = Field(default=None, description="Note body")
    color: NoteColor | None = Field(default=None, description="Palette color")
    type: NoteType | None = Field(default=None, description="text or checklist")
    checklist: list[ChecklistItemInput] | None = Field(default=None, description="Checklist items")
    font_size: FontSize | None = Field(default=None, description="Font size")
    font_family: FontFamily | None = Field(default=None, description="Font family")

    @field_validator("title", "content", mode="before")
    @classmethod
    def _reject_null_text(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("must be a string")
        return value

    def changes(self) -> dict[str, Any]:
        """Fields explicitly provided with a non-null value, ready to set on a Note."""
        changes = {
            name: getattr(self, name)
            for name in self.model_fields_set
            if getattr(self, name) is not None
        }
        if "checklist" in changes:
            changes["checklist"] = _to_items(self.checklist)
        return changes


class NoteCounts(CamelModel):
    """Number of notes in each view, ignoring search."""

    all: int = 0
    archive: int = 0
    trash: int = 0


class NoteViewResponse(CamelModel):
    """Projected note list for one view plus the per-view counts."""

    view: NoteView
    query: str
    notes: list[Note]
    counts: NoteCounts


class MessageResponse(CamelModel):
    """Confirmation for operations that return no note."""

    message: str


class EmptyTrashResponse(CamelModel):
    """Result of emptying the trash."""

    message: str
    deleted_count: int


class PreferencesResponse(CamelModel):
    """UI preference defaults served to clients."""

    view_mode: Literal["grid", "list"]
    dark_mode: bool
    font_size: FontSize
    font_family: FontFamily
