"""
Note Projection.

Pure derivation of what a client displays from the full collection:
the view partition, free-text search, and ordering. Nothing here touches
storage or mutates its input.
"""

from collections.abc import Callable, Iterable

from notekeeper.backend.models.note import Note
from notekeeper.backend.schemas.note import NoteCounts, NoteView

VIEW_PREDICATES: dict[str, Callable[[Note], bool]] = {
    "all": lambda note: not note.is_deleted and not note.is_archived,
    "archive": lambda note: note.is_archived and not note.is_deleted,
    # Trash wins over archive
    "trash": lambda note: note.is_deleted,
}


def in_view(note: Note, view: NoteView) -> bool:
    """Whether ``note`` belongs to ``view``."""
    try:
        predicate = VIEW_PREDICATES[view]
    except KeyError:
        raise ValueError(f"Unknown view: {view!r}") from None
    return predicate(note)


def matches_query(note: Note, query: str) -> bool:
    """
    Case-insensitive substring match on title, content, or any checklist
    item's text. ``query`` is matched as given, surrounding spaces included.
    """
    needle = query.casefold()
    if needle in note.title.casefold() or needle in note.content.casefold():
        return True
    return any(needle in item.text.casefold() for item in note.checklist)


def project_notes(notes: Iterable[Note], view: NoteView, query: str = "") -> list[Note]:
    """
    Notes visible in ``view`` that match ``query``, most recently updated first.

    An empty or whitespace-only query disables search; any other query is
    matched untrimmed. Ties on ``updated_at`` keep collection order.
    """
    visible = [note for note in notes if in_view(note, view)]

    if query.strip():
        visible = [note for note in visible if matches_query(note, query)]

    return sorted(visible, key=lambda note: note.updated_at, reverse=True)


def count_notes(notes: Iterable[Note]) -> NoteCounts:
    """Per-view totals, using the same partition as project_notes without search."""
    totals = {view: 0 for view in VIEW_PREDICATES}
    for note in notes:
        for view, predicate in VIEW_PREDICATES.items():
            if predicate(note):
                totals[view] += 1
    return NoteCounts(**totals)
