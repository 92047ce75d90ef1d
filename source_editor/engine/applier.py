"""
Edit application.

Each edit is applied on its own: its anchor is resolved against the text it
is given, then the payload is spliced in. Nothing here looks at other pending
edits; keeping their positions valid is the job of the sorter.
"""

from typing import Optional

from source_editor.engine.errors import SearchTargetNotFoundError, UnknownEditKindError
from source_editor.engine.positions import resolve_position
from source_editor.models.edit import BLOCK_END_NEEDLE, Edit, EditKind
from source_editor.utils.logging import get_logger, log_edit_applied


logger = get_logger(__name__)


def find_forward(text: str, start: int, needle: str) -> Optional[int]:
    """Return the offset of the first ``needle`` at or after ``start``, or None."""
    index = text.find(needle, start)
    return index if index != -1 else None


def find_backward(text: str, start: int, needle: str) -> Optional[int]:
    """Return the offset of the last ``needle`` beginning at or before ``start``, or None."""
    index = text.rfind(needle, 0, start + len(needle))
    return index if index != -1 else None


def _splice(text: str, offset: int, payload: str) -> str:
    return text[:offset] + payload + text[offset:]


def apply_edit(edit: Edit, text: str) -> str:
    """
    Apply a single edit to ``text``.

    Args:
        edit: Edit to apply
        text: Current text buffer

    Returns:
        New text buffer

    Raises:
        PositionOutOfRangeError: If the anchor does not resolve inside ``text``
        SearchTargetNotFoundError: If a search-based edit finds no target
        UnknownEditKindError: If the edit kind is not supported
    """
    anchor = edit.anchor

    if edit.kind == EditKind.INSERT_BEFORE:
        offset = resolve_position(text, anchor.begin)
        new_text = _splice(text, offset, edit.text)

    elif edit.kind == EditKind.INSERT_AFTER:
        offset = resolve_position(text, anchor.end.right(1))
        new_text = _splice(text, offset, edit.text)

    elif edit.kind == EditKind.INSERT_LINE_AFTER:
        offset = resolve_position(text, anchor.end.next_line())
        new_text = _splice(text, offset, edit.text)

    elif edit.kind == EditKind.REPLACE:
        offset = resolve_position(text, anchor.begin)
        end = resolve_position(text, anchor.end)
        new_text = text[:offset] + edit.text + text[end + 1:]

    elif edit.kind == EditKind.INSERT_AFTER_NEEDLE:
        start = resolve_position(text, anchor.begin.right(1))
        found = find_forward(text, start, edit.needle)
        if found is None:
            raise SearchTargetNotFoundError(
                f"{edit.needle!r} not found after {anchor.begin}",
                details={"needle": edit.needle, "anchor": str(anchor)},
            )
        offset = found + len(edit.needle)
        new_text = _splice(text, offset, edit.text)

    elif edit.kind == EditKind.INSERT_AT_BLOCK_END:
        start = resolve_position(text, anchor.end.right(1))
        found = find_backward(text, start, BLOCK_END_NEEDLE)
        if found is None:
            raise SearchTargetNotFoundError(
                f"No closing brace before {anchor.end}",
                details={"needle": BLOCK_END_NEEDLE, "anchor": str(anchor)},
            )
        offset = found
        new_text = _splice(text, offset, edit.text)

    else:
        raise UnknownEditKindError(
            f"Unknown edit kind: {edit.kind!r}",
            details={"kind": str(edit.kind)},
        )

    log_edit_applied(logger, edit, offset)
    return new_text
