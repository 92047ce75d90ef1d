"""
Edit batch ordering.

Edits are applied from the highest anchor position to the lowest. A splice
only moves text that comes after it, so every edit still pending lies
entirely before the mutation point and resolves to the same offset it would
have had in the original text.
"""

from typing import Iterable, List, Tuple

from source_editor.models.edit import Edit
from source_editor.utils.logging import get_logger


logger = get_logger(__name__)


def edit_sort_key(edit: Edit) -> Tuple[int, int]:
    """Return the (line, column) of the edit's anchor begin."""
    begin = edit.anchor.begin
    return begin.line, begin.column


def sort_edits(edits: Iterable[Edit]) -> List[Edit]:
    """
    Order edits by anchor begin line, then column, both descending.

    Edits sharing an exact anchor position keep their batch order, so a
    builder anchoring two edits to one node must list the edit with the
    later insertion point first.

    Args:
        edits: Unordered edit batch

    Returns:
        New list in application order
    """
    ordered = sorted(edits, key=edit_sort_key, reverse=True)

    for previous, current in zip(ordered, ordered[1:]):
        if edit_sort_key(previous) == edit_sort_key(current):
            logger.debug(
                f"Edits share anchor position {current.anchor.begin}; applying in batch order",
                extra={
                    "line": current.anchor.begin.line,
                    "column": current.anchor.begin.column,
                }
            )

    return ordered
