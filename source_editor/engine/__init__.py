"""
Source transformation engine.

Resolves anchored edits against source text and applies a batch of them
bottom-up so that pending edits keep their original positions.
"""

from source_editor.engine.applier import apply_edit, find_backward, find_forward
from source_editor.engine.errors import (
    AmbiguousTargetError,
    AnchorNotFoundError,
    ForeignAnchorError,
    PositionOutOfRangeError,
    PreconditionError,
    SearchTargetNotFoundError,
    SourceEditError,
    SourceFileError,
    SourceParseError,
    UnknownEditKindError,
    UnsupportedLanguageError,
)
from source_editor.engine.locator import AnchorKind, find_enclosing
from source_editor.engine.positions import resolve_position
from source_editor.engine.session import apply_edits, transform
from source_editor.engine.sorter import sort_edits

__all__ = [
    "resolve_position",
    "apply_edit",
    "apply_edits",
    "find_forward",
    "find_backward",
    "sort_edits",
    "transform",
    "AnchorKind",
    "find_enclosing",
    # Errors
    "SourceEditError",
    "PreconditionError",
    "PositionOutOfRangeError",
    "ForeignAnchorError",
    "UnknownEditKindError",
    "AnchorNotFoundError",
    "SearchTargetNotFoundError",
    "AmbiguousTargetError",
    "SourceParseError",
    "SourceFileError",
    "UnsupportedLanguageError",
]
