"""
Exception hierarchy for source editing.

Precondition errors signal a bug in the code that built an edit batch and
are never retried. The other errors describe conditions of the source being
edited or of the filesystem.
"""

from typing import Any, Dict, Optional


class SourceEditError(Exception):
    """Base exception for source editing operations."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PreconditionError(SourceEditError):
    """An edit batch was built against something it cannot apply to."""
    pass


class PositionOutOfRangeError(PreconditionError):
    """A syntax position does not fall inside the text."""
    pass


class ForeignAnchorError(PreconditionError):
    """An edit anchor is not a node of the tree being transformed."""
    pass


class UnknownEditKindError(PreconditionError):
    """An edit has a kind the applier does not know."""
    pass


class AnchorNotFoundError(PreconditionError):
    """No node suitable as an anchor was found for a line."""
    pass


class SearchTargetNotFoundError(SourceEditError):
    """The needle or closing brace of a search-based edit is absent."""
    pass


class AmbiguousTargetError(SourceEditError):
    """More than one node matches where exactly one anchor is required."""
    pass


class SourceParseError(SourceEditError):
    """The source text could not be parsed."""
    pass


class SourceFileError(SourceEditError):
    """Reading or writing a source file failed."""
    pass


class UnsupportedLanguageError(SourceEditError):
    """No language plugin handles a file."""
    pass
