"""
Position resolution: maps a (line, column) syntax position onto an offset
into a concrete text buffer.
"""

from source_editor.engine.errors import PositionOutOfRangeError
from source_editor.models.syntax import SyntaxPosition


def resolve_position(text: str, position: SyntaxPosition) -> int:
    """
    Convert a 1-based syntax position into a 0-based offset into ``text``.

    Skips ``line - 1`` newline characters from the start of the buffer and
    adds ``column - 1``. The buffer is scanned from the start on every call.

    Args:
        text: Text buffer the position refers to
        position: 1-based line and character column

    Returns:
        Offset of the character at ``position``. A column may point at the
        line's terminating newline (or at the end of the text) but not beyond.

    Raises:
        PositionOutOfRangeError: If the line or column lies outside ``text``
    """
    offset = 0
    for _ in range(position.line - 1):
        newline = text.find("\n", offset)
        if newline == -1:
            raise PositionOutOfRangeError(
                f"Line {position.line} is past the end of the text",
                details={"line": position.line, "column": position.column},
            )
        offset = newline + 1

    line_end = text.find("\n", offset)
    if line_end == -1:
        line_end = len(text)

    resolved = offset + position.column - 1
    if resolved > line_end:
        raise PositionOutOfRangeError(
            f"Column {position.column} is past the end of line {position.line}",
            details={"line": position.line, "column": position.column},
        )
    return resolved
