"""Helpers shared by the unit tests."""

from pathlib import Path

from source_editor.models.syntax import SyntaxNode, SyntaxPosition


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def make_node(begin_line, begin_column, end_line, end_column, node_type="node", children=()):
    """Build a SyntaxNode from raw coordinates."""
    return SyntaxNode(
        node_type=node_type,
        begin=SyntaxPosition(line=begin_line, column=begin_column),
        end=SyntaxPosition(line=end_line, column=end_column),
        children=tuple(children),
    )


def line_of(text: str, fragment: str) -> int:
    """Return the 1-based number of the first line containing ``fragment``."""
    for number, line in enumerate(text.split("\n"), start=1):
        if fragment in line:
            return number
    raise AssertionError(f"{fragment!r} not found")
