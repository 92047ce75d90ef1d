"""
Java Language Plugin.

This plugin parses Java source with tree-sitter-java and converts the
result into a SyntaxTree with 1-based lines, character columns and
inclusive node ends.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import tree_sitter
import tree_sitter_java
import yaml

from plugins.base import LanguagePlugin
from source_editor.engine.errors import SourceParseError
from source_editor.models.syntax import NodeCategories, SyntaxNode, SyntaxPosition, SyntaxTree

logger = logging.getLogger(__name__)


class _NodeConverter:
    """
    Converts tree-sitter nodes of one parse to SyntaxNodes.

    tree-sitter reports 0-based rows, byte columns and exclusive ends.
    """

    def __init__(self, source: bytes):
        self._lines = source.split(b"\n")
        self._ascii = [line.isascii() for line in self._lines]

    def _char_column(self, row: int, byte_column: int) -> int:
        """Convert a byte column on ``row`` into a 0-based character column."""
        if self._ascii[row]:
            return byte_column
        return len(self._lines[row][:byte_column].decode("utf-8", errors="replace"))

    def _line_length(self, row: int) -> int:
        return self._char_column(row, len(self._lines[row]))

    def _begin(self, ts_node: tree_sitter.Node) -> SyntaxPosition:
        row, column = ts_node.start_point
        return SyntaxPosition(line=row + 1, column=self._char_column(row, column) + 1)

    def _end(self, ts_node: tree_sitter.Node) -> SyntaxPosition:
        row, column = ts_node.end_point
        end_column = self._char_column(row, column)
        if end_column == 0 and row == 0:
            # Root of an empty source
            return SyntaxPosition(line=1, column=1)
        if end_column == 0:
            # The node ends with a line terminator, which is its last character
            row -= 1
            end_column = self._line_length(row) + 1
        return SyntaxPosition(line=row + 1, column=end_column)

    def convert(self, ts_node: tree_sitter.Node, field_name: Optional[str] = None) -> SyntaxNode:
        children = []
        cursor = ts_node.walk()
        if cursor.goto_first_child():
            while True:
                child = cursor.node
                # Zero-width nodes are inserted by error recovery and span no text
                if child.end_byte > child.start_byte:
                    children.append(self.convert(child, cursor.field_name))
                if not cursor.goto_next_sibling():
                    break

        return SyntaxNode(
            node_type=ts_node.type,
            begin=self._begin(ts_node),
            end=self._end(ts_node),
            field_name=field_name,
            named=ts_node.is_named,
            children=tuple(children),
        )


class JavaPlugin(LanguagePlugin):
    """Java language plugin using tree-sitter."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        allow_syntax_errors: bool = False,
        config: Optional[Dict] = None,
    ):
        """
        Initialize the Java plugin.

        Args:
            config_path: Path to config.yaml file. If None, uses default location.
            allow_syntax_errors: Return trees for sources containing syntax
                errors instead of raising SourceParseError
            config: Already loaded configuration; takes precedence over config_path
        """
        if config is None:
            if config_path is None:
                config_path = Path(__file__).parent / "config.yaml"
            with open(config_path, 'r') as f:
                config = yaml.safe_load(f)
        self._config = config

        self._categories = NodeCategories(**self._config.get('node_categories', {}))
        self._allow_syntax_errors = allow_syntax_errors

        java_language = tree_sitter.Language(tree_sitter_java.language())
        self._parser = tree_sitter.Parser(java_language)

        logger.info("Java plugin initialized successfully")

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "java"

    @property
    def file_extensions(self) -> List[str]:
        """Return supported file extensions."""
        return self._config.get('file_extensions', ['.java'])

    @property
    def categories(self) -> NodeCategories:
        return self._categories

    def parse(self, content: str, file_path: Optional[str] = None) -> SyntaxTree:
        """
        Parse Java source using tree-sitter-java.

        Args:
            content: File content as string
            file_path: Path to the file being parsed

        Returns:
            SyntaxTree of the content

        Raises:
            SourceParseError: If the content has syntax errors and they are not allowed
        """
        source = content.encode("utf-8")
        ts_tree = self._parser.parse(source)
        root = ts_tree.root_node

        if root.has_error and not self._allow_syntax_errors:
            line, column = self._first_error_point(root)
            raise SourceParseError(
                f"Syntax error in {file_path or 'Java source'} at line {line}",
                details={"file_path": file_path, "line": line, "column": column},
            )

        tree = SyntaxTree(
            root=_NodeConverter(source).convert(root),
            source=content,
            language=self.language_name,
            categories=self._categories,
        )
        logger.debug(f"Successfully parsed Java source: {file_path or '<string>'}")
        return tree

    def _first_error_point(self, root: tree_sitter.Node) -> Tuple[int, int]:
        """Return the 1-based (line, byte column) of the first error or missing node."""
        stack = [root]
        while stack:
            node = stack.pop()
            if node.is_error or node.is_missing:
                row, column = node.start_point
                return row + 1, column + 1
            stack.extend(reversed(node.children))
        return 1, 1
