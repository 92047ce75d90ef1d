"""
Base interface for language plugins.

A language plugin turns source text into the language-neutral SyntaxTree the
transformation engine anchors edits to.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from source_editor.models.syntax import NodeCategories, SyntaxTree


class LanguagePlugin(ABC):
    """Base interface for language plugins."""

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the language name (e.g., 'java')."""
        pass

    @property
    @abstractmethod
    def file_extensions(self) -> List[str]:
        """Return supported file extensions (e.g., ['.java'])."""
        pass

    @property
    @abstractmethod
    def categories(self) -> NodeCategories:
        """Return the node type groups used for anchor lookup."""
        pass

    @abstractmethod
    def parse(self, content: str, file_path: Optional[str] = None) -> SyntaxTree:
        """
        Parse source text into a SyntaxTree.

        Positions in the tree are 1-based lines and character columns of
        ``content``; node ends are inclusive.

        Args:
            content: Source text
            file_path: Path of the file being parsed, for error messages

        Returns:
            SyntaxTree of ``content``

        Raises:
            SourceParseError: If the content cannot be parsed
        """
        pass
