"""Data models for the source editor."""

from .edit import BLOCK_END_NEEDLE, Edit, EditBatch, EditKind
from .result import TransformResult
from .syntax import NodeCategories, SyntaxNode, SyntaxPosition, SyntaxTree

__all__ = [
    # Syntax models
    "SyntaxPosition",
    "SyntaxNode",
    "SyntaxTree",
    "NodeCategories",
    # Edit models
    "EditKind",
    "Edit",
    "EditBatch",
    "BLOCK_END_NEEDLE",
    # Result models
    "TransformResult",
]
