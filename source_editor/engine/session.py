"""
Transformation session: parse, build an edit batch, sort, apply.

The session works on text only. Reading and writing files is done by
``source_editor.services.file_transformer``.
"""

from typing import Callable, Iterable

from source_editor.engine.applier import apply_edit
from source_editor.engine.errors import ForeignAnchorError
from source_editor.engine.sorter import sort_edits
from source_editor.models.edit import Edit
from source_editor.models.result import TransformResult
from source_editor.models.syntax import SyntaxTree
from source_editor.utils.logging import get_logger


logger = get_logger(__name__)

Parser = Callable[[str], SyntaxTree]
EditBatchBuilder = Callable[[SyntaxTree], Iterable[Edit]]


def check_anchors(tree: SyntaxTree, edits: Iterable[Edit]) -> None:
    """
    Verify that every edit is anchored to a node of ``tree``.

    Raises:
        ForeignAnchorError: If an anchor belongs to another tree or to none
    """
    for edit in edits:
        if not tree.contains(edit.anchor):
            raise ForeignAnchorError(
                f"Edit anchor {edit.anchor} is not part of the parsed source",
                details={"edit": edit.describe()},
            )


def apply_edits(text: str, edits: Iterable[Edit]) -> str:
    """Apply an edit batch to ``text`` in bottom-up order."""
    new_text = text
    for edit in sort_edits(edits):
        new_text = apply_edit(edit, new_text)
    return new_text


def transform(text: str, parse: Parser, build_edits: EditBatchBuilder) -> TransformResult:
    """
    Run one transformation session over ``text``.

    Args:
        text: Original source text
        parse: Turns ``text`` into a SyntaxTree
        build_edits: Called once with the tree of the unmodified text;
            returns the edits to apply

    Returns:
        TransformResult with the new text and whether it differs from ``text``
    """
    tree = parse(text)
    edits = list(build_edits(tree))
    check_anchors(tree, edits)

    logger.debug(
        f"Applying {len(edits)} edit(s)",
        extra={"language": tree.language, "edit_count": len(edits)}
    )
    new_text = apply_edits(text, edits)

    return TransformResult(
        changed=new_text != text,
        text=new_text,
        applied_edits=len(edits),
    )
