"""Edit (modification) data models."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from source_editor.models.syntax import SyntaxNode


BLOCK_END_NEEDLE = "}"


class EditKind(str, Enum):
    """Where an edit places its text relative to its anchor node."""

    INSERT_BEFORE = "insert_before"
    INSERT_AFTER = "insert_after"
    INSERT_LINE_AFTER = "insert_line_after"
    REPLACE = "replace"
    INSERT_AFTER_NEEDLE = "insert_after_needle"
    INSERT_AT_BLOCK_END = "insert_at_block_end"


class Edit(BaseModel):
    """A single positional text operation anchored to a syntax node."""

    model_config = ConfigDict(frozen=True)

    kind: EditKind = Field(..., description="Splice strategy")
    anchor: SyntaxNode = Field(..., description="Node of the original tree the edit is anchored to")
    text: str = Field(..., description="Payload to insert or replace with")
    needle: Optional[str] = Field(None, description="Search string for insert_after_needle")

    @model_validator(mode="after")
    def _check_needle(self) -> "Edit":
        if self.kind == EditKind.INSERT_AFTER_NEEDLE:
            if not self.needle:
                raise ValueError("insert_after_needle requires a non-empty needle")
        elif self.needle is not None:
            raise ValueError(f"{self.kind.value} does not take a needle")
        return self

    @classmethod
    def insert_before(cls, anchor: SyntaxNode, text: str) -> "Edit":
        return cls(kind=EditKind.INSERT_BEFORE, anchor=anchor, text=text)

    @classmethod
    def insert_after(cls, anchor: SyntaxNode, text: str) -> "Edit":
        return cls(kind=EditKind.INSERT_AFTER, anchor=anchor, text=text)

    @classmethod
    def insert_line_after(cls, anchor: SyntaxNode, text: str) -> "Edit":
        return cls(kind=EditKind.INSERT_LINE_AFTER, anchor=anchor, text=text)

    @classmethod
    def replace(cls, anchor: SyntaxNode, text: str) -> "Edit":
        return cls(kind=EditKind.REPLACE, anchor=anchor, text=text)

    @classmethod
    def insert_after_needle(cls, anchor: SyntaxNode, needle: str, text: str) -> "Edit":
        return cls(kind=EditKind.INSERT_AFTER_NEEDLE, anchor=anchor, text=text, needle=needle)

    @classmethod
    def insert_at_block_end(cls, anchor: SyntaxNode, text: str) -> "Edit":
        return cls(kind=EditKind.INSERT_AT_BLOCK_END, anchor=anchor, text=text)

    def describe(self) -> str:
        """One-line description for logs."""
        if self.kind == EditKind.INSERT_AFTER_NEEDLE:
            where = f"at {self.anchor.begin} after {self.needle!r}"
        elif self.kind == EditKind.REPLACE:
            where = f"at {self.anchor.begin}-{self.anchor.end}"
        elif self.kind == EditKind.INSERT_BEFORE:
            where = f"at {self.anchor.begin}"
        else:
            where = f"at {self.anchor.end}"
        return f"{self.kind.value} {where}: {self.text!r}"


EditBatch = List[Edit]
