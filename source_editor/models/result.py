"""Transformation result models."""

from typing import Optional

from pydantic import BaseModel, Field


class TransformResult(BaseModel):
    """Outcome of one transformation session."""

    changed: bool = Field(..., description="Whether the new text differs from the original")
    text: str = Field(..., description="Resulting text (the original when unchanged)")
    applied_edits: int = Field(0, description="Number of edits applied")
    file_path: Optional[str] = Field(None, description="Source file, when the session ran on a file")
