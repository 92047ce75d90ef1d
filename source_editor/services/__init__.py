"""
Services for the source editor.

This package contains the file-level front-ends of the transformation engine:
- FileTransformer: runs sessions against files with per-path serialization
- ComponentEditor: builds and applies component edits
- get_source_file: maps class names to source files
"""

from source_editor.services.component_editor import (
    ComponentEditor,
    ComponentType,
    Where,
    build_add_component,
    build_set_component_attribute,
)
from source_editor.services.file_transformer import FileTransformer, PathLockRegistry
from source_editor.services.source_files import get_source_file

__all__ = [
    "FileTransformer",
    "PathLockRegistry",
    "ComponentEditor",
    "ComponentType",
    "Where",
    "build_add_component",
    "build_set_component_attribute",
    "get_source_file",
]
