"""Locating Java source files in a Maven-style project layout."""

from pathlib import Path
from typing import Optional, Sequence

from source_editor.config import get_settings


def get_source_file(
    class_name: str,
    project_root: Optional[Path] = None,
    source_roots: Optional[Sequence[str]] = None,
) -> Path:
    """
    Return the source file of a fully qualified class name.

    The first source root containing the file wins; when none does, the path
    under the last source root is returned.

    Args:
        class_name: Fully qualified class name, e.g. ``com.example.MainView``
        project_root: Project directory; defaults to the working directory
        source_roots: Source roots relative to the project; defaults to settings

    Returns:
        Path of the ``.java`` file
    """
    root = Path(project_root) if project_root is not None else Path.cwd()
    roots = list(source_roots) if source_roots is not None else get_settings().source_roots
    relative = Path(*class_name.split(".")).with_suffix(".java")

    candidate = root / relative
    for source_root in roots:
        candidate = root / source_root / relative
        if candidate.exists():
            return candidate
    return candidate
