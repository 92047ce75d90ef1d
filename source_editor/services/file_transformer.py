"""
File Transformer: runs transformation sessions against source files.

This is the only component that touches the filesystem. It reads a file,
runs the session with the file's language plugin, and writes the result
back only when it differs from the original. Writes go through a temporary
file in the same directory so a failure never leaves a partial file.
Sessions on the same path are serialized with a per-path lock.
"""

import os
import shutil
import tempfile
import threading
import uuid
import weakref
from functools import partial
from pathlib import Path
from typing import Optional, Union

from plugins.manager import PluginManager
from source_editor.config import Settings, get_settings
from source_editor.engine.errors import SourceFileError
from source_editor.engine.session import EditBatchBuilder, transform
from source_editor.models.result import TransformResult
from source_editor.utils.logging import get_logger, log_error_with_context, log_session_outcome
from source_editor.utils.metrics import SessionMetrics


logger = get_logger(__name__)

PathLike = Union[str, Path]


class PathLockRegistry:
    """
    Hands out one lock per resolved file path.

    Locks are held weakly: an entry disappears once no session uses it.
    """

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[Path, threading.Lock]" = weakref.WeakValueDictionary()
        self._guard = threading.Lock()

    def lock_for(self, path: PathLike) -> threading.Lock:
        key = Path(path).resolve()
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock


_DEFAULT_LOCKS = PathLockRegistry()


class FileTransformer:
    """
    Applies edit batches to source files.

    Line numbers used by edit-batch builders refer to the file content at the
    time the session reads it; sessions for the same file run one at a time.
    """

    def __init__(
        self,
        plugin_manager: Optional[PluginManager] = None,
        settings: Optional[Settings] = None,
        locks: Optional[PathLockRegistry] = None,
    ):
        """
        Initialize the file transformer.

        Args:
            plugin_manager: Plugin registry; defaults to one with the bundled plugins
            settings: Settings; defaults to the process-wide settings
            locks: Lock registry shared between transformers editing the same
                files; defaults to one shared by the whole process
        """
        self._settings = settings or get_settings()
        self._plugins = plugin_manager or PluginManager.create_default(self._settings)
        self._locks = locks or _DEFAULT_LOCKS

    @property
    def plugin_manager(self) -> PluginManager:
        return self._plugins

    def read_source(self, path: PathLike) -> str:
        """
        Read a source file without newline translation.

        Raises:
            SourceFileError: If the file cannot be read
        """
        try:
            with open(path, "r", encoding=self._settings.encoding, newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise SourceFileError(
                f"Unable to read {path}: {e}",
                details={"file_path": str(path)},
            ) from e

    def write_source(self, path: PathLike, text: str) -> None:
        """
        Replace a source file's content in one step.

        The new content is written to a temporary file next to ``path`` and
        moved over it, keeping the original file mode.

        Raises:
            SourceFileError: If the file cannot be written
        """
        path = Path(path)
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding=self._settings.encoding,
                newline="",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(text)
                tmp.flush()
                os.fsync(tmp.fileno())
            if path.exists():
                shutil.copymode(path, tmp_name)
            os.replace(tmp_name, path)
        except (OSError, UnicodeEncodeError) as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise SourceFileError(
                f"Unable to write {path}: {e}",
                details={"file_path": str(path)},
            ) from e

    def transform_file(self, path: PathLike, build_edits: EditBatchBuilder) -> TransformResult:
        """
        Run one transformation session on a file.

        Args:
            path: Source file to transform
            build_edits: Builds the edit batch from the file's syntax tree

        Returns:
            TransformResult; ``changed`` is False when the edits produced the
            original text, in which case the file is left untouched

        Raises:
            SourceEditError: Any failure, after it has been logged with the file context
        """
        path = Path(path)
        session_id = uuid.uuid4().hex[:12]
        session_logger = logger.with_context(file_path=str(path), session_id=session_id)
        metrics = SessionMetrics(session_id=session_id, file_path=str(path))
        metrics.start()

        with self._locks.lock_for(path):
            try:
                plugin = self._plugins.require_plugin_for_file(str(path))
                original = self.read_source(path)
                result = transform(original, partial(plugin.parse, file_path=str(path)), build_edits)
                metrics.record_result(result.applied_edits, result.changed)
                if result.changed:
                    self.write_source(path, result.text)
            except Exception as e:
                metrics.complete(status="failed", error_message=str(e))
                log_error_with_context(
                    session_logger,
                    f"Failed to transform {path}",
                    e,
                    status="failed",
                )
                raise

        metrics.complete(status="completed" if result.changed else "unchanged")
        log_session_outcome(
            session_logger,
            str(path),
            result.changed,
            result.applied_edits,
            metrics.duration_ms,
        )
        return result.model_copy(update={"file_path": str(path)})
