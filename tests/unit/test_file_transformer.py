"""Unit tests for FileTransformer."""

import gc
import os
import threading
import weakref
from unittest.mock import patch

import pytest

from plugins.manager import PluginManager
from source_editor.config import Settings
from source_editor.engine.errors import (
    SearchTargetNotFoundError,
    SourceFileError,
    UnsupportedLanguageError,
)
from source_editor.engine.locator import find_statement
from source_editor.models.edit import Edit
from source_editor.services.file_transformer import FileTransformer, PathLockRegistry


SOURCE = "class A {\n    A() {\n        run();\n    }\n}\n"


@pytest.fixture
def transformer(java_plugin):
    manager = PluginManager()
    manager.register_plugin(java_plugin)
    return FileTransformer(plugin_manager=manager, settings=Settings())


@pytest.fixture
def java_file(tmp_path):
    path = tmp_path / "A.java"
    path.write_text(SOURCE, encoding="utf-8")
    return path


def add_call_after_run(tree):
    statement = find_statement(tree, 3)
    return [Edit.insert_line_after(statement, "        stop();\n")]


class TestTransformFile:
    """Test cases for FileTransformer.transform_file."""

    def test_writes_changed_text(self, transformer, java_file):
        result = transformer.transform_file(java_file, add_call_after_run)

        assert result.changed is True
        assert result.file_path == str(java_file)
        assert java_file.read_text(encoding="utf-8") == (
            "class A {\n    A() {\n        run();\n        stop();\n    }\n}\n"
        )

    def test_unchanged_file_is_not_written(self, transformer, java_file):
        before = os.stat(java_file).st_mtime_ns

        with patch.object(transformer, "write_source") as write_source:
            result = transformer.transform_file(java_file, lambda tree: [])

        assert result.changed is False
        write_source.assert_not_called()
        assert os.stat(java_file).st_mtime_ns == before

    def test_failed_session_leaves_file_untouched(self, transformer, java_file):
        def missing_needle(tree):
            return [Edit.insert_after_needle(find_statement(tree, 3), "@@", "x")]

        with pytest.raises(SearchTargetNotFoundError):
            transformer.transform_file(java_file, missing_needle)

        assert java_file.read_text(encoding="utf-8") == SOURCE

    def test_windows_line_endings_are_preserved(self, transformer, tmp_path):
        path = tmp_path / "B.java"
        path.write_bytes(SOURCE.replace("\n", "\r\n").encode("utf-8"))

        transformer.transform_file(path, add_call_after_run)

        content = path.read_bytes().decode("utf-8")
        assert "        run();\r\n        stop();\n    }\r\n" in content

    def test_unsupported_extension(self, transformer, tmp_path):
        path = tmp_path / "script.py"
        path.write_text("print('hi')\n", encoding="utf-8")

        with pytest.raises(UnsupportedLanguageError):
            transformer.transform_file(path, lambda tree: [])

    def test_missing_file(self, transformer, tmp_path):
        with pytest.raises(SourceFileError):
            transformer.transform_file(tmp_path / "Missing.java", lambda tree: [])


class TestWriteSource:
    """Test cases for atomic writes."""

    def test_failed_replace_keeps_original(self, transformer, java_file):
        with patch("source_editor.services.file_transformer.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(SourceFileError):
                transformer.write_source(java_file, "broken")

        assert java_file.read_text(encoding="utf-8") == SOURCE
        assert [p.name for p in java_file.parent.iterdir()] == ["A.java"]

    def test_keeps_file_mode(self, transformer, java_file):
        os.chmod(java_file, 0o640)

        transformer.write_source(java_file, "class A {}\n")

        assert os.stat(java_file).st_mode & 0o777 == 0o640


class TestPathLockRegistry:
    """Test cases for per-path locks."""

    def test_same_path_same_lock(self, tmp_path):
        registry = PathLockRegistry()
        path = tmp_path / "A.java"

        assert registry.lock_for(path) is registry.lock_for(str(path))
        assert registry.lock_for(tmp_path / "x" / ".." / "A.java") is registry.lock_for(path)

    def test_different_paths_different_locks(self, tmp_path):
        registry = PathLockRegistry()

        assert registry.lock_for(tmp_path / "A.java") is not registry.lock_for(tmp_path / "B.java")

    def test_concurrent_sessions_on_one_file_are_serialized(self, transformer, java_file):
        def append_comment(tree):
            return [Edit.insert_after(tree.root.children[-1], "\n// edit")]

        threads = [
            threading.Thread(target=transformer.transform_file, args=(java_file, append_comment))
            for _ in range(8)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert java_file.read_text(encoding="utf-8").count("// edit") == 8

    def test_unused_locks_are_released(self, tmp_path):
        registry = PathLockRegistry()
        lock = registry.lock_for(tmp_path / "A.java")
        ref = weakref.ref(lock)

        del lock
        gc.collect()

        assert ref() is None
        assert registry.lock_for(tmp_path / "A.java") is not None

    def test_default_transformers_share_locks(self, java_plugin, java_file):
        manager = PluginManager()
        manager.register_plugin(java_plugin)
        first = FileTransformer(plugin_manager=manager, settings=Settings())
        second = FileTransformer(plugin_manager=manager, settings=Settings())

        assert first._locks is second._locks
        assert first._locks.lock_for(java_file) is second._locks.lock_for(str(java_file))

    def test_sessions_from_separate_transformers_are_serialized(self, java_plugin, java_file):
        manager = PluginManager()
        manager.register_plugin(java_plugin)
        transformers = [FileTransformer(plugin_manager=manager, settings=Settings()) for _ in range(8)]

        def append_comment(tree):
            return [Edit.insert_after(tree.root.children[-1], "\n// edit")]

        threads = [
            threading.Thread(target=t.transform_file, args=(java_file, append_comment))
            for t in transformers
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert java_file.read_text(encoding="utf-8").count("// edit") == 8
