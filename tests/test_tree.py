"""Tree enumerator tests."""

import errno
import logging
import os
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from autorun import tree
from autorun.errors import WatchError
from autorun.registry import WatchRegistry
from autorun.tree import watch_files, watch_tree


@pytest.fixture
def sample_tree(tmp_watch_dir: Path) -> Path:
    """watch/{a.txt, src/{b.py, pkg/{c.py}}, docs/}"""
    (tmp_watch_dir / "a.txt").write_text("a")
    (tmp_watch_dir / "src" / "pkg").mkdir(parents=True)
    (tmp_watch_dir / "src" / "b.py").write_text("b")
    (tmp_watch_dir / "src" / "pkg" / "c.py").write_text("c")
    (tmp_watch_dir / "docs").mkdir()
    return tmp_watch_dir


class TestWatchTree:
    def test_every_directory_is_watched(
        self, registry: WatchRegistry, sample_tree: Path
    ):
        errors = watch_tree(registry, [sample_tree])

        assert errors == []
        for dirpath, _, _ in os.walk(sample_tree):
            assert dirpath in registry

    def test_files_are_watched_too(self, registry: WatchRegistry, sample_tree: Path):
        watch_tree(registry, [sample_tree])

        assert str(sample_tree / "a.txt") in registry
        assert str(sample_tree / "src" / "pkg" / "c.py") in registry
        assert len(registry) == 7

    def test_multiple_roots(self, registry: WatchRegistry, tmp_path: Path):
        first = tmp_path / "one"
        second = tmp_path / "two" / "nested"
        first.mkdir()
        second.mkdir(parents=True)

        watch_tree(registry, [first, tmp_path / "two"])

        assert first in registry
        assert second in registry

    def test_file_root(self, registry: WatchRegistry, sample_tree: Path):
        watch_tree(registry, [sample_tree / "a.txt"])
        assert registry.paths() == [str(sample_tree / "a.txt")]

    def test_symlinks_are_not_followed(
        self, registry: WatchRegistry, tmp_path: Path, sample_tree: Path
    ):
        outside = tmp_path / "outside"
        (outside / "deep").mkdir(parents=True)
        (sample_tree / "link").symlink_to(outside)
        (sample_tree / "broken").symlink_to(tmp_path / "nowhere")

        watch_tree(registry, [sample_tree])

        assert str(sample_tree / "link") in registry
        assert str(sample_tree / "broken") in registry
        assert str(sample_tree / "link" / "deep") not in registry
        assert outside not in registry

    def test_first_failure_aborts(self, sample_tree: Path):
        registry = MagicMock()
        calls = []

        def add_watch(path, follow_symlinks=True):
            calls.append(path)
            if len(calls) == 2:
                raise WatchError(path, errno.ENOSPC)
            return len(calls)

        registry.add_watch.side_effect = add_watch

        with pytest.raises(WatchError) as excinfo:
            watch_tree(registry, [sample_tree, sample_tree / "docs"])

        assert excinfo.value.errno == errno.ENOSPC
        assert len(calls) == 2

    def test_walk_errors_reported_after_walk(
        self, registry: WatchRegistry, sample_tree: Path, monkeypatch, caplog
    ):
        locked = str(sample_tree / "locked")

        def fake_walk(top, onerror=None, followlinks=False):
            onerror(PermissionError(errno.EACCES, "Permission denied", locked))
            yield top, ["src"], ["a.txt"]

        monkeypatch.setattr(tree.os, "walk", fake_walk)

        with caplog.at_level(logging.ERROR):
            errors = watch_tree(registry, [sample_tree])

        assert [e.filename for e in errors] == [locked]
        assert str(sample_tree / "src") in registry
        assert str(sample_tree / "a.txt") in registry
        assert caplog.text.count("could not be read") == 1


class TestWatchFiles:
    def test_registers_each_file(self, registry: WatchRegistry, sample_tree: Path):
        files = [sample_tree / "a.txt", sample_tree / "src" / "b.py"]
        watch_files(registry, files)
        assert sorted(registry.paths()) == sorted(str(f) for f in files)

    def test_missing_file_fails(self, registry: WatchRegistry, sample_tree: Path):
        with pytest.raises(WatchError):
            watch_files(registry, [sample_tree / "a.txt", sample_tree / "gone.txt"])
