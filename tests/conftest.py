"""Pytest fixtures for autorun tests."""

import select
from pathlib import Path
from typing import List

import pytest

from autorun.registry import WatchRegistry


@pytest.fixture
def registry():
    """Open watch registry, closed after the test."""
    with WatchRegistry() as reg:
        yield reg


@pytest.fixture
def tmp_watch_dir(tmp_path: Path) -> Path:
    """Temporary directory to watch."""
    watch_dir = tmp_path / "watch"
    watch_dir.mkdir()
    return watch_dir


class RecordingRunner:
    """Stands in for run_command; remembers every command it was given."""

    def __init__(self, status: int = 0) -> None:
        self.status = status
        self.commands: List[str] = []

    def __call__(self, command: str) -> int:
        self.commands.append(command)
        return self.status


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def ready(registry):
    """Readiness list as epoll reports it for the registry descriptor."""
    return [(registry.descriptor(), select.EPOLLIN)]
