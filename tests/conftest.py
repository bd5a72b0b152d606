"""Shared fixtures for the hashed_assets test suite."""

from pathlib import Path

import pytest

from hashed_assets.graph import DependencyTree


class StubHasher:
    """Deterministic stand-in for ContentHasher that records its calls."""

    def __init__(self, names=None):
        self.names = dict(names or {})
        self.calls = []

    def hashed_filename(self, path: Path) -> str:
        self.calls.append(path)
        return self.names.get(path.name, f"{path.stem}.a1b2{path.suffix}")


@pytest.fixture
def hasher():
    return StubHasher()


@pytest.fixture
def write_file(tmp_path):
    """Create a file below tmp_path, making parent directories as needed."""

    def _write(relative: str, content="x") -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def tree(tmp_path, hasher):
    return DependencyTree(tmp_path, hasher)
