"""Project-wide dependency graph of documents and the assets they use."""

from __future__ import annotations

import logging
import os
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Union
from urllib.parse import quote, unquote

from .models import AssetResolutionError

logger = logging.getLogger("hashed_assets")

PathLike = Union[str, Path]


class Hasher(Protocol):
    def hashed_filename(self, path: Path) -> str: ...


def normalize_path(path: PathLike) -> Path:
    """Absolute, lexically normalized path; symlinks are left alone."""
    return Path(os.path.abspath(os.fspath(path)))


class DependencyNode:
    """A file in the build together with the files it depends on."""

    def __init__(self, name: Path, tree: "DependencyTree") -> None:
        self.name = name
        self.tree = tree
        self._dependencies: Dict[Path, DependencyNode] = {}
        self._hashed_name: Optional[str] = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"DependencyNode({str(self.name)!r})"

    @property
    def dependencies(self) -> List["DependencyNode"]:
        with self._lock:
            return list(self._dependencies.values())

    def resolve(self, url: str) -> Path:
        """Locate ``url`` on disk relative to this document.

        Root-relative URLs (``/css/site.css``) resolve against the tree root,
        everything else against the directory holding this file.
        """
        decoded = unquote(url)
        if decoded.startswith("/"):
            return normalize_path(self.tree.root / decoded.lstrip("/"))
        return normalize_path(self.name.parent / decoded)

    def classify(self, url: str) -> Optional[Path]:
        """Return the resolved path when ``url`` names an existing local file."""
        path = self.resolve(url)
        if not os.path.isfile(path):
            return None
        return path

    def depend_on(self, other: "DependencyNode") -> None:
        with self._lock:
            if other.name not in self._dependencies:
                logger.debug("%s depends on %s", self.name, other.name)
                self._dependencies[other.name] = other

    def depends_on(self, path: PathLike) -> bool:
        with self._lock:
            return normalize_path(path) in self._dependencies

    @property
    def hashed_name(self) -> str:
        """Versioned filename for this node, computed once and cached."""
        with self._lock:
            if self._hashed_name is None:
                self._hashed_name = self.tree.hasher.hashed_filename(self.name)
            return self._hashed_name

    @property
    def hashed_path(self) -> Path:
        return self.name.with_name(self.hashed_name)

    def resolve_as_hashed_url(self, url: str) -> str:
        """Rewrite ``url`` so its last segment is the hashed filename.

        The dependency must have been registered during extraction; anything
        else means the two passes disagree and is reported as an error.
        """
        path = self.resolve(url)
        node = self.tree.lookup(path)
        if node is None or not self.depends_on(path):
            raise AssetResolutionError(
                f"{self.name} has no registered dependency on {path} (from {url!r})"
            )
        head, separator, _ = url.rpartition("/")
        return head + separator + quote(node.hashed_name)


class DependencyTree:
    """Thread-safe registry of nodes keyed by their absolute path."""

    def __init__(self, root: PathLike, hasher: Hasher) -> None:
        self.root = normalize_path(root)
        self.hasher = hasher
        self._nodes: Dict[Path, DependencyNode] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._nodes)

    def get(self, path: PathLike) -> DependencyNode:
        """Return the node for ``path``, creating it on first use."""
        key = normalize_path(path)
        with self._lock:
            node = self._nodes.get(key)
            if node is None:
                node = DependencyNode(key, self)
                self._nodes[key] = node
            return node

    def lookup(self, path: PathLike) -> Optional[DependencyNode]:
        with self._lock:
            return self._nodes.get(normalize_path(path))

    @property
    def nodes(self) -> List[DependencyNode]:
        with self._lock:
            return list(self._nodes.values())
