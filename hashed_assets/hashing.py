"""Content hashing used to derive versioned asset filenames."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from .config import DEFAULT_ALGORITHM, DEFAULT_HASH_LENGTH

logger = logging.getLogger("hashed_assets")

CHUNK_SIZE = 64 * 1024


class ContentHasher:
    """Derive ``name.<digest>.ext`` filenames from file contents."""

    def __init__(
        self,
        algorithm: str = DEFAULT_ALGORITHM,
        length: int = DEFAULT_HASH_LENGTH,
    ) -> None:
        if algorithm not in hashlib.algorithms_available:
            raise ValueError(f"Unknown hash algorithm: {algorithm}")
        if length <= 0:
            raise ValueError(f"Hash length must be positive, got {length}")
        self.algorithm = algorithm
        self.length = length

    def digest(self, path: Path) -> str:
        """Hash the file in chunks and return the truncated hex digest."""
        hasher = hashlib.new(self.algorithm)
        with path.open("rb") as handle:
            for chunk in iter(lambda: handle.read(CHUNK_SIZE), b""):
                hasher.update(chunk)
        return hasher.hexdigest()[: self.length]

    def hashed_filename(self, path: Path) -> str:
        digest = self.digest(path)
        logger.debug("Hashed %s -> %s", path, digest)
        return f"{path.stem}.{digest}{path.suffix}"
