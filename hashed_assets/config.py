"""Configuration objects and constants for the asset build."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

DEFAULT_ALGORITHM = "md5"
DEFAULT_HASH_LENGTH = 8
DEFAULT_WORKERS = 4
DOCUMENT_EXTENSIONS = (".html", ".htm")


@dataclass
class BuildConfig:
    """Top-level settings that control extraction, hashing and rewriting."""

    root: Path
    algorithm: str = DEFAULT_ALGORITHM
    hash_length: int = DEFAULT_HASH_LENGTH
    workers: int = DEFAULT_WORKERS
    emit_assets: bool = True
    extensions: Tuple[str, ...] = DOCUMENT_EXTENSIONS
