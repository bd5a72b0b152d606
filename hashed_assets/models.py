"""Data models shared by the extraction and substitution passes."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, List, Tuple

from bs4 import BeautifulSoup, Tag

if TYPE_CHECKING:
    from .attributes import AttributeShape


@dataclass(frozen=True)
class UrlReference:
    """A local-resource URL split into the path and its query/fragment tail."""

    path: str
    trailing: str = ""

    def with_path(self, path: str) -> str:
        return path + self.trailing


@dataclass(frozen=True)
class Candidate:
    """One entry of a srcset-style list: a URL token and its descriptor."""

    url: str
    descriptor: str = ""

    def render(self) -> str:
        if self.descriptor:
            return f"{self.url} {self.descriptor}"
        return self.url


@dataclass(frozen=True)
class MarkedAttribute:
    """An attribute that qualified during extraction, with its accepted paths."""

    name: str
    shape: "AttributeShape"
    paths: Tuple[str, ...]


@dataclass
class Mark:
    """An element together with the attributes that will be rewritten on it."""

    element: Tag
    attributes: Tuple[MarkedAttribute, ...]

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(attribute.name for attribute in self.attributes)


@dataclass
class ExtractionResult:
    """Parsed document plus the marks collected for the substitution pass."""

    soup: BeautifulSoup
    marks: List[Mark] = field(default_factory=list)
    dependencies: List[Path] = field(default_factory=list)


class AssetResolutionError(RuntimeError):
    """Raised when substitution meets a path that extraction never registered."""
