"""Extraction and substitution passes over HTML documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional

from bs4 import BeautifulSoup, Tag
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from .attributes import ATTRIBUTE_SHAPES, AttributeShape, classify_value, rewrite_value
from .graph import DependencyNode
from .models import ExtractionResult, Mark, MarkedAttribute

logger = logging.getLogger("hashed_assets")

HTML_PARSER = "html.parser"

# Void elements stay unclosed (<img ...>) and only & < > get escaped.
HTML_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)


def parse_html(markup) -> BeautifulSoup:
    return BeautifulSoup(markup, HTML_PARSER)


def serialize_html(soup: BeautifulSoup) -> str:
    return soup.decode(formatter=HTML_FORMATTER)


def _carries_asset_attributes(
    shapes: Mapping[str, AttributeShape],
) -> Callable[[Tag], bool]:
    def predicate(tag: Tag) -> bool:
        return bool(tag.attrs) and any(name in tag.attrs for name in shapes)

    return predicate


def _register(node: DependencyNode, path: Path, result: ExtractionResult) -> None:
    node.depend_on(node.tree.get(path))
    if path not in result.dependencies:
        result.dependencies.append(path)


def _mark_element(
    node: DependencyNode,
    element: Tag,
    shapes: Mapping[str, AttributeShape],
    result: ExtractionResult,
) -> Optional[Mark]:
    marked: List[MarkedAttribute] = []
    for name, shape in shapes.items():
        value = element.get(name)
        if not isinstance(value, str):
            continue
        accepted = classify_value(shape, value, node.classify)
        if not accepted:
            continue
        for path in accepted.values():
            _register(node, path, result)
        marked.append(MarkedAttribute(name=name, shape=shape, paths=tuple(accepted)))
    if not marked:
        return None
    return Mark(element=element, attributes=tuple(marked))


def extract(
    node: DependencyNode,
    soup: BeautifulSoup,
    shapes: Mapping[str, AttributeShape] = ATTRIBUTE_SHAPES,
) -> ExtractionResult:
    """Find asset references in ``soup`` and register them on ``node``.

    Elements are visited in document order. Every dependency edge is in
    place before the element's mark is recorded, and the returned marks are
    the only thing :func:`substitute` will touch.
    """
    result = ExtractionResult(soup=soup)
    for element in soup.find_all(_carries_asset_attributes(shapes)):
        mark = _mark_element(node, element, shapes, result)
        if mark is not None:
            result.marks.append(mark)
    logger.debug(
        "Extracted %d mark(s) and %d dependency(ies) from %s",
        len(result.marks),
        len(result.dependencies),
        node.name,
    )
    return result


def extract_document(
    node: DependencyNode,
    shapes: Mapping[str, AttributeShape] = ATTRIBUTE_SHAPES,
) -> ExtractionResult:
    """Read and parse the document behind ``node``, then run :func:`extract`."""
    soup = parse_html(node.name.read_bytes())
    return extract(node, soup, shapes)


def substitute(node: DependencyNode, result: ExtractionResult) -> str:
    """Rewrite every marked attribute to its hashed URL and serialize the tree."""
    for mark in result.marks:
        element = mark.element
        for attribute in mark.attributes:
            element[attribute.name] = rewrite_value(
                attribute.shape,
                element[attribute.name],
                attribute.paths,
                node.resolve_as_hashed_url,
            )
    return serialize_html(result.soup)


def substitute_document(node: DependencyNode, result: ExtractionResult) -> str:
    """Run :func:`substitute` and overwrite the document with the output."""
    html = substitute(node, result)
    node.name.write_text(html, encoding="utf-8")
    logger.info("Rewrote %d element(s) in %s", len(result.marks), node.name)
    return html


@dataclass(frozen=True)
class DocumentHandler:
    """Pair of passes used for one kind of document."""

    extract: Callable[[DependencyNode], ExtractionResult]
    substitute: Callable[[DependencyNode, ExtractionResult], str]


HTML_HANDLER = DocumentHandler(extract=extract_document, substitute=substitute_document)

HANDLERS: Dict[str, DocumentHandler] = {
    ".html": HTML_HANDLER,
    ".htm": HTML_HANDLER,
}


def handler_for(path: Path) -> Optional[DocumentHandler]:
    return HANDLERS.get(path.suffix.lower())
