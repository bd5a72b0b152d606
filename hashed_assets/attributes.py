"""Attribute shapes that can carry local asset references."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Collection, Dict, Optional

from .models import AssetResolutionError, Candidate
from .urls import (
    join_candidates,
    parse_url_reference,
    replace_url_path,
    split_candidates,
)

logger = logging.getLogger("hashed_assets")

Classifier = Callable[[str], Optional[Path]]
HashedUrl = Callable[[str], str]


class AttributeShape(Enum):
    """Syntax of an attribute value holding asset references."""

    URL = "url"
    CANDIDATE_LIST = "candidate-list"


ATTRIBUTE_SHAPES: Dict[str, AttributeShape] = {
    "src": AttributeShape.URL,
    "href": AttributeShape.URL,
    "srcset": AttributeShape.CANDIDATE_LIST,
}


def _classify_url(value: Optional[str], classify: Classifier) -> Dict[str, Path]:
    reference = parse_url_reference(value)
    if reference is None:
        return {}
    resolved = classify(reference.path)
    if resolved is None:
        logger.debug("Skipping %r: not a local file", value)
        return {}
    return {reference.path: resolved}


def _classify_candidates(value: Optional[str], classify: Classifier) -> Dict[str, Path]:
    accepted: Dict[str, Path] = {}
    for candidate in split_candidates(value):
        accepted.update(_classify_url(candidate.url, classify))
    return accepted


def classify_value(
    shape: AttributeShape,
    value: Optional[str],
    classify: Classifier,
) -> Dict[str, Path]:
    """Map every URL path in ``value`` that is a local file to its location.

    Only the file-existence check inside ``classify`` touches the outside
    world; no dependency edges are registered here.
    """
    if shape is AttributeShape.URL:
        return _classify_url(value, classify)
    if shape is AttributeShape.CANDIDATE_LIST:
        return _classify_candidates(value, classify)
    raise ValueError(f"Unsupported attribute shape: {shape!r}")


def _rewrite_url(value: str, accepted: Collection[str], hashed_url: HashedUrl) -> str:
    reference = parse_url_reference(value)
    if reference is None or reference.path not in accepted:
        raise AssetResolutionError(
            f"Attribute value {value!r} was not accepted during extraction"
        )
    return replace_url_path(value, hashed_url)


def _rewrite_candidates(
    value: str, accepted: Collection[str], hashed_url: HashedUrl
) -> str:
    rewritten = []
    for candidate in split_candidates(value):
        reference = parse_url_reference(candidate.url)
        if reference is None or reference.path not in accepted:
            logger.debug("Dropping candidate %r: not a local file", candidate.url)
            continue
        rewritten.append(
            Candidate(
                url=replace_url_path(candidate.url, hashed_url),
                descriptor=candidate.descriptor,
            )
        )
    return join_candidates(rewritten)


def rewrite_value(
    shape: AttributeShape,
    value: str,
    accepted: Collection[str],
    hashed_url: HashedUrl,
) -> str:
    """Point every accepted URL path in ``value`` at its hashed name."""
    if shape is AttributeShape.URL:
        return _rewrite_url(value, accepted, hashed_url)
    if shape is AttributeShape.CANDIDATE_LIST:
        return _rewrite_candidates(value, accepted, hashed_url)
    raise ValueError(f"Unsupported attribute shape: {shape!r}")
