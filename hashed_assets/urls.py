"""URL recognition helpers for dependency-bearing attribute values."""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from .models import Candidate, UrlReference

_PATH_TERMINATORS = frozenset("?#)")
CANDIDATE_SEPARATOR = ","


def _is_blocked(char: str) -> bool:
    return char == ")" or char.isspace()


def parse_url_reference(value: Optional[str]) -> Optional[UrlReference]:
    """Split a value into its path and query/fragment tail.

    The whole value has to qualify: a non-empty path free of ``?``, ``#``,
    ``)`` and whitespace, followed by an optional tail that may carry ``?``
    and ``#`` but never whitespace or ``)``. Anything else is not a URL.
    """
    if not value:
        return None

    end = 0
    while end < len(value):
        char = value[end]
        if char in _PATH_TERMINATORS or char.isspace():
            break
        end += 1
    if end == 0:
        return None

    trailing = value[end:]
    if any(_is_blocked(char) for char in trailing):
        return None
    return UrlReference(path=value[:end], trailing=trailing)


def replace_url_path(value: str, replace: Callable[[str], str]) -> str:
    """Swap the path portion of ``value``; the tail is kept verbatim."""
    reference = parse_url_reference(value)
    if reference is None:
        return value
    return reference.with_path(replace(reference.path))


def split_candidates(value: Optional[str]) -> List[Candidate]:
    """Break a srcset-style list into URL/descriptor pairs, skipping blanks."""
    candidates: List[Candidate] = []
    if not value:
        return candidates
    for entry in value.split(CANDIDATE_SEPARATOR):
        parts = entry.strip().split(None, 1)
        if not parts:
            continue
        descriptor = parts[1] if len(parts) > 1 else ""
        candidates.append(Candidate(url=parts[0], descriptor=descriptor))
    return candidates


def join_candidates(candidates: Iterable[Candidate]) -> str:
    return CANDIDATE_SEPARATOR.join(candidate.render() for candidate in candidates)
