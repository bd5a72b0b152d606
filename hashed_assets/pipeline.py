"""High-level orchestration: extract every document, then rewrite them."""

from __future__ import annotations

import logging
import shutil
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .config import BuildConfig, DOCUMENT_EXTENSIONS
from .graph import DependencyNode, DependencyTree, Hasher, normalize_path
from .hashing import ContentHasher
from .html import DocumentHandler, handler_for
from .models import ExtractionResult

logger = logging.getLogger("hashed_assets")


@dataclass
class DocumentMetrics:
    """Outcome and timing details for a processed document."""

    path: Path
    mark_count: int
    dependency_count: int
    extract_seconds: float
    substitute_seconds: float


@dataclass
class PreparedDocument:
    """A document whose extraction pass has finished."""

    node: DependencyNode
    handler: DocumentHandler
    result: ExtractionResult
    extract_seconds: float


def collect_documents(
    paths: Iterable[Path],
    extensions: Sequence[str] = DOCUMENT_EXTENSIONS,
) -> List[Path]:
    """Expand directories into the documents below them, sorted and unique."""
    suffixes = {ext.lower() for ext in extensions}
    found: Set[Path] = set()
    for path in paths:
        path = normalize_path(path)
        if path.is_dir():
            found.update(
                candidate
                for candidate in path.rglob("*")
                if candidate.is_file() and candidate.suffix.lower() in suffixes
            )
        else:
            found.add(path)
    return sorted(found)


def prepare_document(tree: DependencyTree, path: Path) -> Optional[PreparedDocument]:
    """Run the extraction pass for one document."""
    handler = handler_for(path)
    if handler is None:
        logger.warning("Skipping %s: no handler for %r files", path, path.suffix)
        return None
    start = time.perf_counter()
    node = tree.get(path)
    result = handler.extract(node)
    elapsed = time.perf_counter() - start
    logger.info(
        "Extracted %s (%d dependency(ies))", node.name, len(result.dependencies)
    )
    return PreparedDocument(
        node=node, handler=handler, result=result, extract_seconds=elapsed
    )


def substitution_order(documents: Sequence[PreparedDocument]) -> List[PreparedDocument]:
    """Order documents so that each one follows the documents it links to.

    A linked document has to be rewritten before its content hash is taken.
    Cycles cannot be satisfied; they are broken at the first repeated visit.
    """
    by_path: Dict[Path, PreparedDocument] = {doc.node.name: doc for doc in documents}
    ordered: List[PreparedDocument] = []
    done: Set[Path] = set()
    visiting: Set[Path] = set()

    def visit(doc: PreparedDocument) -> None:
        name = doc.node.name
        if name in done:
            return
        if name in visiting:
            logger.warning("Dependency cycle through %s; hash may be stale", name)
            return
        visiting.add(name)
        for dependency in doc.node.dependencies:
            linked = by_path.get(dependency.name)
            if linked is not None:
                visit(linked)
        visiting.discard(name)
        done.add(name)
        ordered.append(doc)

    for doc in documents:
        visit(doc)
    return ordered


def emit_hashed_assets(tree: DependencyTree) -> List[Path]:
    """Copy every depended-upon file next to itself under its hashed name."""
    targets: Dict[Path, DependencyNode] = {}
    for node in tree.nodes:
        for dependency in node.dependencies:
            targets.setdefault(dependency.name, dependency)

    written: List[Path] = []
    for name in sorted(targets):
        dependency = targets[name]
        destination = dependency.hashed_path
        if destination.exists():
            logger.debug("Hashed copy %s already present", destination)
            continue
        shutil.copyfile(dependency.name, destination)
        logger.debug("Copied %s -> %s", dependency.name, destination)
        written.append(destination)
    return written


def run_build(
    paths: Iterable[Path],
    config: BuildConfig,
    hasher: Optional[Hasher] = None,
) -> List[DocumentMetrics]:
    """Extract all documents in parallel, then rewrite them one by one."""
    hasher = hasher or ContentHasher(config.algorithm, config.hash_length)
    tree = DependencyTree(config.root, hasher)
    documents = collect_documents(paths, config.extensions)
    logger.info("Processing %d document(s) under %s", len(documents), tree.root)

    with ThreadPoolExecutor(max_workers=max(1, config.workers)) as pool:
        prepared = [
            doc
            for doc in pool.map(partial(prepare_document, tree), documents)
            if doc is not None
        ]

    metrics: List[DocumentMetrics] = []
    for doc in substitution_order(prepared):
        start = time.perf_counter()
        doc.handler.substitute(doc.node, doc.result)
        metrics.append(
            DocumentMetrics(
                path=doc.node.name,
                mark_count=len(doc.result.marks),
                dependency_count=len(doc.result.dependencies),
                extract_seconds=doc.extract_seconds,
                substitute_seconds=time.perf_counter() - start,
            )
        )

    if len(metrics) != len(prepared):
        raise RuntimeError(
            "Mismatch between rewritten and extracted documents "
            f"({len(metrics)} != {len(prepared)})"
        )

    if config.emit_assets:
        written = emit_hashed_assets(tree)
        logger.info("Wrote %d hashed asset(s)", len(written))
    return metrics
