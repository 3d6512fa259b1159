# catalogsync/core/path_address.py

"""Dot-delimited key-path addressing for catalog trees.

Converts between the flat representation used by translation patches
(``{"club.chat.title": "..."}``) and the nested tree stored on disk, and
provides pure get/set access by path.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from catalogsync.core.catalog_tree import (
    DELIMITER,
    CatalogTree,
    Leaf,
    Node,
    copy_tree,
    is_branch,
    is_leaf,
    iter_leaves,
)
from catalogsync.core.exceptions import (
    InvalidCatalogError,
    MalformedPathError,
    NotFoundError,
    PathConflictError,
    ShapeConflictError,
)

__all__ = [
    "NOT_FOUND",
    "flatten",
    "get",
    "get_strict",
    "join",
    "nest",
    "parse",
    "set_value",
]

logger = logging.getLogger("catalogsync.path_address")


class _NotFound:
    """Sentinel returned by get() when a path does not resolve."""

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


NOT_FOUND = _NotFound()


def parse(path: str) -> tuple[str, ...]:
    """Split a dotted key-path into its segments.

    Args:
        path: Dot-joined path such as ``"club.chat"``.

    Returns:
        Tuple of non-empty segments.

    Raises:
        MalformedPathError: If the path is not a string or any segment is empty.
    """
    if not isinstance(path, str):
        raise MalformedPathError(f"Key-path must be a string, got {type(path).__name__}")
    segments = tuple(path.split(DELIMITER))
    if any(segment == "" for segment in segments):
        raise MalformedPathError(f"Empty segment in key-path {path!r}")
    return segments


def join(segments: Sequence[str]) -> str:
    """Join segments into a dotted key-path.

    Raises:
        MalformedPathError: If there are no segments, or one is empty or contains the delimiter.
    """
    if not segments:
        raise MalformedPathError("Key-path needs at least one segment")
    for segment in segments:
        if not isinstance(segment, str) or segment == "" or DELIMITER in segment:
            raise MalformedPathError(f"Invalid key-path segment {segment!r}")
    return DELIMITER.join(segments)


def _segments(path: str | Sequence[str]) -> tuple[str, ...]:
    if isinstance(path, str):
        return parse(path)
    return parse(join(path))


def get(tree: CatalogTree, path: str | Sequence[str]) -> Node | _NotFound:
    """Resolve a path in ``tree``.

    Args:
        tree: Catalog to descend.
        path: Dotted string or sequence of segments.

    Returns:
        The node at the path, or NOT_FOUND if a segment is absent or a leaf
        sits where a branch was expected.
    """
    node: Any = tree
    for segment in _segments(path):
        if not is_branch(node) or segment not in node:
            return NOT_FOUND
        node = node[segment]
    return node


def get_strict(tree: CatalogTree, path: str | Sequence[str]) -> Node:
    """Like get() but raises NotFoundError instead of returning NOT_FOUND."""
    node = get(tree, path)
    if node is NOT_FOUND:
        shown = path if isinstance(path, str) else DELIMITER.join(path)
        raise NotFoundError(f"Path '{shown}' not found in catalog")
    return node


def set_value(tree: CatalogTree, path: str | Sequence[str], value: Leaf) -> CatalogTree:
    """Return a copy of ``tree`` with the leaf at ``path`` set to ``value``.

    Missing intermediate branches are created. The input tree is not modified.

    Raises:
        InvalidCatalogError: If ``value`` is not a scalar leaf.
        ShapeConflictError: If the path runs through an existing leaf, or would
            replace an existing branch with a leaf.
    """
    if not is_leaf(value):
        raise InvalidCatalogError(f"Leaf value must be a scalar, got {type(value).__name__}")
    segments = _segments(path)
    result = copy_tree(tree)
    node = result
    for depth, segment in enumerate(segments[:-1]):
        child = node.get(segment)
        if child is None:
            child = node[segment] = {}
        elif not is_branch(child):
            raise ShapeConflictError(
                f"Cannot descend into leaf at '{join(segments[: depth + 1])}' while setting '{join(segments)}'"
            )
        node = child
    last = segments[-1]
    if is_branch(node.get(last)):
        raise ShapeConflictError(f"Refusing to replace branch '{join(segments)}' with a leaf")
    node[last] = value
    return result


def flatten(tree: CatalogTree) -> dict[str, Leaf]:
    """Flatten a tree into ``{dotted_path: leaf}`` in depth-first key order.

    Empty branches contribute nothing.

    Raises:
        MalformedPathError: If a key is invalid.
        InvalidCatalogError: If a node is neither leaf nor branch.
    """
    return dict(iter_leaves(tree))


def nest(flat: Mapping[str, Leaf]) -> CatalogTree:
    """Build a nested tree from a flat ``{dotted_path: leaf}`` mapping.

    Inverse of flatten(). Branch order follows the first key that mentions it.

    Raises:
        MalformedPathError: If a key is not a valid key-path.
        InvalidCatalogError: If a value is not a scalar leaf.
        PathConflictError: If one key uses a prefix as a leaf and another as a branch.
    """
    result: CatalogTree = {}
    for path, value in flat.items():
        if not is_leaf(value):
            raise InvalidCatalogError(f"Value for '{path}' must be a scalar, got {type(value).__name__}")
        segments = parse(path)
        node = result
        for depth, segment in enumerate(segments[:-1]):
            child = node.setdefault(segment, {})
            if not is_branch(child):
                raise PathConflictError(
                    f"'{join(segments[: depth + 1])}' is a leaf but '{path}' needs it to be a branch"
                )
            node = child
        last = segments[-1]
        if is_branch(node.get(last)):
            raise PathConflictError(f"'{path}' is a branch of other keys and cannot also be a leaf")
        node[last] = value
    logger.debug("Nested %d flat keys", len(flat))
    return result
