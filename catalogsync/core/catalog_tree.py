# catalogsync/core/catalog_tree.py

"""Data model for a locale catalog.

A catalog is an insertion-ordered tree. Internal nodes (branches) are
plain dicts keyed by non-empty strings without the path delimiter;
terminal nodes (leaves) are immutable scalars: str, int, float or bool.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Union

from catalogsync.core.exceptions import InvalidCatalogError, MalformedPathError

__all__ = [
    "Branch",
    "CatalogTree",
    "DELIMITER",
    "LEAF_TYPES",
    "Leaf",
    "Node",
    "check_key",
    "copy_tree",
    "count_leaves",
    "is_branch",
    "is_leaf",
    "iter_leaves",
    "leaves_equal",
    "trees_equal",
    "validate_tree",
]

DELIMITER = "."

Leaf = Union[str, int, float, bool]
Node = Union[Leaf, "dict[str, Node]"]
Branch = dict[str, Any]
CatalogTree = dict[str, Any]

LEAF_TYPES: tuple[type, ...] = (str, int, float, bool)


def is_leaf(node: Any) -> bool:
    """Return True if ``node`` is a scalar catalog leaf."""
    return isinstance(node, LEAF_TYPES)


def is_branch(node: Any) -> bool:
    """Return True if ``node`` is a branch (a dict)."""
    return isinstance(node, dict)


def check_key(key: Any, where: str = "") -> None:
    """Validate a single branch key.

    Args:
        key: The key to check.
        where: Dotted path of the parent branch, used in the error message.

    Raises:
        MalformedPathError: If the key is not a non-empty string free of the delimiter.
    """
    if not isinstance(key, str) or key == "" or DELIMITER in key:
        location = f" under '{where}'" if where else ""
        raise MalformedPathError(f"Invalid catalog key {key!r}{location}")


def _child_path(prefix: str, key: str) -> str:
    return f"{prefix}{DELIMITER}{key}" if prefix else key


def validate_tree(tree: Any, _prefix: str = "") -> None:
    """Check that ``tree`` is a well-formed catalog rooted at a branch.

    Args:
        tree: The candidate catalog.

    Raises:
        InvalidCatalogError: If the root is not a dict or any node is not a leaf/branch.
        MalformedPathError: If any key is empty, non-string or contains the delimiter.
    """
    if not is_branch(tree):
        raise InvalidCatalogError(f"Catalog root must be a mapping, got {type(tree).__name__}")
    for key, value in tree.items():
        check_key(key, _prefix)
        path = _child_path(_prefix, key)
        if is_branch(value):
            validate_tree(value, path)
        elif not is_leaf(value):
            raise InvalidCatalogError(f"Unsupported value of type {type(value).__name__} at '{path}'")


def iter_leaves(tree: CatalogTree, prefix: str = "") -> Iterator[tuple[str, Leaf]]:
    """Yield ``(dotted_path, leaf)`` pairs depth-first in key order.

    Raises:
        InvalidCatalogError: On a node that is neither leaf nor branch.
        MalformedPathError: On an invalid key.
    """
    for key, value in tree.items():
        check_key(key, prefix)
        path = _child_path(prefix, key)
        if is_branch(value):
            yield from iter_leaves(value, path)
        elif is_leaf(value):
            yield path, value
        else:
            raise InvalidCatalogError(f"Unsupported value of type {type(value).__name__} at '{path}'")


def count_leaves(tree: CatalogTree) -> int:
    """Return the number of leaves in ``tree``."""
    return sum(1 for _ in iter_leaves(tree))


def copy_tree(node: Node) -> Node:
    """Return a copy of ``node`` with fresh dicts at every branch.

    Leaves are immutable and shared.

    Raises:
        InvalidCatalogError: On a node that is neither leaf nor branch.
    """
    if is_branch(node):
        return {key: copy_tree(value) for key, value in node.items()}
    if is_leaf(node):
        return node
    raise InvalidCatalogError(f"Unsupported value of type {type(node).__name__}")


def leaves_equal(left: Any, right: Any) -> bool:
    """Strict leaf equality: same type and same value (``1`` is not ``True``)."""
    return type(left) is type(right) and left == right


def trees_equal(left: Node, right: Node) -> bool:
    """Structural equality including key order at every branch."""
    if is_branch(left) and is_branch(right):
        if list(left) != list(right):
            return False
        return all(trees_equal(left[key], right[key]) for key in left)
    if is_branch(left) or is_branch(right):
        return False
    return leaves_equal(left, right)
