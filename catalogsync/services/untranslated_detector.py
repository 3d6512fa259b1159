# catalogsync/services/untranslated_detector.py

"""Find leaves in a target catalog that still need translation.

A reference leaf path is untranslated in the target when the target has
no leaf there, or has a leaf with the identical value. Target catalogs
are seeded as copies of the reference, so an untouched leaf is always
byte-identical to it. A differing value is never flagged, even when it
looks like a placeholder.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Union

from catalogsync.core.catalog_tree import (
    DELIMITER,
    CatalogTree,
    Leaf,
    check_key,
    is_branch,
    is_leaf,
    iter_leaves,
    leaves_equal,
    validate_tree,
)
from catalogsync.core.exceptions import InvalidCatalogError

__all__ = [
    "DiffEntry",
    "DiffResult",
    "MISSING",
    "diff",
    "find_empty_values",
    "find_orphans",
]

logger = logging.getLogger("catalogsync.untranslated_detector")


class _Missing:
    """Marks a leaf that does not exist in the target catalog."""

    def __repr__(self) -> str:
        return "<missing>"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass(frozen=True)
class DiffEntry:
    """One untranslated leaf.

    Attributes:
        path: Dotted key-path of the leaf.
        reference_value: Leaf value in the reference catalog.
        target_value: Leaf value in the target, or MISSING if absent.
    """

    path: str
    reference_value: Leaf
    target_value: Union[Leaf, _Missing] = MISSING

    @property
    def missing(self) -> bool:
        return self.target_value is MISSING

    @property
    def namespace(self) -> str:
        """Top-level segment of the path."""
        return self.path.split(DELIMITER, 1)[0]


class DiffResult:
    """Ordered, immutable list of untranslated entries with fast path lookup."""

    __slots__ = ("_entries", "_paths")

    def __init__(self, entries: Iterator[DiffEntry] | list[DiffEntry] | tuple[DiffEntry, ...] = ()) -> None:
        self._entries: tuple[DiffEntry, ...] = tuple(entries)
        self._paths: frozenset[str] = frozenset(entry.path for entry in self._entries)

    @property
    def entries(self) -> tuple[DiffEntry, ...]:
        return self._entries

    @property
    def paths(self) -> frozenset[str]:
        return self._paths

    def missing(self) -> list[DiffEntry]:
        """Entries whose leaf is absent from the target."""
        return [entry for entry in self._entries if entry.missing]

    def unchanged(self) -> list[DiffEntry]:
        """Entries whose target leaf is identical to the reference."""
        return [entry for entry in self._entries if not entry.missing]

    def as_pairs(self) -> list[tuple[str, Any]]:
        """Return ``(path, target_value)`` pairs, MISSING for absent leaves."""
        return [(entry.path, entry.target_value) for entry in self._entries]

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[DiffEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> DiffEntry:
        return self._entries[index]

    def __repr__(self) -> str:
        return f"DiffResult({len(self._entries)} entries)"


def _walk(target: Any, reference: CatalogTree, prefix: str) -> Iterator[DiffEntry]:
    # target may be MISSING, a leaf or a branch at this level
    for key, ref_value in reference.items():
        check_key(key, prefix)
        path = f"{prefix}{DELIMITER}{key}" if prefix else key
        if is_branch(target) and key in target:
            tgt_value = target[key]
        else:
            tgt_value = MISSING

        if is_branch(ref_value):
            yield from _walk(tgt_value, ref_value, path)
        elif is_leaf(ref_value):
            if not is_leaf(tgt_value):
                # absent, or a branch sits where the reference has a leaf
                yield DiffEntry(path, ref_value, MISSING)
            elif leaves_equal(tgt_value, ref_value):
                yield DiffEntry(path, ref_value, tgt_value)
        else:
            raise InvalidCatalogError(f"Unsupported value of type {type(ref_value).__name__} at '{path}'")


def diff(target: CatalogTree, reference: CatalogTree) -> DiffResult:
    """Compute the untranslated leaves of ``target`` relative to ``reference``.

    Traversal is depth-first in the reference key order, so the result is
    stable for unchanged inputs.

    Args:
        target: Catalog of the locale being reconciled.
        reference: Catalog of the reference (authoring) locale.

    Returns:
        DiffResult with one entry per untranslated leaf.

    Raises:
        InvalidCatalogError: If either tree holds a node that is neither leaf nor branch.
        MalformedPathError: If either tree holds an invalid key.
    """
    validate_tree(reference)
    validate_tree(target)
    result = DiffResult(_walk(target, reference, ""))
    logger.debug("Diff found %d untranslated leaves", len(result))
    return result


def find_orphans(target: CatalogTree, reference: CatalogTree) -> list[str]:
    """Return leaf paths present in ``target`` but absent from ``reference``."""
    reference_paths = {path for path, _ in iter_leaves(reference)}
    return [path for path, _ in iter_leaves(target) if path not in reference_paths]


def find_empty_values(tree: CatalogTree) -> list[str]:
    """Return leaf paths whose value is the empty string."""
    return [path for path, value in iter_leaves(tree) if isinstance(value, str) and value == ""]
