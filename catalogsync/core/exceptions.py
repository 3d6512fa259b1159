"""Exception hierarchy for catalog reconciliation.

All errors raised by the core derive from CatalogError so callers
(the CLI in particular) can catch a single type.
"""

from __future__ import annotations

__all__ = [
    "CatalogError",
    "CatalogIOError",
    "InvalidCatalogError",
    "MalformedPathError",
    "NotFoundError",
    "PatchSourceError",
    "PathConflictError",
    "ShapeConflictError",
]


class CatalogError(Exception):
    """Base class for every catalogsync error."""


class MalformedPathError(CatalogError):
    """A key-path or tree key has an empty segment or contains the delimiter."""


class PathConflictError(CatalogError):
    """A set of flat keys implies incompatible nested shapes at the same path."""


class ShapeConflictError(CatalogError):
    """An update would replace a branch with a leaf (or descend through a leaf)."""


class NotFoundError(CatalogError, KeyError):
    """Strict lookup of a path that does not exist in a tree."""

    def __str__(self) -> str:
        # KeyError quotes its argument, keep the plain message
        return str(self.args[0]) if self.args else ""


class InvalidCatalogError(CatalogError):
    """A tree contains a node that is neither a scalar leaf nor a mapping."""


class CatalogIOError(CatalogError):
    """A catalog document could not be read or written."""


class PatchSourceError(CatalogError):
    """A patch or glossary source could not be fetched or parsed."""
