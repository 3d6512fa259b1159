# catalogsync/services/patch_applier.py

"""Apply a flat translation patch to a target catalog.

Only entries whose path is currently untranslated are applied unless
the policy forces them. Re-running the same patch against the updated
catalog is a no-op: every path the first run wrote now differs from
the reference (or already holds the patch value).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from catalogsync.core.catalog_tree import DELIMITER, CatalogTree, Leaf, is_leaf, leaves_equal
from catalogsync.core.deep_merge import merge
from catalogsync.core.exceptions import CatalogError, InvalidCatalogError, ShapeConflictError
from catalogsync.core.path_address import NOT_FOUND, get, nest, parse
from catalogsync.services.untranslated_detector import diff

__all__ = ["ApplyPolicy", "ApplyResult", "PatchFailure", "apply", "patch_from_glossary"]

logger = logging.getLogger("catalogsync.patch_applier")


@dataclass(frozen=True)
class ApplyPolicy:
    """Controls which patch entries are accepted.

    Attributes:
        force: Apply every well-formed entry, translated or not.
    """

    force: bool = False


@dataclass(frozen=True)
class PatchFailure:
    """A patch entry that could not be applied."""

    path: str
    error: CatalogError

    @property
    def reason(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"


@dataclass(frozen=True)
class ApplyResult:
    """Outcome of apply().

    Attributes:
        updated: The merged catalog (the input tree when nothing was applied).
        applied_count: Entries written to the catalog.
        skipped_count: Entries left out because the path is already translated
            or already holds the patch value.
        failures: Entries rejected as malformed.
    """

    updated: CatalogTree
    applied_count: int = 0
    skipped_count: int = 0
    failures: tuple[PatchFailure, ...] = field(default_factory=tuple)

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def changed(self) -> bool:
        return self.applied_count > 0


def _shape_conflicts(paths: list[str]) -> set[str]:
    """Return the paths that are a strict prefix of another path in the same patch."""
    prefixes: set[str] = set()
    for path in paths:
        segments = path.split(DELIMITER)
        for depth in range(1, len(segments)):
            prefixes.add(DELIMITER.join(segments[:depth]))
    return {path for path in paths if path in prefixes}


def apply(
    target: CatalogTree,
    reference: CatalogTree,
    patch: Mapping[str, Leaf],
    policy: ApplyPolicy | None = None,
) -> ApplyResult:
    """Apply ``patch`` to ``target`` where the reference shows it is still needed.

    Args:
        target: Catalog of the locale being patched. Not modified.
        reference: Catalog of the reference locale.
        patch: Flat ``{dotted_path: leaf}`` translations.
        policy: Acceptance policy, defaults to ``ApplyPolicy()``.

    Returns:
        ApplyResult with the merged catalog and per-entry counts.

    Raises:
        InvalidCatalogError: If ``target`` or ``reference`` is not a well-formed catalog.
        MalformedPathError: If either catalog holds an invalid key.
    """
    policy = policy or ApplyPolicy()
    untranslated = diff(target, reference)

    failures: list[PatchFailure] = []
    valid: dict[str, Leaf] = {}
    for path, value in patch.items():
        try:
            parse(path)
            if not is_leaf(value):
                raise InvalidCatalogError(f"Value for '{path}' must be a scalar, got {type(value).__name__}")
        except CatalogError as exc:
            logger.warning("Rejected patch entry %r: %s", path, exc)
            failures.append(PatchFailure(str(path), exc))
            continue
        valid[path] = value

    conflicting = _shape_conflicts(list(valid))
    accepted: dict[str, Leaf] = {}
    skipped = 0
    for path, value in valid.items():
        if path in conflicting:
            error = ShapeConflictError(f"'{path}' is set as a leaf but other entries of the patch nest under it")
            logger.warning("Rejected patch entry %r: %s", path, error)
            failures.append(PatchFailure(path, error))
            continue
        if not policy.force and path not in untranslated:
            skipped += 1
            continue
        current = get(target, path)
        if current is not NOT_FOUND and leaves_equal(current, value):
            skipped += 1
            continue
        accepted[path] = value

    updated = merge(target, nest(accepted)) if accepted else target
    logger.debug(
        "Patch of %d entries: %d applied, %d skipped, %d failed",
        len(patch),
        len(accepted),
        skipped,
        len(failures),
    )
    return ApplyResult(
        updated=updated,
        applied_count=len(accepted),
        skipped_count=skipped,
        failures=tuple(failures),
    )


def patch_from_glossary(
    target: CatalogTree,
    reference: CatalogTree,
    glossary: Mapping[str, Leaf],
) -> dict[str, Leaf]:
    """Build a flat patch by translating untranslated leaves through their source text.

    Args:
        target: Catalog of the locale being translated.
        reference: Catalog of the reference locale.
        glossary: Mapping of reference text to translated text.

    Returns:
        ``{dotted_path: translation}`` for every untranslated string leaf whose
        reference text appears in the glossary.
    """
    patch: dict[str, Leaf] = {}
    for entry in diff(target, reference):
        if isinstance(entry.reference_value, str) and entry.reference_value in glossary:
            patch[entry.path] = glossary[entry.reference_value]
    logger.debug("Glossary matched %d untranslated leaves", len(patch))
    return patch
