# catalogsync/services/coverage_reporter.py

"""Per-namespace translation coverage for a target catalog."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from catalogsync.core.catalog_tree import DELIMITER, CatalogTree, iter_leaves
from catalogsync.services.untranslated_detector import diff

__all__ = ["NamespaceCoverage", "report", "top_sections", "total_coverage"]

logger = logging.getLogger("catalogsync.coverage_reporter")


@dataclass(frozen=True)
class NamespaceCoverage:
    """Untranslated and total leaf counts for one top-level namespace."""

    untranslated: int
    total: int

    @property
    def translated(self) -> int:
        return self.total - self.untranslated

    @property
    def percent(self) -> float:
        """Share of translated leaves, 100.0 for an empty namespace."""
        if self.total == 0:
            return 100.0
        return self.translated * 100.0 / self.total


def report(target: CatalogTree, reference: CatalogTree) -> dict[str, NamespaceCoverage]:
    """Group untranslated leaves by their first path segment.

    Args:
        target: Catalog of the locale being measured.
        reference: Catalog of the reference locale.

    Returns:
        Mapping of namespace to coverage, ordered by descending untranslated
        count. Ties keep the reference key order.
    """
    totals: dict[str, int] = {}
    for path, _ in iter_leaves(reference):
        namespace = path.split(DELIMITER, 1)[0]
        totals[namespace] = totals.get(namespace, 0) + 1

    untranslated: dict[str, int] = dict.fromkeys(totals, 0)
    for entry in diff(target, reference):
        untranslated[entry.namespace] += 1

    ordered = sorted(totals, key=lambda namespace: untranslated[namespace], reverse=True)
    return {namespace: NamespaceCoverage(untranslated[namespace], totals[namespace]) for namespace in ordered}


def total_coverage(coverage: dict[str, NamespaceCoverage]) -> NamespaceCoverage:
    """Sum a report across all namespaces."""
    return NamespaceCoverage(
        untranslated=sum(item.untranslated for item in coverage.values()),
        total=sum(item.total for item in coverage.values()),
    )


def top_sections(coverage: dict[str, NamespaceCoverage], limit: int = 10) -> list[tuple[str, NamespaceCoverage]]:
    """Return up to ``limit`` namespaces that still have untranslated leaves."""
    pending = [(namespace, item) for namespace, item in coverage.items() if item.untranslated > 0]
    return pending[:limit]
