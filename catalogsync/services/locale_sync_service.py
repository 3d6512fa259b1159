# catalogsync/services/locale_sync_service.py

"""Reconcile the target locales of a catalog store against its reference locale.

Loads catalogs, runs the detector, applier and reporter, and writes a
catalog back only when a patch actually changed it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from catalogsync.core.catalog_store import CatalogStore
from catalogsync.core.catalog_tree import CatalogTree, Leaf
from catalogsync.services.coverage_reporter import NamespaceCoverage, report
from catalogsync.services.patch_applier import ApplyPolicy, ApplyResult, apply, patch_from_glossary
from catalogsync.services.untranslated_detector import DiffResult, diff, find_empty_values, find_orphans

__all__ = ["LocaleSyncService", "ParityReport", "SyncOutcome"]

logger = logging.getLogger("catalogsync.locale_sync_service")


@dataclass(frozen=True)
class SyncOutcome:
    """Result of applying a patch to one locale.

    Attributes:
        locale: Locale tag.
        result: The applier result.
        before: Untranslated leaves before the patch.
        after: Untranslated leaves after the patch.
        saved: Whether the catalog was written.
        backup_path: Backup taken before writing, if any.
    """

    locale: str
    result: ApplyResult
    before: int
    after: int
    saved: bool = False
    backup_path: Path | None = None

    @property
    def translated(self) -> int:
        return self.before - self.after

    @property
    def progress(self) -> float:
        """Share of the previously untranslated leaves that this run resolved."""
        if self.before == 0:
            return 100.0
        return self.translated * 100.0 / self.before


@dataclass(frozen=True)
class ParityReport:
    """Key parity of one locale against the reference."""

    locale: str
    missing: list[str] = field(default_factory=list)
    orphans: list[str] = field(default_factory=list)
    empty: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing and not self.orphans


class LocaleSyncService:
    """Runs reconciliation operations against a CatalogStore."""

    def __init__(self, store: CatalogStore, reference_locale: str = "en") -> None:
        self.store = store
        self.reference_locale = reference_locale
        self._reference: CatalogTree | None = None

    @property
    def reference(self) -> CatalogTree:
        """The reference catalog, loaded once."""
        if self._reference is None:
            self._reference = self.store.load_catalog(self.reference_locale)
        return self._reference

    def target_locales(self) -> list[str]:
        """All locales in the store except the reference."""
        return [locale for locale in self.store.list_locales() if locale != self.reference_locale]

    def diff_locale(self, locale: str) -> DiffResult:
        return diff(self.store.load_catalog(locale), self.reference)

    def report_locale(self, locale: str) -> dict[str, NamespaceCoverage]:
        return report(self.store.load_catalog(locale), self.reference)

    def report_all(self) -> dict[str, dict[str, NamespaceCoverage]]:
        """Coverage of every target locale, keyed by locale tag."""
        return {locale: self.report_locale(locale) for locale in self.target_locales()}

    def check_locale(self, locale: str) -> ParityReport:
        """Missing, orphan and empty-value paths of one locale."""
        target = self.store.load_catalog(locale)
        return ParityReport(
            locale=locale,
            missing=[entry.path for entry in diff(target, self.reference).missing()],
            orphans=find_orphans(target, self.reference),
            empty=find_empty_values(target),
        )

    def apply_patch(
        self,
        locale: str,
        patch: Mapping[str, Leaf],
        policy: ApplyPolicy | None = None,
        dry_run: bool = False,
    ) -> SyncOutcome:
        """Apply a flat patch to one locale and save it if anything changed.

        Args:
            locale: Target locale tag.
            patch: Flat ``{dotted_path: leaf}`` translations.
            policy: Acceptance policy.
            dry_run: Compute the outcome without writing.

        Returns:
            SyncOutcome with counts before and after.
        """
        target = self.store.load_catalog(locale)
        before = len(diff(target, self.reference))
        result = apply(target, self.reference, patch, policy)
        after = len(diff(result.updated, self.reference)) if result.changed else before

        saved = False
        backup_path = None
        if result.changed and not dry_run:
            backup_path = self.store.save_catalog(locale, result.updated)
            saved = True

        logger.info(
            "[%s] applied %d, skipped %d, failed %d; untranslated %d -> %d%s",
            locale,
            result.applied_count,
            result.skipped_count,
            result.failed_count,
            before,
            after,
            " (dry run)" if dry_run else "",
        )
        for failure in result.failures:
            logger.warning("[%s] %s: %s", locale, failure.path, failure.reason)
        return SyncOutcome(locale, result, before, after, saved, backup_path)

    def apply_glossary(
        self,
        locale: str,
        glossary: Mapping[str, Leaf],
        dry_run: bool = False,
    ) -> SyncOutcome:
        """Translate untranslated leaves of one locale through a source-text glossary."""
        patch = patch_from_glossary(self.store.load_catalog(locale), self.reference, glossary)
        return self.apply_patch(locale, patch, ApplyPolicy(force=False), dry_run=dry_run)
