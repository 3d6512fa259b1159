from __future__ import annotations

from catalogsync.services.coverage_reporter import NamespaceCoverage, report
from catalogsync.services.locale_sync_service import LocaleSyncService
from catalogsync.services.patch_applier import ApplyPolicy, ApplyResult, apply
from catalogsync.services.untranslated_detector import DiffEntry, DiffResult, diff

__all__: list[str] = [
    "ApplyPolicy",
    "ApplyResult",
    "DiffEntry",
    "DiffResult",
    "LocaleSyncService",
    "NamespaceCoverage",
    "apply",
    "diff",
    "report",
]
