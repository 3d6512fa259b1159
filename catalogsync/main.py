#!/usr/bin/env python3
"""catalogsync - Main Entry Point (command line)."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from catalogsync.config import Config, load_config
from catalogsync.core.backup_manager import BackupManager
from catalogsync.core.catalog_store import CatalogStore
from catalogsync.core.exceptions import CatalogError
from catalogsync.core.logging import logger, setup_logging
from catalogsync.integrations.patch_source import load_glossary, load_patch
from catalogsync.services.coverage_reporter import NamespaceCoverage, top_sections, total_coverage
from catalogsync.services.locale_sync_service import LocaleSyncService, SyncOutcome
from catalogsync.services.patch_applier import ApplyPolicy
from catalogsync.version import __app_name__, __version__

__all__ = ["build_parser", "main"]


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog=__app_name__,
        description="Reconcile locale translation catalogs against a reference locale.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--settings", type=Path, help="JSON settings file (default: ./catalogsync.json).")
    parser.add_argument("--locales-dir", type=Path, help="Directory holding <locale>.json catalogs.")
    parser.add_argument("--reference", help="Reference locale tag (default: en).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--log-file", type=Path, help="Also write logs to this file.")

    sub = parser.add_subparsers(dest="command", required=True)

    p_diff = sub.add_parser("diff", help="List untranslated leaves of a locale.")
    p_diff.add_argument("locale")

    p_apply = sub.add_parser("apply", help="Apply a translation patch (file or URL) to a locale.")
    p_apply.add_argument("locale")
    p_apply.add_argument("patch", help="JSON patch file or http(s) URL.")
    p_apply.add_argument("--force", action="store_true", help="Also overwrite translated leaves.")
    p_apply.add_argument("--dry-run", action="store_true", help="Do not write the catalog.")

    p_translate = sub.add_parser("translate", help="Translate untranslated leaves through a source-text glossary.")
    p_translate.add_argument("locale")
    p_translate.add_argument("glossary", help="JSON glossary file or http(s) URL.")
    p_translate.add_argument("--dry-run", action="store_true", help="Do not write the catalog.")

    p_report = sub.add_parser("report", help="Show per-namespace coverage.")
    p_report.add_argument("locale", nargs="?", help="Only this locale (default: all target locales).")
    p_report.add_argument("--top", type=int, help="Number of sections to list per locale.")

    p_check = sub.add_parser("check", help="Check key parity against the reference.")
    p_check.add_argument("locale", nargs="?", help="Only this locale (default: all target locales).")

    return parser


def _resolve_config(args: argparse.Namespace) -> Config:
    cfg = load_config(args.settings)
    if args.locales_dir:
        cfg.LOCALES_DIR = args.locales_dir
    if args.reference:
        cfg.REFERENCE_LOCALE = args.reference
    if args.verbose:
        cfg.LOG_LEVEL = "DEBUG"
    return cfg


def _build_service(cfg: Config) -> LocaleSyncService:
    backups = BackupManager(cfg.backup_dir, cfg.MAX_BACKUPS) if cfg.CREATE_BACKUPS else None
    store = CatalogStore(cfg.LOCALES_DIR, indent=cfg.JSON_INDENT, backup_manager=backups)
    return LocaleSyncService(store, cfg.REFERENCE_LOCALE)


def _print_coverage(locale: str, coverage: dict[str, NamespaceCoverage], limit: int) -> None:
    total = total_coverage(coverage)
    print(  # noqa: T201
        f"[{locale}] {total.translated}/{total.total} translated ({total.percent:.1f}%),"
        f" {total.untranslated} remaining"
    )
    for namespace, item in top_sections(coverage, limit):
        print(f"   {namespace}: {item.untranslated}/{item.total} untranslated")  # noqa: T201


def _print_outcome(outcome: SyncOutcome, dry_run: bool) -> None:
    result = outcome.result
    print(  # noqa: T201
        f"[{outcome.locale}] applied: {result.applied_count}, skipped: {result.skipped_count},"
        f" failed: {result.failed_count}"
    )
    for failure in result.failures:
        print(f"   FAILED {failure.path}: {failure.reason}")  # noqa: T201
    print(  # noqa: T201
        f"   untranslated: {outcome.before} -> {outcome.after} ({outcome.progress:.1f}% of remaining resolved)"
    )
    if dry_run and result.changed:
        print("   dry run, catalog not written")  # noqa: T201


def _cmd_diff(service: LocaleSyncService, args: argparse.Namespace) -> int:
    result = service.diff_locale(args.locale)
    for entry in result:
        state = "missing" if entry.missing else "unchanged"
        print(f"{entry.path}\t{state}\t{entry.reference_value}")  # noqa: T201
    print(f"[{args.locale}] {len(result)} untranslated", file=sys.stderr)  # noqa: T201
    return 0


def _cmd_apply(service: LocaleSyncService, args: argparse.Namespace, cfg: Config) -> int:
    patch = load_patch(args.patch, timeout=cfg.HTTP_TIMEOUT)
    outcome = service.apply_patch(args.locale, patch, ApplyPolicy(force=args.force), dry_run=args.dry_run)
    _print_outcome(outcome, args.dry_run)
    # skipped entries alone are not an error
    if outcome.result.applied_count == 0 and outcome.result.failed_count > 0:
        return 1
    return 0


def _cmd_translate(service: LocaleSyncService, args: argparse.Namespace, cfg: Config) -> int:
    glossary = load_glossary(args.glossary, timeout=cfg.HTTP_TIMEOUT)
    outcome = service.apply_glossary(args.locale, glossary, dry_run=args.dry_run)
    _print_outcome(outcome, args.dry_run)
    if outcome.result.applied_count == 0 and outcome.result.failed_count > 0:
        return 1
    return 0


def _cmd_report(service: LocaleSyncService, args: argparse.Namespace, cfg: Config) -> int:
    limit = args.top if args.top is not None else cfg.TOP_SECTIONS
    locales = [args.locale] if args.locale else service.target_locales()
    for locale in locales:
        _print_coverage(locale, service.report_locale(locale), limit)
    return 0


def _cmd_check(service: LocaleSyncService, args: argparse.Namespace) -> int:
    locales = [args.locale] if args.locale else service.target_locales()
    failed = 0
    for locale in locales:
        parity = service.check_locale(locale)
        status = "PASS" if parity.ok else "FAIL"
        print(  # noqa: T201
            f"[{status}] {locale}: {len(parity.missing)} missing, {len(parity.orphans)} extra,"
            f" {len(parity.empty)} empty"
        )
        for path in parity.missing:
            print(f"    Missing in {locale}: {path}")  # noqa: T201
        for path in parity.orphans:
            print(f"    Not in {service.reference_locale}: {path}")  # noqa: T201
        if not parity.ok:
            failed += 1
    return 1 if failed else 0


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run one subcommand and return the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    cfg = _resolve_config(args)
    setup_logging(cfg.LOG_LEVEL, args.log_file)
    service = _build_service(cfg)

    try:
        if args.command == "diff":
            return _cmd_diff(service, args)
        if args.command == "apply":
            return _cmd_apply(service, args, cfg)
        if args.command == "translate":
            return _cmd_translate(service, args, cfg)
        if args.command == "report":
            return _cmd_report(service, args, cfg)
        if args.command == "check":
            return _cmd_check(service, args)
    except CatalogError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1

    parser.error(f"unknown command {args.command!r}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
