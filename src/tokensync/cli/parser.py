"""CLI parser construction."""

from __future__ import annotations

import argparse
from importlib.metadata import PackageNotFoundError, version

from tokensync.contracts.plan import PlanTier
from tokensync.contracts.sync import ExportFormat, NamingConvention

_DEFAULT_CONFIG = "./tokensync.json"


def _package_version() -> str:
    try:
        return version("tokensync")
    except PackageNotFoundError:
        return "0.0.0"


def _mode_selection(value: str) -> tuple[str, list[str]]:
    collection, separator, modes = value.partition("=")
    names = [mode.strip() for mode in modes.split(",") if mode.strip()]
    if not separator or not collection.strip() or not names:
        raise argparse.ArgumentTypeError("use COLLECTION=MODE[,MODE...]")
    return collection.strip(), names


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--config", default=_DEFAULT_CONFIG, help="Path to tokensync.json")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")


def _add_apply_mode(parser: argparse.ArgumentParser) -> None:
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--dry-run", action="store_true", help="Preview mode")
    mode.add_argument("--apply", action="store_true", help="Apply mode")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tokensync")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export the store as a token document")
    _add_common(export_parser)
    export_parser.add_argument("--output", "-o", default="tokens.json", help="Output file path ('-' for stdout)")
    export_parser.add_argument(
        "--format", choices=[item.value for item in ExportFormat], default=ExportFormat.DOCUMENT.value
    )
    export_parser.add_argument(
        "--naming",
        choices=[item.value for item in NamingConvention],
        default=None,
        help="Naming convention (default: from config)",
    )
    export_parser.add_argument("--collection", action="append", default=None, help="Export only this collection")
    export_parser.add_argument(
        "--resolve-aliases", action="store_true", help="Write terminal values instead of aliases"
    )
    export_parser.add_argument("--no-styles", action="store_true", help="Skip style export")
    export_parser.add_argument("--include-images", action="store_true", help="Embed image bytes in image paints")

    validate_parser = subparsers.add_parser("validate", help="Check a document against plan limits")
    _add_common(validate_parser)
    validate_parser.add_argument("document", help="Path to the token document")
    validate_parser.add_argument("--tier", choices=[tier.value for tier in PlanTier], default=None)

    diff_parser = subparsers.add_parser("diff", help="Preview what importing a document would change")
    _add_common(diff_parser)
    diff_parser.add_argument("document", help="Path to the token document")

    import_parser = subparsers.add_parser("import", help="Import a token document into the store")
    _add_common(import_parser)
    import_parser.add_argument("document", help="Path to the token document")
    _add_apply_mode(import_parser)
    import_parser.add_argument("--no-merge", action="store_true", help="Skip collections that already exist")
    import_parser.add_argument("--no-overwrite", action="store_true", help="Keep values of existing variables")
    import_parser.add_argument("--clear-first", action="store_true", help="Remove everything before importing")
    import_parser.add_argument("--clear-variables", action="store_true", help="Remove all collections first")
    import_parser.add_argument("--clear-styles", action="store_true", help="Remove all styles first")
    import_parser.add_argument(
        "--replace", action="append", default=[], metavar="NAME", help="Recreate this collection from scratch"
    )
    import_parser.add_argument(
        "--modes",
        action="append",
        default=[],
        type=_mode_selection,
        metavar="COLLECTION=A,B",
        help="Import only these modes of a collection",
    )
    import_parser.add_argument(
        "--interactive", action="store_true", help="Prompt for a mode subset when a collection exceeds the tier"
    )
    import_parser.add_argument("--no-styles", action="store_true", help="Skip style import")
    import_parser.add_argument("--tier", choices=[tier.value for tier in PlanTier], default=None)

    undo_parser = subparsers.add_parser("undo", help="Restore the store as it was before the last import")
    _add_common(undo_parser)

    clear_parser = subparsers.add_parser("clear", help="Remove collections and/or styles from the store")
    _add_common(clear_parser)
    _add_apply_mode(clear_parser)
    scope = clear_parser.add_mutually_exclusive_group()
    scope.add_argument("--variables-only", action="store_true", help="Keep styles")
    scope.add_argument("--styles-only", action="store_true", help="Keep collections")

    info_parser = subparsers.add_parser("info", help="Summarize the store contents")
    _add_common(info_parser)

    return parser


__all__ = ["build_parser"]
