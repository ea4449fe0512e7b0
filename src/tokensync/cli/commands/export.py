"""Export command."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from tokensync import ExportFormat, ExportOptions, ExportResult, StyleSelection, SyncError, TokenSyncConfig
from tokensync.cli.persistence.store_file import open_store
from tokensync.cli.progress.rich import RichSyncProgress


def format_export_summary(result: ExportResult, output: str) -> str:
    style_total = sum(result.stats.styles.values())
    lines = [
        "",
        f"tokensync - export complete ({result.export_format.value})",
        "",
        f"  Collections: {result.stats.collections}",
        f"  Variables:   {result.stats.variables}",
    ]
    if result.stats.styles:
        breakdown = ", ".join(f"{count} {kind.value}" for kind, count in result.stats.styles.items())
        lines.append(f"  Styles:      {style_total} ({breakdown})")
    lines.append("")
    lines.append(f"  Output:      {output}")
    lines.append("")
    return "\n".join(lines)


def build_export_options(args: argparse.Namespace, config: TokenSyncConfig) -> ExportOptions:
    return ExportOptions(
        collections=args.collection,
        naming_convention=args.naming or config.naming_convention,
        resolve_aliases=args.resolve_aliases,
        styles=None if args.no_styles else StyleSelection(),
        include_images=args.include_images or config.include_images,
        export_format=ExportFormat(args.format),
    )


def write_export(result: ExportResult, output: str) -> None:
    payload = json.dumps(result.to_wire(), indent=2, ensure_ascii=False)
    if output == "-":
        print(payload)
        return
    path = Path(output)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(payload + "\n", encoding="utf-8")
    except OSError as exc:
        raise SyncError(f"failed to write export file: {path}") from exc


async def run_export(args: argparse.Namespace) -> ExportResult:
    import tokensync.cli as cli

    config = cli.load_config(args.config)
    options = build_export_options(args, config)

    if not args.verbose:
        with RichSyncProgress() as progress:
            sdk = await cli.TokenSync.from_config(config, progress=progress)
            await open_store(sdk, config.store_path)
            result = await sdk.export_document(options)
    else:
        sdk = await cli.TokenSync.from_config(config)
        await open_store(sdk, config.store_path)
        result = await sdk.export_document(options)

    write_export(result, args.output)
    if args.output != "-":
        print(cli._format_export_summary(result, args.output))
    return result


__all__ = ["build_export_options", "format_export_summary", "run_export", "write_export"]
