"""Clear command formatting."""

from __future__ import annotations

import argparse

from tokensync import ClearResult, TokenSyncConfig
from tokensync.cli.persistence.store_file import open_store, save_store


def format_clear_summary(result: ClearResult, config: TokenSyncConfig, *, dry_run: bool) -> str:
    mode = "dry-run" if dry_run else "apply"
    verb = "Would remove" if dry_run else "Removed"
    lines = [
        "",
        f"tokensync - clear complete ({mode})",
        "",
        f"  {verb}: {result.collections} collections, {result.variables} variables, {result.styles} styles",
        f"  Store:   {config.store_path}",
    ]
    if dry_run:
        lines.append("")
        lines.append("  [dry-run] No changes were made")
    lines.append("")
    return "\n".join(lines)


async def run_clear(args: argparse.Namespace) -> ClearResult:
    import tokensync.cli as cli

    config = cli.load_config(args.config)
    sdk = await cli.TokenSync.from_config(config)
    await open_store(sdk, config.store_path)

    result = await sdk.clear(variables=not args.styles_only, styles=not args.variables_only)
    if not args.dry_run:
        await save_store(sdk, config.store_path)

    print(cli._format_clear_summary(result, config, dry_run=args.dry_run))
    return result


__all__ = ["format_clear_summary", "run_clear"]
