"""Undo command."""

from __future__ import annotations

import argparse

from tokensync import Snapshot, SyncError, TokenSyncConfig
from tokensync.cli.persistence.store_file import discard_snapshot, load_snapshot, save_store
from tokensync.cli.progress.rich import RichSyncProgress


def format_undo_summary(snapshot: Snapshot, config: TokenSyncConfig) -> str:
    lines = [
        "",
        "tokensync - undo complete",
        "",
        f"  Collections: {len(snapshot.collections)}",
        f"  Variables:   {snapshot.variable_count}",
        f"  Store:       {config.store_path}",
        "",
    ]
    return "\n".join(lines)


async def run_undo(args: argparse.Namespace) -> Snapshot:
    import tokensync.cli as cli

    config = cli.load_config(args.config)
    undo_path = config.resolved_undo_path
    snapshot = load_snapshot(undo_path)
    if snapshot is None:
        raise SyncError(f"No import snapshot is available to undo ({undo_path})")

    if not args.verbose:
        with RichSyncProgress() as progress:
            sdk = await cli.TokenSync.from_config(config, progress=progress)
            await sdk.restore(snapshot)
    else:
        sdk = await cli.TokenSync.from_config(config)
        await sdk.restore(snapshot)

    await save_store(sdk, config.store_path)
    discard_snapshot(undo_path)

    print(cli._format_undo_summary(snapshot, config))
    return snapshot


__all__ = ["format_undo_summary", "run_undo"]
