"""Store-file persistence for the in-memory host.

The CLI keeps the store between runs as a snapshot JSON file. Loading replays
that snapshot into a fresh host; saving captures the host again.
"""

from __future__ import annotations

from pathlib import Path

from tokensync.contracts.exceptions import ConfigError, DocumentLoadError, SyncError
from tokensync.contracts.sync import Snapshot
from tokensync.sdk import TokenSync


def load_snapshot(path: Path) -> Snapshot | None:
    if not path.exists():
        return None
    try:
        return Snapshot.from_json(path.read_text(encoding="utf-8"))
    except (OSError, DocumentLoadError) as exc:
        raise ConfigError(f"invalid store file: {path}") from exc


def persist_snapshot(snapshot: Snapshot, path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(snapshot.to_json() + "\n", encoding="utf-8")
    except OSError as exc:
        raise SyncError(f"failed to persist store file: {path}") from exc


def discard_snapshot(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        raise SyncError(f"failed to remove snapshot file: {path}") from exc


async def open_store(sdk: TokenSync, path: Path) -> None:
    snapshot = load_snapshot(path)
    if snapshot is not None:
        await TokenSync(sdk.host).restore(snapshot)


async def save_store(sdk: TokenSync, path: Path) -> None:
    persist_snapshot(await sdk.snapshot(), path)


__all__ = ["discard_snapshot", "load_snapshot", "open_store", "persist_snapshot", "save_store"]
