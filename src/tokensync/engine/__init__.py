"""Synchronization engine: export, import, diff, snapshot and rollback."""

from tokensync.engine.clear import StoreClearer
from tokensync.engine.diff import DiffEngine
from tokensync.engine.export import MAX_ALIAS_DEPTH, ExportSerializer, resolve_alias_value
from tokensync.engine.importer import ImportReconciler, PendingAlias
from tokensync.engine.inventory import build_inventory
from tokensync.engine.progress import NullSyncProgress, SyncProgress
from tokensync.engine.snapshot import SnapshotManager, TransactionOutcome
from tokensync.engine.store import EntityStore
from tokensync.engine.styles import StyleReconciler, StyleSerializer

__all__ = [
    "MAX_ALIAS_DEPTH",
    "DiffEngine",
    "EntityStore",
    "ExportSerializer",
    "ImportReconciler",
    "NullSyncProgress",
    "PendingAlias",
    "SnapshotManager",
    "StoreClearer",
    "StyleReconciler",
    "StyleSerializer",
    "SyncProgress",
    "TransactionOutcome",
    "build_inventory",
    "resolve_alias_value",
]
