"""Snapshot capture, restore and transactional execution.

A snapshot is taken immediately before a mutating operation. If the operation
raises, the snapshot is restored through the same alias-wiring and style
machinery the importer uses. Success discards the snapshot unless the caller
keeps it.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from tokensync.codec.values import decode_scalar, scopes_from_wire, snapshot_scalar
from tokensync.contracts.exceptions import MANUAL_RECOVERY_HINT, RollbackFailedError, RollbackUnavailableError
from tokensync.contracts.host import Host, Variable, VariableCollection
from tokensync.contracts.sync import (
    CollectionSnapshot,
    ImportStats,
    Snapshot,
    SnapshotMode,
    SnapshotValue,
    StyleSelection,
    VariableSnapshot,
)
from tokensync.contracts.values import Scalar, VariableAlias, VariableType, default_scalar
from tokensync.engine.clear import StoreClearer
from tokensync.engine.export import resolve_alias_value
from tokensync.engine.importer import ImportReconciler, PendingAlias
from tokensync.engine.progress import PHASE_RESTORE, NullSyncProgress, SyncProgress
from tokensync.engine.store import EntityStore
from tokensync.engine.styles import StyleSerializer

_LOG = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class TransactionOutcome(Generic[T]):
    """Result of :meth:`SnapshotManager.run_transaction`.

    ``rolled_back`` is true when the operation raised ``error`` and the
    snapshot was restored successfully.
    """

    result: T | None
    error: BaseException | None
    snapshot: Snapshot | None
    rolled_back: bool


def _fallback(value: SnapshotValue, variable_type: VariableType) -> Scalar:
    if value.value is None or value.value == "":
        return default_scalar(variable_type)
    return decode_scalar(value.value, variable_type)


class SnapshotManager:
    def __init__(self, host: Host, store: EntityStore, *, progress: SyncProgress | None = None) -> None:
        self._host = host
        self._store = store
        self._progress: SyncProgress = progress or NullSyncProgress()

    async def snapshot(self) -> Snapshot:
        collections = [await self._capture_collection(item) for item in await self._host.list_collections()]
        styles = await StyleSerializer(self._host).export(StyleSelection(), include_images=True)
        snapshot = Snapshot(timestamp=time.time(), collections=collections, styles=styles)
        _LOG.debug("Snapshot captured: %d collections, %d variables", len(collections), snapshot.variable_count)
        return snapshot

    async def _capture_collection(self, collection: VariableCollection) -> CollectionSnapshot:
        variables: list[VariableSnapshot] = []
        for variable_id in collection.variable_ids:
            variable = await self._host.get_variable(variable_id)
            if variable is None:
                continue
            values: dict[str, SnapshotValue] = {}
            for mode in collection.modes:
                value = variable.values_by_mode.get(mode.id)
                if value is None:
                    continue
                if isinstance(value, VariableAlias):
                    values[mode.id] = await self._capture_alias(variable, mode.id, value)
                else:
                    values[mode.id] = SnapshotValue(is_alias=False, value=snapshot_scalar(value))
            variables.append(
                VariableSnapshot(
                    name=variable.name,
                    type=variable.resolved_type,
                    scopes=list(variable.scopes),
                    description=variable.description,
                    values=values,
                )
            )
        return CollectionSnapshot(
            name=collection.name,
            modes=[SnapshotMode(id=mode.id, name=mode.name) for mode in collection.modes],
            variables=variables,
        )

    async def _capture_alias(self, variable: Variable, mode_id: str, alias: VariableAlias) -> SnapshotValue:
        target = await self._host.get_variable(alias.id)
        target_collection = await self._host.get_collection(target.collection_id) if target is not None else None
        resolved = await resolve_alias_value(self._host, variable, mode_id)
        return SnapshotValue(
            is_alias=True,
            alias_name=target.name if target is not None else None,
            alias_collection=target_collection.name if target_collection is not None else None,
            alias_id=alias.id,
            value=snapshot_scalar(resolved) if resolved != "" else None,
        )

    async def restore(self, snapshot: Snapshot) -> ImportStats:
        """Replace the live store with *snapshot*."""
        stats = ImportStats()
        pending: list[PendingAlias] = []
        self._progress.phase_start(PHASE_RESTORE, total=len(snapshot.collections))
        try:
            await StoreClearer(self._host, self._store).clear_all()
            await self._store.rebuild()
            for captured in snapshot.collections:
                await self._restore_collection(captured, stats, pending)
                self._progress.item_done(PHASE_RESTORE)
            self._progress.phase_done(PHASE_RESTORE)
        except BaseException as exc:
            self._progress.phase_error(PHASE_RESTORE, exc)
            raise

        reconciler = ImportReconciler(self._host, self._store, progress=self._progress)
        await reconciler.wire_aliases(pending, stats)
        if not snapshot.styles.is_empty:
            await reconciler.import_styles(snapshot.styles, stats)
        _LOG.info(
            "Restored snapshot: %d collections, %d variables", len(snapshot.collections), snapshot.variable_count
        )
        return stats

    async def _restore_collection(
        self, captured: CollectionSnapshot, stats: ImportStats, pending: list[PendingAlias]
    ) -> None:
        collection = await self._host.create_collection(captured.name)
        self._store.put_collection(collection)
        stats.collections_created += 1

        mode_ids: dict[str, str] = {}
        for index, mode in enumerate(captured.modes):
            if index == 0:
                sole = collection.modes[0]
                if sole.name != mode.name:
                    await collection.rename_mode(sole.id, mode.name)
                mode_ids[mode.id] = sole.id
            else:
                mode_ids[mode.id] = await collection.add_mode(mode.name)

        for captured_variable in captured.variables:
            variable = await self._host.create_variable(captured_variable.name, collection, captured_variable.type)
            self._store.put_variable(captured.name, variable)
            if captured_variable.description:
                await variable.set_description(captured_variable.description)
            await variable.set_scopes(scopes_from_wire(captured_variable.scopes))
            for old_mode_id, value in captured_variable.values.items():
                mode_id = mode_ids.get(old_mode_id)
                if mode_id is None:
                    continue
                if not value.is_alias:
                    await variable.set_value(mode_id, decode_scalar(value.value, captured_variable.type))
                    continue
                fallback = _fallback(value, captured_variable.type)
                await variable.set_value(mode_id, fallback)
                pending.append(
                    PendingAlias(
                        variable_id=variable.id,
                        mode_id=mode_id,
                        collection=value.alias_collection or captured.name,
                        path=value.alias_name or "",
                        fallback=fallback,
                        target_id=value.alias_id,
                    )
                )
            stats.variables_created += 1

    async def run_transaction(self, operation: Callable[[], Awaitable[T]]) -> TransactionOutcome[T]:
        """Run *operation* under a snapshot, restoring it if the operation raises.

        Raises:
            RollbackFailedError: The operation failed and so did the restore.
            RollbackUnavailableError: The operation failed and no snapshot could be taken.
        """
        snapshot: Snapshot | None
        try:
            snapshot = await self.snapshot()
        except Exception as exc:
            _LOG.warning("Could not capture a snapshot before the operation: %s", exc)
            snapshot = None

        try:
            result = await operation()
        except Exception as exc:
            if snapshot is None:
                raise RollbackUnavailableError(
                    f"Operation failed and no snapshot was available to restore: {exc}. {MANUAL_RECOVERY_HINT}",
                    original=exc,
                ) from exc
            _LOG.warning("Operation failed (%s); restoring the pre-operation snapshot", exc)
            try:
                await self.restore(snapshot)
            except Exception as rollback_exc:
                raise RollbackFailedError(
                    f"Operation failed ({exc}) and rollback failed too ({rollback_exc}); "
                    f"the store may be inconsistent. {MANUAL_RECOVERY_HINT}",
                    original=exc,
                    rollback_error=rollback_exc,
                ) from rollback_exc
            return TransactionOutcome(result=None, error=exc, snapshot=snapshot, rolled_back=True)
        return TransactionOutcome(result=result, error=None, snapshot=snapshot, rolled_back=False)
