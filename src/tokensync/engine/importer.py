"""Two-pass import reconciler.

Pass 1 creates or updates every collection, mode and variable of the document
and writes raw values. An alias leaf gets its fallback scalar written as a
placeholder and is queued as a :class:`PendingAlias`. Pass 2 runs only after
Pass 1 has finished for all collections: it rebuilds the entity store and
replaces each placeholder with a real alias link when the target exists.
Styles are imported last, against a store rebuilt once more.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tokensync.codec.values import LiteralLeaf, decode_leaf, from_export_type, scopes_from_wire
from tokensync.contracts.document import CollectionEntry, Document, StylesBundle, ValueRecord, value_at_path
from tokensync.contracts.exceptions import HostError
from tokensync.contracts.host import Host, VariableCollection
from tokensync.contracts.sync import CollectionBehavior, ImportOptions, ImportStats
from tokensync.contracts.values import Scalar, VariableAlias
from tokensync.engine.clear import StoreClearer
from tokensync.engine.names import DocumentNames
from tokensync.engine.progress import (
    PHASE_ALIASES,
    PHASE_CLEAR,
    PHASE_COLLECTIONS,
    PHASE_STYLES,
    NullSyncProgress,
    SyncProgress,
)
from tokensync.engine.store import EntityStore
from tokensync.engine.styles import StyleReconciler

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingAlias:
    """Alias wiring deferred to Pass 2; ``fallback`` is already written."""

    variable_id: str
    mode_id: str
    collection: str
    path: str
    fallback: Scalar
    target_id: str | None = None


class ImportReconciler:
    def __init__(self, host: Host, store: EntityStore, *, progress: SyncProgress | None = None) -> None:
        self._host = host
        self._store = store
        self._progress: SyncProgress = progress or NullSyncProgress()

    async def reconcile(self, document: Document, options: ImportOptions | None = None) -> ImportStats:
        options = options or ImportOptions()
        stats = ImportStats()
        await self.prepare(options)
        pending = await self.create_raw_values(document, options, stats)
        await self.wire_aliases(pending, stats)
        if options.import_styles and document.styles is not None and not document.styles.is_empty:
            await self.import_styles(document.styles, stats)
        _LOG.info(
            "Import finished: %d collections created, %d variables created, %d updated, %d aliases resolved",
            stats.collections_created,
            stats.variables_created,
            stats.variables_updated,
            stats.aliases_resolved,
        )
        return stats

    async def prepare(self, options: ImportOptions) -> None:
        """Apply requested clearing, then rebuild the store."""
        custom = options.custom_merge
        clear_variables = options.clear_first or bool(custom and custom.clear_variables)
        clear_styles = options.clear_first or bool(custom and custom.clear_styles)
        if clear_variables or clear_styles:
            self._progress.phase_start(PHASE_CLEAR)
            try:
                clearer = StoreClearer(self._host, self._store)
                if clear_variables:
                    await clearer.clear_variables()
                if clear_styles:
                    await clearer.clear_styles()
                self._progress.phase_done(PHASE_CLEAR)
            except BaseException as exc:
                self._progress.phase_error(PHASE_CLEAR, exc)
                raise
        await self._store.rebuild()

    async def create_raw_values(
        self, document: Document, options: ImportOptions, stats: ImportStats
    ) -> list[PendingAlias]:
        """Pass 1 across all collections; returns the alias worklist for Pass 2."""
        names = DocumentNames(document)
        pending: list[PendingAlias] = []
        self._progress.phase_start(PHASE_COLLECTIONS, total=len(document.collections))
        try:
            for entry in document.collections:
                await self._import_collection(entry, options, names, stats, pending)
                self._progress.item_done(PHASE_COLLECTIONS)
            self._progress.phase_done(PHASE_COLLECTIONS)
        except BaseException as exc:
            self._progress.phase_error(PHASE_COLLECTIONS, exc)
            raise
        return pending

    async def wire_aliases(self, pending: list[PendingAlias], stats: ImportStats) -> None:
        """Pass 2: replace placeholders with alias links where targets exist."""
        self._progress.phase_start(PHASE_ALIASES, total=len(pending))
        try:
            await self._store.rebuild()
            library = await self._library_index() if pending else {}
            for item in pending:
                await self._wire_alias(item, library, stats)
                self._progress.item_done(PHASE_ALIASES)
            self._progress.phase_done(PHASE_ALIASES)
        except BaseException as exc:
            self._progress.phase_error(PHASE_ALIASES, exc)
            raise

    async def import_styles(self, bundle: StylesBundle, stats: ImportStats) -> None:
        self._progress.phase_start(PHASE_STYLES, total=bundle.count())
        try:
            await self._store.rebuild()
            style_stats = await StyleReconciler(self._host).import_styles(bundle, self._store)
            stats.styles_created += style_stats.created
            stats.styles_updated += style_stats.updated
            stats.styles_failed += style_stats.failed
            self._progress.phase_done(PHASE_STYLES)
        except BaseException as exc:
            self._progress.phase_error(PHASE_STYLES, exc)
            raise

    async def _library_index(self) -> dict[tuple[str, str], str]:
        """Variable ids of connected library collections by ``(collection, path)``."""
        index: dict[tuple[str, str], str] = {}
        for collection in await self._host.list_library_collections():
            for variable_id in collection.variable_ids:
                variable = await self._host.get_variable(variable_id)
                if variable is not None:
                    index[(collection.name, variable.name)] = variable.id
        return index

    async def _wire_alias(self, item: PendingAlias, library: dict[tuple[str, str], str], stats: ImportStats) -> None:
        variable = self._store.variable_by_id(item.variable_id)
        target = self._store.variable(item.collection, item.path)
        if target is None:
            target_id = item.target_id or library.get((item.collection, item.path))
            if target_id is not None:
                target = await self._host.get_variable(target_id)
            if target is not None and target.name != item.path:
                target = None
        if variable is None or target is None:
            _LOG.warning(
                "Alias target %s/%s not found; keeping fallback %r", item.collection, item.path, item.fallback
            )
            stats.aliases_unresolved += 1
            return
        try:
            await variable.set_value(item.mode_id, VariableAlias(target.id))
        except HostError as exc:
            _LOG.warning("Could not alias %r to %s/%s: %s", variable.name, item.collection, item.path, exc)
            stats.aliases_unresolved += 1
            return
        stats.aliases_resolved += 1

    async def _import_collection(
        self,
        entry: CollectionEntry,
        options: ImportOptions,
        names: DocumentNames,
        stats: ImportStats,
        pending: list[PendingAlias],
    ) -> None:
        host_name = entry.host_name
        collection = self._store.collection(host_name)
        if collection is not None:
            if options.behavior_for(entry.name, host_name) is CollectionBehavior.REPLACE:
                _LOG.info("Replacing collection %r", host_name)
                try:
                    await collection.remove()
                except HostError as exc:
                    _LOG.warning("Failed to remove collection %r for replacement: %s", host_name, exc)
                    stats.collections_failed += 1
                    return
                self._store.drop_collection(host_name)
                collection = None
            elif not options.merge:
                _LOG.info("Skipping existing collection %r (merge disabled)", host_name)
                stats.collections_skipped += 1
                return

        if collection is None:
            try:
                collection = await self._host.create_collection(host_name)
            except HostError as exc:
                _LOG.warning("Failed to create collection %r: %s", host_name, exc)
                stats.collections_failed += 1
                return
            self._store.put_collection(collection)
            stats.collections_created += 1

        selected = options.modes_for(entry.name, host_name)
        mode_names = [name for name in entry.mode_names if selected is None or name in selected]
        mode_ids = await self._reconcile_modes(collection, entry, mode_names, stats)

        for path, template in entry.iter_paths():
            await self._import_variable(entry, collection, path, template, mode_ids, options, names, stats, pending)

    async def _reconcile_modes(
        self,
        collection: VariableCollection,
        entry: CollectionEntry,
        mode_names: list[str],
        stats: ImportStats,
    ) -> dict[str, str]:
        """Map document mode names to host mode ids, renaming or adding modes as needed."""
        required = [entry.host_mode_name(name) for name in mode_names]
        untouched = len(collection.modes) == 1 and not collection.variable_ids
        if required and untouched and collection.modes[0].name not in required:
            sole = collection.modes[0]
            try:
                await collection.rename_mode(sole.id, required[0])
            except HostError as exc:
                _LOG.warning("Failed to rename mode %r of %r: %s", sole.name, collection.name, exc)
                stats.modes_failed += 1

        live = {mode.name: mode.id for mode in collection.modes}
        mode_ids: dict[str, str] = {}
        for doc_name, host_mode in zip(mode_names, required, strict=True):
            mode_id = live.get(host_mode)
            if mode_id is None:
                try:
                    mode_id = await collection.add_mode(host_mode)
                except HostError as exc:
                    _LOG.warning("Failed to add mode %r to %r: %s", host_mode, collection.name, exc)
                    stats.modes_failed += 1
                    continue
                live[host_mode] = mode_id
            mode_ids[doc_name] = mode_id
        return mode_ids

    async def _import_variable(
        self,
        entry: CollectionEntry,
        collection: VariableCollection,
        path: str,
        template: ValueRecord,
        mode_ids: dict[str, str],
        options: ImportOptions,
        names: DocumentNames,
        stats: ImportStats,
        pending: list[PendingAlias],
    ) -> None:
        host_path = names.path(entry, path)
        variable_type = from_export_type(template.type)
        variable = self._store.variable(collection.name, host_path)
        created = variable is None
        if variable is not None:
            if not options.overwrite:
                stats.variables_skipped += 1
                return
            if variable.resolved_type is not variable_type:
                _LOG.warning(
                    "Variable %s/%s is %s but the document declares %s; skipped",
                    collection.name,
                    host_path,
                    variable.resolved_type,
                    variable_type,
                )
                stats.variables_failed += 1
                return
        else:
            try:
                variable = await self._host.create_variable(host_path, collection, variable_type)
            except HostError as exc:
                _LOG.warning("Failed to create variable %s/%s: %s", collection.name, host_path, exc)
                stats.variables_failed += 1
                return
            self._store.put_variable(collection.name, variable)

        try:
            if template.description is not None:
                await variable.set_description(template.description)
            await variable.set_scopes(scopes_from_wire(template.scopes))
            for mode_name, mode_id in mode_ids.items():
                record = value_at_path(entry.modes[mode_name], path)
                if record is None:
                    continue
                leaf = decode_leaf(record, variable_type, default_collection=entry.name)
                if isinstance(leaf, LiteralLeaf):
                    await variable.set_value(mode_id, leaf.value)
                    continue
                await variable.set_value(mode_id, leaf.fallback)
                target_collection, target_path = names.resolve(leaf.collection, leaf.path)
                pending.append(
                    PendingAlias(
                        variable_id=variable.id,
                        mode_id=mode_id,
                        collection=target_collection,
                        path=target_path,
                        fallback=leaf.fallback,
                    )
                )
        except HostError as exc:
            _LOG.warning("Failed to write values of %s/%s: %s", collection.name, host_path, exc)
            stats.variables_failed += 1
            return

        if created:
            stats.variables_created += 1
        else:
            stats.variables_updated += 1
