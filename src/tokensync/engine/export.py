"""Export serializer: live store to portable document. Pure read."""

from __future__ import annotations

import logging
from typing import Any

from tokensync.codec.naming import convert_parts, converted_with_original
from tokensync.codec.values import alias_ref_from_parts, encode_scalar, scopes_to_wire, to_export_type
from tokensync.contracts.document import CollectionEntry, Document, ValueRecord, insert_at_path
from tokensync.contracts.host import Host, Variable, VariableCollection
from tokensync.contracts.styles import StyleKind
from tokensync.contracts.sync import ExportOptions, ExportResult, ExportStats, NamingConvention
from tokensync.contracts.values import ModeValue, Scalar, VariableAlias, default_scalar
from tokensync.engine.progress import PHASE_EXPORT, NullSyncProgress, SyncProgress
from tokensync.engine.styles import StyleSerializer

_LOG = logging.getLogger(__name__)

MAX_ALIAS_DEPTH = 10


async def resolve_alias_value(host: Host, variable: Variable, mode_id: str, depth: int = 0) -> Scalar:
    """Follow an alias chain to its terminal scalar.

    Chains longer than ``MAX_ALIAS_DEPTH`` (cycles included) resolve to ``""``.
    A target without the requested mode falls back to its first mode.
    """
    if depth > MAX_ALIAS_DEPTH:
        _LOG.warning("Alias chain from %r exceeds depth %d; resolved to empty", variable.name, MAX_ALIAS_DEPTH)
        return ""
    values = variable.values_by_mode
    value = values.get(mode_id)
    if value is None and values:
        value = next(iter(values.values()))
    if value is None:
        return default_scalar(variable.resolved_type)
    if not isinstance(value, VariableAlias):
        return value
    target = await host.get_variable(value.id)
    if target is None:
        return default_scalar(variable.resolved_type)
    return await resolve_alias_value(host, target, mode_id, depth + 1)


class ExportSerializer:
    def __init__(self, host: Host, *, progress: SyncProgress | None = None) -> None:
        self._host = host
        self._progress: SyncProgress = progress or NullSyncProgress()

    async def export(self, options: ExportOptions | None = None) -> ExportResult:
        options = options or ExportOptions()
        collections = await self._host.list_collections()
        if options.collections is not None:
            wanted = set(options.collections)
            collections = [collection for collection in collections if collection.name in wanted]
        exported_ids = {collection.id for collection in collections}

        stats = ExportStats()
        entries: list[CollectionEntry] = []
        self._progress.phase_start(PHASE_EXPORT, total=len(collections))
        try:
            for collection in collections:
                entry, variable_count = await self._export_collection(collection, options, exported_ids)
                entries.append(entry)
                stats.collections += 1
                stats.variables += variable_count
                self._progress.item_done(PHASE_EXPORT)

            styles = None
            if options.styles is not None:
                styles = await StyleSerializer(self._host).export(options.styles, include_images=options.include_images)
                stats.styles = {
                    StyleKind.COLOR: len(styles.color_styles or []),
                    StyleKind.TEXT: len(styles.text_styles or []),
                    StyleKind.EFFECT: len(styles.effect_styles or []),
                    StyleKind.GRID: len(styles.grid_styles or []),
                }
            self._progress.phase_done(PHASE_EXPORT)
        except BaseException as exc:
            self._progress.phase_error(PHASE_EXPORT, exc)
            raise

        _LOG.info("Exported %d collections, %d variables", stats.collections, stats.variables)
        return ExportResult(
            document=Document(collections=entries, styles=styles),
            stats=stats,
            export_format=options.export_format,
        )

    async def _export_collection(
        self, collection: VariableCollection, options: ExportOptions, exported_ids: set[str]
    ) -> tuple[CollectionEntry, int]:
        convention = options.naming_convention
        name, original_name = converted_with_original(collection.name, convention)

        selected = options.modes.get(collection.name)
        modes = [mode for mode in collection.modes if selected is None or mode.name in selected]
        trees: dict[str, dict[str, Any]] = {}
        mode_keys: dict[str, str] = {}
        original_mode_names: dict[str, str] = {}
        for mode in modes:
            mode_name, original_mode = converted_with_original(mode.name, convention)
            trees[mode_name] = {}
            mode_keys[mode.id] = mode_name
            if original_mode is not None:
                original_mode_names[mode_name] = original_mode

        count = 0
        for variable_id in collection.variable_ids:
            variable = await self._host.get_variable(variable_id)
            if variable is None:
                continue
            parts = convert_parts(variable.name, convention)
            original_path = variable.name if "/".join(parts) != variable.name else None
            for mode in modes:
                record = await self._record(variable, mode.id, options, exported_ids, original_path)
                insert_at_path(trees[mode_keys[mode.id]], parts, record)
            count += 1

        entry = CollectionEntry(
            name=name,
            modes=trees,
            original_name=original_name,
            original_mode_names=original_mode_names or None,
        )
        return entry, count

    async def _record(
        self,
        variable: Variable,
        mode_id: str,
        options: ExportOptions,
        exported_ids: set[str],
        original_path: str | None,
    ) -> ValueRecord:
        value: ModeValue | None = variable.values_by_mode.get(mode_id)
        fields: dict[str, Any] = {
            "type": to_export_type(variable.resolved_type),
            "scopes": scopes_to_wire(variable.scopes),
            "description": variable.description or None,
            "original_name": original_path,
        }
        if value is None:
            return ValueRecord(value=encode_scalar(default_scalar(variable.resolved_type)), **fields)
        if not isinstance(value, VariableAlias):
            return ValueRecord(value=encode_scalar(value), **fields)
        if options.resolve_aliases:
            resolved = await resolve_alias_value(self._host, variable, mode_id)
            return ValueRecord(value=encode_scalar(resolved), **fields)

        target = await self._host.get_variable(value.id)
        if target is None:
            _LOG.warning("Alias target %s of %r no longer exists; exporting the default", value.id, variable.name)
            return ValueRecord(value=encode_scalar(default_scalar(variable.resolved_type)), **fields)
        target_collection = await self._host.get_collection(target.collection_id)
        target_collection_name = target_collection.name if target_collection is not None else ""
        convention: NamingConvention = options.naming_convention
        fields["collection_name"] = converted_with_original(target_collection_name, convention)[0]
        remote = target_collection is not None and target_collection.remote
        if remote:
            fields["library_ref"] = target_collection_name
        if target_collection is None or target_collection.remote or target_collection.id not in exported_ids:
            local = await resolve_alias_value(self._host, target, mode_id)
            fields["local_value"] = encode_scalar(local)
        # library variables are looked up under their host names on import
        parts = target.name.split("/") if remote else convert_parts(target.name, convention)
        return ValueRecord(value=alias_ref_from_parts(parts), **fields)
