"""Read-only classification of a document against the live store."""

from __future__ import annotations

from tokensync.codec.color import parse_color, to_hex
from tokensync.codec.values import decode_scalar, display_record_value, display_value, to_export_type
from tokensync.contracts.diff import DiffResult, ModeValueChange, StyleChange, VariableChange, VariableRef
from tokensync.contracts.document import CollectionEntry, Document, StylesBundle, ValueRecord, value_at_path
from tokensync.contracts.host import Host, Variable, VariableCollection
from tokensync.contracts.styles import StyleKind
from tokensync.contracts.values import ModeValue, Rgba, VariableAlias, VariableType
from tokensync.engine.names import DocumentNames
from tokensync.engine.store import EntityStore


def values_differ(current: ModeValue | None, record: ValueRecord, variable_type: VariableType) -> bool:
    """Whether an incoming record would change the current mode value.

    Existing aliases always differ; chains are not compared. Colors compare by
    hex so that float rounding does not register as a change.
    """
    if current is None or isinstance(current, VariableAlias) or record.is_alias:
        return True
    if record.type != to_export_type(variable_type):
        return True
    if variable_type is VariableType.COLOR:
        if not isinstance(current, Rgba):
            return True
        return to_hex(current).lower() != to_hex(parse_color(record.value)).lower()
    return current != decode_scalar(record.value, variable_type)


class DiffEngine:
    def __init__(self, host: Host, store: EntityStore) -> None:
        self._host = host
        self._store = store

    async def diff(self, document: Document) -> DiffResult:
        await self._store.rebuild()
        names = DocumentNames(document)
        result = DiffResult()
        for entry in document.collections:
            collection = self._store.collection(entry.host_name)
            if collection is None:
                result.new_collections.append(entry.name)
                result.summary.collections_new += 1
                result.summary.variables_new += len(list(entry.iter_paths()))
                continue
            if self._diff_collection(entry, collection, names, result):
                result.modified_collections.append(entry.name)
                result.summary.collections_modified += 1
            else:
                result.unchanged_collections.append(entry.name)
                result.summary.collections_unchanged += 1

        if document.styles is not None:
            await self._diff_styles(document.styles, result)
        result.summary.variables_new += len(result.new_variables)
        result.summary.variables_modified = len(result.modified_variables)
        result.summary.variables_unchanged = result.unchanged_variables
        return result

    def _diff_collection(
        self,
        entry: CollectionEntry,
        collection: VariableCollection,
        names: DocumentNames,
        result: DiffResult,
    ) -> bool:
        live_modes = {mode.name: mode.id for mode in collection.modes}
        modified = False
        for path, _template in entry.iter_paths():
            variable = self._store.variable(collection.name, names.path(entry, path))
            if variable is None:
                result.new_variables.append(VariableRef(collection=entry.name, path=path))
                modified = True
                continue
            changes = self._mode_changes(entry, path, variable, live_modes)
            if changes:
                result.modified_variables.append(
                    VariableChange(
                        collection=entry.name,
                        path=path,
                        old_value=changes[0].old_value,
                        new_value=changes[0].new_value,
                        modes=changes,
                    )
                )
                modified = True
            else:
                result.unchanged_variables += 1
        return modified

    def _mode_changes(
        self, entry: CollectionEntry, path: str, variable: Variable, live_modes: dict[str, str]
    ) -> list[ModeValueChange]:
        # A document mode missing on the host compares against an absent value.
        values = variable.values_by_mode
        changes: list[ModeValueChange] = []
        for mode_name, tree in entry.modes.items():
            record = value_at_path(tree, path)
            if record is None:
                continue
            mode_id = live_modes.get(entry.host_mode_name(mode_name))
            current = values.get(mode_id) if mode_id is not None else None
            if values_differ(current, record, variable.resolved_type):
                changes.append(
                    ModeValueChange(
                        mode=mode_name,
                        old_value=display_value(current),
                        new_value=display_record_value(record),
                    )
                )
        return changes

    async def _diff_styles(self, bundle: StylesBundle, result: DiffResult) -> None:
        incoming = {
            StyleKind.COLOR: bundle.color_styles,
            StyleKind.TEXT: bundle.text_styles,
            StyleKind.EFFECT: bundle.effect_styles,
            StyleKind.GRID: bundle.grid_styles,
        }
        for kind, records in incoming.items():
            if not records:
                continue
            existing = {style.name for style in await self._host.list_styles(kind)}
            for record in records:
                change = StyleChange(kind=kind, name=record.name)
                if record.name in existing:
                    result.modified_styles.append(change)
                    result.summary.styles_modified += 1
                else:
                    result.new_styles.append(change)
                    result.summary.styles_new += 1
