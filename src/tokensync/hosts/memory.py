"""In-memory host with a deterministic operation log."""

from __future__ import annotations

import dataclasses
import hashlib
from collections.abc import Iterable
from dataclasses import dataclass
from types import TracebackType

from tokensync.contracts.exceptions import HostError
from tokensync.contracts.host import Host, Mode, Variable, VariableCollection
from tokensync.contracts.styles import Style, StyleKind
from tokensync.contracts.values import ModeValue, VariableAlias, VariableType, conforms, default_scalar

_FORBIDDEN_NAME_CHARS = frozenset(".{}")


@dataclass(frozen=True)
class HostOperation:
    """Deterministic host mutation log entry."""

    sequence: int
    name: str
    target_id: str | None
    payload: dict[str, str]


def _validate_variable_name(name: str) -> None:
    segments = name.split("/")
    if any(not segment.strip() for segment in segments):
        raise HostError(f"Invalid variable name {name!r}: empty path segment", entity=name)
    if any(char in _FORBIDDEN_NAME_CHARS for char in name):
        raise HostError(f"Invalid variable name {name!r}: names may not contain '.', '{{' or '}}'", entity=name)


class MemoryCollection(VariableCollection):
    def __init__(self, *, host: MemoryHost, id: str, name: str, remote: bool = False) -> None:
        self._host = host
        self._id = id
        self._name = name
        self._remote = remote
        self._modes: list[Mode] = []
        self._variable_ids: list[str] = []

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def modes(self) -> tuple[Mode, ...]:
        return tuple(self._modes)

    @property
    def variable_ids(self) -> tuple[str, ...]:
        return tuple(self._variable_ids)

    @property
    def remote(self) -> bool:
        return self._remote

    def _require_local(self, action: str) -> None:
        if self._remote:
            raise HostError(f"Cannot {action} in library collection {self._name!r}", entity=self._id)

    def _append_mode(self, name: str) -> str:
        mode = Mode(id=self._host._next_id("mode"), name=name)
        self._modes.append(mode)
        return mode.id

    async def rename_mode(self, mode_id: str, name: str) -> None:
        self._require_local("rename a mode")
        self._host._record_operation("rename_mode", self._id, {"mode_id": mode_id, "name": name})
        if not name.strip():
            raise HostError("Mode name must not be empty", entity=self._id)
        for index, mode in enumerate(self._modes):
            if mode.id == mode_id:
                self._modes[index] = Mode(id=mode_id, name=name)
                return
        raise HostError(f"Mode not found: {mode_id}", entity=self._id)

    async def add_mode(self, name: str) -> str:
        self._require_local("add a mode")
        self._host._record_operation("add_mode", self._id, {"name": name})
        limit = self._host.max_modes_per_collection
        if limit is not None and len(self._modes) >= limit:
            raise HostError(
                f"Collection {self._name!r} already has the maximum of {limit} mode(s)",
                entity=self._id,
            )
        if not name.strip():
            raise HostError("Mode name must not be empty", entity=self._id)
        if any(mode.name == name for mode in self._modes):
            raise HostError(f"Mode {name!r} already exists in {self._name!r}", entity=self._id)
        source_mode = self._modes[0].id if self._modes else None
        mode_id = self._append_mode(name)
        for variable_id in self._variable_ids:
            variable = self._host._variables[variable_id]
            variable._values[mode_id] = (
                variable._values[source_mode] if source_mode is not None else default_scalar(variable.resolved_type)
            )
        return mode_id

    async def remove(self) -> None:
        self._require_local("remove a collection")
        self._host._record_operation("remove_collection", self._id, {"name": self._name})
        for variable_id in list(self._variable_ids):
            self._host._variables.pop(variable_id, None)
        self._variable_ids.clear()
        self._host._collections.pop(self._id, None)


class MemoryVariable(Variable):
    def __init__(
        self,
        *,
        host: MemoryHost,
        id: str,
        name: str,
        collection: MemoryCollection,
        resolved_type: VariableType,
    ) -> None:
        self._host = host
        self._id = id
        self._name = name
        self._collection = collection
        self._resolved_type = resolved_type
        self._description = ""
        self._scopes: tuple[str, ...] = ("ALL_SCOPES",)
        self._values: dict[str, ModeValue] = {mode.id: default_scalar(resolved_type) for mode in collection.modes}

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def collection_id(self) -> str:
        return self._collection.id

    @property
    def resolved_type(self) -> VariableType:
        return self._resolved_type

    @property
    def description(self) -> str:
        return self._description

    @property
    def scopes(self) -> tuple[str, ...]:
        return self._scopes

    @property
    def values_by_mode(self) -> dict[str, ModeValue]:
        return dict(self._values)

    def _reaches(self, alias: VariableAlias) -> bool:
        seen: set[str] = set()
        pending = [alias.id]
        while pending:
            current = pending.pop()
            if current == self._id:
                return True
            if current in seen:
                continue
            seen.add(current)
            target = self._host._variables.get(current)
            if target is not None:
                pending.extend(value.id for value in target._values.values() if isinstance(value, VariableAlias))
        return False

    async def set_value(self, mode_id: str, value: ModeValue) -> None:
        self._host._record_operation("set_value", self._id, {"mode_id": mode_id, "value": repr(value)})
        if self._collection.remote:
            raise HostError(f"Cannot edit library variable {self._name!r}", entity=self._id)
        if mode_id not in self._values:
            raise HostError(f"Mode {mode_id} does not belong to {self._collection.name!r}", entity=self._id)
        if isinstance(value, VariableAlias):
            target = self._host._variables.get(value.id)
            if target is None:
                raise HostError(f"Alias target not found: {value.id}", entity=self._id)
            if target.resolved_type is not self._resolved_type:
                raise HostError(
                    f"Alias target {target.name!r} is {target.resolved_type}, expected {self._resolved_type}",
                    entity=self._id,
                )
            if self._reaches(value):
                raise HostError(f"Alias from {self._name!r} would create a cycle", entity=self._id)
        elif not conforms(value, self._resolved_type):
            raise HostError(f"Value {value!r} does not conform to {self._resolved_type}", entity=self._id)
        elif self._resolved_type is VariableType.FLOAT:
            value = float(value)
        self._values[mode_id] = value

    async def set_description(self, description: str) -> None:
        self._host._record_operation("set_description", self._id, {"description": description})
        self._description = description

    async def set_scopes(self, scopes: tuple[str, ...]) -> None:
        self._host._record_operation("set_scopes", self._id, {"scopes": ",".join(scopes)})
        self._scopes = tuple(scopes) or ("ALL_SCOPES",)

    async def remove(self) -> None:
        self._host._record_operation("remove_variable", self._id, {"name": self._name})
        if self._collection.remote:
            raise HostError(f"Cannot remove library variable {self._name!r}", entity=self._id)
        self._host._variables.pop(self._id, None)
        if self._id in self._collection._variable_ids:
            self._collection._variable_ids.remove(self._id)


class MemoryHost(Host):
    """Host that keeps the whole store in process memory.

    Ids are deterministic (``collection-1``, ``variable-2``, ...) and every
    mutation is appended to :attr:`operations`. ``fonts`` restricts which
    family/style pairs :meth:`load_font` accepts; ``None`` accepts all.
    """

    def __init__(
        self,
        *,
        max_modes_per_collection: int | None = None,
        fonts: Iterable[tuple[str, str]] | None = None,
    ) -> None:
        self.max_modes_per_collection = max_modes_per_collection
        self._fonts = None if fonts is None else set(fonts)
        self._counters: dict[str, int] = {}
        self._collections: dict[str, MemoryCollection] = {}
        self._variables: dict[str, MemoryVariable] = {}
        self._styles: dict[StyleKind, list[Style]] = {kind: [] for kind in StyleKind}
        self._images: dict[str, bytes] = {}
        self._operation_counter = 0
        self._operations: list[HostOperation] = []

    @property
    def operations(self) -> tuple[HostOperation, ...]:
        return tuple(self._operations)

    def _record_operation(self, name: str, target_id: str | None, payload: dict[str, str] | None = None) -> None:
        self._operation_counter += 1
        self._operations.append(
            HostOperation(
                sequence=self._operation_counter,
                name=name,
                target_id=target_id,
                payload=payload or {},
            )
        )

    def _next_id(self, prefix: str) -> str:
        self._counters[prefix] = self._counters.get(prefix, 0) + 1
        return f"{prefix}-{self._counters[prefix]}"

    async def __aenter__(self) -> MemoryHost:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        return None

    async def list_collections(self) -> list[VariableCollection]:
        return [collection for collection in self._collections.values() if not collection.remote]

    async def list_library_collections(self) -> list[VariableCollection]:
        return [collection for collection in self._collections.values() if collection.remote]

    async def get_collection(self, collection_id: str) -> VariableCollection | None:
        return self._collections.get(collection_id)

    def _new_collection(self, name: str, *, remote: bool) -> MemoryCollection:
        collection = MemoryCollection(host=self, id=self._next_id("collection"), name=name, remote=remote)
        self._collections[collection.id] = collection
        return collection

    async def create_collection(self, name: str) -> VariableCollection:
        self._record_operation("create_collection", None, {"name": name})
        if not name.strip():
            raise HostError("Collection name must not be empty")
        if any(existing.name == name and not existing.remote for existing in self._collections.values()):
            raise HostError(f"Collection {name!r} already exists", entity=name)
        collection = self._new_collection(name, remote=False)
        collection._append_mode("Mode 1")
        return collection

    async def get_variable(self, variable_id: str) -> Variable | None:
        return self._variables.get(variable_id)

    async def create_variable(
        self, name: str, collection: VariableCollection, variable_type: VariableType
    ) -> Variable:
        self._record_operation(
            "create_variable", None, {"name": name, "collection_id": collection.id, "type": variable_type.value}
        )
        owner = self._collections.get(collection.id)
        if owner is None:
            raise HostError(f"Collection not found: {collection.id}", entity=name)
        owner._require_local("create a variable")
        _validate_variable_name(name)
        if any(self._variables[variable_id].name == name for variable_id in owner._variable_ids):
            raise HostError(f"Variable {name!r} already exists in {owner.name!r}", entity=name)
        variable = MemoryVariable(
            host=self, id=self._next_id("variable"), name=name, collection=owner, resolved_type=variable_type
        )
        self._variables[variable.id] = variable
        owner._variable_ids.append(variable.id)
        return variable

    def add_library_collection(self, name: str, modes: Iterable[str] = ("Mode 1",)) -> MemoryCollection:
        """Register a remote collection, as a connected library would expose it."""
        collection = self._new_collection(name, remote=True)
        for mode_name in modes:
            collection._append_mode(mode_name)
        return collection

    def add_library_variable(
        self,
        collection: MemoryCollection,
        name: str,
        variable_type: VariableType,
        values: Iterable[ModeValue] = (),
    ) -> MemoryVariable:
        variable = MemoryVariable(
            host=self, id=self._next_id("variable"), name=name, collection=collection, resolved_type=variable_type
        )
        for mode, value in zip(collection.modes, values, strict=False):
            variable._values[mode.id] = value
        self._variables[variable.id] = variable
        collection._variable_ids.append(variable.id)
        return variable

    async def list_styles(self, kind: StyleKind) -> list[Style]:
        return list(self._styles[kind])

    async def create_style(self, style: Style) -> Style:
        self._record_operation("create_style", None, {"kind": style.kind.value, "name": style.name})
        if not style.name.strip():
            raise HostError("Style name must not be empty")
        created = dataclasses.replace(style, id=self._next_id("style"))
        self._styles[style.kind].append(created)
        return created

    def _style_index(self, style: Style) -> int:
        for index, existing in enumerate(self._styles[style.kind]):
            if existing.id == style.id:
                return index
        raise HostError(f"Style not found: {style.id or style.name}", entity=style.name)

    async def update_style(self, style: Style) -> Style:
        self._record_operation("update_style", style.id, {"kind": style.kind.value, "name": style.name})
        self._styles[style.kind][self._style_index(style)] = style
        return style

    async def remove_style(self, style: Style) -> None:
        self._record_operation("remove_style", style.id, {"kind": style.kind.value, "name": style.name})
        del self._styles[style.kind][self._style_index(style)]

    async def load_font(self, family: str, style: str) -> None:
        if self._fonts is not None and (family, style) not in self._fonts:
            raise HostError(f"Font not available: {family} {style}", entity=f"{family} {style}")

    async def create_image(self, data: bytes) -> str:
        image_hash = hashlib.sha1(data).hexdigest()
        self._record_operation("create_image", image_hash, {"size": str(len(data))})
        self._images[image_hash] = data
        return image_hash

    async def get_image_bytes(self, image_hash: str) -> bytes | None:
        return self._images.get(image_hash)
