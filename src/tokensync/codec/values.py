"""Value codec: single scalars between live and portable form.

Alias strings such as ``{colors.brand}`` are a wire detail only; they are
decoded here into ``(collection, path)`` lookups and never held as live
references.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias

from tokensync.codec.color import normalize_alpha, parse_color, to_all_formats, to_hex
from tokensync.contracts.document import ValueRecord
from tokensync.contracts.values import ModeValue, Rgba, Scalar, VariableAlias, VariableType, default_scalar

ALL_SCOPES = "ALL_SCOPES"

_EXPORT_TYPE_NAMES: dict[VariableType, str] = {
    VariableType.COLOR: "color",
    VariableType.FLOAT: "float",
    VariableType.STRING: "string",
    VariableType.BOOLEAN: "boolean",
}
_TYPES_BY_EXPORT_NAME = {name: variable_type for variable_type, name in _EXPORT_TYPE_NAMES.items()}


def to_export_type(variable_type: VariableType) -> str:
    return _EXPORT_TYPE_NAMES[variable_type]


def from_export_type(name: str) -> VariableType:
    return _TYPES_BY_EXPORT_NAME.get(name, VariableType.STRING)


def scopes_to_wire(scopes: tuple[str, ...] | list[str]) -> list[str]:
    if not scopes or ALL_SCOPES in scopes:
        return [ALL_SCOPES]
    return list(scopes)


def scopes_from_wire(scopes: list[str]) -> tuple[str, ...]:
    if not scopes or ALL_SCOPES in scopes:
        return (ALL_SCOPES,)
    return tuple(scopes)


def is_alias_ref(raw: Any) -> bool:
    return isinstance(raw, str) and raw.startswith("{")


def alias_path_from_ref(ref: str) -> str:
    return ref.strip()[1:-1].replace(".", "/")


def alias_ref_from_parts(parts: list[str]) -> str:
    return "{" + ".".join(parts) + "}"


def encode_scalar(value: Scalar) -> Any:
    if isinstance(value, Rgba):
        return to_all_formats(value)
    return value


def decode_scalar(raw: Any, variable_type: VariableType) -> Scalar:
    """Coerce a portable value into a scalar that conforms to *variable_type*."""
    match variable_type:
        case VariableType.COLOR:
            return normalize_alpha(parse_color(raw))
        case VariableType.FLOAT:
            if isinstance(raw, bool):
                return 1.0 if raw else 0.0
            if isinstance(raw, int | float):
                return float(raw)
            try:
                return float(str(raw))
            except ValueError:
                return 0.0
        case VariableType.STRING:
            if isinstance(raw, str):
                return raw
            if isinstance(raw, bool):
                return "true" if raw else "false"
            return "" if raw is None else str(raw)
        case VariableType.BOOLEAN:
            if isinstance(raw, bool):
                return raw
            if isinstance(raw, str):
                return raw.strip().lower() == "true"
            return bool(raw)


def snapshot_scalar(value: Scalar) -> Any:
    """Snapshot form of a raw value; colors are captured as hex."""
    if isinstance(value, Rgba):
        return to_hex(value)
    return value


@dataclass(frozen=True)
class LiteralLeaf:
    value: Scalar


@dataclass(frozen=True)
class AliasLeaf:
    collection: str
    path: str
    fallback: Scalar


Leaf: TypeAlias = LiteralLeaf | AliasLeaf


def decode_leaf(record: ValueRecord, variable_type: VariableType, *, default_collection: str) -> Leaf:
    """Decode a value record for a variable of *variable_type*.

    Alias leaves carry a concrete fallback: the record's ``$localValue`` when
    present, otherwise the type's default. Library aliases target the
    ``$libraryRef`` collection, which keeps the host name.
    """
    if record.is_alias:
        fallback = (
            decode_scalar(record.local_value, variable_type)
            if record.local_value is not None
            else default_scalar(variable_type)
        )
        return AliasLeaf(
            collection=record.library_ref or record.collection_name or default_collection,
            path=alias_path_from_ref(record.value),
            fallback=fallback,
        )
    return LiteralLeaf(decode_scalar(record.value, variable_type))


def format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def display_value(value: ModeValue | None) -> str:
    """Human-readable rendering used in diffs."""
    if value is None:
        return "undefined"
    if isinstance(value, VariableAlias):
        return "{alias}"
    if isinstance(value, Rgba):
        return to_hex(value)
    return format_scalar(value)


def display_record_value(record: ValueRecord) -> str:
    if record.is_alias:
        return str(record.value)
    if record.type == "color":
        return to_hex(parse_color(record.value))
    return format_scalar(record.value)
