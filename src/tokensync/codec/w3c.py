"""Adapter for the W3C design-token format.

Each top-level group becomes one collection with a single ``Default`` mode.
Styles travel in ``$extensions["com.figma"].styles`` because the token format
has no notion of them.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from tokensync.codec.color import parse_color, to_all_formats
from tokensync.codec.values import ALL_SCOPES
from tokensync.contracts.document import CollectionEntry, Document, StylesBundle, ValueRecord
from tokensync.contracts.exceptions import DocumentLoadError

EXTENSIONS_KEY = "$extensions"
VENDOR_KEY = "com.figma"
DEFAULT_MODE = "Default"

_TO_W3C_TYPE = {"color": "color", "float": "number", "string": "string", "boolean": "boolean"}
_FROM_W3C_TYPE = {
    "color": "color",
    "number": "float",
    "dimension": "float",
    "string": "string",
    "boolean": "boolean",
    "fontFamily": "string",
    "fontWeight": "float",
    "duration": "string",
    "cubicBezier": "string",
}


def _is_token(node: Any) -> bool:
    return isinstance(node, dict) and "$value" in node


def is_w3c_payload(payload: Any) -> bool:
    """A mapping whose top-level groups, or their direct children, hold tokens."""
    if not isinstance(payload, dict):
        return False
    for value in payload.values():
        if not isinstance(value, dict):
            continue
        if "$value" in value and "$type" in value:
            return True
        if any(_is_token(child) for child in value.values()):
            return True
    return False


def _split_reference(ref: str) -> tuple[str | None, str]:
    """Split ``{group.path}`` into its top-level group and the in-collection reference."""
    head, _, rest = ref.strip()[1:-1].partition(".")
    if not rest:
        return None, ref
    return head, "{" + rest + "}"


def _token_to_record(token: dict[str, Any]) -> ValueRecord:
    value_type = _FROM_W3C_TYPE.get(str(token.get("$type", "")), "string")
    raw = token["$value"]
    value: Any
    collection_name: str | None = None
    if isinstance(raw, str) and raw.startswith("{"):
        collection_name, value = _split_reference(raw)
    elif value_type == "color" and isinstance(raw, str):
        value = to_all_formats(parse_color(raw))
    elif isinstance(raw, str | int | float | bool):
        value = raw
    else:
        value = json.dumps(raw)
    vendor = token.get(EXTENSIONS_KEY, {}).get(VENDOR_KEY, {})
    return ValueRecord(
        type=value_type,
        value=value,
        scopes=vendor.get("scopes") or [ALL_SCOPES],
        description=token.get("$description"),
        collection_name=collection_name,
    )


def _group_to_tree(group: dict[str, Any]) -> dict[str, Any]:
    tree: dict[str, Any] = {}
    for key, value in group.items():
        if key.startswith("$"):
            continue
        if _is_token(value):
            tree[key] = _token_to_record(value)
        elif isinstance(value, dict):
            tree[key] = _group_to_tree(value)
    return tree


def w3c_to_document(payload: dict[str, Any]) -> Document:
    collections = [
        CollectionEntry(name=name, modes={DEFAULT_MODE: _group_to_tree(group)})
        for name, group in payload.items()
        if not name.startswith("$") and isinstance(group, dict)
    ]
    styles: StylesBundle | None = None
    raw_styles = payload.get(EXTENSIONS_KEY, {}).get(VENDOR_KEY, {}).get("styles")
    if raw_styles:
        try:
            styles = StylesBundle.model_validate(raw_styles)
        except ValidationError as exc:
            raise DocumentLoadError(f"invalid styles extension: {exc}") from exc
    return Document(collections=collections, styles=styles)


def _record_to_token(record: ValueRecord, collection: str) -> dict[str, Any]:
    token: dict[str, Any] = {"$type": _TO_W3C_TYPE.get(record.type, "string")}
    if record.is_alias:
        token["$value"] = "{" + (record.collection_name or collection) + "." + str(record.value).strip()[1:-1] + "}"
    elif record.type == "color" and isinstance(record.value, dict) and "hex" in record.value:
        token["$value"] = record.value["hex"]
    else:
        token["$value"] = record.value
    if record.description:
        token["$description"] = record.description
    if record.scopes and ALL_SCOPES not in record.scopes:
        token[EXTENSIONS_KEY] = {VENDOR_KEY: {"scopes": list(record.scopes)}}
    return token


def _tree_to_group(tree: dict[str, Any], collection: str) -> dict[str, Any]:
    return {
        key: _record_to_token(child, collection)
        if isinstance(child, ValueRecord)
        else _tree_to_group(child, collection)
        for key, child in tree.items()
    }


def document_to_w3c(document: Document) -> dict[str, Any]:
    """Render a document as W3C tokens; several modes become mode subgroups."""
    payload: dict[str, Any] = {}
    for entry in document.collections:
        group: dict[str, Any] = {}
        if entry.original_name and entry.original_name != entry.name:
            group["$description"] = f"Collection: {entry.original_name}"
        if len(entry.modes) == 1:
            group.update(_tree_to_group(entry.template, entry.name))
        else:
            for mode_name, tree in entry.modes.items():
                group[mode_name] = _tree_to_group(tree, entry.name)
        payload[entry.name] = group
    if document.styles is not None and not document.styles.is_empty:
        payload[EXTENSIONS_KEY] = {VENDOR_KEY: {"styles": document.styles.to_wire()}}
    return payload
