"""Portable document contracts.

The wire form is a JSON array whose entries are either a single collection
export ``{name: {"modes": {mode: tree}, "$originalName"?: ...}}`` or a single
``{"_styles": {...}}`` entry. Trees nest groups by path segment; their leaves
are value records.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from tokensync.contracts.exceptions import DocumentLoadError

STYLES_KEY = "_styles"
LEAF_MARKER = "$type"


class WireModel(BaseModel):
    """Base for models whose field names differ from their JSON keys."""

    model_config = {"populate_by_name": True}

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ValueRecord(WireModel):
    type: Literal["color", "float", "string", "boolean"] = Field(alias="$type")
    value: Any = Field(alias="$value")
    scopes: list[str] = Field(default_factory=lambda: ["ALL_SCOPES"], alias="$scopes")
    description: str | None = Field(default=None, alias="$description")
    collection_name: str | None = Field(default=None, alias="$collectionName")
    library_ref: str | None = Field(default=None, alias="$libraryRef")
    local_value: Any = Field(default=None, alias="$localValue")
    original_name: str | None = Field(default=None, alias="$originalName")

    model_config = {"populate_by_name": True, "frozen": True}

    @property
    def is_alias(self) -> bool:
        return isinstance(self.value, str) and self.value.startswith("{")


def _validate_tree(node: Any, path: str) -> dict[str, Any]:
    if not isinstance(node, dict):
        raise ValueError(f"group at {path or '<root>'} must be an object")
    validated: dict[str, Any] = {}
    for key, child in node.items():
        child_path = f"{path}/{key}" if path else key
        if isinstance(child, ValueRecord):
            validated[key] = child
        elif isinstance(child, dict) and LEAF_MARKER in child:
            try:
                validated[key] = ValueRecord.model_validate(child)
            except ValidationError as exc:
                raise ValueError(f"invalid value record at {child_path}: {exc}") from exc
        else:
            validated[key] = _validate_tree(child, child_path)
    return validated


def flatten_tree(tree: dict[str, Any], prefix: str = "") -> list[tuple[str, ValueRecord]]:
    """Pairs of ``(path, record)`` in tree order, paths joined with ``/``."""
    pairs: list[tuple[str, ValueRecord]] = []
    for key, child in tree.items():
        path = f"{prefix}/{key}" if prefix else key
        if isinstance(child, ValueRecord):
            pairs.append((path, child))
        else:
            pairs.extend(flatten_tree(child, path))
    return pairs


def value_at_path(tree: dict[str, Any], path: str) -> ValueRecord | None:
    current: Any = tree
    for part in path.split("/"):
        if not isinstance(current, dict):
            return None
        current = current.get(part)
    return current if isinstance(current, ValueRecord) else None


def insert_at_path(tree: dict[str, Any], parts: list[str], record: ValueRecord) -> None:
    current = tree
    for part in parts[:-1]:
        child = current.get(part)
        if not isinstance(child, dict):
            child = {}
            current[part] = child
        current = child
    current[parts[-1]] = record


def count_tree_variables(tree: dict[str, Any]) -> int:
    return len(flatten_tree(tree))


def tree_to_wire(tree: dict[str, Any]) -> dict[str, Any]:
    return {
        key: child.to_wire() if isinstance(child, ValueRecord) else tree_to_wire(child) for key, child in tree.items()
    }


class CollectionEntry(WireModel):
    name: str
    modes: dict[str, dict[str, Any]] = Field(default_factory=dict)
    original_name: str | None = Field(default=None, alias="$originalName")
    original_mode_names: dict[str, str] | None = Field(default=None, alias="$originalModeNames")

    @field_validator("modes", mode="before")
    @classmethod
    def validate_modes(cls, value: Any) -> dict[str, dict[str, Any]]:
        if not isinstance(value, dict):
            raise ValueError("modes must be an object keyed by mode name")
        return {mode_name: _validate_tree(tree, "") for mode_name, tree in value.items()}

    @property
    def host_name(self) -> str:
        """Collection name on the host side, restored from ``$originalName``."""
        return self.original_name or self.name

    def host_mode_name(self, mode_name: str) -> str:
        if self.original_mode_names:
            return self.original_mode_names.get(mode_name, mode_name)
        return mode_name

    @property
    def mode_names(self) -> list[str]:
        return list(self.modes)

    @property
    def template(self) -> dict[str, Any]:
        """Tree of the first mode; all modes share its path set."""
        if not self.modes:
            return {}
        return next(iter(self.modes.values()))

    def iter_paths(self) -> Iterator[tuple[str, ValueRecord]]:
        yield from flatten_tree(self.template)

    def to_wire(self) -> dict[str, Any]:
        body: dict[str, Any] = {"modes": {mode: tree_to_wire(tree) for mode, tree in self.modes.items()}}
        if self.original_name is not None:
            body["$originalName"] = self.original_name
        if self.original_mode_names:
            body["$originalModeNames"] = dict(self.original_mode_names)
        return {self.name: body}


class BindingRecord(WireModel):
    id: str | None = None
    name: str | None = None
    collection: str | None = None


class SolidPaintRecord(WireModel):
    type: Literal["SOLID"] = "SOLID"
    color: Any
    opacity: float | None = None


class GradientStopRecord(WireModel):
    position: float
    color: Any


class GradientPaintRecord(WireModel):
    type: Literal["GRADIENT_LINEAR", "GRADIENT_RADIAL", "GRADIENT_ANGULAR", "GRADIENT_DIAMOND"]
    gradient_stops: list[GradientStopRecord] = Field(default_factory=list, alias="gradientStops")
    gradient_transform: list[list[float]] | None = Field(default=None, alias="gradientTransform")
    opacity: float | None = None


class ImagePaintRecord(WireModel):
    type: Literal["IMAGE"] = "IMAGE"
    scale_mode: str = Field(default="FILL", alias="scaleMode")
    image_hash: str | None = Field(default=None, alias="imageHash")
    image_base64: str | None = Field(default=None, alias="imageBase64")
    opacity: float | None = None
    rotation: float | None = None
    filters: dict[str, float] | None = None


PaintRecord = Annotated[SolidPaintRecord | GradientPaintRecord | ImagePaintRecord, Field(discriminator="type")]


class ColorStyleRecord(WireModel):
    name: str
    paints: list[PaintRecord] = Field(default_factory=list)
    color: Any = None
    opacity: float | None = None
    description: str | None = None
    bound_variables: dict[str, BindingRecord] | None = Field(default=None, alias="boundVariables")


class DimensionRecord(WireModel):
    unit: str
    value: float | None = None


class TextStyleRecord(WireModel):
    name: str
    font_family: str = Field(alias="fontFamily")
    font_style: str = Field(alias="fontStyle")
    font_size: float = Field(default=12.0, alias="fontSize")
    line_height: DimensionRecord | None = Field(default=None, alias="lineHeight")
    letter_spacing: DimensionRecord | None = Field(default=None, alias="letterSpacing")
    text_case: str | None = Field(default=None, alias="textCase")
    text_decoration: str | None = Field(default=None, alias="textDecoration")
    description: str | None = None
    bound_variables: dict[str, BindingRecord] | None = Field(default=None, alias="boundVariables")


class OffsetRecord(WireModel):
    x: float = 0.0
    y: float = 0.0


class EffectRecord(WireModel):
    type: str
    visible: bool = True
    radius: float | None = None
    spread: float | None = None
    offset: OffsetRecord | None = None
    color: Any = None
    blend_mode: str | None = Field(default=None, alias="blendMode")
    show_shadow_behind_node: bool | None = Field(default=None, alias="showShadowBehindNode")
    bound_variables: dict[str, BindingRecord] | None = Field(default=None, alias="boundVariables")


class EffectStyleRecord(WireModel):
    name: str
    description: str | None = None
    effects: list[EffectRecord] = Field(default_factory=list)


class LayoutGridRecord(WireModel):
    pattern: str
    visible: bool = True
    color: Any = None
    section_size: float | None = Field(default=None, alias="sectionSize")
    alignment: str | None = None
    gutter_size: float | None = Field(default=None, alias="gutterSize")
    count: int | None = None
    offset: float | None = None
    bound_variables: dict[str, BindingRecord] | None = Field(default=None, alias="boundVariables")


class GridStyleRecord(WireModel):
    name: str
    description: str | None = None
    layout_grids: list[LayoutGridRecord] = Field(default_factory=list, alias="layoutGrids")


class StylesBundle(WireModel):
    color_styles: list[ColorStyleRecord] | None = Field(default=None, alias="colorStyles")
    text_styles: list[TextStyleRecord] | None = Field(default=None, alias="textStyles")
    effect_styles: list[EffectStyleRecord] | None = Field(default=None, alias="effectStyles")
    grid_styles: list[GridStyleRecord] | None = Field(default=None, alias="gridStyles")

    @property
    def is_empty(self) -> bool:
        return not (self.color_styles or self.text_styles or self.effect_styles or self.grid_styles)

    def count(self) -> int:
        return sum(
            len(records or [])
            for records in (self.color_styles, self.text_styles, self.effect_styles, self.grid_styles)
        )


class Document(BaseModel):
    collections: list[CollectionEntry] = Field(default_factory=list)
    styles: StylesBundle | None = None

    @classmethod
    def from_wire(cls, payload: Any) -> Document:
        if not isinstance(payload, list):
            raise DocumentLoadError("document root must be a JSON array")

        collections: list[CollectionEntry] = []
        styles: StylesBundle | None = None
        for index, entry in enumerate(payload):
            if not isinstance(entry, dict) or len(entry) != 1:
                raise DocumentLoadError(f"document entry {index} must be an object with exactly one key")
            name, body = next(iter(entry.items()))
            try:
                if name == STYLES_KEY:
                    styles = StylesBundle.model_validate(body)
                    continue
                if not isinstance(body, dict):
                    raise DocumentLoadError(f"collection {name!r} must be an object")
                collections.append(CollectionEntry.model_validate({"name": name, **body}))
            except ValidationError as exc:
                raise DocumentLoadError(f"invalid document entry {name!r}: {exc}") from exc
        return cls(collections=collections, styles=styles)

    def to_wire(self) -> list[dict[str, Any]]:
        payload = [entry.to_wire() for entry in self.collections]
        if self.styles is not None and not self.styles.is_empty:
            payload.append({STYLES_KEY: self.styles.to_wire()})
        return payload

    def collection(self, name: str) -> CollectionEntry | None:
        for entry in self.collections:
            if entry.name == name or entry.host_name == name:
                return entry
        return None
