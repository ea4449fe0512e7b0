"""Style processors for the four style kinds.

Export turns host styles into wire records, resolving bound variables into
``{id, name, collection}`` bindings. Import matches styles by name within their
kind, updates in place or creates, and wires bindings against a freshly
rebuilt entity store.
"""

from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Awaitable
from dataclasses import dataclass, replace

from tokensync.codec.color import parse_color, to_all_formats
from tokensync.contracts.document import (
    BindingRecord,
    ColorStyleRecord,
    DimensionRecord,
    EffectRecord,
    EffectStyleRecord,
    GradientPaintRecord,
    GradientStopRecord,
    GridStyleRecord,
    ImagePaintRecord,
    LayoutGridRecord,
    OffsetRecord,
    SolidPaintRecord,
    StylesBundle,
    TextStyleRecord,
)
from tokensync.contracts.exceptions import HostError
from tokensync.contracts.host import Host
from tokensync.contracts.styles import (
    IDENTITY_TRANSFORM,
    ColorStop,
    Dimension,
    Effect,
    EffectStyle,
    GradientKind,
    GradientPaint,
    GridStyle,
    ImagePaint,
    LayoutGrid,
    Paint,
    PaintStyle,
    SolidPaint,
    Style,
    StyleKind,
    TextStyle,
    Transform,
    Vector,
)
from tokensync.contracts.sync import StyleSelection
from tokensync.contracts.values import Rgba, VariableAlias
from tokensync.engine.store import EntityStore

_LOG = logging.getLogger(__name__)

_SHADOW_TYPES = frozenset({"DROP_SHADOW", "INNER_SHADOW"})
_SHADOW_COLOR = Rgba(0.0, 0.0, 0.0, 0.25)
_GRID_COLOR = Rgba(1.0, 0.0, 0.0, 0.1)


@dataclass
class StyleImportStats:
    created: int = 0
    updated: int = 0
    failed: int = 0


class StyleSerializer:
    """Exports host styles as wire records."""

    def __init__(self, host: Host) -> None:
        self._host = host

    async def export(self, selection: StyleSelection | None = None, *, include_images: bool = False) -> StylesBundle:
        selection = selection or StyleSelection()
        bundle: dict[str, object] = {}
        if selection.includes(StyleKind.COLOR):
            bundle["color_styles"] = [
                await self._color_record(style, include_images)
                for style in await self._host.list_styles(StyleKind.COLOR)
                if isinstance(style, PaintStyle)
            ]
        if selection.includes(StyleKind.TEXT):
            bundle["text_styles"] = [
                await self._text_record(style)
                for style in await self._host.list_styles(StyleKind.TEXT)
                if isinstance(style, TextStyle)
            ]
        if selection.includes(StyleKind.EFFECT):
            bundle["effect_styles"] = [
                await self._effect_style_record(style)
                for style in await self._host.list_styles(StyleKind.EFFECT)
                if isinstance(style, EffectStyle)
            ]
        if selection.includes(StyleKind.GRID):
            bundle["grid_styles"] = [
                await self._grid_style_record(style)
                for style in await self._host.list_styles(StyleKind.GRID)
                if isinstance(style, GridStyle)
            ]
        return StylesBundle(**bundle)

    async def _binding(self, alias: VariableAlias) -> BindingRecord | None:
        variable = await self._host.get_variable(alias.id)
        if variable is None:
            return None
        collection = await self._host.get_collection(variable.collection_id)
        return BindingRecord(id=variable.id, name=variable.name, collection=collection.name if collection else None)

    async def _bindings(self, bound: dict[str, VariableAlias]) -> dict[str, BindingRecord] | None:
        records: dict[str, BindingRecord] = {}
        for field_name, alias in bound.items():
            record = await self._binding(alias)
            if record is not None:
                records[field_name] = record
        return records or None

    async def _paint_record(
        self, paint: Paint, include_images: bool
    ) -> SolidPaintRecord | GradientPaintRecord | ImagePaintRecord:
        if isinstance(paint, SolidPaint):
            return SolidPaintRecord(color=to_all_formats(paint.color), opacity=paint.opacity)
        if isinstance(paint, GradientPaint):
            return GradientPaintRecord(
                type=paint.kind.value,
                gradient_stops=[
                    GradientStopRecord(position=stop.position, color=to_all_formats(stop.color))
                    for stop in paint.stops
                ],
                gradient_transform=[list(row) for row in paint.transform],
                opacity=paint.opacity,
            )
        image_base64 = None
        if include_images:
            data = await self._host.get_image_bytes(paint.image_hash)
            if data is None:
                _LOG.warning("Image %s is not available; exporting its hash only", paint.image_hash)
            else:
                image_base64 = base64.b64encode(data).decode("ascii")
        return ImagePaintRecord(
            scale_mode=paint.scale_mode,
            image_hash=paint.image_hash,
            image_base64=image_base64,
            opacity=paint.opacity,
            rotation=paint.rotation,
            filters=dict(paint.filters) or None,
        )

    async def _color_record(self, style: PaintStyle, include_images: bool) -> ColorStyleRecord:
        paints = [await self._paint_record(paint, include_images) for paint in style.paints]
        first_solid = next((paint for paint in style.paints if isinstance(paint, SolidPaint)), None)
        return ColorStyleRecord(
            name=style.name,
            paints=paints,
            color=to_all_formats(first_solid.color) if first_solid else None,
            opacity=first_solid.opacity if first_solid else None,
            description=style.description or None,
            bound_variables=await self._bindings(first_solid.bound_variables) if first_solid else None,
        )

    async def _text_record(self, style: TextStyle) -> TextStyleRecord:
        return TextStyleRecord(
            name=style.name,
            font_family=style.font_family,
            font_style=style.font_style,
            font_size=style.font_size,
            line_height=DimensionRecord(unit=style.line_height.unit, value=style.line_height.value),
            letter_spacing=DimensionRecord(unit=style.letter_spacing.unit, value=style.letter_spacing.value),
            text_case=style.text_case,
            text_decoration=style.text_decoration,
            description=style.description or None,
            bound_variables=await self._bindings(style.bound_variables),
        )

    async def _effect_style_record(self, style: EffectStyle) -> EffectStyleRecord:
        effects = []
        for effect in style.effects:
            effects.append(
                EffectRecord(
                    type=effect.type,
                    visible=effect.visible,
                    radius=effect.radius,
                    spread=effect.spread,
                    offset=OffsetRecord(x=effect.offset.x, y=effect.offset.y) if effect.offset else None,
                    color=to_all_formats(effect.color) if effect.color else None,
                    blend_mode=effect.blend_mode,
                    show_shadow_behind_node=effect.show_shadow_behind_node,
                    bound_variables=await self._bindings(effect.bound_variables),
                )
            )
        return EffectStyleRecord(name=style.name, description=style.description or None, effects=effects)

    async def _grid_style_record(self, style: GridStyle) -> GridStyleRecord:
        grids = []
        for grid in style.layout_grids:
            grids.append(
                LayoutGridRecord(
                    pattern=grid.pattern,
                    visible=grid.visible,
                    color=to_all_formats(grid.color),
                    section_size=grid.section_size,
                    alignment=grid.alignment,
                    gutter_size=grid.gutter_size,
                    count=grid.count,
                    offset=grid.offset,
                    bound_variables=await self._bindings(grid.bound_variables),
                )
            )
        return GridStyleRecord(name=style.name, description=style.description or None, layout_grids=grids)


def _transform(rows: list[list[float]] | None) -> Transform:
    if not rows or len(rows) != 2 or any(len(row) != 3 for row in rows):
        return IDENTITY_TRANSFORM
    first, second = rows
    return (
        (float(first[0]), float(first[1]), float(first[2])),
        (float(second[0]), float(second[1]), float(second[2])),
    )


def _dimension(record: DimensionRecord | None, default: Dimension) -> Dimension:
    if record is None:
        return default
    return Dimension(unit=record.unit, value=record.value)


class StyleReconciler:
    """Imports style records, matching existing styles by name within each kind."""

    def __init__(self, host: Host) -> None:
        self._host = host

    async def import_styles(self, bundle: StylesBundle, store: EntityStore) -> StyleImportStats:
        stats = StyleImportStats()
        for record in bundle.color_styles or []:
            await self._upsert(StyleKind.COLOR, record.name, stats, self._color_style(record, store))
        for record in bundle.text_styles or []:
            await self._upsert_text(record, store, stats)
        for record in bundle.effect_styles or []:
            await self._upsert(StyleKind.EFFECT, record.name, stats, self._effect_style(record, store))
        for record in bundle.grid_styles or []:
            await self._upsert(StyleKind.GRID, record.name, stats, self._grid_style(record, store))
        _LOG.info(
            "Styles imported: %d created, %d updated, %d failed", stats.created, stats.updated, stats.failed
        )
        return stats

    async def _existing(self, kind: StyleKind, name: str) -> Style | None:
        for style in await self._host.list_styles(kind):
            if style.name == name:
                return style
        return None

    async def _upsert(self, kind: StyleKind, name: str, stats: StyleImportStats, build: Awaitable[Style]) -> None:
        try:
            style = await build
            existing = await self._existing(kind, name)
            if existing is not None:
                await self._host.update_style(replace(style, id=existing.id))
                stats.updated += 1
            else:
                await self._host.create_style(style)
                stats.created += 1
        except HostError as exc:
            _LOG.warning("Failed to import %s style %r: %s", kind.value, name, exc)
            stats.failed += 1

    async def _upsert_text(self, record: TextStyleRecord, store: EntityStore, stats: StyleImportStats) -> None:
        try:
            await self._host.load_font(record.font_family, record.font_style)
        except HostError as exc:
            _LOG.warning(
                "Font %s %s unavailable for text style %r; typography not applied: %s",
                record.font_family,
                record.font_style,
                record.name,
                exc,
            )
            await self._upsert(StyleKind.TEXT, record.name, stats, self._text_style_without_font(record))
            return
        await self._upsert(StyleKind.TEXT, record.name, stats, self._text_style(record, store))

    async def _text_style_without_font(self, record: TextStyleRecord) -> TextStyle:
        """Keep the existing typography, or the defaults for a new style."""
        existing = await self._existing(StyleKind.TEXT, record.name)
        base = existing if isinstance(existing, TextStyle) else TextStyle(name=record.name)
        return replace(base, description=record.description or base.description)

    async def _resolve_bindings(
        self, bindings: dict[str, BindingRecord] | None, store: EntityStore
    ) -> dict[str, VariableAlias]:
        resolved: dict[str, VariableAlias] = {}
        for field_name, binding in (bindings or {}).items():
            variable = None
            if binding.collection and binding.name:
                variable = store.variable(binding.collection, binding.name)
            if variable is None and binding.id:
                candidate = await self._host.get_variable(binding.id)
                if candidate is not None and (binding.name is None or candidate.name == binding.name):
                    variable = candidate
            if variable is None:
                _LOG.debug("Binding %s -> %s/%s not found; skipped", field_name, binding.collection, binding.name)
                continue
            resolved[field_name] = VariableAlias(variable.id)
        return resolved

    async def _image_hash(self, record: ImagePaintRecord) -> str | None:
        if record.image_base64:
            try:
                data = base64.b64decode(record.image_base64, validate=True)
            except (binascii.Error, ValueError) as exc:
                _LOG.warning("Embedded image data is not valid base64: %s", exc)
            else:
                return await self._host.create_image(data)
        if record.image_hash and await self._host.get_image_bytes(record.image_hash) is not None:
            return record.image_hash
        return None

    async def _color_style(self, record: ColorStyleRecord, store: EntityStore) -> PaintStyle:
        paints: list[Paint] = []
        bindings = await self._resolve_bindings(record.bound_variables, store)
        solid_bound = False
        for paint in record.paints:
            if isinstance(paint, SolidPaintRecord):
                opacity = paint.opacity if paint.opacity is not None else 1.0
                bound = bindings if not solid_bound else {}
                solid_bound = True
                paints.append(SolidPaint(color=parse_color(paint.color), opacity=opacity, bound_variables=bound))
            elif isinstance(paint, GradientPaintRecord):
                paints.append(
                    GradientPaint(
                        kind=GradientKind(paint.type),
                        stops=tuple(
                            ColorStop(position=stop.position, color=parse_color(stop.color))
                            for stop in paint.gradient_stops
                        ),
                        transform=_transform(paint.gradient_transform),
                        opacity=paint.opacity if paint.opacity is not None else 1.0,
                    )
                )
            else:
                image_hash = await self._image_hash(paint)
                if image_hash is None:
                    _LOG.warning("Image paint in style %r has no usable image; paint dropped", record.name)
                    continue
                paints.append(
                    ImagePaint(
                        image_hash=image_hash,
                        scale_mode=paint.scale_mode,
                        opacity=paint.opacity if paint.opacity is not None else 1.0,
                        rotation=paint.rotation,
                        filters=dict(paint.filters or {}),
                    )
                )
        if not record.paints and record.color is not None:
            opacity = record.opacity if record.opacity is not None else 1.0
            paints.append(SolidPaint(color=parse_color(record.color), opacity=opacity, bound_variables=bindings))
        return PaintStyle(name=record.name, paints=tuple(paints), description=record.description or "")

    async def _text_style(self, record: TextStyleRecord, store: EntityStore) -> TextStyle:
        defaults = TextStyle(name=record.name)
        return TextStyle(
            name=record.name,
            font_family=record.font_family,
            font_style=record.font_style,
            font_size=record.font_size,
            line_height=_dimension(record.line_height, defaults.line_height),
            letter_spacing=_dimension(record.letter_spacing, defaults.letter_spacing),
            text_case=record.text_case or defaults.text_case,
            text_decoration=record.text_decoration or defaults.text_decoration,
            description=record.description or "",
            bound_variables=await self._resolve_bindings(record.bound_variables, store),
        )

    async def _effect_style(self, record: EffectStyleRecord, store: EntityStore) -> EffectStyle:
        effects = []
        for effect in record.effects:
            shadow = effect.type in _SHADOW_TYPES
            color = parse_color(effect.color) if effect.color is not None else (_SHADOW_COLOR if shadow else None)
            offset = None
            if effect.offset is not None:
                offset = Vector(effect.offset.x, effect.offset.y)
            elif shadow:
                offset = Vector(0.0, 0.0)
            effects.append(
                Effect(
                    type=effect.type,
                    visible=effect.visible,
                    radius=effect.radius if effect.radius is not None else 0.0,
                    spread=effect.spread if effect.spread is not None else (0.0 if shadow else None),
                    offset=offset,
                    color=color,
                    blend_mode=effect.blend_mode or ("NORMAL" if shadow else None),
                    show_shadow_behind_node=effect.show_shadow_behind_node,
                    bound_variables=await self._resolve_bindings(effect.bound_variables, store),
                )
            )
        return EffectStyle(name=record.name, effects=tuple(effects), description=record.description or "")

    async def _grid_style(self, record: GridStyleRecord, store: EntityStore) -> GridStyle:
        grids = []
        for grid in record.layout_grids:
            color = parse_color(grid.color) if grid.color is not None else _GRID_COLOR
            bound = await self._resolve_bindings(grid.bound_variables, store)
            if grid.pattern == "GRID":
                grids.append(
                    LayoutGrid(
                        pattern="GRID",
                        visible=grid.visible,
                        color=color,
                        section_size=grid.section_size if grid.section_size is not None else 10.0,
                        bound_variables=bound,
                    )
                )
                continue
            alignment = grid.alignment or "STRETCH"
            section_size = grid.section_size
            if section_size is None and alignment == "CENTER":
                section_size = 100.0
            offset = grid.offset
            if offset is None and alignment != "CENTER":
                offset = 0.0
            grids.append(
                LayoutGrid(
                    pattern=grid.pattern,
                    visible=grid.visible,
                    color=color,
                    section_size=section_size,
                    alignment=alignment,
                    gutter_size=grid.gutter_size if grid.gutter_size is not None else 10.0,
                    count=grid.count if grid.count is not None else 5,
                    offset=offset,
                    bound_variables=bound,
                )
            )
        return GridStyle(name=record.name, layout_grids=tuple(grids), description=record.description or "")
