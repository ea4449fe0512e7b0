"""Host-side style definitions.

Every style kind is an explicit variant; fields pinned to a variable live in
``bound_variables`` keyed by the bindable field name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar, TypeAlias

from tokensync.contracts.values import Rgba, VariableAlias

Transform: TypeAlias = tuple[tuple[float, float, float], tuple[float, float, float]]
IDENTITY_TRANSFORM: Transform = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0))


class StyleKind(StrEnum):
    COLOR = "color"
    TEXT = "text"
    EFFECT = "effect"
    GRID = "grid"


class GradientKind(StrEnum):
    LINEAR = "GRADIENT_LINEAR"
    RADIAL = "GRADIENT_RADIAL"
    ANGULAR = "GRADIENT_ANGULAR"
    DIAMOND = "GRADIENT_DIAMOND"


@dataclass(frozen=True)
class SolidPaint:
    color: Rgba
    opacity: float = 1.0
    bound_variables: dict[str, VariableAlias] = field(default_factory=dict)


@dataclass(frozen=True)
class ColorStop:
    position: float
    color: Rgba


@dataclass(frozen=True)
class GradientPaint:
    kind: GradientKind
    stops: tuple[ColorStop, ...]
    transform: Transform = IDENTITY_TRANSFORM
    opacity: float = 1.0


@dataclass(frozen=True)
class ImagePaint:
    image_hash: str
    scale_mode: str = "FILL"
    opacity: float = 1.0
    rotation: float | None = None
    filters: dict[str, float] = field(default_factory=dict)


Paint: TypeAlias = SolidPaint | GradientPaint | ImagePaint


@dataclass(frozen=True)
class Dimension:
    """Typographic measure such as a line height; ``AUTO`` carries no value."""

    unit: str
    value: float | None = None


@dataclass(frozen=True)
class Vector:
    x: float
    y: float


@dataclass(frozen=True)
class Effect:
    type: str
    visible: bool = True
    radius: float | None = None
    spread: float | None = None
    offset: Vector | None = None
    color: Rgba | None = None
    blend_mode: str | None = None
    show_shadow_behind_node: bool | None = None
    bound_variables: dict[str, VariableAlias] = field(default_factory=dict)


@dataclass(frozen=True)
class LayoutGrid:
    pattern: str
    visible: bool = True
    color: Rgba = Rgba(1.0, 0.0, 0.0, 0.1)
    section_size: float | None = None
    alignment: str | None = None
    gutter_size: float | None = None
    count: int | None = None
    offset: float | None = None
    bound_variables: dict[str, VariableAlias] = field(default_factory=dict)


@dataclass(frozen=True)
class PaintStyle:
    name: str
    paints: tuple[Paint, ...] = ()
    description: str = ""
    id: str = ""

    kind: ClassVar[StyleKind] = StyleKind.COLOR


@dataclass(frozen=True)
class TextStyle:
    name: str
    font_family: str = "Inter"
    font_style: str = "Regular"
    font_size: float = 12.0
    line_height: Dimension = Dimension("AUTO")
    letter_spacing: Dimension = Dimension("PERCENT", 0.0)
    text_case: str = "ORIGINAL"
    text_decoration: str = "NONE"
    description: str = ""
    bound_variables: dict[str, VariableAlias] = field(default_factory=dict)
    id: str = ""

    kind: ClassVar[StyleKind] = StyleKind.TEXT


@dataclass(frozen=True)
class EffectStyle:
    name: str
    effects: tuple[Effect, ...] = ()
    description: str = ""
    id: str = ""

    kind: ClassVar[StyleKind] = StyleKind.EFFECT


@dataclass(frozen=True)
class GridStyle:
    name: str
    layout_grids: tuple[LayoutGrid, ...] = ()
    description: str = ""
    id: str = ""

    kind: ClassVar[StyleKind] = StyleKind.GRID


Style: TypeAlias = PaintStyle | TextStyle | EffectStyle | GridStyle


def style_bindings(style: Style) -> list[VariableAlias]:
    """All variable references held by *style*, across its paints, effects or grids."""
    if isinstance(style, PaintStyle):
        return [
            alias for paint in style.paints if isinstance(paint, SolidPaint) for alias in paint.bound_variables.values()
        ]
    if isinstance(style, TextStyle):
        return list(style.bound_variables.values())
    if isinstance(style, EffectStyle):
        return [alias for effect in style.effects for alias in effect.bound_variables.values()]
    return [alias for grid in style.layout_grids for alias in grid.bound_variables.values()]
