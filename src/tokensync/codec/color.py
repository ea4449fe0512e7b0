"""Color conversions between host channels (0..1) and portable formats."""

from __future__ import annotations

import math
import re
from typing import Any

from tokensync.contracts.values import Rgba

_HEX_8 = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)
_HEX_6 = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)
_RGBA = re.compile(r"rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([\d.]+))?\s*\)", re.IGNORECASE)
_HSLA = re.compile(r"hsla?\(\s*(\d+)\s*,\s*(\d+)%?\s*,\s*(\d+)%?\s*(?:,\s*([\d.]+))?\s*\)", re.IGNORECASE)

BLACK = Rgba(0.0, 0.0, 0.0, 1.0)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def round2(value: float) -> float:
    return _round_half_up(value * 100) / 100


def _hex_byte(channel: float) -> str:
    return f"{min(255, max(0, _round_half_up(channel * 255))):02x}"


def _byte(channel: float) -> int:
    return _round_half_up(channel * 255)


def _hue(r: float, g: float, b: float, high: float, low: float) -> int:
    if high == low:
        return 0
    delta = high - low
    if high == r:
        hue = ((g - b) / delta + (6 if g < b else 0)) / 6
    elif high == g:
        hue = ((b - r) / delta + 2) / 6
    else:
        hue = ((r - g) / delta + 4) / 6
    return _round_half_up(hue * 360)


def _with_alpha(values: dict[str, Any], color: Rgba) -> dict[str, Any]:
    if color.a < 1:
        values["a"] = round2(color.a)
    return values


def to_hex(color: Rgba) -> str:
    value = "#" + _hex_byte(color.r) + _hex_byte(color.g) + _hex_byte(color.b)
    if color.a < 1:
        value += _hex_byte(color.a)
    return value


def to_rgb255(color: Rgba) -> dict[str, Any]:
    return _with_alpha({"r": _byte(color.r), "g": _byte(color.g), "b": _byte(color.b)}, color)


def to_css(color: Rgba) -> str:
    r, g, b = _byte(color.r), _byte(color.g), _byte(color.b)
    alpha = round2(color.a)
    if alpha < 1:
        return f"rgba({r}, {g}, {b}, {alpha:g})"
    return f"rgb({r}, {g}, {b})"


def to_hsl(color: Rgba) -> dict[str, Any]:
    high = max(color.r, color.g, color.b)
    low = min(color.r, color.g, color.b)
    lightness = (high + low) / 2
    saturation = 0.0
    if high != low:
        delta = high - low
        saturation = delta / (2 - high - low) if lightness > 0.5 else delta / (high + low)
    values = {
        "h": _hue(color.r, color.g, color.b, high, low),
        "s": _round_half_up(saturation * 100),
        "l": _round_half_up(lightness * 100),
    }
    return _with_alpha(values, color)


def to_hsb(color: Rgba) -> dict[str, Any]:
    high = max(color.r, color.g, color.b)
    low = min(color.r, color.g, color.b)
    saturation = 0.0 if high == 0 else (high - low) / high
    values = {
        "h": _hue(color.r, color.g, color.b, high, low),
        "s": _round_half_up(saturation * 100),
        "b": _round_half_up(high * 100),
    }
    return _with_alpha(values, color)


def to_all_formats(color: Rgba) -> dict[str, Any]:
    """Portable color bundle: ``hex``, ``rgb``, ``css``, ``hsl`` and ``hsb``."""
    return {
        "hex": to_hex(color),
        "rgb": to_rgb255(color),
        "css": to_css(color),
        "hsl": to_hsl(color),
        "hsb": to_hsb(color),
    }


def from_hex(value: str) -> Rgba:
    match = _HEX_8.match(value)
    if match:
        r, g, b, a = (int(group, 16) / 255 for group in match.groups())
        return Rgba(r, g, b, a)
    match = _HEX_6.match(value)
    if match:
        r, g, b = (int(group, 16) / 255 for group in match.groups())
        return Rgba(r, g, b, 1.0)
    return BLACK


def from_hsl(h: float, s: float, l: float, a: float = 1.0) -> Rgba:  # noqa: E741
    hue, saturation, lightness = h / 360, s / 100, l / 100
    if saturation == 0:
        return Rgba(lightness, lightness, lightness, a)

    def channel(p: float, q: float, t: float) -> float:
        if t < 0:
            t += 1
        elif t > 1:
            t -= 1
        if t < 1 / 6:
            return p + (q - p) * 6 * t
        if t < 1 / 2:
            return q
        if t < 2 / 3:
            return p + (q - p) * (2 / 3 - t) * 6
        return p

    q = lightness * (1 + saturation) if lightness < 0.5 else lightness + saturation - lightness * saturation
    p = 2 * lightness - q
    return Rgba(channel(p, q, hue + 1 / 3), channel(p, q, hue), channel(p, q, hue - 1 / 3), a)


def from_hsb(h: float, s: float, b: float, a: float = 1.0) -> Rgba:
    hue, saturation, brightness = h / 360, s / 100, b / 100
    sector = math.floor(hue * 6)
    fraction = hue * 6 - sector
    p = brightness * (1 - saturation)
    q = brightness * (1 - fraction * saturation)
    t = brightness * (1 - (1 - fraction) * saturation)
    table = (
        (brightness, t, p),
        (q, brightness, p),
        (p, brightness, t),
        (p, q, brightness),
        (t, p, brightness),
        (brightness, p, q),
    )
    r, g, blue = table[sector % 6]
    return Rgba(r, g, blue, a)


def from_css(value: str) -> Rgba:
    match = _RGBA.search(value)
    if match:
        r, g, b, a = match.groups()
        return Rgba(int(r) / 255, int(g) / 255, int(b) / 255, float(a) if a is not None else 1.0)
    match = _HSLA.search(value)
    if match:
        h, s, l, a = match.groups()  # noqa: E741
        return from_hsl(int(h), int(s), int(l), float(a) if a is not None else 1.0)
    return BLACK


def parse_color(value: Any) -> Rgba:
    """Parse any supported color representation; unrecognized input yields opaque black."""
    if isinstance(value, Rgba):
        return value
    if isinstance(value, dict):
        if "hex" in value and "rgb" in value:
            return from_hex(str(value["hex"]))
        if {"r", "g", "b"} <= value.keys():
            r, g, b = float(value["r"]), float(value["g"]), float(value["b"])
            alpha = float(value.get("a", 1.0))
            if r <= 1 and g <= 1 and b <= 1:
                return Rgba(r, g, b, alpha)
            return Rgba(r / 255, g / 255, b / 255, alpha)
        if {"h", "s", "l"} <= value.keys():
            return from_hsl(value["h"], value["s"], value["l"], value.get("a", 1.0))
        if {"h", "s", "b"} <= value.keys():
            return from_hsb(value["h"], value["s"], value["b"], value.get("a", 1.0))
    if isinstance(value, str):
        if value.startswith(("rgb", "hsl")):
            return from_css(value)
        return from_hex(value)
    return BLACK


def normalize_alpha(color: Rgba) -> Rgba:
    """Round a translucent alpha to two decimals, as hosts store it."""
    if color.a < 1:
        return Rgba(color.r, color.g, color.b, round2(color.a))
    return color
