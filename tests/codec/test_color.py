"""Tests for color conversions."""

from __future__ import annotations

import pytest

from tokensync.codec.color import (
    BLACK,
    from_css,
    from_hex,
    from_hsb,
    from_hsl,
    normalize_alpha,
    parse_color,
    to_all_formats,
    to_css,
    to_hex,
    to_hsb,
    to_hsl,
    to_rgb255,
)
from tokensync.contracts.values import Rgba

RED = Rgba(1.0, 0.0, 0.0, 1.0)


def test_to_hex_opaque_omits_alpha() -> None:
    assert to_hex(Rgba(0.0, 0.4, 1.0)) == "#0066ff"


def test_to_hex_translucent_appends_alpha_byte() -> None:
    assert to_hex(Rgba(1.0, 1.0, 1.0, 0.5)) == "#ffffff80"


def test_to_rgb255_and_css() -> None:
    assert to_rgb255(RED) == {"r": 255, "g": 0, "b": 0}
    assert to_rgb255(Rgba(1.0, 0.0, 0.0, 0.256)) == {"r": 255, "g": 0, "b": 0, "a": 0.26}
    assert to_css(RED) == "rgb(255, 0, 0)"
    assert to_css(Rgba(0.0, 0.0, 0.0, 0.5)) == "rgba(0, 0, 0, 0.5)"


def test_hsl_and_hsb_of_pure_red() -> None:
    assert to_hsl(RED) == {"h": 0, "s": 100, "l": 50}
    assert to_hsb(RED) == {"h": 0, "s": 100, "b": 100}


def test_to_all_formats_has_every_representation() -> None:
    formats = to_all_formats(RED)

    assert set(formats) == {"hex", "rgb", "css", "hsl", "hsb"}
    assert formats["hex"] == "#ff0000"


def test_from_hex_accepts_six_and_eight_digits() -> None:
    assert from_hex("#ff0000") == RED
    assert from_hex("00ff0080") == Rgba(0.0, 1.0, 0.0, 128 / 255)


def test_from_hex_unrecognized_is_black() -> None:
    assert from_hex("not-a-color") == BLACK


def test_from_hsl_and_hsb_primaries() -> None:
    assert from_hsl(120, 100, 50) == Rgba(0.0, 1.0, 0.0, 1.0)
    assert from_hsl(0, 0, 50) == Rgba(0.5, 0.5, 0.5, 1.0)
    assert from_hsb(0, 100, 100) == RED
    assert from_hsb(0, 0, 50) == Rgba(0.5, 0.5, 0.5, 1.0)


def test_from_css_rgba_and_hsla() -> None:
    assert from_css("rgba(255, 0, 0, 0.5)") == Rgba(1.0, 0.0, 0.0, 0.5)
    assert from_css("hsl(120, 100%, 50%)") == Rgba(0.0, 1.0, 0.0, 1.0)
    assert from_css("cmyk(0, 0, 0, 0)") == BLACK


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ({"hex": "#ff0000", "rgb": {"r": 0, "g": 0, "b": 0}}, RED),
        ({"r": 255, "g": 0, "b": 0}, RED),
        ({"r": 1, "g": 0, "b": 0, "a": 0.5}, Rgba(1.0, 0.0, 0.0, 0.5)),
        ({"h": 0, "s": 100, "l": 50}, RED),
        ({"h": 0, "s": 100, "b": 100}, RED),
        ("rgb(255, 0, 0)", RED),
        ("#ff0000", RED),
        (RED, RED),
        (42, BLACK),
    ],
)
def test_parse_color_accepts_every_portable_form(raw: object, expected: Rgba) -> None:
    assert parse_color(raw) == expected


def test_normalize_alpha_rounds_translucent_only() -> None:
    assert normalize_alpha(Rgba(0.0, 0.0, 0.0, 0.333)) == Rgba(0.0, 0.0, 0.0, 0.33)
    assert normalize_alpha(RED) is RED
