"""Tests for the scalar value codec."""

from __future__ import annotations

import pytest

from tokensync.codec.values import (
    AliasLeaf,
    LiteralLeaf,
    alias_path_from_ref,
    alias_ref_from_parts,
    decode_leaf,
    decode_scalar,
    display_record_value,
    display_value,
    encode_scalar,
    from_export_type,
    scopes_from_wire,
    scopes_to_wire,
    snapshot_scalar,
)
from tokensync.contracts.document import ValueRecord
from tokensync.contracts.values import Rgba, VariableAlias, VariableType


@pytest.mark.parametrize(
    ("raw", "variable_type", "expected"),
    [
        (4, VariableType.FLOAT, 4.0),
        ("1.5", VariableType.FLOAT, 1.5),
        ("wide", VariableType.FLOAT, 0.0),
        (True, VariableType.FLOAT, 1.0),
        (12, VariableType.STRING, "12"),
        (None, VariableType.STRING, ""),
        ("TRUE", VariableType.BOOLEAN, True),
        (0, VariableType.BOOLEAN, False),
        ("#ff000080", VariableType.COLOR, Rgba(1.0, 0.0, 0.0, 0.5)),
    ],
)
def test_decode_scalar_coerces_to_the_declared_type(raw: object, variable_type: VariableType, expected: object) -> None:
    assert decode_scalar(raw, variable_type) == expected


def test_encode_scalar_expands_colors_only() -> None:
    assert encode_scalar(Rgba(1.0, 0.0, 0.0))["hex"] == "#ff0000"
    assert encode_scalar(3.0) == 3.0
    assert snapshot_scalar(Rgba(1.0, 0.0, 0.0)) == "#ff0000"


def test_export_type_and_scope_mapping() -> None:
    assert from_export_type("boolean") is VariableType.BOOLEAN
    assert from_export_type("dimension") is VariableType.STRING
    assert scopes_to_wire(()) == ["ALL_SCOPES"]
    assert scopes_to_wire(("GAP", "WIDTH_HEIGHT")) == ["GAP", "WIDTH_HEIGHT"]
    assert scopes_from_wire(["ALL_SCOPES", "GAP"]) == ("ALL_SCOPES",)


def test_alias_references() -> None:
    assert alias_path_from_ref("{colors.brand.primary}") == "colors/brand/primary"
    assert alias_ref_from_parts(["colors", "brand"]) == "{colors.brand}"


def test_decode_leaf_literal() -> None:
    record = ValueRecord(type="float", value=8)

    assert decode_leaf(record, VariableType.FLOAT, default_collection="Spacing") == LiteralLeaf(8.0)


def test_decode_leaf_alias_uses_local_value_as_fallback() -> None:
    record = ValueRecord(type="color", value="{colors.blue}", collection_name="Primitives", local_value="#0000ff")

    leaf = decode_leaf(record, VariableType.COLOR, default_collection="Semantic")

    assert leaf == AliasLeaf(collection="Primitives", path="colors/blue", fallback=Rgba(0.0, 0.0, 1.0, 1.0))


def test_decode_leaf_alias_defaults_to_own_collection_and_type_default() -> None:
    record = ValueRecord(type="float", value="{spacing.sm}")

    leaf = decode_leaf(record, VariableType.FLOAT, default_collection="Spacing")

    assert leaf == AliasLeaf(collection="Spacing", path="spacing/sm", fallback=0.0)


def test_decode_leaf_library_alias_targets_library_ref() -> None:
    record = ValueRecord(
        type="color",
        value="{Primary Blue}",
        collection_name="brandLibrary",
        library_ref="Brand Library",
        local_value="#0000ff",
    )

    leaf = decode_leaf(record, VariableType.COLOR, default_collection="semantic")

    assert leaf == AliasLeaf(collection="Brand Library", path="Primary Blue", fallback=Rgba(0.0, 0.0, 1.0, 1.0))


def test_display_helpers() -> None:
    assert display_value(None) == "undefined"
    assert display_value(VariableAlias("variable-1")) == "{alias}"
    assert display_value(4.0) == "4"
    assert display_value(False) == "false"
    assert display_record_value(ValueRecord(type="color", value={"hex": "#FF0000", "rgb": {}})) == "#ff0000"
    assert display_record_value(ValueRecord(type="string", value="{a.b}")) == "{a.b}"
