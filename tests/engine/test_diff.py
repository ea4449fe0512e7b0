"""Tests for the read-only diff engine."""

from __future__ import annotations

from typing import Any

import pytest

from tokensync.contracts.document import Document, ValueRecord
from tokensync.contracts.styles import PaintStyle
from tokensync.contracts.values import Rgba, VariableAlias, VariableType
from tokensync.engine.diff import DiffEngine, values_differ
from tokensync.engine.importer import ImportReconciler
from tokensync.engine.store import EntityStore
from tokensync.hosts.memory import MemoryHost


def test_values_differ_compares_colors_by_hex() -> None:
    record = ValueRecord(type="color", value="#0066FF")

    assert not values_differ(Rgba(0.0, 0.4, 1.0), record, VariableType.COLOR)
    assert values_differ(Rgba(0.0, 0.4, 0.9), record, VariableType.COLOR)


def test_values_differ_for_aliases_absent_values_and_type_changes() -> None:
    assert values_differ(VariableAlias("variable-1"), ValueRecord(type="float", value=1), VariableType.FLOAT)
    assert values_differ(1.0, ValueRecord(type="float", value="{spacing.sm}"), VariableType.FLOAT)
    assert values_differ(None, ValueRecord(type="float", value=1), VariableType.FLOAT)
    assert values_differ(1.0, ValueRecord(type="string", value="1"), VariableType.FLOAT)
    assert not values_differ(1.0, ValueRecord(type="float", value=1), VariableType.FLOAT)


@pytest.mark.asyncio
async def test_diff_against_empty_store_reports_everything_new(host: MemoryHost, sample_document: Document) -> None:
    diff = await DiffEngine(host, EntityStore(host)).diff(sample_document)

    assert diff.new_collections == ["Semantic", "Primitives"]
    assert diff.summary.collections_new == 2
    assert diff.summary.variables_new == 4
    assert host.operations == ()


@pytest.mark.asyncio
async def test_diff_classifies_variables(host: MemoryHost, sample_payload: list[dict[str, Any]]) -> None:
    document = Document.from_wire(sample_payload)
    await ImportReconciler(host, EntityStore(host)).reconcile(document)
    operations_before = len(host.operations)

    primitives = sample_payload[1]["Primitives"]["modes"]["Default"]
    primitives["spacing"]["sm"]["$value"] = 6
    primitives["spacing"]["md"] = {"$type": "float", "$value": 12}
    diff = await DiffEngine(host, EntityStore(host)).diff(Document.from_wire(sample_payload))

    assert diff.modified_collections == ["Semantic", "Primitives"]
    assert [(ref.collection, ref.path) for ref in diff.new_variables] == [("Primitives", "spacing/md")]
    changed = {(change.collection, change.path): change for change in diff.modified_variables}
    assert changed[("Primitives", "spacing/sm")].old_value == "4"
    assert changed[("Primitives", "spacing/sm")].new_value == "6"
    assert ("Semantic", "text/primary") in changed
    assert diff.summary.variables_unchanged == 2
    assert diff.summary.variables_modified == 2
    assert diff.summary.variables_new == 1
    assert len(host.operations) == operations_before


@pytest.mark.asyncio
async def test_diff_reports_missing_mode_as_undefined(host: MemoryHost) -> None:
    collection = await host.create_collection("Theme")
    variable = await host.create_variable("bg", collection, VariableType.COLOR)
    await variable.set_value(collection.modes[0].id, Rgba(1.0, 1.0, 1.0))
    document = Document.from_wire(
        [
            {
                "Theme": {
                    "modes": {
                        "Mode 1": {"bg": {"$type": "color", "$value": "#ffffff"}},
                        "Dark": {"bg": {"$type": "color", "$value": "#000000"}},
                    }
                }
            }
        ]
    )

    diff = await DiffEngine(host, EntityStore(host)).diff(document)

    change = diff.modified_variables[0]
    assert [(mode.mode, mode.old_value, mode.new_value) for mode in change.modes] == [("Dark", "undefined", "#000000")]


@pytest.mark.asyncio
async def test_diff_styles_by_name(host: MemoryHost) -> None:
    await host.create_style(PaintStyle(name="Brand"))
    document = Document.from_wire(
        [{"_styles": {"colorStyles": [{"name": "Brand", "color": "#0066ff"}, {"name": "Accent", "color": "#ff0000"}]}}]
    )

    diff = await DiffEngine(host, EntityStore(host)).diff(document)

    assert [style.name for style in diff.modified_styles] == ["Brand"]
    assert [style.name for style in diff.new_styles] == ["Accent"]
    assert diff.summary.styles_new == 1
    assert diff.summary.styles_modified == 1
