"""Tests for the export serializer."""

from __future__ import annotations

import pytest

from tokensync.contracts.sync import ExportFormat, ExportOptions, NamingConvention, StyleSelection
from tokensync.contracts.values import Rgba, VariableAlias, VariableType
from tokensync.engine.export import MAX_ALIAS_DEPTH, ExportSerializer, resolve_alias_value
from tokensync.engine.progress import SyncProgress
from tokensync.hosts.memory import MemoryHost


class _RecordingProgress(SyncProgress):
    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def phase_start(self, phase: str, total: int | None = None) -> None:
        self.events.append(("start", phase))

    def item_done(self, phase: str) -> None:
        self.events.append(("item", phase))

    def phase_done(self, phase: str) -> None:
        self.events.append(("done", phase))

    def phase_error(self, phase: str, error: BaseException) -> None:
        self.events.append(("error", phase))


async def _seed(host: MemoryHost) -> None:
    primitives = await host.create_collection("Primitives")
    blue = await host.create_variable("colors/blue", primitives, VariableType.COLOR)
    await blue.set_value(primitives.modes[0].id, Rgba(0.0, 0.4, 1.0))
    gap = await host.create_variable("spacing/gap", primitives, VariableType.FLOAT)
    await gap.set_value(primitives.modes[0].id, 8)
    await gap.set_scopes(("GAP",))

    semantic = await host.create_collection("Semantic")
    await semantic.rename_mode(semantic.modes[0].id, "Light")
    primary = await host.create_variable("text/primary", semantic, VariableType.COLOR)
    await primary.set_value(semantic.modes[0].id, VariableAlias(blue.id))
    await primary.set_description("Body text")


@pytest.mark.asyncio
async def test_export_builds_wire_document(host: MemoryHost) -> None:
    await _seed(host)

    result = await ExportSerializer(host).export()

    wire = result.to_wire()
    assert [next(iter(entry)) for entry in wire] == ["Primitives", "Semantic"]
    primitives = wire[0]["Primitives"]["modes"]["Mode 1"]
    assert primitives["colors"]["blue"]["$type"] == "color"
    assert primitives["colors"]["blue"]["$value"]["hex"] == "#0066ff"
    assert primitives["spacing"]["gap"] == {"$type": "float", "$value": 8.0, "$scopes": ["GAP"]}
    assert result.stats.collections == 2
    assert result.stats.variables == 3


@pytest.mark.asyncio
async def test_export_writes_alias_references(host: MemoryHost) -> None:
    await _seed(host)

    result = await ExportSerializer(host).export()

    primary = result.to_wire()[1]["Semantic"]["modes"]["Light"]["text"]["primary"]
    assert primary["$value"] == "{colors.blue}"
    assert primary["$collectionName"] == "Primitives"
    assert primary["$description"] == "Body text"
    assert "$localValue" not in primary


@pytest.mark.asyncio
async def test_export_resolves_aliases_when_requested(host: MemoryHost) -> None:
    await _seed(host)

    result = await ExportSerializer(host).export(ExportOptions(resolve_aliases=True))

    primary = result.to_wire()[1]["Semantic"]["modes"]["Light"]["text"]["primary"]
    assert primary["$value"]["hex"] == "#0066ff"
    assert "$collectionName" not in primary


@pytest.mark.asyncio
async def test_alias_into_unexported_collection_carries_local_value(host: MemoryHost) -> None:
    await _seed(host)

    result = await ExportSerializer(host).export(ExportOptions(collections=["Semantic"]))

    wire = result.to_wire()
    assert len(wire) == 1
    primary = wire[0]["Semantic"]["modes"]["Light"]["text"]["primary"]
    assert primary["$localValue"]["hex"] == "#0066ff"


@pytest.mark.asyncio
async def test_alias_into_library_carries_library_ref(host: MemoryHost) -> None:
    library = host.add_library_collection("Brand Library")
    remote = host.add_library_variable(library, "brand/red", VariableType.COLOR, [Rgba(1.0, 0.0, 0.0)])
    local = await host.create_collection("Semantic")
    danger = await host.create_variable("danger", local, VariableType.COLOR)
    await danger.set_value(local.modes[0].id, VariableAlias(remote.id))

    result = await ExportSerializer(host).export()

    record = result.to_wire()[0]["Semantic"]["modes"]["Mode 1"]["danger"]
    assert record["$value"] == "{brand.red}"
    assert record["$libraryRef"] == "Brand Library"
    assert record["$localValue"]["hex"] == "#ff0000"


@pytest.mark.asyncio
async def test_naming_convention_keeps_originals(host: MemoryHost) -> None:
    collection = await host.create_collection("Brand Colors")
    await collection.rename_mode(collection.modes[0].id, "Light Mode")
    await host.create_variable("Primary Blue", collection, VariableType.COLOR)

    result = await ExportSerializer(host).export(ExportOptions(naming_convention=NamingConvention.KEBAB_CASE))

    entry = result.to_wire()[0]["brand-colors"]
    assert entry["$originalName"] == "Brand Colors"
    assert entry["$originalModeNames"] == {"light-mode": "Light Mode"}
    assert entry["modes"]["light-mode"]["primary-blue"]["$originalName"] == "Primary Blue"


@pytest.mark.asyncio
async def test_export_mode_filter(host: MemoryHost) -> None:
    collection = await host.create_collection("Theme")
    await collection.add_mode("Dark")
    await host.create_variable("bg", collection, VariableType.COLOR)

    result = await ExportSerializer(host).export(ExportOptions(modes={"Theme": ["Dark"]}))

    assert list(result.to_wire()[0]["Theme"]["modes"]) == ["Dark"]


@pytest.mark.asyncio
async def test_export_w3c_format_and_style_counts(host: MemoryHost) -> None:
    await _seed(host)

    result = await ExportSerializer(host).export(
        ExportOptions(export_format=ExportFormat.W3C, styles=StyleSelection(text=False))
    )

    payload = result.to_wire()
    assert payload["Primitives"]["colors"]["blue"] == {"$type": "color", "$value": "#0066ff"}
    assert payload["Semantic"]["text"]["primary"]["$value"] == "{Primitives.colors.blue}"
    assert sum(result.stats.styles.values()) == 0


@pytest.mark.asyncio
async def test_export_reports_progress(host: MemoryHost) -> None:
    await _seed(host)
    progress = _RecordingProgress()

    await ExportSerializer(host, progress=progress).export()

    assert progress.events == [("start", "Export"), ("item", "Export"), ("item", "Export"), ("done", "Export")]


async def _chain(host: MemoryHost, length: int) -> str:
    collection = await host.create_collection("Chain")
    mode_id = collection.modes[0].id
    variables = [await host.create_variable(f"v{index}", collection, VariableType.STRING) for index in range(length)]
    await variables[-1].set_value(mode_id, "end")
    for current, target in zip(variables, variables[1:], strict=False):
        await current.set_value(mode_id, VariableAlias(target.id))
    return mode_id


@pytest.mark.asyncio
async def test_resolve_alias_value_follows_chain_within_depth(host: MemoryHost) -> None:
    mode_id = await _chain(host, MAX_ALIAS_DEPTH + 1)
    first = await host.get_variable("variable-1")
    assert first is not None

    assert await resolve_alias_value(host, first, mode_id) == "end"


@pytest.mark.asyncio
async def test_resolve_alias_value_gives_up_past_max_depth(host: MemoryHost) -> None:
    mode_id = await _chain(host, MAX_ALIAS_DEPTH + 3)
    first = await host.get_variable("variable-1")
    assert first is not None

    assert await resolve_alias_value(host, first, mode_id) == ""
