"""Tests for destructive clear operations."""

from __future__ import annotations

import pytest

from tokensync.contracts.styles import PaintStyle, TextStyle
from tokensync.contracts.values import VariableType
from tokensync.engine.clear import StoreClearer
from tokensync.engine.store import EntityStore
from tokensync.hosts.memory import MemoryHost


async def _populate(host: MemoryHost) -> None:
    colors = await host.create_collection("Colors")
    await host.create_variable("blue", colors, VariableType.COLOR)
    await host.create_variable("red", colors, VariableType.COLOR)
    await host.create_collection("Empty")
    await host.create_style(PaintStyle(name="Brand"))
    await host.create_style(TextStyle(name="Body"))


@pytest.mark.asyncio
async def test_clear_variables_removes_local_collections_only(host: MemoryHost) -> None:
    await _populate(host)
    library = host.add_library_collection("Brand Library")
    host.add_library_variable(library, "brand/red", VariableType.COLOR)
    store = EntityStore(host)
    await store.rebuild()

    result = await StoreClearer(host, store).clear_variables()

    assert (result.collections, result.variables, result.styles) == (2, 2, 0)
    assert await host.list_collections() == []
    assert [collection.name for collection in await host.list_library_collections()] == ["Brand Library"]
    assert store.is_stale


@pytest.mark.asyncio
async def test_clear_styles_keeps_variables(host: MemoryHost) -> None:
    await _populate(host)

    result = await StoreClearer(host, EntityStore(host)).clear_styles()

    assert result.styles == 2
    assert len(await host.list_collections()) == 2


@pytest.mark.asyncio
async def test_clear_all_reports_combined_counts(host: MemoryHost) -> None:
    await _populate(host)

    result = await StoreClearer(host, EntityStore(host)).clear_all()

    assert (result.collections, result.variables, result.styles) == (2, 2, 2)
    assert [operation.name for operation in host.operations].count("remove_style") == 2
