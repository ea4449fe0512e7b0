"""Tests for the explicitly invalidated entity store."""

from __future__ import annotations

import pytest

from tokensync.contracts.exceptions import StaleStoreError
from tokensync.contracts.values import VariableType
from tokensync.engine.store import EntityStore
from tokensync.hosts.memory import MemoryHost


@pytest.mark.asyncio
async def test_reads_require_rebuild(host: MemoryHost) -> None:
    store = EntityStore(host)

    assert store.is_stale
    with pytest.raises(StaleStoreError):
        store.collection("Colors")

    await store.rebuild()
    assert not store.is_stale
    assert store.collections() == []


@pytest.mark.asyncio
async def test_rebuild_indexes_by_collection_and_path(host: MemoryHost) -> None:
    collection = await host.create_collection("Colors")
    blue = await host.create_variable("brand/blue", collection, VariableType.COLOR)
    store = EntityStore(host)

    await store.rebuild()

    assert store.collection("Colors") is collection
    assert store.variable("Colors", "brand/blue") is blue
    assert store.variable_by_id(blue.id) is blue
    assert store.variables_in("Colors") == [blue]
    assert store.variable("Colors", "brand/red") is None
    assert store.variables_in("Missing") == []


@pytest.mark.asyncio
async def test_single_entry_updates_keep_store_fresh(host: MemoryHost) -> None:
    store = EntityStore(host)
    await store.rebuild()

    collection = await host.create_collection("Colors")
    store.put_collection(collection)
    variable = await host.create_variable("blue", collection, VariableType.COLOR)
    store.put_variable("Colors", variable)

    assert store.variable("Colors", "blue") is variable

    store.drop_collection("Colors")
    assert store.collection("Colors") is None
    assert store.variable_by_id(variable.id) is None


@pytest.mark.asyncio
async def test_invalidate_marks_store_stale(host: MemoryHost) -> None:
    store = EntityStore(host)
    await store.rebuild()

    store.invalidate()

    with pytest.raises(StaleStoreError):
        store.variable("Colors", "blue")
