"""Destructive clear operations over the live store."""

from __future__ import annotations

import logging

from tokensync.contracts.host import Host
from tokensync.contracts.styles import StyleKind
from tokensync.contracts.sync import ClearResult
from tokensync.engine.store import EntityStore

_LOG = logging.getLogger(__name__)


class StoreClearer:
    """Removes local collections and/or styles, invalidating the entity store."""

    def __init__(self, host: Host, store: EntityStore) -> None:
        self._host = host
        self._store = store

    async def clear_variables(self) -> ClearResult:
        result = ClearResult()
        for collection in await self._host.list_collections():
            result.variables += len(collection.variable_ids)
            await collection.remove()
            result.collections += 1
        self._store.invalidate()
        _LOG.info("Cleared %d collections (%d variables)", result.collections, result.variables)
        return result

    async def clear_styles(self) -> ClearResult:
        result = ClearResult()
        for kind in StyleKind:
            for style in await self._host.list_styles(kind):
                await self._host.remove_style(style)
                result.styles += 1
        _LOG.info("Cleared %d styles", result.styles)
        return result

    async def clear_all(self) -> ClearResult:
        variables = await self.clear_variables()
        styles = await self.clear_styles()
        return ClearResult(collections=variables.collections, variables=variables.variables, styles=styles.styles)
