"""Entity store: an explicitly invalidated index over the live host.

Variables live in an arena keyed by their host identity; a separate index maps
``(collection name, path)`` to that identity. Any structural mutation on the
host (creating or removing collections or variables in bulk) must be followed
by :meth:`EntityStore.invalidate`, and the next read requires
:meth:`EntityStore.rebuild`. The only exception is a single-entry update right
after creating or removing exactly one entity.
"""

from __future__ import annotations

import logging

from tokensync.contracts.exceptions import StaleStoreError
from tokensync.contracts.host import Host, Variable, VariableCollection

_LOG = logging.getLogger(__name__)


class EntityStore:
    def __init__(self, host: Host) -> None:
        self._host = host
        self._collections: dict[str, VariableCollection] = {}
        self._variables: dict[str, Variable] = {}
        self._index: dict[tuple[str, str], str] = {}
        self._stale = True

    @property
    def is_stale(self) -> bool:
        return self._stale

    def invalidate(self) -> None:
        self._stale = True

    async def rebuild(self) -> None:
        """Re-read every local collection and variable from the host."""
        collections: dict[str, VariableCollection] = {}
        variables: dict[str, Variable] = {}
        index: dict[tuple[str, str], str] = {}
        for collection in await self._host.list_collections():
            collections[collection.name] = collection
            for variable_id in collection.variable_ids:
                variable = await self._host.get_variable(variable_id)
                if variable is None:
                    continue
                variables[variable.id] = variable
                index[(collection.name, variable.name)] = variable.id
        self._collections = collections
        self._variables = variables
        self._index = index
        self._stale = False
        _LOG.debug("Entity store rebuilt: %d collections, %d variables", len(collections), len(variables))

    def _check_fresh(self) -> None:
        if self._stale:
            raise StaleStoreError("Entity store read after a structural mutation; call rebuild() first")

    def collections(self) -> list[VariableCollection]:
        self._check_fresh()
        return list(self._collections.values())

    def collection(self, name: str) -> VariableCollection | None:
        self._check_fresh()
        return self._collections.get(name)

    def variable(self, collection_name: str, path: str) -> Variable | None:
        self._check_fresh()
        variable_id = self._index.get((collection_name, path))
        return self._variables.get(variable_id) if variable_id is not None else None

    def variable_by_id(self, variable_id: str) -> Variable | None:
        self._check_fresh()
        return self._variables.get(variable_id)

    def variables_in(self, collection_name: str) -> list[Variable]:
        self._check_fresh()
        collection = self._collections.get(collection_name)
        if collection is None:
            return []
        return [self._variables[vid] for vid in collection.variable_ids if vid in self._variables]

    def put_collection(self, collection: VariableCollection) -> None:
        self._check_fresh()
        self._collections[collection.name] = collection

    def put_variable(self, collection_name: str, variable: Variable) -> None:
        self._check_fresh()
        self._variables[variable.id] = variable
        self._index[(collection_name, variable.name)] = variable.id

    def drop_collection(self, name: str) -> None:
        """Forget a collection and its variables after it was removed from the host."""
        self._check_fresh()
        self._collections.pop(name, None)
        for key in [key for key in self._index if key[0] == name]:
            self._variables.pop(self._index.pop(key), None)
