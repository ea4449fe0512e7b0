"""Translation from document names back to host-side identity."""

from __future__ import annotations

from tokensync.contracts.document import CollectionEntry, Document


class DocumentNames:
    """Maps document collection names and paths to the names used on the host.

    Names converted at export carry their originals (``$originalName`` on the
    collection entry and on each leaf); alias references in the document use
    the converted names and are translated through this table.
    """

    def __init__(self, document: Document) -> None:
        self._collections = {entry.name: entry.host_name for entry in document.collections}
        self._paths: dict[tuple[str, str], str] = {}
        for entry in document.collections:
            for path, record in entry.iter_paths():
                if record.original_name:
                    self._paths[(entry.name, path)] = record.original_name

    def collection(self, name: str) -> str:
        return self._collections.get(name, name)

    def path(self, entry: CollectionEntry, path: str) -> str:
        return self._paths.get((entry.name, path), path)

    def resolve(self, collection: str, path: str) -> tuple[str, str]:
        """Host ``(collection, path)`` for an alias reference in document naming."""
        return self.collection(collection), self._paths.get((collection, path), path)
