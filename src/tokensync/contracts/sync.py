"""Export, import and snapshot operation contracts."""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from tokensync.contracts.document import Document, StylesBundle, WireModel
from tokensync.contracts.exceptions import DocumentLoadError
from tokensync.contracts.styles import StyleKind
from tokensync.contracts.values import VariableType


class NamingConvention(StrEnum):
    ORIGINAL = "original"
    CAMEL_CASE = "camelCase"
    KEBAB_CASE = "kebab-case"
    SNAKE_CASE = "snake_case"


class ExportFormat(StrEnum):
    DOCUMENT = "document"
    W3C = "w3c"


class CollectionBehavior(StrEnum):
    MERGE = "merge"
    REPLACE = "replace"


class StyleSelection(BaseModel):
    color: bool = True
    text: bool = True
    effect: bool = True
    grid: bool = True

    model_config = {"frozen": True}

    def includes(self, kind: StyleKind) -> bool:
        return bool(getattr(self, kind.value))


class ExportOptions(BaseModel):
    collections: list[str] | None = None
    modes: dict[str, list[str]] = Field(default_factory=dict)
    naming_convention: NamingConvention = NamingConvention.ORIGINAL
    resolve_aliases: bool = False
    styles: StyleSelection | None = None
    include_images: bool = False
    export_format: ExportFormat = ExportFormat.DOCUMENT

    model_config = {"frozen": True}


class ExportStats(BaseModel):
    collections: int = 0
    variables: int = 0
    styles: dict[StyleKind, int] = Field(default_factory=dict)


class ExportResult(BaseModel):
    document: Document
    stats: ExportStats
    export_format: ExportFormat = ExportFormat.DOCUMENT

    def to_wire(self) -> Any:
        if self.export_format is ExportFormat.W3C:
            from tokensync.codec.w3c import document_to_w3c

            return document_to_w3c(self.document)
        return self.document.to_wire()


class CustomMerge(BaseModel):
    clear_variables: bool = False
    clear_styles: bool = False

    model_config = {"frozen": True}


class ImportOptions(BaseModel):
    merge: bool = True
    overwrite: bool = True
    clear_first: bool = False
    custom_merge: CustomMerge | None = None
    collection_behaviors: dict[str, CollectionBehavior] = Field(default_factory=dict)
    import_styles: bool = True
    selected_modes: dict[str, list[str]] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def behavior_for(self, *names: str) -> CollectionBehavior:
        for name in names:
            behavior = self.collection_behaviors.get(name)
            if behavior is not None:
                return behavior
        return CollectionBehavior.MERGE

    def modes_for(self, *names: str) -> list[str] | None:
        for name in names:
            modes = self.selected_modes.get(name)
            if modes is not None:
                return modes
        return None


class ImportStats(BaseModel):
    collections_created: int = 0
    collections_skipped: int = 0
    collections_failed: int = 0
    modes_failed: int = 0
    variables_created: int = 0
    variables_updated: int = 0
    variables_skipped: int = 0
    variables_failed: int = 0
    aliases_resolved: int = 0
    aliases_unresolved: int = 0
    styles_created: int = 0
    styles_updated: int = 0
    styles_failed: int = 0

    @property
    def has_caveats(self) -> bool:
        return any(
            (
                self.collections_failed,
                self.modes_failed,
                self.variables_skipped,
                self.variables_failed,
                self.aliases_unresolved,
                self.styles_failed,
            )
        )


class ImportStatus(StrEnum):
    COMPLETED = "completed"
    ROLLED_BACK = "rolled_back"


class ImportResult(BaseModel):
    status: ImportStatus
    stats: ImportStats | None = None
    error: str | None = None


class ClearResult(BaseModel):
    collections: int = 0
    variables: int = 0
    styles: int = 0


class SnapshotMode(BaseModel):
    id: str
    name: str


class SnapshotValue(WireModel):
    is_alias: bool = Field(alias="isAlias")
    alias_name: str | None = Field(default=None, alias="aliasName")
    alias_collection: str | None = Field(default=None, alias="aliasCollection")
    alias_id: str | None = Field(default=None, alias="aliasId")
    value: Any = None


class VariableSnapshot(BaseModel):
    name: str
    type: VariableType
    scopes: list[str] = Field(default_factory=list)
    description: str = ""
    values: dict[str, SnapshotValue] = Field(default_factory=dict)


class CollectionSnapshot(BaseModel):
    name: str
    modes: list[SnapshotMode] = Field(default_factory=list)
    variables: list[VariableSnapshot] = Field(default_factory=list)


class Snapshot(BaseModel):
    """Full capture of the local store, replayable through the import machinery."""

    timestamp: float
    collections: list[CollectionSnapshot] = Field(default_factory=list)
    styles: StylesBundle = Field(default_factory=StylesBundle)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)

    @classmethod
    def from_json(cls, text: str) -> Snapshot:
        try:
            return cls.model_validate(json.loads(text))
        except json.JSONDecodeError as exc:
            raise DocumentLoadError(f"invalid snapshot JSON: {exc}") from exc
        except ValidationError as exc:
            raise DocumentLoadError(f"snapshot schema mismatch: {exc}") from exc

    @property
    def variable_count(self) -> int:
        return sum(len(collection.variables) for collection in self.collections)


class CollectionInfo(BaseModel):
    id: str
    name: str
    modes: list[str]
    variable_count: int
    types: dict[str, int] = Field(default_factory=dict)


class FontUsage(BaseModel):
    family: str
    styles: list[str] = Field(default_factory=list)


class StoreInventory(BaseModel):
    collections: list[CollectionInfo] = Field(default_factory=list)
    styles: dict[StyleKind, int] = Field(default_factory=dict)
    library_dependencies: list[str] = Field(default_factory=list)
    fonts_used: list[FontUsage] = Field(default_factory=list)
    total_variables: int = 0
    total_aliases: int = 0
    local_aliases: int = 0
    library_aliases: int = 0
    style_bindings: int = 0
