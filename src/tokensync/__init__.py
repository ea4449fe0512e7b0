"""Public API surface for tokensync."""

__version__ = "1.0.0"

from tokensync.contracts.config import TokenSyncConfig
from tokensync.contracts.diff import DiffResult, DiffSummary
from tokensync.contracts.document import CollectionEntry, Document, StylesBundle, ValueRecord
from tokensync.contracts.exceptions import (
    CapacityExceededError,
    ConfigError,
    DocumentLoadError,
    HostError,
    RollbackFailedError,
    RollbackUnavailableError,
    StaleStoreError,
    SyncError,
    TokenSyncError,
)
from tokensync.contracts.host import Host
from tokensync.contracts.plan import FontRef, PlanTier, PlanValidation
from tokensync.contracts.sync import (
    ClearResult,
    CollectionBehavior,
    CustomMerge,
    ExportFormat,
    ExportOptions,
    ExportResult,
    ImportOptions,
    ImportResult,
    ImportStats,
    ImportStatus,
    NamingConvention,
    Snapshot,
    StoreInventory,
    StyleSelection,
)
from tokensync.engine.progress import SyncProgress
from tokensync.hosts import MemoryHost, create_host
from tokensync.sdk import TokenSync, load_config, load_document

__all__ = [
    "CapacityExceededError",
    "ClearResult",
    "CollectionBehavior",
    "CollectionEntry",
    "ConfigError",
    "CustomMerge",
    "DiffResult",
    "DiffSummary",
    "Document",
    "DocumentLoadError",
    "ExportFormat",
    "ExportOptions",
    "ExportResult",
    "FontRef",
    "Host",
    "HostError",
    "ImportOptions",
    "ImportResult",
    "ImportStats",
    "ImportStatus",
    "MemoryHost",
    "NamingConvention",
    "PlanTier",
    "PlanValidation",
    "RollbackFailedError",
    "RollbackUnavailableError",
    "Snapshot",
    "StaleStoreError",
    "StoreInventory",
    "StyleSelection",
    "StylesBundle",
    "SyncError",
    "SyncProgress",
    "TokenSync",
    "TokenSyncConfig",
    "TokenSyncError",
    "ValueRecord",
    "__version__",
    "create_host",
    "load_config",
    "load_document",
]
