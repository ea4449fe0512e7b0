"""Contracts shared by the engine, hosts and the CLI."""

from tokensync.contracts.config import TokenSyncConfig
from tokensync.contracts.diff import DiffResult, DiffSummary, ModeValueChange, StyleChange, VariableChange, VariableRef
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
from tokensync.contracts.host import Host, Mode, Variable, VariableCollection
from tokensync.contracts.plan import PlanTier, PlanValidation, TierLimits
from tokensync.contracts.sync import (
    ExportOptions,
    ExportResult,
    ImportOptions,
    ImportResult,
    ImportStats,
    ImportStatus,
    NamingConvention,
    Snapshot,
)
from tokensync.contracts.values import ModeValue, Rgba, Scalar, VariableAlias, VariableType

__all__ = [
    "CapacityExceededError",
    "CollectionEntry",
    "ConfigError",
    "DiffResult",
    "DiffSummary",
    "Document",
    "DocumentLoadError",
    "ExportOptions",
    "ExportResult",
    "Host",
    "HostError",
    "ImportOptions",
    "ImportResult",
    "ImportStats",
    "ImportStatus",
    "Mode",
    "ModeValue",
    "ModeValueChange",
    "NamingConvention",
    "PlanTier",
    "PlanValidation",
    "Rgba",
    "RollbackFailedError",
    "RollbackUnavailableError",
    "Scalar",
    "Snapshot",
    "StaleStoreError",
    "StyleChange",
    "StylesBundle",
    "SyncError",
    "TierLimits",
    "TokenSyncConfig",
    "TokenSyncError",
    "ValueRecord",
    "Variable",
    "VariableAlias",
    "VariableChange",
    "VariableCollection",
    "VariableRef",
    "VariableType",
]
