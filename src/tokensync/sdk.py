"""SDK composition root for tokensync."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from tokensync.contracts.config import TokenSyncConfig
from tokensync.contracts.diff import DiffResult
from tokensync.contracts.document import Document
from tokensync.contracts.exceptions import CapacityExceededError, ConfigError, SyncError
from tokensync.contracts.host import Host
from tokensync.contracts.plan import FontCheckResult, FontRef, LibraryCheckResult, PlanTier, PlanValidation
from tokensync.contracts.sync import (
    ClearResult,
    ExportOptions,
    ExportResult,
    ImportOptions,
    ImportResult,
    ImportStatus,
    Snapshot,
    StoreInventory,
    StyleSelection,
)
from tokensync.document.loader import DocumentLoader
from tokensync.document.validator import (
    PlanValidator,
    check_fonts,
    check_libraries,
    detect_tier,
    limits_for,
    measure_store,
)
from tokensync.engine.clear import StoreClearer
from tokensync.engine.diff import DiffEngine
from tokensync.engine.export import ExportSerializer
from tokensync.engine.importer import ImportReconciler
from tokensync.engine.inventory import build_inventory
from tokensync.engine.progress import SyncProgress
from tokensync.engine.snapshot import SnapshotManager
from tokensync.engine.store import EntityStore
from tokensync.hosts.factory import create_host

_LOG = logging.getLogger(__name__)


def _resolve_path(value: Path | None, *, base_dir: Path) -> Path | None:
    if value is None:
        return None
    if value.is_absolute():
        return value
    return (base_dir / value).resolve()


def load_config(path: str | Path) -> TokenSyncConfig:
    """Load and validate config from JSON, resolving relative paths against the config directory."""
    config_path = Path(path).expanduser().resolve()
    config_dir = config_path.parent

    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
        parsed = TokenSyncConfig.model_validate(raw_payload)
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc

    return parsed.model_copy(
        update={
            "store_path": _resolve_path(parsed.store_path, base_dir=config_dir),
            "undo_path": _resolve_path(parsed.undo_path, base_dir=config_dir),
        }
    )


def load_document(path: str | Path) -> Document:
    """Load a document (or W3C token file) from disk."""
    return DocumentLoader().load(Path(path))


class TokenSync:
    """tokensync SDK public API.

    Wraps one host and one entity store. Every mutating operation runs under a
    snapshot and is rolled back if it raises.
    """

    def __init__(
        self,
        host: Host,
        *,
        config: TokenSyncConfig | None = None,
        progress: SyncProgress | None = None,
    ) -> None:
        self._host = host
        self._config = config or TokenSyncConfig()
        self._progress = progress
        self._store = EntityStore(host)
        self._last_snapshot: Snapshot | None = None

    @classmethod
    async def from_config(cls, config: TokenSyncConfig, *, progress: SyncProgress | None = None) -> TokenSync:
        kwargs: dict[str, object] = {}
        if config.max_modes_per_collection is not None:
            kwargs["max_modes_per_collection"] = config.max_modes_per_collection
        try:
            host = create_host(config.host, **kwargs)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        return cls(host, config=config, progress=progress)

    @property
    def host(self) -> Host:
        return self._host

    @property
    def last_snapshot(self) -> Snapshot | None:
        """Snapshot retained by the last import run with ``keep_snapshot=True``."""
        return self._last_snapshot

    def _snapshots(self) -> SnapshotManager:
        return SnapshotManager(self._host, self._store, progress=self._progress)

    async def export_document(self, options: ExportOptions | None = None) -> ExportResult:
        if options is None:
            options = ExportOptions(
                naming_convention=self._config.naming_convention,
                include_images=self._config.include_images,
                styles=StyleSelection(),
            )
        return await ExportSerializer(self._host, progress=self._progress).export(options)

    async def validate_plan(self, document: Document, tier: PlanTier | None = None) -> PlanValidation:
        resolved_tier = tier or self._config.tier or await detect_tier(self._host)
        existing = await measure_store(self._host)
        return PlanValidator().validate(document, limits_for(resolved_tier), existing)

    async def diff(self, document: Document) -> DiffResult:
        return await DiffEngine(self._host, self._store).diff(document)

    async def snapshot(self) -> Snapshot:
        return await self._snapshots().snapshot()

    async def import_document(
        self,
        document: Document,
        options: ImportOptions | None = None,
        *,
        enforce_limits: bool = True,
        keep_snapshot: bool = False,
    ) -> ImportResult:
        """Import *document* transactionally.

        Raises:
            CapacityExceededError: A hard capacity limit fails; nothing is mutated.
            RollbackFailedError: The import failed and restoring the snapshot failed too.
            RollbackUnavailableError: The import failed and no snapshot could be taken.
        """
        if enforce_limits:
            validation = await self.validate_plan(document)
            if validation.errors:
                raise CapacityExceededError(
                    "Document exceeds capacity limits: " + "; ".join(validation.errors),
                    errors=validation.errors,
                )

        reconciler = ImportReconciler(self._host, self._store, progress=self._progress)
        outcome = await self._snapshots().run_transaction(lambda: reconciler.reconcile(document, options))
        if outcome.rolled_back:
            _LOG.warning("Import rolled back: %s", outcome.error)
            return ImportResult(status=ImportStatus.ROLLED_BACK, error=str(outcome.error))
        if keep_snapshot:
            self._last_snapshot = outcome.snapshot
        return ImportResult(status=ImportStatus.COMPLETED, stats=outcome.result)

    async def restore(self, snapshot: Snapshot) -> None:
        await self._snapshots().restore(snapshot)

    async def undo_last_import(self) -> None:
        if self._last_snapshot is None:
            raise SyncError("No import snapshot is available to undo")
        await self.restore(self._last_snapshot)
        self._last_snapshot = None

    async def detect_tier(self) -> PlanTier:
        return await detect_tier(self._host)

    async def check_fonts(self, fonts: list[FontRef]) -> FontCheckResult:
        return await check_fonts(self._host, fonts)

    async def check_libraries(self, collections: list[str]) -> LibraryCheckResult:
        return await check_libraries(self._host, collections)

    async def clear(self, *, variables: bool = True, styles: bool = True) -> ClearResult:
        clearer = StoreClearer(self._host, self._store)
        result = ClearResult()
        if variables:
            cleared = await clearer.clear_variables()
            result.collections = cleared.collections
            result.variables = cleared.variables
        if styles:
            result.styles = (await clearer.clear_styles()).styles
        return result

    async def inventory(self) -> StoreInventory:
        return await build_inventory(self._host)
