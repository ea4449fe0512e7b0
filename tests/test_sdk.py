from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from tokensync.contracts.config import TokenSyncConfig
from tokensync.contracts.document import Document
from tokensync.contracts.exceptions import CapacityExceededError, ConfigError, DocumentLoadError, SyncError
from tokensync.contracts.plan import FontRef, PlanTier
from tokensync.contracts.styles import PaintStyle, StyleKind
from tokensync.contracts.sync import ImportStatus, NamingConvention
from tokensync.contracts.values import VariableType
from tokensync.hosts.memory import MemoryHost
from tokensync.sdk import TokenSync, load_config, load_document


def _write_config(path: Path, payload: dict[str, Any]) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


async def _collection_names(host: MemoryHost) -> list[str]:
    return [collection.name for collection in await host.list_collections()]


def test_load_config_resolves_relative_paths(tmp_path: Path) -> None:
    config_dir = tmp_path / "cfg"
    config_dir.mkdir()
    config_path = _write_config(
        config_dir / "tokensync.json",
        {"store_path": "state/store.json", "undo_path": "state/undo.json", "naming_convention": "kebab-case"},
    )

    config = load_config(config_path)

    assert config.store_path == (config_dir / "state/store.json").resolve()
    assert config.undo_path == (config_dir / "state/undo.json").resolve()
    assert config.naming_convention is NamingConvention.KEBAB_CASE


def test_load_config_defaults_undo_path_next_to_store(config_file: Path) -> None:
    config = load_config(config_file)

    assert config.undo_path is None
    assert config.resolved_undo_path == config.store_path.with_name("store.json.undo.json")


def test_load_config_keeps_absolute_paths_absolute(tmp_path: Path) -> None:
    absolute_store = (tmp_path / "elsewhere" / "store.json").resolve()
    config_path = _write_config(tmp_path / "tokensync.json", {"store_path": str(absolute_store)})

    config = load_config(config_path)

    assert config.store_path == absolute_store


def test_load_config_invalid_json_raises_config_error(tmp_path: Path) -> None:
    config_path = tmp_path / "tokensync.json"
    config_path.write_text("{not-json", encoding="utf-8")

    with pytest.raises(ConfigError, match="invalid JSON"):
        load_config(config_path)


@pytest.mark.parametrize(
    "payload",
    [
        {"max_modes_per_collection": 0},
        {"tier": "platinum"},
        {"store_path": "same.json", "undo_path": "same.json"},
    ],
)
def test_load_config_invalid_schema_raises_config_error(tmp_path: Path, payload: dict[str, Any]) -> None:
    config_path = _write_config(tmp_path / "tokensync.json", payload)

    with pytest.raises(ConfigError, match="invalid config"):
        load_config(config_path)


def test_load_config_read_os_error_raises_config_error(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_path = _write_config(tmp_path / "tokensync.json", {})
    original_read_text = Path.read_text

    def _boom(self: Path, *args: object, **kwargs: object) -> str:
        if self == config_path:
            raise OSError("permission denied")
        return original_read_text(self, *args, **kwargs)  # type: ignore[arg-type]

    monkeypatch.setattr(Path, "read_text", _boom)

    with pytest.raises(ConfigError, match="failed reading config file"):
        load_config(config_path)


def test_load_document_reads_file(document_file: Path, tmp_path: Path) -> None:
    assert len(load_document(document_file).collections) == 2

    with pytest.raises(DocumentLoadError):
        load_document(tmp_path / "absent.json")


@pytest.mark.asyncio
async def test_from_config_builds_memory_host() -> None:
    sdk = await TokenSync.from_config(TokenSyncConfig(max_modes_per_collection=3))

    assert isinstance(sdk.host, MemoryHost)
    assert sdk.host.max_modes_per_collection == 3
    assert sdk.last_snapshot is None


@pytest.mark.asyncio
async def test_from_config_unknown_host_raises_config_error() -> None:
    with pytest.raises(ConfigError, match="Unknown host"):
        await TokenSync.from_config(TokenSyncConfig(host="figma"))


@pytest.mark.asyncio
async def test_import_rejects_documents_over_capacity(host: MemoryHost) -> None:
    tree = {f"v{index}": {"$type": "boolean", "$value": True} for index in range(5001)}
    document = Document.from_wire([{"Flags": {"modes": {"Default": tree}}}])

    with pytest.raises(CapacityExceededError) as exc_info:
        await TokenSync(host).import_document(document)

    assert len(exc_info.value.errors) == 1
    assert host.operations == ()


@pytest.mark.asyncio
async def test_import_then_undo_restores_previous_store(host: MemoryHost, sample_document: Document) -> None:
    existing = await host.create_collection("Existing")
    await host.create_variable("flag", existing, VariableType.BOOLEAN)
    sdk = TokenSync(host)

    result = await sdk.import_document(sample_document, keep_snapshot=True)

    assert result.status is ImportStatus.COMPLETED
    assert result.stats is not None and result.stats.variables_created == 4
    assert await _collection_names(host) == ["Existing", "Semantic", "Primitives"]
    assert sdk.last_snapshot is not None

    await sdk.undo_last_import()

    assert await _collection_names(host) == ["Existing"]
    assert sdk.last_snapshot is None
    with pytest.raises(SyncError, match="No import snapshot"):
        await sdk.undo_last_import()


@pytest.mark.asyncio
async def test_import_without_keep_snapshot_discards_it(host: MemoryHost, sample_document: Document) -> None:
    sdk = TokenSync(host)

    await sdk.import_document(sample_document)

    assert sdk.last_snapshot is None


@pytest.mark.asyncio
async def test_export_document_uses_config_defaults(host: MemoryHost, sample_document: Document) -> None:
    await host.create_style(PaintStyle(name="Brand"))
    sdk = TokenSync(host, config=TokenSyncConfig(naming_convention=NamingConvention.SNAKE_CASE))
    await sdk.import_document(sample_document)

    result = await sdk.export_document()

    assert [entry.name for entry in result.document.collections] == ["semantic", "primitives"]
    assert result.stats.styles[StyleKind.COLOR] == 1
    assert result.stats.variables == 4


@pytest.mark.asyncio
async def test_validate_plan_prefers_explicit_then_configured_tier(host: MemoryHost, sample_document: Document) -> None:
    sdk = TokenSync(host, config=TokenSyncConfig(tier=PlanTier.STARTER))

    configured = await sdk.validate_plan(sample_document)
    explicit = await sdk.validate_plan(sample_document, PlanTier.ENTERPRISE)
    detected = await TokenSync(host).validate_plan(sample_document)

    assert configured.limits.tier is PlanTier.STARTER
    assert configured.warnings
    assert explicit.limits.tier is PlanTier.ENTERPRISE
    assert detected.limits.tier is PlanTier.PROFESSIONAL
    assert await sdk.detect_tier() is PlanTier.PROFESSIONAL


@pytest.mark.asyncio
async def test_diff_snapshot_and_inventory(host: MemoryHost, sample_document: Document) -> None:
    sdk = TokenSync(host)
    assert (await sdk.diff(sample_document)).summary.collections_new == 2

    await sdk.import_document(sample_document)

    assert not (await sdk.diff(sample_document)).summary.collections_new
    assert (await sdk.snapshot()).variable_count == 4
    assert (await sdk.inventory()).total_variables == 4


@pytest.mark.asyncio
async def test_clear_selects_what_to_remove(host: MemoryHost, sample_document: Document) -> None:
    sdk = TokenSync(host)
    await sdk.import_document(sample_document)
    await host.create_style(PaintStyle(name="Brand"))

    styles_only = await sdk.clear(variables=False)
    everything = await sdk.clear()

    assert (styles_only.collections, styles_only.styles) == (0, 1)
    assert (everything.collections, everything.variables, everything.styles) == (2, 4, 0)
    assert await host.list_collections() == []


@pytest.mark.asyncio
async def test_dependency_checks() -> None:
    host = MemoryHost(fonts=[("Inter", "Regular")])
    host.add_library_collection("Brand Library")
    sdk = TokenSync(host)

    fonts = await sdk.check_fonts([FontRef(family="Inter", style="Bold")])
    libraries = await sdk.check_libraries(["Brand Library"])

    assert not fonts.all_available
    assert libraries.all_available
