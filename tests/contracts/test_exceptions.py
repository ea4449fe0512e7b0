from __future__ import annotations

import pytest

from tokensync.contracts.exceptions import (
    MANUAL_RECOVERY_HINT,
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


@pytest.mark.parametrize(
    "error_type",
    [ConfigError, DocumentLoadError, CapacityExceededError, HostError, SyncError],
)
def test_errors_share_the_base(error_type: type[TokenSyncError]) -> None:
    assert issubclass(error_type, TokenSyncError)


@pytest.mark.parametrize("error_type", [StaleStoreError, RollbackFailedError, RollbackUnavailableError])
def test_engine_failures_are_sync_errors(error_type: type[SyncError]) -> None:
    assert issubclass(error_type, SyncError)


def test_capacity_error_keeps_its_findings() -> None:
    error = CapacityExceededError("over", errors=["a", "b"])

    assert error.errors == ("a", "b")
    assert CapacityExceededError("over").errors == ()


def test_host_error_names_the_entity() -> None:
    assert HostError("refused", entity="collection-1").entity == "collection-1"
    assert HostError("refused").entity is None


def test_rollback_errors_keep_the_causes() -> None:
    original = RuntimeError("import failed")
    rollback = RuntimeError("restore failed")

    failed = RollbackFailedError("both failed", original=original, rollback_error=rollback)
    unavailable = RollbackUnavailableError("no snapshot", original=original)

    assert (failed.original, failed.rollback_error) == (original, rollback)
    assert unavailable.original is original
    assert "manually" in MANUAL_RECOVERY_HINT
