"""Exception hierarchy for tokensync."""

from __future__ import annotations

MANUAL_RECOVERY_HINT = "Restore the store manually from a backup or the host's undo history."


class TokenSyncError(Exception):
    """Base exception for all tokensync errors."""


class ConfigError(TokenSyncError):
    """Configuration loading or validation failure."""


class DocumentLoadError(TokenSyncError):
    """Document payload could not be parsed or does not match the expected shape."""


class CapacityExceededError(TokenSyncError):
    """Document violates a hard capacity limit of the target store."""

    def __init__(self, message: str, *, errors: list[str] | tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.errors = tuple(errors)


class HostError(TokenSyncError):
    """The host refused a read or mutation of one specific entity."""

    def __init__(self, message: str, *, entity: str | None = None) -> None:
        super().__init__(message)
        self.entity = entity


class SyncError(TokenSyncError):
    """Engine-level synchronization failure."""


class StaleStoreError(SyncError):
    """Entity store was read after a structural mutation without a rebuild."""


class RollbackFailedError(SyncError):
    """Operation failed and restoring the pre-operation snapshot failed too."""

    def __init__(self, message: str, *, original: BaseException, rollback_error: BaseException) -> None:
        super().__init__(message)
        self.original = original
        self.rollback_error = rollback_error


class RollbackUnavailableError(SyncError):
    """Operation failed and no pre-operation snapshot was available to restore."""

    def __init__(self, message: str, *, original: BaseException) -> None:
        super().__init__(message)
        self.original = original
