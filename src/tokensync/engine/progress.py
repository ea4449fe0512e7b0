"""Progress reporting protocol for engine operations.

Engine components emit phase lifecycle events; consumers such as the CLI's
Rich display implement ``SyncProgress`` to render feedback.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

PHASE_CLEAR = "Clear"
PHASE_COLLECTIONS = "Collections"
PHASE_ALIASES = "Aliases"
PHASE_STYLES = "Styles"
PHASE_RESTORE = "Restore"
PHASE_EXPORT = "Export"


class SyncProgress(ABC):
    """Observer for phase-level progress events."""

    @abstractmethod
    def phase_start(self, phase: str, total: int | None = None) -> None:
        """A phase is starting. *total* is ``None`` for indeterminate phases."""
        ...  # pragma: no cover

    @abstractmethod
    def item_done(self, phase: str) -> None:
        """One item within *phase* has completed."""
        ...  # pragma: no cover

    @abstractmethod
    def phase_done(self, phase: str) -> None:
        """The *phase* has finished successfully."""
        ...  # pragma: no cover

    @abstractmethod
    def phase_error(self, phase: str, error: BaseException) -> None:
        """The *phase* was interrupted by *error*."""
        ...  # pragma: no cover


class NullSyncProgress(SyncProgress):
    """No-op implementation used when no progress display is requested."""

    def phase_start(self, phase: str, total: int | None = None) -> None:
        pass

    def item_done(self, phase: str) -> None:
        pass

    def phase_done(self, phase: str) -> None:
        pass

    def phase_error(self, phase: str, error: BaseException) -> None:
        pass
