"""Host object-model contract.

The host owns the live collections, variables and styles. Every accessor is
asynchronous; suspension happens only at host calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import TracebackType

from tokensync.contracts.styles import Style, StyleKind
from tokensync.contracts.values import ModeValue, VariableType


@dataclass(frozen=True)
class Mode:
    id: str
    name: str


class VariableCollection(ABC):
    @property
    @abstractmethod
    def id(self) -> str: ...  # pragma: no cover

    @property
    @abstractmethod
    def name(self) -> str: ...  # pragma: no cover

    @property
    @abstractmethod
    def modes(self) -> tuple[Mode, ...]: ...  # pragma: no cover

    @property
    @abstractmethod
    def variable_ids(self) -> tuple[str, ...]: ...  # pragma: no cover

    @property
    @abstractmethod
    def remote(self) -> bool:
        """True when the collection lives in an external library."""
        ...  # pragma: no cover

    @abstractmethod
    async def rename_mode(self, mode_id: str, name: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def add_mode(self, name: str) -> str: ...  # pragma: no cover

    @abstractmethod
    async def remove(self) -> None: ...  # pragma: no cover


class Variable(ABC):
    @property
    @abstractmethod
    def id(self) -> str: ...  # pragma: no cover

    @property
    @abstractmethod
    def name(self) -> str:
        """The ``/``-delimited path of the variable within its collection."""
        ...  # pragma: no cover

    @property
    @abstractmethod
    def collection_id(self) -> str: ...  # pragma: no cover

    @property
    @abstractmethod
    def resolved_type(self) -> VariableType: ...  # pragma: no cover

    @property
    @abstractmethod
    def description(self) -> str: ...  # pragma: no cover

    @property
    @abstractmethod
    def scopes(self) -> tuple[str, ...]: ...  # pragma: no cover

    @property
    @abstractmethod
    def values_by_mode(self) -> dict[str, ModeValue]: ...  # pragma: no cover

    @abstractmethod
    async def set_value(self, mode_id: str, value: ModeValue) -> None: ...  # pragma: no cover

    @abstractmethod
    async def set_description(self, description: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def set_scopes(self, scopes: tuple[str, ...]) -> None: ...  # pragma: no cover

    @abstractmethod
    async def remove(self) -> None: ...  # pragma: no cover


class Host(ABC):
    @abstractmethod
    async def __aenter__(self) -> Host: ...  # pragma: no cover

    @abstractmethod
    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...  # pragma: no cover

    @abstractmethod
    async def list_collections(self) -> list[VariableCollection]:
        """Local collections in host order; library collections are not listed."""
        ...  # pragma: no cover

    @abstractmethod
    async def list_library_collections(self) -> list[VariableCollection]:
        """Remote collections made available by connected libraries."""
        ...  # pragma: no cover

    @abstractmethod
    async def get_collection(self, collection_id: str) -> VariableCollection | None: ...  # pragma: no cover

    @abstractmethod
    async def create_collection(self, name: str) -> VariableCollection: ...  # pragma: no cover

    @abstractmethod
    async def get_variable(self, variable_id: str) -> Variable | None: ...  # pragma: no cover

    @abstractmethod
    async def create_variable(
        self, name: str, collection: VariableCollection, variable_type: VariableType
    ) -> Variable: ...  # pragma: no cover

    @abstractmethod
    async def list_styles(self, kind: StyleKind) -> list[Style]: ...  # pragma: no cover

    @abstractmethod
    async def create_style(self, style: Style) -> Style: ...  # pragma: no cover

    @abstractmethod
    async def update_style(self, style: Style) -> Style: ...  # pragma: no cover

    @abstractmethod
    async def remove_style(self, style: Style) -> None: ...  # pragma: no cover

    @abstractmethod
    async def load_font(self, family: str, style: str) -> None: ...  # pragma: no cover

    @abstractmethod
    async def create_image(self, data: bytes) -> str:
        """Store image bytes and return their opaque hash."""
        ...  # pragma: no cover

    @abstractmethod
    async def get_image_bytes(self, image_hash: str) -> bytes | None: ...  # pragma: no cover
