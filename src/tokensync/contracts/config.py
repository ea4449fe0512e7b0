"""Configuration contracts."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from tokensync.contracts.plan import PlanTier
from tokensync.contracts.sync import NamingConvention


class TokenSyncConfig(BaseModel):
    host: str = "memory"
    store_path: Path = Path("tokens.store.json")
    undo_path: Path | None = None
    naming_convention: NamingConvention = NamingConvention.ORIGINAL
    tier: PlanTier | None = None
    max_modes_per_collection: int | None = Field(default=None, ge=1)
    include_images: bool = False

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_paths(self) -> TokenSyncConfig:
        if self.undo_path is not None and self.undo_path == self.store_path:
            raise ValueError("undo_path must differ from store_path")
        return self

    @property
    def resolved_undo_path(self) -> Path:
        if self.undo_path is not None:
            return self.undo_path
        return self.store_path.with_name(f"{self.store_path.name}.undo.json")
