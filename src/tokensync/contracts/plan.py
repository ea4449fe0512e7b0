"""Plan tier and capacity validation contracts."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class PlanTier(StrEnum):
    STARTER = "starter"
    PROFESSIONAL = "professional"
    ORGANIZATION = "organization"
    ENTERPRISE = "enterprise"


class TierLimits(BaseModel):
    tier: PlanTier
    max_modes_per_collection: int | None
    can_publish_libraries: bool
    has_variable_rest_api: bool

    model_config = {"frozen": True}

    @property
    def mode_limit_label(self) -> str:
        return "unlimited" if self.max_modes_per_collection is None else str(self.max_modes_per_collection)

    def allows_modes(self, count: int) -> bool:
        return self.max_modes_per_collection is None or count <= self.max_modes_per_collection


TIER_LIMITS: dict[PlanTier, TierLimits] = {
    PlanTier.STARTER: TierLimits(
        tier=PlanTier.STARTER, max_modes_per_collection=1, can_publish_libraries=False, has_variable_rest_api=False
    ),
    PlanTier.PROFESSIONAL: TierLimits(
        tier=PlanTier.PROFESSIONAL, max_modes_per_collection=10, can_publish_libraries=True, has_variable_rest_api=False
    ),
    PlanTier.ORGANIZATION: TierLimits(
        tier=PlanTier.ORGANIZATION, max_modes_per_collection=20, can_publish_libraries=True, has_variable_rest_api=False
    ),
    PlanTier.ENTERPRISE: TierLimits(
        tier=PlanTier.ENTERPRISE, max_modes_per_collection=None, can_publish_libraries=True, has_variable_rest_api=True
    ),
}


class StoreShape(BaseModel):
    collections: int = 0
    max_modes_in_any_collection: int = 0
    total_variables: int = 0


class ModeLimitExceedance(BaseModel):
    collection: str
    modes: list[str]
    limit: int | None

    def describe(self) -> str:
        limit = "unlimited" if self.limit is None else str(self.limit)
        return f'"{self.collection}" ({len(self.modes)} modes, limit: {limit})'


class ImportShape(StoreShape):
    collections_exceeding_mode_limit: list[ModeLimitExceedance] = Field(default_factory=list)


class FontRef(BaseModel):
    family: str
    style: str

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.family} {self.style}"


class LibraryDependencies(BaseModel):
    variable_count: int = 0
    collections: list[str] = Field(default_factory=list)


class FontDependencies(BaseModel):
    style_count: int = 0
    fonts: list[FontRef] = Field(default_factory=list)


class PlanValidation(BaseModel):
    limits: TierLimits
    existing: StoreShape = Field(default_factory=StoreShape)
    importing: ImportShape = Field(default_factory=ImportShape)
    warnings: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    library_dependencies: LibraryDependencies | None = None
    font_dependencies: FontDependencies | None = None

    @property
    def can_import(self) -> bool:
        return not self.errors


class FontCheckResult(BaseModel):
    required: list[FontRef] = Field(default_factory=list)
    available: list[FontRef] = Field(default_factory=list)
    missing: list[FontRef] = Field(default_factory=list)

    @property
    def all_available(self) -> bool:
        return not self.missing


class LibraryCheckResult(BaseModel):
    required: list[str] = Field(default_factory=list)
    available: list[str] = Field(default_factory=list)
    missing: list[str] = Field(default_factory=list)

    @property
    def all_available(self) -> bool:
        return not self.missing
