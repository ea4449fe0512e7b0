"""Diff contracts."""

from __future__ import annotations

from pydantic import BaseModel, Field

from tokensync.contracts.styles import StyleKind


class VariableRef(BaseModel):
    collection: str
    path: str


class ModeValueChange(BaseModel):
    mode: str
    old_value: str
    new_value: str


class VariableChange(BaseModel):
    collection: str
    path: str
    old_value: str
    new_value: str
    modes: list[ModeValueChange] = Field(default_factory=list)


class StyleChange(BaseModel):
    kind: StyleKind
    name: str


class DiffSummary(BaseModel):
    collections_new: int = 0
    collections_modified: int = 0
    collections_unchanged: int = 0
    variables_new: int = 0
    variables_modified: int = 0
    variables_unchanged: int = 0
    styles_new: int = 0
    styles_modified: int = 0


class DiffResult(BaseModel):
    new_collections: list[str] = Field(default_factory=list)
    modified_collections: list[str] = Field(default_factory=list)
    unchanged_collections: list[str] = Field(default_factory=list)
    new_variables: list[VariableRef] = Field(default_factory=list)
    modified_variables: list[VariableChange] = Field(default_factory=list)
    unchanged_variables: int = 0
    new_styles: list[StyleChange] = Field(default_factory=list)
    modified_styles: list[StyleChange] = Field(default_factory=list)
    summary: DiffSummary = Field(default_factory=DiffSummary)

    @property
    def has_changes(self) -> bool:
        summary = self.summary
        return bool(
            summary.collections_new
            or summary.collections_modified
            or summary.variables_new
            or summary.variables_modified
            or summary.styles_new
            or summary.styles_modified
        )
