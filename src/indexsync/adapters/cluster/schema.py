"""Pydantic models describing the cluster's index API payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator


class ClusterBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class AcknowledgedResponse(ClusterBaseModel):
    acknowledged: bool = False


class ErrorCause(ClusterBaseModel):
    type: str | None = None
    reason: str | None = None


class ErrorResponse(ClusterBaseModel):
    error: ErrorCause | str
    status: int | None = None

    @property
    def error_type(self) -> str | None:
        return self.error.type if isinstance(self.error, ErrorCause) else None

    @property
    def reason(self) -> str:
        if isinstance(self.error, ErrorCause):
            return self.error.reason or self.error.type or "unknown error"
        return self.error


class IndexMappingEntry(ClusterBaseModel):
    mappings: dict[str, Any] = Field(default_factory=dict)


class IndexSettingsBody(ClusterBaseModel):
    index: dict[str, Any] = Field(default_factory=dict)


class IndexSettingsEntry(ClusterBaseModel):
    settings: IndexSettingsBody = Field(default_factory=IndexSettingsBody)


class MappingResponse(RootModel[dict[str, IndexMappingEntry]]):
    def entry_for(self, name: str) -> IndexMappingEntry:
        return _entry_for(self.root, name) or IndexMappingEntry()


class SettingsResponse(RootModel[dict[str, IndexSettingsEntry]]):
    def entry_for(self, name: str) -> IndexSettingsEntry:
        return _entry_for(self.root, name) or IndexSettingsEntry()


def _entry_for[T](entries: dict[str, T], name: str) -> T | None:
    # Aliases answer under the concrete index name.
    if name in entries:
        return entries[name]
    if len(entries) == 1:
        return next(iter(entries.values()))
    return None


class CatIndexRow(ClusterBaseModel):
    index: str | None = None
    creation_date: int = Field(alias="creation.date")

    @field_validator("creation_date", mode="before")
    @classmethod
    def _parse_epoch_millis(cls, value: int | str) -> int:
        return int(value)
