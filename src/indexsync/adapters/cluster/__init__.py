"""Public interface for the cluster adapter."""

from __future__ import annotations

from .client import ClusterClient, TemplateApi
from .schema import (
    AcknowledgedResponse,
    CatIndexRow,
    ErrorResponse,
    MappingResponse,
    SettingsResponse,
)

__all__ = [
    "AcknowledgedResponse",
    "CatIndexRow",
    "ClusterClient",
    "ErrorResponse",
    "MappingResponse",
    "SettingsResponse",
    "TemplateApi",
]
