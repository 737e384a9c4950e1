"""Shared reconciliation contract components.

This module holds the decision enums, the per-call options record and the
value types exchanged between state fetching, drift detection and apply.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

type JsonObject = dict[str, Any]


class ReconciliationDecision(StrEnum):
    """What the index reconciler did for one declaration."""

    NO_OP = "no_op"
    CREATE = "create"
    FORCE_RECREATE = "force_recreate"
    DRIFT_RECREATE = "drift_recreate"

    @property
    def mutated(self) -> bool:
        return self is not ReconciliationDecision.NO_OP


class TemplateDecision(StrEnum):
    """What the template reconciler did for one declaration."""

    NO_OP = "no_op"
    CREATE = "create"
    OVERWRITE = "overwrite"

    @property
    def mutated(self) -> bool:
        return self is not TemplateDecision.NO_OP


@dataclass(slots=True, frozen=True, kw_only=True)
class ReconcileOptions:
    """Per-call reconciliation switches.

    ``relevant_settings`` lists dotted setting keys (``analysis``,
    ``number_of_shards``) compared during drift detection. Every other setting
    is left to the cluster.
    """

    force: bool = False
    relevant_settings: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for key in self.relevant_settings:
            # Bare ``index`` names the whole settings scope, not a setting.
            if not key.strip() or key.strip(".") != key or key == "index":
                raise ValueError(f"Invalid relevant setting key: {key!r}")


@dataclass(slots=True, frozen=True)
class ClusterIndexState:
    """Snapshot of one index, discarded once its decision has been applied."""

    exists: bool
    mappings: JsonObject | None = None
    settings: JsonObject | None = None


@dataclass(slots=True, frozen=True)
class DriftReport:
    mapping_differs: bool = False
    differing_settings: tuple[str, ...] = ()

    @property
    def drifted(self) -> bool:
        return self.mapping_differs or bool(self.differing_settings)

    def describe(self) -> str:
        parts: list[str] = []
        if self.mapping_differs:
            parts.append("mappings")
        parts.extend(f"settings.{key}" for key in self.differing_settings)
        return ", ".join(parts) if parts else "none"
