"""Reconciliation core for declared indices and templates.

Flow for one index:
1) check whether the index exists
2) when it exists and force is off, fetch mapping and relevant settings
3) normalize both sides and detect drift
4) apply the decision (create, delete+create, or nothing)
"""

from __future__ import annotations

from .contracts import (
    ClusterIndexState,
    DriftReport,
    ReconcileOptions,
    ReconciliationDecision,
    TemplateDecision,
)
from .drift import detect_drift
from .engine import IndexReconciler
from .normalize import mappings_equal, normalize_mapping
from .templates import TemplateReconciler

__all__ = [
    "ClusterIndexState",
    "DriftReport",
    "IndexReconciler",
    "ReconcileOptions",
    "ReconciliationDecision",
    "TemplateDecision",
    "TemplateReconciler",
    "detect_drift",
    "mappings_equal",
    "normalize_mapping",
]
