"""Drift detection between a declaration and the index the cluster holds."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .contracts import DriftReport
from .normalize import differing_settings, mappings_equal

if TYPE_CHECKING:
    from collections.abc import Sequence

    from indexsync.domain.declarations import IndexDeclaration

    from .contracts import ClusterIndexState

log = getLogger(__name__)


def detect_drift(
    declaration: IndexDeclaration,
    state: ClusterIndexState,
    relevant_settings: Sequence[str],
) -> DriftReport:
    """Compare mappings and the relevant settings; either one differing is drift."""

    mapping_differs = not mappings_equal(declaration.mappings, state.mappings)
    if mapping_differs:
        log.info("Index [%s] mapping differs from its declaration", declaration.name)

    differing = differing_settings(declaration.settings, state.settings, relevant_settings)
    for key in differing:
        log.warning("Index [%s] setting [%s] differs from its declaration", declaration.name, key)
    if relevant_settings and not differing:
        log.debug("Index [%s] relevant settings are equal", declaration.name)

    return DriftReport(mapping_differs=mapping_differs, differing_settings=differing)
