"""Index reconciliation: decide what an index needs and apply it.

Decision table for one declaration:

- force and the index exists: delete, then create (``FORCE_RECREATE``)
- the index does not exist: create (``CREATE``)
- otherwise fetch mapping and relevant settings and compare them; on drift
  delete, then create (``DRIFT_RECREATE``), else leave it alone (``NO_OP``)

Delete followed by create is not atomic. If the create fails, the index stays
absent and the error propagates to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from indexsync.domain.errors import IndexSyncError

from .contracts import ClusterIndexState, ReconciliationDecision, ReconcileOptions
from .drift import detect_drift
from .normalize import settings_filter

if TYPE_CHECKING:
    from collections.abc import Sequence

    from indexsync.domain.declarations import IndexDeclaration
    from indexsync.domain.ports import IndexCluster

log = getLogger(__name__)


@dataclass(slots=True)
class IndexReconciler:
    """Reconcile one index at a time against ``cluster``.

    Nothing is cached between calls; each ``reconcile`` reads fresh state.
    """

    cluster: IndexCluster

    def reconcile(
        self,
        declaration: IndexDeclaration,
        options: ReconcileOptions | None = None,
    ) -> ReconciliationDecision:
        effective = options or ReconcileOptions()
        name = declaration.name
        exists = self.cluster.exists(name)

        if effective.force and exists:
            log.warning("Index [%s] already exists but force is set. Removing all data!", name)
            self._recreate(declaration)
            return ReconciliationDecision.FORCE_RECREATE

        if not exists:
            log.info("Index [%s] doesn't exist. Creating it.", name)
            self._create(declaration)
            return ReconciliationDecision.CREATE

        state = self.fetch_state(name, effective.relevant_settings)
        report = detect_drift(declaration, state, effective.relevant_settings)
        if report.drifted:
            log.info(
                "Index [%s] exists but differs from its declaration (%s). Replacing it.",
                name,
                report.describe(),
            )
            self._recreate(declaration)
            return ReconciliationDecision.DRIFT_RECREATE

        log.info("Index [%s] already exists and matches its declaration.", name)
        return ReconciliationDecision.NO_OP

    def fetch_state(self, name: str, relevant_settings: Sequence[str]) -> ClusterIndexState:
        """Read the mapping and, when any are relevant, the settings of an existing index."""

        mappings = self.cluster.get_mapping(name)
        settings = (
            self.cluster.get_settings(name, settings_filter(relevant_settings))
            if relevant_settings
            else None
        )
        return ClusterIndexState(exists=True, mappings=mappings, settings=settings)

    def _create(self, declaration: IndexDeclaration) -> None:
        if declaration.raw_json is None:
            log.debug(
                "No declaration body for index [%s]; using cluster defaults", declaration.name
            )
        self.cluster.create_index(declaration.name, declaration.raw_json)

    def _recreate(self, declaration: IndexDeclaration) -> None:
        self.cluster.delete_index(declaration.name)
        try:
            self._create(declaration)
        except IndexSyncError:
            log.error(
                "Index [%s] was deleted but could not be created again; it is now absent",
                declaration.name,
            )
            raise
