"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from indexsync.adapters.cluster import ClusterClient, TemplateApi
from indexsync.adapters.filesystem import DeclarationDirectory
from indexsync.config import get_cluster_config
from indexsync.domain.declarations import (
    parse_declaration_object,
    parse_index_declaration,
    parse_template_declaration,
)
from indexsync.domain.errors import IndexSyncError
from indexsync.domain.reconciliation import (
    IndexReconciler,
    ReconcileOptions,
    ReconciliationDecision,
    TemplateDecision,
    TemplateReconciler,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from contextlib import AbstractContextManager
    from pathlib import Path

    from indexsync.config import ClusterConfig
    from indexsync.domain.ports import DeclarativeCluster, IndexCluster, TemplateGateway

log = getLogger(__name__)


class EntityKind(StrEnum):
    TEMPLATE = "template"
    INDEX = "index"


@dataclass(slots=True, frozen=True)
class ReconciliationOutcome:
    """Result for one template or index of a pass."""

    kind: EntityKind
    name: str
    decision: ReconciliationDecision | TemplateDecision | None = None
    settings_updated: bool = False
    error: IndexSyncError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class ReconciliationSummary:
    outcomes: list[ReconciliationOutcome] = field(default_factory=list["ReconciliationOutcome"])

    def add(self, outcome: ReconciliationOutcome) -> None:
        self.outcomes.append(outcome)

    @property
    def failures(self) -> list[ReconciliationOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]

    @property
    def ok(self) -> bool:
        return not self.failures

    def decision_for(
        self, kind: EntityKind, name: str
    ) -> ReconciliationDecision | TemplateDecision | None:
        for outcome in self.outcomes:
            if outcome.kind is kind and outcome.name == name:
                return outcome.decision
        return None

    def describe(self) -> str:
        decisions = [outcome.decision for outcome in self.outcomes if outcome.decision is not None]
        changed = sum(1 for decision in decisions if decision.mutated)
        return (
            f"entities={len(self.outcomes)}, changed={changed}, "
            f"unchanged={len(decisions) - changed}, failed={len(self.failures)}"
        )


def reconcile_index(
    cluster: IndexCluster,
    name: str,
    declaration_text: str | None,
    options: ReconcileOptions | None = None,
) -> ReconciliationDecision:
    """Bring index ``name`` in line with ``declaration_text``."""

    declaration = parse_index_declaration(name, declaration_text)
    return IndexReconciler(cluster).reconcile(declaration, options)


def reconcile_template(
    gateway: TemplateGateway,
    name: str,
    declaration_text: str | None,
    *,
    force: bool = False,
) -> TemplateDecision:
    declaration = parse_template_declaration(name, declaration_text)
    return TemplateReconciler(gateway).reconcile(declaration, force=force)


def apply_update_settings(cluster: IndexCluster, name: str, settings_text: str | None) -> bool:
    """Push ``_update_settings`` to an index; returns whether a call was made."""

    if settings_text is None or parse_declaration_object(name, settings_text) is None:
        return False
    cluster.update_settings(name, settings_text)
    return True


def reconcile_directory(
    root: Path,
    *,
    cluster: DeclarativeCluster,
    options: ReconcileOptions | None = None,
    fail_fast: bool = True,
    environ: Mapping[str, str] | None = None,
) -> ReconciliationSummary:
    """Reconcile every declared template, then every declared index.

    Each entity is reconciled on its own. With ``fail_fast`` the first failure
    is re-raised; otherwise it is recorded and the pass moves on.
    """

    effective = options or ReconcileOptions()
    directory = DeclarationDirectory(root)
    summary = ReconciliationSummary()
    log.info("Starting declaration discovery under %s", directory.resolve_root())

    for template_name in directory.template_names():
        _run_entity(
            summary,
            EntityKind.TEMPLATE,
            template_name,
            partial(_template_outcome, directory, cluster, template_name, effective, environ),
            fail_fast=fail_fast,
        )

    for index_name in directory.index_names():
        _run_entity(
            summary,
            EntityKind.INDEX,
            index_name,
            partial(_index_outcome, directory, cluster, index_name, effective, environ),
            fail_fast=fail_fast,
        )

    log.info("Finished reconciliation: %s", summary.describe())
    return summary


def _template_outcome(
    directory: DeclarationDirectory,
    cluster: DeclarativeCluster,
    name: str,
    options: ReconcileOptions,
    environ: Mapping[str, str] | None,
) -> ReconciliationOutcome:
    text = directory.read_template(name, environ)
    decision = reconcile_template(cluster, name, text, force=options.force)
    return ReconciliationOutcome(kind=EntityKind.TEMPLATE, name=name, decision=decision)


def _index_outcome(
    directory: DeclarationDirectory,
    cluster: DeclarativeCluster,
    name: str,
    options: ReconcileOptions,
    environ: Mapping[str, str] | None,
) -> ReconciliationOutcome:
    text = directory.read_index(name, environ)
    decision = reconcile_index(cluster, name, text, options)
    updated = apply_update_settings(cluster, name, directory.read_update_settings(name, environ))
    return ReconciliationOutcome(
        kind=EntityKind.INDEX, name=name, decision=decision, settings_updated=updated
    )


def _run_entity(
    summary: ReconciliationSummary,
    kind: EntityKind,
    name: str,
    run: Callable[[], ReconciliationOutcome],
    *,
    fail_fast: bool,
) -> None:
    try:
        outcome = run()
    except IndexSyncError as exc:
        log.error("Reconciling %s [%s] failed: %s", kind, name, exc)
        summary.add(ReconciliationOutcome(kind=kind, name=name, error=exc))
        if fail_fast:
            raise
        return
    log.debug("Reconciled %s [%s]: %s", kind, name, outcome.decision)
    summary.add(outcome)


type ClusterFactory = Callable[
    [ClusterConfig, TemplateApi | None], AbstractContextManager[DeclarativeCluster]
]


def run_reconciliation(
    root: Path,
    *,
    options: ReconcileOptions | None = None,
    fail_fast: bool = True,
    template_api: TemplateApi | None = None,
    cluster_config: ClusterConfig | None = None,
    cluster_factory: ClusterFactory | None = None,
) -> ReconciliationSummary:
    """Reconcile ``root`` against the configured cluster using the HTTP adapter."""

    config = cluster_config or get_cluster_config()
    factory = cluster_factory or _default_cluster_factory
    log.info("Reconciling declarations under %s against %s", root, config.url)
    with factory(config, template_api) as cluster:
        return reconcile_directory(root, cluster=cluster, options=options, fail_fast=fail_fast)


def _default_cluster_factory(
    config: ClusterConfig, template_api: TemplateApi | None
) -> ClusterClient:
    return ClusterClient(config, template_api=template_api)
