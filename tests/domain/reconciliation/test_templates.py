from __future__ import annotations

import pytest

from indexsync.domain.declarations import TemplateDeclaration
from indexsync.domain.errors import AcknowledgementError
from indexsync.domain.reconciliation import TemplateDecision, TemplateReconciler
from tests.support.fake_cluster import FakeCluster

_BODY = '{"index_patterns": ["logs-*"], "template": {"settings": {"number_of_shards": 1}}}'


def test_missing_template_is_created(fake_cluster: FakeCluster) -> None:
    reconciler = TemplateReconciler(fake_cluster)

    decision = reconciler.reconcile(TemplateDeclaration(name="logs", raw_json=_BODY))

    assert decision is TemplateDecision.CREATE
    assert fake_cluster.templates["logs"] == _BODY


def test_existing_template_is_left_untouched_without_force(fake_cluster: FakeCluster) -> None:
    fake_cluster.templates["logs"] = '{"index_patterns": ["old-*"]}'
    reconciler = TemplateReconciler(fake_cluster)

    decision = reconciler.reconcile(TemplateDeclaration(name="logs", raw_json=_BODY))

    assert decision is TemplateDecision.NO_OP
    assert fake_cluster.templates["logs"] == '{"index_patterns": ["old-*"]}'
    assert fake_cluster.count("put_template") == 0


def test_existing_template_is_overwritten_with_force(fake_cluster: FakeCluster) -> None:
    fake_cluster.templates["logs"] = '{"index_patterns": ["old-*"]}'
    reconciler = TemplateReconciler(fake_cluster)

    decision = reconciler.reconcile(TemplateDeclaration(name="logs", raw_json=_BODY), force=True)

    assert decision is TemplateDecision.OVERWRITE
    assert fake_cluster.templates["logs"] == _BODY


def test_unacknowledged_template_put_propagates(fake_cluster: FakeCluster) -> None:
    fake_cluster.unacknowledged.add("put template")
    reconciler = TemplateReconciler(fake_cluster)

    with pytest.raises(AcknowledgementError, match=r"put template \[logs\]"):
        reconciler.reconcile(TemplateDeclaration(name="logs", raw_json=_BODY))
