from __future__ import annotations

from indexsync.domain.declarations import IndexDeclaration
from indexsync.domain.reconciliation import ClusterIndexState, DriftReport, detect_drift


def _state(
    mappings: dict[str, object], settings: dict[str, object] | None = None
) -> ClusterIndexState:
    return ClusterIndexState(exists=True, mappings=mappings, settings=settings)


def test_detect_drift_reports_nothing_for_matching_index() -> None:
    declaration = IndexDeclaration(
        name="messages",
        raw_json="{}",
        settings={"index": {"number_of_shards": 2}},
        mappings={"properties": {"msg": {"type": "text", "index": True}}},
    )
    state = _state(
        {"properties": {"msg": {"type": "text"}}},
        {"number_of_shards": "2", "uuid": "abc", "creation_date": "1"},
    )

    report = detect_drift(declaration, state, ["number_of_shards"])

    assert report == DriftReport()
    assert not report.drifted
    assert report.describe() == "none"


def test_detect_drift_combines_mapping_and_settings() -> None:
    declaration = IndexDeclaration(
        name="messages",
        raw_json="{}",
        settings={"number_of_shards": 2, "refresh_interval": "1s"},
        mappings={"properties": {"msg": {"type": "keyword"}}},
    )
    state = _state(
        {"properties": {"msg": {"type": "text"}}},
        {"number_of_shards": "1", "refresh_interval": "1s"},
    )

    report = detect_drift(declaration, state, ["number_of_shards", "refresh_interval"])

    assert report.drifted
    assert report.mapping_differs
    assert report.differing_settings == ("number_of_shards",)
    assert report.describe() == "mappings, settings.number_of_shards"


def test_detect_drift_on_settings_alone() -> None:
    declaration = IndexDeclaration(
        name="messages",
        raw_json="{}",
        settings={"analysis": {"filter": {"short": {"type": "length", "max": 5}}}},
        mappings=None,
    )
    state = _state({}, {"analysis": {"filter": {"short": {"type": "length", "max": "10"}}}})

    report = detect_drift(declaration, state, ["analysis"])

    assert report.drifted
    assert not report.mapping_differs
