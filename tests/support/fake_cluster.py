"""In-memory stand-in for the cluster ports used by reconciliation tests."""

from __future__ import annotations

import copy
import itertools
import json
from dataclasses import dataclass, field
from typing import Any, cast

from indexsync.domain.errors import AcknowledgementError, IndexNotFoundError, TransportError

type JsonObject = dict[str, Any]


def _stringify_leaves(value: object) -> object:
    if isinstance(value, dict):
        return {key: _stringify_leaves(child) for key, child in cast("JsonObject", value).items()}
    if isinstance(value, list):
        return [_stringify_leaves(item) for item in cast("list[object]", value)]
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    return value


def _echo_dynamic(node: JsonObject) -> None:
    if isinstance(node.get("dynamic"), bool):
        node["dynamic"] = "true" if node["dynamic"] else "false"


def _stored_mappings(mappings: JsonObject | None) -> JsonObject:
    stored = copy.deepcopy(mappings or {})
    _echo_dynamic(stored)
    for field_mapping in cast("JsonObject", stored.get("properties", {})).values():
        if not isinstance(field_mapping, dict):
            continue
        field_dict = cast("JsonObject", field_mapping)
        if field_dict.get("index") is True:
            del field_dict["index"]
        _echo_dynamic(field_dict)
    return stored


def _stored_settings(settings: JsonObject | None, *, created: int) -> JsonObject:
    declared = copy.deepcopy(settings or {})
    index_scope = cast("JsonObject", declared.pop("index", {}))
    index_scope.update(declared)
    stored = cast("JsonObject", _stringify_leaves(index_scope))
    # Defaults the cluster adds on its own.
    stored.setdefault("number_of_shards", "1")
    stored.setdefault("number_of_replicas", "1")
    stored["creation_date"] = str(created)
    stored["uuid"] = f"uuid-{created}"
    return stored


@dataclass(slots=True)
class StoredIndex:
    mappings: JsonObject
    settings: JsonObject
    creation_date: int
    body: str | None


@dataclass(slots=True)
class FakeCluster:
    """Cluster double that enriches stored documents the way a real cluster does."""

    indices: dict[str, StoredIndex] = field(default_factory=dict["str", "StoredIndex"])
    templates: dict[str, str] = field(default_factory=dict["str", "str"])
    unacknowledged: set[str] = field(default_factory=set["str"])
    calls: list[tuple[str, str]] = field(default_factory=list["tuple[str, str]"])
    settings_filters: list[str] = field(default_factory=list["str"])
    updated_settings: dict[str, list[str]] = field(default_factory=dict["str", "list[str]"])
    _clock: itertools.count[int] = field(default_factory=lambda: itertools.count(1_700_000_000_000))

    def seed(self, name: str, body: str | None) -> None:
        """Create ``name`` without recording a call."""

        self._store(name, body)

    def count(self, operation: str, name: str | None = None) -> int:
        return sum(
            1 for op, target in self.calls if op == operation and (name is None or target == name)
        )

    def creation_date(self, name: str) -> int:
        return self.indices[name].creation_date

    # state reader

    def exists(self, name: str) -> bool:
        self.calls.append(("exists", name))
        return name in self.indices

    def get_mapping(self, name: str) -> JsonObject:
        self.calls.append(("get_mapping", name))
        return copy.deepcopy(self._require(name).mappings)

    def get_settings(self, name: str, path_filter: str) -> JsonObject:
        self.calls.append(("get_settings", name))
        self.settings_filters.append(path_filter)
        return copy.deepcopy(self._require(name).settings)

    # index writer

    def create_index(self, name: str, body: str | None) -> None:
        self.calls.append(("create_index", name))
        if name in self.indices:
            raise TransportError(f"index [{name}] already exists", status_code=400)
        if "create index" in self.unacknowledged:
            raise AcknowledgementError(name, "create index")
        self._store(name, body)

    def delete_index(self, name: str) -> None:
        self.calls.append(("delete_index", name))
        self._require(name)
        if "delete index" in self.unacknowledged:
            raise AcknowledgementError(name, "delete index")
        del self.indices[name]

    def update_settings(self, name: str, body: str) -> None:
        self.calls.append(("update_settings", name))
        self._require(name)
        self.updated_settings.setdefault(name, []).append(body)

    # template gateway

    def template_exists(self, name: str) -> bool:
        self.calls.append(("template_exists", name))
        return name in self.templates

    def put_template(self, name: str, body: str) -> None:
        self.calls.append(("put_template", name))
        if "put template" in self.unacknowledged:
            raise AcknowledgementError(name, "put template")
        self.templates[name] = body

    def _require(self, name: str) -> StoredIndex:
        try:
            return self.indices[name]
        except KeyError:
            raise IndexNotFoundError(f"Index [{name}] not found", status_code=404) from None

    def _store(self, name: str, body: str | None) -> None:
        payload = cast("JsonObject", json.loads(body)) if body else {}
        created = next(self._clock)
        self.indices[name] = StoredIndex(
            mappings=_stored_mappings(payload.get("mappings")),
            settings=_stored_settings(payload.get("settings"), created=created),
            creation_date=created,
            body=body,
        )
