"""Ports for reading and mutating the search cluster."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from indexsync.domain.reconciliation.contracts import JsonObject


@runtime_checkable
class ClusterStateReader(Protocol):
    """Read-only view of index state.

    ``get_mapping`` and ``get_settings`` must only be called once ``exists``
    returned ``True`` for the same name.
    """

    def exists(self, name: str) -> bool: ...

    def get_mapping(self, name: str) -> JsonObject: ...

    def get_settings(self, name: str, path_filter: str) -> JsonObject: ...


@runtime_checkable
class IndexWriter(Protocol):
    """Mutations that raise unless the cluster acknowledges them."""

    def create_index(self, name: str, body: str | None) -> None: ...

    def delete_index(self, name: str) -> None: ...

    def update_settings(self, name: str, body: str) -> None: ...


@runtime_checkable
class IndexCluster(ClusterStateReader, IndexWriter, Protocol):
    """Everything the index reconciler needs from the cluster."""


@runtime_checkable
class TemplateGateway(Protocol):
    def template_exists(self, name: str) -> bool: ...

    def put_template(self, name: str, body: str) -> None: ...


@runtime_checkable
class DeclarativeCluster(IndexCluster, TemplateGateway, Protocol):
    """Cluster port used by a full reconciliation pass."""


__all__ = [
    "ClusterStateReader",
    "DeclarativeCluster",
    "IndexCluster",
    "IndexWriter",
    "TemplateGateway",
]
