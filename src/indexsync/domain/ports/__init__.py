"""Domain port definitions for adapters."""

from __future__ import annotations

from .cluster import (
    ClusterStateReader,
    DeclarativeCluster,
    IndexCluster,
    IndexWriter,
    TemplateGateway,
)

__all__ = [
    "ClusterStateReader",
    "DeclarativeCluster",
    "IndexCluster",
    "IndexWriter",
    "TemplateGateway",
]
