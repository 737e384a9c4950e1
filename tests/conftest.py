from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from tests.support.fake_cluster import FakeCluster

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path


@pytest.fixture
def fake_cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def message_declaration() -> dict[str, object]:
    return {
        "settings": {
            "number_of_shards": 1,
            "analysis": {
                "analyzer": {
                    "folding": {"type": "custom", "tokenizer": "standard", "filter": ["lowercase"]}
                }
            },
        },
        "mappings": {"properties": {"msg": {"type": "text", "analyzer": "folding"}}},
    }


@pytest.fixture
def declaration_root(tmp_path: Path) -> Callable[[dict[str, object]], Path]:
    """Write a declaration tree from ``{"relative/path.json": payload}`` and return its root."""

    def write(files: dict[str, object]) -> Path:
        root = tmp_path / "es"
        root.mkdir(exist_ok=True)
        for relative, payload in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            text = payload if isinstance(payload, str) else json.dumps(payload)
            path.write_text(text, encoding="utf-8")
        return root

    return write
