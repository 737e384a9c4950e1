from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from indexsync.adapters.filesystem import (
    DeclarationDirectory,
    load_declaration_text,
    substitute_env,
)
from indexsync.domain.errors import DeclarationNotFoundError

if TYPE_CHECKING:
    from pathlib import Path


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ('{"shards": ${SHARDS}}', '{"shards": 3}'),
        ('{"shards": ${UNSET:-1}}', '{"shards": 1}'),
        ('{"shards": ${SHARDS:-1}}', '{"shards": 3}'),
        ('{"name": "${UNSET}"}', '{"name": "${UNSET}"}'),
        ('{"name": "$${SHARDS}"}', '{"name": "${SHARDS}"}'),
        ('{"price": "$5"}', '{"price": "$5"}'),
    ],
)
def test_substitute_env(text: str, expected: str) -> None:
    assert substitute_env(text, {"SHARDS": "3"}) == expected


def test_substitute_env_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INDEXSYNC_TEST_REPLICAS", "2")

    assert substitute_env("${INDEXSYNC_TEST_REPLICAS}") == "2"


def test_load_declaration_text_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DeclarationNotFoundError, match=r"\[messages\]"):
        load_declaration_text(tmp_path / "missing.json", name="messages")


def test_directory_discovers_indices_and_templates(tmp_path: Path) -> None:
    for index in ("twitter", "messages", ".git"):
        (tmp_path / index).mkdir()
    template_dir = tmp_path / "_template"
    template_dir.mkdir()
    (template_dir / "logs.json").write_text("{}", encoding="utf-8")
    (template_dir / "README.md").write_text("notes", encoding="utf-8")
    (tmp_path / "stray.json").write_text("{}", encoding="utf-8")

    directory = DeclarationDirectory(tmp_path)

    assert directory.index_names() == ["messages", "twitter"]
    assert directory.template_names() == ["logs"]


def test_directory_without_templates(tmp_path: Path) -> None:
    (tmp_path / "messages").mkdir()

    assert DeclarationDirectory(tmp_path).template_names() == []


def test_index_names_require_existing_root(tmp_path: Path) -> None:
    with pytest.raises(DeclarationNotFoundError, match="not a directory"):
        DeclarationDirectory(tmp_path / "absent").index_names()


def test_read_index_and_update_settings(tmp_path: Path) -> None:
    index_dir = tmp_path / "messages"
    index_dir.mkdir()
    (index_dir / "_settings.json").write_text(
        '{"settings": {"number_of_replicas": ${REPLICAS:-1}}}', encoding="utf-8"
    )
    directory = DeclarationDirectory(tmp_path)

    assert directory.read_index("messages", {"REPLICAS": "0"}) == (
        '{"settings": {"number_of_replicas": 0}}'
    )
    assert directory.read_update_settings("messages") is None


def test_read_index_without_settings_file_returns_none(tmp_path: Path) -> None:
    (tmp_path / "bare").mkdir()

    assert DeclarationDirectory(tmp_path).read_index("bare") is None


def test_read_template_requires_file(tmp_path: Path) -> None:
    with pytest.raises(DeclarationNotFoundError):
        DeclarationDirectory(tmp_path).read_template("logs")
