"""Discover and read declaration files from a directory tree.

Layout under the declaration root::

    _template/<template>.json       index templates
    <index>/_settings.json          index creation body (optional)
    <index>/_update_settings.json   settings pushed to the index after reconciling
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from indexsync.domain.errors import DeclarationNotFoundError

if TYPE_CHECKING:
    from collections.abc import Mapping

log = getLogger(__name__)

INDEX_SETTINGS_FILENAME: Final[str] = "_settings.json"
UPDATE_SETTINGS_FILENAME: Final[str] = "_update_settings.json"
TEMPLATE_DIRNAME: Final[str] = "_template"
TEMPLATE_SUFFIX: Final[str] = ".json"

_PLACEHOLDER = re.compile(r"\$(?P<escape>\$)?\{(?P<name>[^}:]+)(?::-(?P<default>[^}]*))?\}")


def substitute_env(text: str, environ: Mapping[str, str] | None = None) -> str:
    """Replace ``${NAME}`` and ``${NAME:-default}`` placeholders.

    Unknown names without a default are left untouched and ``$${NAME}`` escapes
    a literal placeholder.
    """

    values = os.environ if environ is None else environ

    def replace(match: re.Match[str]) -> str:
        if match.group("escape"):
            return match.group(0)[1:]
        name = match.group("name")
        if name in values:
            return values[name]
        default = match.group("default")
        return default if default is not None else match.group(0)

    return _PLACEHOLDER.sub(replace, text)


def load_declaration_text(
    path: Path,
    *,
    name: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DeclarationNotFoundError(name or path.stem, f"cannot read {path}: {exc}") from exc
    log.debug("Loaded declaration %s", path)
    return substitute_env(text, environ)


@dataclass(frozen=True, slots=True)
class DeclarationDirectory:
    """Convention-based view over a declaration root."""

    root: Path

    def resolve_root(self) -> Path:
        return self.root.expanduser().resolve()

    def index_names(self) -> list[str]:
        root = self.resolve_root()
        if not root.is_dir():
            raise DeclarationNotFoundError(str(root), "declaration root is not a directory")
        return sorted(
            entry.name
            for entry in root.iterdir()
            if entry.is_dir() and entry.name != TEMPLATE_DIRNAME and not entry.name.startswith(".")
        )

    def template_names(self) -> list[str]:
        template_dir = self.resolve_root() / TEMPLATE_DIRNAME
        if not template_dir.is_dir():
            return []
        return sorted(
            entry.name.removesuffix(TEMPLATE_SUFFIX)
            for entry in template_dir.iterdir()
            if entry.is_file() and entry.name.endswith(TEMPLATE_SUFFIX)
        )

    def index_settings_path(self, index: str) -> Path:
        return self.resolve_root() / index / INDEX_SETTINGS_FILENAME

    def update_settings_path(self, index: str) -> Path:
        return self.resolve_root() / index / UPDATE_SETTINGS_FILENAME

    def template_path(self, template: str) -> Path:
        return self.resolve_root() / TEMPLATE_DIRNAME / f"{template}{TEMPLATE_SUFFIX}"

    def read_index(self, index: str, environ: Mapping[str, str] | None = None) -> str | None:
        """Return the creation body, or ``None`` to create with cluster defaults."""

        path = self.index_settings_path(index)
        if not path.is_file():
            log.debug("No %s for index [%s]", INDEX_SETTINGS_FILENAME, index)
            return None
        return load_declaration_text(path, name=index, environ=environ)

    def read_update_settings(
        self, index: str, environ: Mapping[str, str] | None = None
    ) -> str | None:
        path = self.update_settings_path(index)
        if not path.is_file():
            return None
        return load_declaration_text(path, name=index, environ=environ)

    def read_template(self, template: str, environ: Mapping[str, str] | None = None) -> str:
        return load_declaration_text(self.template_path(template), name=template, environ=environ)
