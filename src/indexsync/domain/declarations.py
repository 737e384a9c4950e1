"""Desired-state documents for indices and templates."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, cast

from .errors import DeclarationError

if TYPE_CHECKING:
    from .reconciliation.contracts import JsonObject


@dataclass(slots=True, frozen=True)
class IndexDeclaration:
    """Create body for one index plus the parsed parts drift detection compares.

    ``raw_json`` of ``None`` means the index is created with the cluster defaults.
    """

    name: str
    raw_json: str | None = None
    settings: JsonObject | None = None
    mappings: JsonObject | None = None


@dataclass(slots=True, frozen=True)
class TemplateDeclaration:
    name: str
    raw_json: str


def parse_declaration_object(name: str, text: str | None) -> JsonObject | None:
    """Parse declaration text into a JSON object, or ``None`` for blank text."""

    if text is None or not text.strip():
        return None
    try:
        payload: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DeclarationError(
            name, f"malformed JSON at line {exc.lineno} column {exc.colno}: {exc.msg}"
        ) from exc
    if not isinstance(payload, dict):
        raise DeclarationError(name, f"expected a JSON object, got {type(payload).__name__}")
    return cast("JsonObject", payload)


def _optional_object(name: str, payload: JsonObject, key: str) -> JsonObject | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise DeclarationError(name, f"'{key}' must be a JSON object")
    return cast("JsonObject", value)


def parse_index_declaration(name: str, text: str | None) -> IndexDeclaration:
    payload = parse_declaration_object(name, text)
    if payload is None:
        return IndexDeclaration(name=name)
    return IndexDeclaration(
        name=name,
        raw_json=text,
        settings=_optional_object(name, payload, "settings"),
        mappings=_optional_object(name, payload, "mappings"),
    )


def parse_template_declaration(name: str, text: str | None) -> TemplateDeclaration:
    payload = parse_declaration_object(name, text)
    if payload is None:
        raise DeclarationError(name, "template declarations cannot be empty")
    return TemplateDeclaration(name=name, raw_json=cast("str", text))
