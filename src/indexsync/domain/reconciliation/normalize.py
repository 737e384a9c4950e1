"""Canonical forms for comparing declared and cluster-reported documents.

The cluster enriches what it stores: mappings gain implicit defaults and every
settings leaf comes back as a string. Comparing raw documents would therefore
always report a difference. This module turns both sides into hashable
canonical trees where object key order does not matter, array order does,
and JSON types are tagged so ``true`` never equals ``1``.
"""

from __future__ import annotations

import copy
from collections.abc import Hashable, Mapping
from functools import singledispatch
from typing import TYPE_CHECKING, Any, Final, cast

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .contracts import JsonObject

type Canonical = tuple[Hashable, ...]

_MAPPING_CHILD_KEYS: Final = ("properties", "fields")
_DYNAMIC: Final = "dynamic"
_SETTINGS_ROOT: Final = "index"


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<missing>"


MISSING: Final = _Missing()


@singledispatch
def canonicalize(value: object) -> Canonical:
    raise TypeError(f"Unsupported JSON value of type {type(value).__name__}")


@canonicalize.register(type(None))
def _(value: None) -> Canonical:
    return ("null",)


@canonicalize.register
def _(value: _Missing) -> Canonical:
    return ("missing",)


@canonicalize.register
def _(value: bool) -> Canonical:
    return ("bool", value)


@canonicalize.register(int)
@canonicalize.register(float)
def _(value: float) -> Canonical:
    return ("number", value)


@canonicalize.register
def _(value: str) -> Canonical:
    return ("string", value)


@canonicalize.register(list)
@canonicalize.register(tuple)
def _(value: Iterable[object]) -> Canonical:
    return ("array", tuple(canonicalize(item) for item in value))


@canonicalize.register(Mapping)
def _(value: Mapping[str, object]) -> Canonical:
    items = sorted((str(key), canonicalize(child)) for key, child in value.items())
    return ("object", tuple(items))


def normalize_mapping(mapping: Mapping[str, Any] | None) -> JsonObject:
    """Return a copy of ``mapping`` in the shape the cluster reports it.

    The cluster never reports ``index: true`` because it is the default, so
    the flag is dropped from every field under ``properties``, including
    nested object properties and multi-field ``fields``. ``index: false`` is
    kept because it changes behaviour. ``dynamic`` comes back as a string
    (``"false"``, ``"strict"``) at the root and on object fields.
    """

    if not mapping:
        return {}
    normalized = cast("JsonObject", copy.deepcopy(dict(mapping)))
    _stringify_dynamic(normalized)
    _normalize_fields(normalized.get("properties"))
    return normalized


def _stringify_dynamic(node: dict[str, object]) -> None:
    value = node.get(_DYNAMIC)
    if isinstance(value, bool):
        node[_DYNAMIC] = "true" if value else "false"


def _normalize_fields(properties: object) -> None:
    if not isinstance(properties, dict):
        return
    for field_mapping in cast("dict[str, object]", properties).values():
        if not isinstance(field_mapping, dict):
            continue
        field_dict = cast("dict[str, object]", field_mapping)
        if field_dict.get("index") is True:
            del field_dict["index"]
        _stringify_dynamic(field_dict)
        for child_key in _MAPPING_CHILD_KEYS:
            _normalize_fields(field_dict.get(child_key))


def canonical_mapping(mapping: Mapping[str, Any] | None) -> Canonical:
    return canonicalize(normalize_mapping(mapping))


def mappings_equal(desired: Mapping[str, Any] | None, actual: Mapping[str, Any] | None) -> bool:
    return canonical_mapping(desired) == canonical_mapping(actual)


def _lookup(node: object, parts: tuple[str, ...]) -> object:
    if not parts:
        return node
    if not isinstance(node, Mapping):
        return MISSING
    mapping = cast("Mapping[str, object]", node)
    # Settings may be nested, flat (``"analysis.analyzer"``) or a mix of both.
    for size in range(len(parts), 0, -1):
        key = ".".join(parts[:size])
        if key in mapping:
            value = _lookup(mapping[key], parts[size:])
            if value is not MISSING:
                return value
    prefix = ".".join(parts) + "."
    flattened = {
        key.removeprefix(prefix): child for key, child in mapping.items() if key.startswith(prefix)
    }
    return flattened or MISSING


def settings_value(settings: Mapping[str, Any] | None, dotted_key: str) -> object:
    """Resolve ``dotted_key`` in a settings object, or return ``MISSING``.

    Declarations may write settings with or without the ``index`` wrapper, so
    the path is tried under ``index`` first and then at the top level.
    """

    if not settings:
        return MISSING
    parts = tuple(dotted_key.split("."))
    if parts[0] == _SETTINGS_ROOT and len(parts) > 1:
        parts = parts[1:]
    scoped = _lookup(settings, (_SETTINGS_ROOT, *parts))
    if scoped is not MISSING:
        return scoped
    return _lookup(settings, parts)


def expand_setting(value: object) -> object:
    """Expand flat dotted keys and stringify scalars the way the cluster reports them."""

    if isinstance(value, Mapping):
        expanded: dict[str, object] = {}
        for key, child in cast("Mapping[str, object]", value).items():
            _insert_dotted(expanded, str(key).split("."), expand_setting(child))
        return expanded
    if isinstance(value, list | tuple):
        return [expand_setting(item) for item in cast("Iterable[object]", value)]
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int | float):
        return str(value)
    return value


def _insert_dotted(target: dict[str, object], parts: list[str], value: object) -> None:
    head, *rest = parts
    if not rest:
        existing = target.get(head)
        if isinstance(existing, dict) and isinstance(value, dict):
            for key, child in cast("dict[str, object]", value).items():
                _insert_dotted(cast("dict[str, object]", existing), [key], child)
        else:
            target[head] = value
        return
    child = target.get(head)
    if not isinstance(child, dict):
        child = {}
        target[head] = child
    _insert_dotted(cast("dict[str, object]", child), rest, value)


def canonical_setting(value: object) -> Canonical:
    return canonicalize(expand_setting(value))


def differing_settings(
    desired: Mapping[str, Any] | None,
    actual: Mapping[str, Any] | None,
    relevant_settings: Iterable[str],
) -> tuple[str, ...]:
    """Return the relevant keys whose values differ between both settings objects."""

    differing: list[str] = []
    for key in relevant_settings:
        wanted = canonical_setting(settings_value(desired, key))
        current = canonical_setting(settings_value(actual, key))
        if wanted != current:
            differing.append(key)
    return tuple(differing)


def settings_filter(relevant_settings: Iterable[str]) -> str:
    """Build the ``GET _settings`` name filter covering every relevant key."""

    patterns: list[str] = []
    for key in relevant_settings:
        scoped = key if key.startswith(f"{_SETTINGS_ROOT}.") else f"{_SETTINGS_ROOT}.{key}"
        pattern = f"{scoped}*"
        if pattern not in patterns:
            patterns.append(pattern)
    return ",".join(patterns)
