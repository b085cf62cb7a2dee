"""Serialización de query strings.

Reglas (por defecto):
- Arrays: se repite la clave (`tags=a&tags=b`); opcional `tags[]=` o coma.
- Objetos anidados: claves `padre[hijo]`.
- `None` se omite; strings vacíos se conservan.
- Claves ordenadas alfabéticamente (también dentro de objetos anidados).
- Percent-encoding de claves y valores (semántica `encodeURIComponent`).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Literal
from urllib.parse import quote

ArrayFormat = Literal["repeat", "bracket", "comma"]

# Caracteres que encodeURIComponent deja sin escapar.
_UNRESERVED = "-_.!~*'()"


@dataclass(frozen=True)
class QueryStringOptions:
    array_format: ArrayFormat = "repeat"
    skip_null: bool = True
    skip_empty_string: bool = False
    encode: bool = True
    sort_keys: bool = True


DEFAULT_QUERY_OPTIONS = QueryStringOptions()


def serialize_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return serialize_value(value.value)
    return str(value)


def _encode(value: str, encode: bool) -> str:
    return quote(value, safe=_UNRESERVED) if encode else value


def _items(mapping: Mapping[str, Any], sort_keys: bool) -> list[tuple[str, Any]]:
    items = [(str(k), v) for k, v in mapping.items()]
    if sort_keys:
        items.sort(key=lambda item: item[0])
    return items


def _build_pairs(key: str, value: Any, options: QueryStringOptions, pairs: list[tuple[str, str]]) -> None:
    if value is None:
        if not options.skip_null:
            pairs.append((key, ""))
        return

    if isinstance(value, (list, tuple)):
        if not value:
            return
        if options.array_format == "comma":
            serialized = [serialize_value(v) for v in value if v is not None]
            if options.skip_empty_string:
                serialized = [s for s in serialized if s != ""]
            joined = ",".join(serialized)
            if joined or not options.skip_empty_string:
                pairs.append((key, joined))
            return
        next_key = f"{key}[]" if options.array_format == "bracket" else key
        for item in value:
            _build_pairs(next_key, item, options, pairs)
        return

    if isinstance(value, Mapping):
        for child_key, child_value in _items(value, options.sort_keys):
            next_key = f"{key}[{child_key}]" if key else child_key
            _build_pairs(next_key, child_value, options, pairs)
        return

    serialized = serialize_value(value)
    if options.skip_empty_string and serialized == "":
        return
    pairs.append((key, serialized))


def to_query_string(
    params: Mapping[str, Any] | None,
    options: QueryStringOptions | None = None,
) -> str:
    """Serializa `params` como `clave=valor&...` (sin `?` inicial)."""

    if not params:
        return ""
    options = options or DEFAULT_QUERY_OPTIONS

    pairs: list[tuple[str, str]] = []
    for key, value in _items(params, options.sort_keys):
        _build_pairs(key, value, options, pairs)

    return "&".join(f"{_encode(k, options.encode)}={_encode(v, options.encode)}" for k, v in pairs)
