"""Loading of schema graphs from the JSON hand-off format of a schema parser.

The document is either a list of schemas or an object with a ``schemas`` list.
Each schema has a ``kind`` (``message``, ``service`` or ``action``), a
``name`` in ``package/msg/Name`` form, and one field list per part::

    {"kind": "service", "name": "example/srv/AddTwoInts",
     "request": [{"type": "int64", "name": "a"}, {"type": "int64", "name": "b"}],
     "response": [{"type": "int64", "name": "sum"}]}

A field has ``type`` and ``name``, and optionally ``array_length`` (``-1``
scalar, ``0`` unbounded, ``n`` fixed), ``value`` for constants and
``children`` for inline nested types. String constant values are kept as raw
literal text; numbers and booleans are rendered as Python literals.
"""

import json
import logging
from pathlib import Path
from typing import Any

from rosbridge_codegen.exceptions import InvalidFieldError, SchemaLoadError
from rosbridge_codegen.models import SCALAR, Action, Field, Message, Schema, Service, TypeName

logger = logging.getLogger(__name__)

SCHEMA_PARTS: dict[str, tuple[type, tuple[str, ...]]] = {
    "message": (Message, ("fields",)),
    "service": (Service, ("request", "response")),
    "action": (Action, ("goal", "result", "feedback")),
}


def _literal(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool | int | float):
        return repr(value)
    raise TypeError(f"Unsupported constant value {value!r}")


def field_from_dict(data: dict[str, Any]) -> Field:
    """Build a Field (and its nested children) from its JSON form."""
    return Field(
        type=TypeName.parse(data["type"]),
        name=data["name"],
        children=tuple(field_from_dict(child) for child in data.get("children", ())),
        value=_literal(data.get("value")),
        array_length=int(data.get("array_length", SCALAR)),
    )


def schema_from_dict(data: dict[str, Any]) -> Schema:
    """Build a Message, Service or Action from its JSON form."""
    kind = data.get("kind", "message")
    if kind not in SCHEMA_PARTS:
        raise ValueError(f"Unknown schema kind '{kind}'")
    schema_cls, parts = SCHEMA_PARTS[kind]
    fields = {part: tuple(field_from_dict(f) for f in data.get(part, ())) for part in parts}
    return schema_cls(name=TypeName.parse(data["name"]), **fields)


def parse_schemas(document: Any, source: str = "<document>") -> list[Schema]:
    """Build schemas from an already decoded JSON document."""
    if isinstance(document, dict):
        document = document.get("schemas")
    if not isinstance(document, list):
        raise SchemaLoadError(source, "expected a list of schemas")
    schemas = []
    for index, entry in enumerate(document):
        try:
            schemas.append(schema_from_dict(entry))
        except InvalidFieldError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SchemaLoadError(source, f"schema #{index}: {e!r}") from e
    logger.debug("Loaded %d schemas from %s", len(schemas), source)
    return schemas


def load_schemas(path: Path) -> list[Schema]:
    """Load schemas from a JSON file."""
    try:
        document = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SchemaLoadError(str(path), str(e)) from e
    return parse_schemas(document, str(path))
