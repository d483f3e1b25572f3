"""JSON-typed node parameters.

Parameters such as ``pointIds`` or ``filter`` reach the node either as JSON
text typed into the editor or as values an expression already produced.
Both shapes are captured as a JsonField and turned into a structured value
by a single function, ``normalize``.
"""

import json
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class RawText:
    """JSON text still to be parsed."""

    text: str


@dataclass(frozen=True)
class Structured:
    """A value that is already structured (list, dict, number...)."""

    value: Any


JsonField = RawText | Structured


def is_blank(value: Any) -> bool:
    """Return True for None and for empty or whitespace-only strings."""
    return value is None or (isinstance(value, str) and value.strip() == "")


def json_field(value: Any) -> JsonField | None:
    """Wrap a resolved parameter value; blank values become None."""
    if is_blank(value):
        return None
    if isinstance(value, str):
        return RawText(value)
    return Structured(value)


def normalize(field: JsonField) -> Any:
    """Return the structured value of a field.

    Raises:
        json.JSONDecodeError: If a RawText field is not valid JSON.
    """
    match field:
        case RawText(text=text):
            return json.loads(text)
        case Structured(value=value):
            return value


def parse_optional(value: Any) -> Any | None:
    """Normalize a resolved value, treating blank input as absent."""
    field = json_field(value)
    return None if field is None else normalize(field)
