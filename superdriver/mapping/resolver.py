"""
Payload Value Resolver - reads the value a cursor points to.

The first cursor segment is looked up as a dotted path. When the value
found is a list, the rest of the cursor is resolved once per element
(fan-out). A non-list value is returned as is, and the remaining
segments are dropped.
"""

from typing import Any

from superdriver.schema.cursor import ARRAY_BOUNDARY, Cursor, Segment


def get_path(data: Any, path: str) -> Any:
    """
    Look up a dotted property path ("a.b.0.c")

    Numeric tokens index into lists. Missing keys, out of range indexes
    and lookups on scalars all resolve to None. The empty path returns
    `data` itself.
    """
    if not path:
        return data

    value = data
    for token in path.split("."):
        if isinstance(value, dict):
            value = value.get(token)
        elif isinstance(value, (list, tuple)) and token.lstrip("-").isdigit():
            index = int(token)
            value = value[index] if -len(value) <= index < len(value) else None
        else:
            return None

        if value is None:
            return None

    return value


def resolve_segment(data: Any, segment: Segment) -> Any:
    if segment is ARRAY_BOUNDARY:
        return data
    return get_path(data, segment.path)


def extract(data: Any, cursor: Cursor) -> Any:
    """
    Extract the value denoted by a cursor

    Args:
        data: Payload (parsed JSON)
        cursor: Cursor produced by the schema scanner

    Returns:
        The value, a (nested) list of values when the cursor crosses
        arrays, or None when the data is missing
    """
    if not cursor:
        return data

    value = resolve_segment(data, cursor.head)
    if isinstance(value, (list, tuple)):
        rest = cursor.rest
        return [extract(element, rest) for element in value]

    return value
