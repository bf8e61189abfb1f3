"""Conversion of JSON metadata updates into YAML-compatible values.

``convert_value`` never fails: every JSON value maps onto a value that
``yaml.safe_dump`` can write, and integral numbers stay integers.
"""

from __future__ import annotations

import json
import math
from typing import Any
from typing import Union

from ..exceptions import ValidationError

# str | int | float | bool | None | dict[str, StructuredValue] | list[StructuredValue]
StructuredValue = Union[str, int, float, bool, None, dict[str, Any], list[Any]]


def convert_value(value: Any) -> StructuredValue:
    """Convert a decoded JSON value into a structured frontmatter value."""
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return int(value)
        return value
    if isinstance(value, dict):
        return {str(key): convert_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [convert_value(item) for item in value]
    return str(value)


def parse_updates(updates_json: str) -> dict[str, StructuredValue]:
    """Decode a JSON object of metadata updates and convert every value.

    Raises:
        ValidationError: If the text is not valid JSON or is not an object.
    """
    try:
        decoded = json.loads(updates_json)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            "Invalid JSON format provided for metadata_updates_json.",
            field="metadata_updates_json",
            details={"failure_reason": str(e)},
        ) from e

    if not isinstance(decoded, dict):
        raise ValidationError(
            "metadata_updates_json must be a JSON object.",
            field="metadata_updates_json",
            details={"received_type": type(decoded).__name__},
        )
    return {str(key): convert_value(item) for key, item in decoded.items()}
