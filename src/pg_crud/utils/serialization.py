"""JSON serialization utilities using orjson for speed and correctness.

orjson handles most database types automatically and correctly:
- datetime, date, time → ISO format
- UUID → string
- dataclasses, pydantic models → dict

We only need to handle a few special cases.
"""

import base64
import datetime
import decimal
import ipaddress
from typing import Any, Mapping

import orjson


def _default_handler(obj: Any) -> Any:
    """
    Custom default handler for types orjson doesn't handle natively.

    Args:
        obj: Object to serialize

    Returns:
        JSON-serializable representation

    Raises:
        TypeError: If object cannot be serialized
    """
    # NUMERIC columns come back as Decimal; keep full precision
    if isinstance(obj, decimal.Decimal):
        return str(obj)

    if isinstance(obj, datetime.timedelta):
        return obj.total_seconds()

    # bytea - try UTF-8 decode, fall back to base64
    if isinstance(obj, (bytes, bytearray, memoryview)):
        data = bytes(obj)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return base64.b64encode(data).decode("ascii")

    if isinstance(obj, (set, frozenset)):
        return list(obj)

    if isinstance(
        obj,
        (
            ipaddress.IPv4Address,
            ipaddress.IPv6Address,
            ipaddress.IPv4Network,
            ipaddress.IPv6Network,
        ),
    ):
        return str(obj)

    # asyncpg Range objects
    if (
        hasattr(obj, "lower")
        and hasattr(obj, "upper")
        and hasattr(obj, "lower_inc")
        and not isinstance(obj, str)
    ):
        return {
            "lower": obj.lower,
            "upper": obj.upper,
            "lower_inc": obj.lower_inc,
            "upper_inc": obj.upper_inc,
        }

    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def convert_value_to_json_safe(value: Any) -> Any:
    """
    Convert a value to JSON-serializable format.

    Args:
        value: Value to convert

    Returns:
        JSON-serializable value
    """
    try:
        # Round-trip through orjson so the result matches what dumps() emits
        return orjson.loads(orjson.dumps(value, default=_default_handler))
    except TypeError:
        return str(value)


def convert_row_to_json_safe(row: Mapping[str, Any]) -> dict[str, Any]:
    """
    Convert all values in a row to JSON-serializable formats.

    Args:
        row: Mapping representing a database row

    Returns:
        Dictionary with JSON-serializable values
    """
    return {key: convert_value_to_json_safe(value) for key, value in row.items()}


def convert_rows_to_json_safe(rows: list[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """Convert all rows to JSON-serializable format."""
    return [convert_row_to_json_safe(row) for row in rows]


def prepare_param(value: Any) -> Any:
    """
    Prepare a value for positional binding.

    Mappings and lists are sent as JSON text so they can land in json/jsonb
    columns. Everything else is handed to the driver untouched; pass a tuple
    to bind a PostgreSQL array.
    """
    if isinstance(value, (Mapping, list)):
        return dumps(value)
    return value


def dumps(obj: Any) -> str:
    """
    Serialize object to JSON string using orjson.

    Args:
        obj: Object to serialize

    Returns:
        JSON string
    """
    return orjson.dumps(obj, default=_default_handler).decode("utf-8")
