"""Request model: turn a raw payload into a validated Request.

Validation order matters because clients see only the first failure:
payload shape, then presence of method and date, then the date value.
The method itself is not checked here; the dispatcher rejects unknown
methods.
"""

import json
import re
from datetime import datetime, timezone
from typing import Any

from .errors import InvalidDate, MalformedPayload, MissingField
from .models import Request

# More than 20 digits cannot fit a signed 64-bit value.
_INTEGER = re.compile(r"\s*[+-]?[0-9]{1,20}\s*")

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

# Seconds since the epoch of 0001-01-01T00:00:00Z and 9999-12-31T23:59:59Z.
_EARLIEST_DATE = int(datetime(1, 1, 1, tzinfo=timezone.utc).timestamp())
_LATEST_DATE = int(datetime(9999, 12, 31, 23, 59, 59, tzinfo=timezone.utc).timestamp())


def field_text(value: Any) -> str:
    """Text form of a decoded JSON field.

    Strings are returned unchanged, null becomes the empty string and
    any other value is rendered back to its JSON text.
    """
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return json.dumps(value)


def parse_date(value: Any) -> int:
    """Parse the date field into unix seconds.

    Accepts a JSON integer or a string holding a decimal integer.

    Raises:
        InvalidDate: If the value is not an integer, overflows a signed
            64-bit integer, or is outside the representable calendar range.
    """
    if isinstance(value, bool):
        raise InvalidDate()
    if isinstance(value, int):
        seconds = value
    else:
        text = field_text(value)
        if not _INTEGER.fullmatch(text):
            raise InvalidDate()
        seconds = int(text)

    if not _INT64_MIN <= seconds <= _INT64_MAX:
        raise InvalidDate()
    # The first representable second doubles as the "no date" sentinel.
    if not _EARLIEST_DATE < seconds <= _LATEST_DATE:
        raise InvalidDate()
    return seconds


def parse_request(payload: bytes | str) -> Request:
    """Parse and validate a raw request payload.

    Args:
        payload: Complete request as received from the connection.

    Returns:
        The validated Request.

    Raises:
        MalformedPayload: If the payload is not a UTF-8 JSON object.
        MissingField: If method or date is absent.
        InvalidDate: If date is not a valid unix timestamp.
    """
    try:
        text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
        data = json.loads(text)
    except ValueError as e:
        raise MalformedPayload(str(e)) from e

    if not isinstance(data, dict):
        raise MalformedPayload(
            f"expected a JSON object, got {type(data).__name__}"
        )

    if "method" not in data or "date" not in data:
        raise MissingField()

    date = parse_date(data["date"])

    return Request(
        method=field_text(data["method"]),
        date=date,
        path=field_text(data.get("path")),
        body=field_text(data["body"]) if "body" in data else None,
    )
