"""Response codec: render Results into the canonical envelope.

Every response is ``{"status": "<code> <phrase>", "body": <str|null>}``.
Success envelopes carry the fixed reason phrase of their code and the
payload; failure envelopes carry the failure reason verbatim and a null
body. Rendering never fails.

The client-side helpers at the bottom build and encode a Request for the
wire and decode an envelope received from a server.
"""

import json
import time
from typing import Any

from .models import COLLECTION_PATH, Request, Result, StatusCode, Success

REASON_PHRASES: dict[StatusCode, str] = {
    StatusCode.OK: "Ok",
    StatusCode.CREATED: "Created",
    StatusCode.UPDATED: "Updated",
}


def render(result: Result) -> dict[str, Any]:
    """Build the envelope for a result."""
    if isinstance(result, Success):
        phrase = REASON_PHRASES.get(result.code, "")
        return {"status": f"{int(result.code)} {phrase}", "body": result.payload}
    return {"status": f"{int(result.code)} {result.reason}", "body": None}


def encode_response(result: Result) -> bytes:
    """Render a result to the UTF-8 bytes written back to the client."""
    return json.dumps(render(result)).encode("utf-8")


def item_path(cid: int) -> str:
    """Path addressing a single category."""
    return f"{COLLECTION_PATH}/{cid}"


def build_request(
    method: str,
    path: str = "",
    body: str | dict[str, Any] | None = None,
    date: int | None = None,
) -> Request:
    """Build a request stamped with the current unix time.

    Dict bodies are JSON-encoded, as create and update expect a JSON
    object inside the body string.
    """
    if isinstance(body, dict):
        body = json.dumps(body)
    return Request(
        method=method,
        date=int(time.time()) if date is None else date,
        path=path,
        body=body,
    )


def encode_request(request: Request) -> bytes:
    """Serialize a request to the bytes a client sends."""
    return json.dumps(request.to_dict()).encode("utf-8")


def decode_response(payload: bytes) -> dict[str, Any]:
    """Decode a response envelope received from a server.

    Raises:
        ValueError: If the payload is not a JSON object with a status field.
    """
    envelope = json.loads(payload.decode("utf-8"))
    if not isinstance(envelope, dict) or "status" not in envelope:
        raise ValueError(f"Not a response envelope: {payload[:200]!r}")
    return envelope


def status_code(envelope: dict[str, Any]) -> int:
    """Numeric code of a decoded envelope's status string."""
    return int(str(envelope["status"]).split(" ", 1)[0])
