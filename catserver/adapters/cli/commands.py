"""CLI command implementations for catserver.

Maps human-friendly commands (list, show, add, rename, remove, echo) to
protocol requests, runs them through a ProtocolPort in-process and
formats the response envelope for the terminal.
"""

import json
import logging
from typing import Any

from catserver.core.codec import (
    build_request,
    decode_response,
    encode_request,
    item_path,
    status_code,
)
from catserver.core.models import COLLECTION_PATH, Request, StatusCode
from catserver.core.ports import ProtocolPort

logger = logging.getLogger(__name__)


class CLICommandHandler:
    """Handles CLI commands by delegating to a ProtocolPort.

    Every command returns a dictionary with ``status`` ("success" or
    "error"), ``operation`` and the decoded ``response`` envelope. With
    ``output_format="text"`` a human-readable ``message`` is added.
    """

    def __init__(self, protocol: ProtocolPort):
        """Initialize the CLI command handler.

        Args:
            protocol: ProtocolPort implementation to execute requests.
        """
        self.protocol = protocol

    def _execute(
        self, operation: str, request: Request, output_format: str = "json"
    ) -> dict[str, Any]:
        envelope = decode_response(self.protocol.handle(encode_request(request)))
        return self._format(operation, envelope, output_format)

    def _format(
        self, operation: str, envelope: dict[str, Any], output_format: str
    ) -> dict[str, Any]:
        code = status_code(envelope)
        succeeded = code <= StatusCode.UPDATED
        result: dict[str, Any] = {
            "status": "success" if succeeded else "error",
            "operation": operation,
            "response": envelope,
        }
        if not succeeded:
            logger.error(f"{operation} failed: {envelope['status']}")

        if output_format == "text":
            result["message"] = _format_text(envelope)
        return result

    def list_categories(self, output_format: str = "json") -> dict[str, Any]:
        """List every category."""
        return self._execute(
            "list", build_request("read", COLLECTION_PATH), output_format
        )

    def show_category(self, cid: int, output_format: str = "json") -> dict[str, Any]:
        """Show a single category."""
        return self._execute("show", build_request("read", item_path(cid)), output_format)

    def add_category(self, name: str, output_format: str = "json") -> dict[str, Any]:
        """Create a category with the given name."""
        request = build_request("create", COLLECTION_PATH, {"name": name})
        return self._execute("add", request, output_format)

    def rename_category(
        self, cid: int, name: str, output_format: str = "json"
    ) -> dict[str, Any]:
        """Rename an existing category."""
        request = build_request("update", item_path(cid), {"name": name})
        return self._execute("rename", request, output_format)

    def remove_category(self, cid: int, output_format: str = "json") -> dict[str, Any]:
        """Delete a category."""
        return self._execute(
            "remove", build_request("delete", item_path(cid)), output_format
        )

    def echo(self, text: str, output_format: str = "json") -> dict[str, Any]:
        """Send text through the echo method."""
        return self._execute("echo", build_request("echo", body=text), output_format)

    def raw_request(
        self, request: dict[str, Any], output_format: str = "json"
    ) -> dict[str, Any]:
        """Send a hand-written request object as-is.

        Nothing is validated on this side, so this exercises exactly the
        checks a remote client would hit.
        """
        payload = json.dumps(request).encode("utf-8")
        envelope = decode_response(self.protocol.handle(payload))
        return self._format("raw", envelope, output_format)


def _format_text(envelope: dict[str, Any]) -> str:
    """Render an envelope as terminal text."""
    lines = [f"Status: {envelope['status']}"]
    body = envelope.get("body")
    if body is None:
        return lines[0]

    try:
        decoded = json.loads(body)
    except ValueError:
        decoded = None

    if isinstance(decoded, list) and all(isinstance(i, dict) for i in decoded):
        lines.append(f"Categories ({len(decoded)}):")
        for item in decoded:
            lines.append(f"  {item.get('cid')}: {item.get('name')}")
    elif isinstance(decoded, dict) and "cid" in decoded:
        lines.append(f"Category {decoded['cid']}: {decoded.get('name')}")
    else:
        lines.append(f"Body: {body}")
    return "\n".join(lines)
