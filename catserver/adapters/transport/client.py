"""Asyncio client for the catserver protocol.

Opens one connection per request, writes the encoded request and reads
the response envelope until the server closes the connection.
"""

import asyncio
import logging
from typing import Any

from catserver.core.codec import (
    build_request,
    decode_response,
    encode_request,
    item_path,
)
from catserver.core.models import COLLECTION_PATH, Request

logger = logging.getLogger(__name__)


class ProtocolClient:
    """Client for a running catserver instance."""

    def __init__(self, host: str = "127.0.0.1", port: int = 5000, timeout: float = 10.0):
        """Initialize the client.

        Args:
            host: Server host.
            port: Server port.
            timeout: Seconds allowed for connecting and for reading the response.
        """
        self.host = host
        self.port = port
        self.timeout = timeout

    async def send_raw(self, payload: bytes) -> bytes:
        """Send raw bytes and return the raw response."""
        reader, writer = await asyncio.wait_for(
            asyncio.open_connection(self.host, self.port), timeout=self.timeout
        )
        try:
            writer.write(payload)
            await writer.drain()
            return await asyncio.wait_for(reader.read(), timeout=self.timeout)
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug(f"Error closing connection: {e}")

    async def send(self, request: Request) -> dict[str, Any]:
        """Send a request and return the decoded response envelope.

        Raises:
            ValueError: If the server's reply is not a response envelope.
            OSError: If the connection fails.
            asyncio.TimeoutError: If the server does not answer in time.
        """
        response = await self.send_raw(encode_request(request))
        return decode_response(response)

    async def create(self, name: str) -> dict[str, Any]:
        return await self.send(build_request("create", COLLECTION_PATH, {"name": name}))

    async def read(self, cid: int | None = None) -> dict[str, Any]:
        """Read one category, or the whole collection when cid is None."""
        path = COLLECTION_PATH if cid is None else item_path(cid)
        return await self.send(build_request("read", path))

    async def update(self, cid: int, name: str) -> dict[str, Any]:
        return await self.send(build_request("update", item_path(cid), {"name": name}))

    async def delete(self, cid: int) -> dict[str, Any]:
        return await self.send(build_request("delete", item_path(cid)))

    async def echo(self, text: str) -> dict[str, Any]:
        return await self.send(build_request("echo", body=text))
