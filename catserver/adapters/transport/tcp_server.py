"""TCP server adapter for the catserver protocol.

Each accepted connection is served by its own thread: the handler reads
a single request payload, passes it to the ProtocolPort, writes the
response envelope back and closes the connection.

A payload is considered complete as soon as the received bytes form a
JSON document, when the client shuts down its side, when the size limit
is reached, or when the read timeout expires. Whatever has arrived by
then is handed to the protocol, which reports malformed input inside
the envelope.
"""

import asyncio
import json
import logging
import socket
import socketserver
from typing import Any

from catserver.core.ports import ProtocolPort

logger = logging.getLogger(__name__)

RECV_CHUNK_SIZE = 4096


def is_complete_document(data: bytes) -> bool:
    """Return True if the bytes decode to a complete JSON document."""
    try:
        json.loads(data.decode("utf-8"))
    except ValueError:
        return False
    return True


def make_connection_handler(
    protocol: ProtocolPort,
    read_timeout: float,
    max_payload_bytes: int,
) -> type[socketserver.BaseRequestHandler]:
    """Factory to create a ConnectionHandler class bound to a protocol.

    Dependencies are captured in the closure instead of class-level
    mutable state, so several servers can run in one process.

    Args:
        protocol: ProtocolPort that processes each payload.
        read_timeout: Seconds to wait for more request bytes.
        max_payload_bytes: Stop reading once this many bytes arrived.

    Returns:
        A ConnectionHandler class configured with the provided dependencies.
    """

    class ConnectionHandler(socketserver.BaseRequestHandler):
        """Serves exactly one request/response exchange."""

        request: socket.socket

        def handle(self) -> None:
            peer = self.client_address[0] if self.client_address else "?"
            payload = self._read_payload()
            logger.debug(f"Received {len(payload)} bytes from {peer}")

            response = protocol.handle(payload)

            try:
                self.request.sendall(response)
            except OSError as e:
                logger.warning(f"Failed to send response to {peer}: {e}")

        def _read_payload(self) -> bytes:
            self.request.settimeout(read_timeout)
            buffer = bytearray()
            while len(buffer) < max_payload_bytes:
                try:
                    chunk = self.request.recv(RECV_CHUNK_SIZE)
                except TimeoutError:
                    logger.debug("Read timeout, processing partial payload")
                    break
                except OSError as e:
                    logger.warning(f"Connection error while reading request: {e}")
                    break
                if not chunk:
                    break
                buffer.extend(chunk)
                # A JSON object can only end in a chunk holding "}".
                if b"}" in chunk and is_complete_document(bytes(buffer)):
                    break
            return bytes(buffer[:max_payload_bytes])

    return ConnectionHandler


class ThreadingProtocolServer(socketserver.ThreadingTCPServer):
    """Thread-per-connection TCP server."""

    allow_reuse_address = True
    daemon_threads = True
    request_queue_size = 128

    def handle_error(self, request: Any, client_address: Any) -> None:
        logger.error(
            f"Unhandled error serving connection from {client_address}",
            exc_info=True,
        )


class TCPProtocolServer:
    """TCP server adapter driving a ProtocolPort.

    The blocking accept loop runs in a worker thread so it can be started
    and stopped from asyncio code.
    """

    def __init__(
        self,
        protocol: ProtocolPort,
        host: str = "0.0.0.0",
        port: int = 5000,
        read_timeout: float = 5.0,
        max_payload_bytes: int = 1024 * 1024,
    ):
        """Initialize the TCP server.

        Args:
            protocol: ProtocolPort instance to handle payloads.
            host: Host to listen on (default 0.0.0.0).
            port: Port to listen on (default 5000, 0 picks a free port).
            read_timeout: Seconds to wait for request bytes (default 5).
            max_payload_bytes: Maximum request size in bytes (default 1 MiB).

        Raises:
            ValueError: If read_timeout or max_payload_bytes is not positive.
        """
        if read_timeout <= 0:
            raise ValueError(f"read_timeout must be positive, got {read_timeout}")
        if max_payload_bytes <= 0:
            raise ValueError(
                f"max_payload_bytes must be positive, got {max_payload_bytes}"
            )

        self.protocol = protocol
        self.host = host
        self.port = port
        self.read_timeout = read_timeout
        self.max_payload_bytes = max_payload_bytes
        self.server: ThreadingProtocolServer | None = None
        self._server_task: asyncio.Task[None] | None = None

    @property
    def address(self) -> tuple[str, int]:
        """Address the server is bound to.

        Raises:
            RuntimeError: If the server has not been started.
        """
        if self.server is None:
            raise RuntimeError("Server is not running")
        host, port = self.server.server_address[:2]
        return str(host), int(port)

    async def start(self) -> None:
        """Bind the socket and start accepting connections."""
        handler_class = make_connection_handler(
            protocol=self.protocol,
            read_timeout=self.read_timeout,
            max_payload_bytes=self.max_payload_bytes,
        )
        self.server = ThreadingProtocolServer((self.host, self.port), handler_class)
        self._server_task = asyncio.create_task(self._run_server())

        host, port = self.address
        logger.info(f"Server started on {host}:{port}")

    async def _run_server(self) -> None:
        """Run the accept loop in a thread pool."""
        if not self.server:
            return

        try:
            await asyncio.to_thread(self.server.serve_forever)
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error(f"TCP server error: {e}", exc_info=True)

    async def serve_forever(self) -> None:
        """Start the server and wait until the accept loop ends."""
        if self.server is None:
            await self.start()
        assert self._server_task is not None
        await self._server_task

    async def stop(self) -> None:
        """Stop accepting connections and close the socket."""
        if self.server:
            await asyncio.to_thread(self.server.shutdown)
            self.server.server_close()
        if self._server_task:
            self._server_task.cancel()
            try:
                await self._server_task
            except asyncio.CancelledError:
                pass
        self.server = None
        self._server_task = None
        logger.info("Server stopped")
