"""Error hierarchy for the catserver protocol.

Every failure the protocol reports to a client is a ProtocolError
carrying its status code and the reason text rendered in the envelope.
Core code raises these; the dispatcher and the protocol service turn
them into Failure results with to_result().
"""

from .models import Failure, StatusCode


class ProtocolError(Exception):
    """Base exception for all protocol-level failures."""

    status = StatusCode.ERROR
    reason = "error"

    def __init__(self, reason: str | None = None):
        if reason is not None:
            self.reason = reason
        super().__init__(self.reason)

    def to_result(self) -> Failure:
        """Convert to the Failure result rendered by the codec."""
        return Failure(self.status, self.reason)


# ─── Client errors (code 4) ────────────────────────────────────


class ClientError(ProtocolError):
    """Malformed or semantically invalid request."""

    status = StatusCode.BAD_REQUEST
    reason = "bad request"


class MissingField(ClientError):
    reason = "missing method, missing date"


class InvalidDate(ClientError):
    reason = "illegal date"


class UnknownMethod(ClientError):
    reason = "illegal method"


class MissingResource(ClientError):
    reason = "missing resource"


class MissingBody(ClientError):
    reason = "missing body"


class InvalidBody(ClientError):
    reason = "illegal body"


class BadRequest(ClientError):
    """Path does not address anything the method can act on."""


# ─── Not found (code 5) ────────────────────────────────────────


class NotFound(ProtocolError):
    """Valid request for a record that does not exist."""

    status = StatusCode.NOT_FOUND
    reason = "not found"


# ─── Internal errors (code 6) ──────────────────────────────────


class MalformedPayload(ProtocolError):
    """Payload could not be decoded into a JSON object."""

    status = StatusCode.ERROR

    def __init__(self, message: str):
        super().__init__(f"error: {message}")
