"""Protocol service: implements ProtocolPort for one request/response exchange.

This is the outermost boundary of request processing. It chains the
request model, the dispatcher and the response codec, and guarantees
that a complete envelope comes back for every payload: protocol errors
become their Failure result and any unexpected exception is logged and
reported as a code 6 error.
"""

import logging

from .codec import encode_response
from .dispatcher import Dispatcher
from .errors import ProtocolError
from .models import Failure, Result, StatusCode
from .ports import ProtocolPort
from .request import parse_request

logger = logging.getLogger(__name__)


class ProtocolService(ProtocolPort):
    """Core implementation of ProtocolPort."""

    def __init__(self, dispatcher: Dispatcher):
        """Initialize the protocol service.

        Args:
            dispatcher: Dispatcher that executes validated requests.
        """
        self.dispatcher = dispatcher

    def process(self, payload: bytes) -> Result:
        """Turn a raw payload into a Result without rendering it."""
        try:
            request = parse_request(payload)
            result = self.dispatcher.dispatch(request)
        except ProtocolError as e:
            logger.debug(f"Rejected payload: {e.reason}")
            return e.to_result()
        except Exception as e:
            logger.error(f"Unexpected error processing request: {e}", exc_info=True)
            return Failure(StatusCode.ERROR, f"error: {e}")

        logger.debug(
            f"{request.method} {request.path} -> {int(result.code)}",
            extra={
                "method": request.method,
                "path": request.path,
                "status_code": int(result.code),
            },
        )
        return result

    def handle(self, payload: bytes) -> bytes:
        """Process a raw payload and return the encoded envelope."""
        return encode_response(self.process(payload))
