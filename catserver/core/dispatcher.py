"""Dispatcher: route a validated Request to its method handler.

Recognized methods are create, update, read, delete and echo, matched
case-sensitively. Handlers raise ProtocolError subclasses for every
negative outcome; dispatch() converts them into Failure results so the
caller always receives a Result.

Path rules:
- The collection path is exactly ``/api/categories``.
- An item path splits on ``/`` into exactly four segments: ``""``,
  ``"api"``, ``"categories"`` and an integer id.
"""

import json
import logging
import re
from collections.abc import Callable
from typing import Any

from .errors import (
    BadRequest,
    InvalidBody,
    MissingBody,
    MissingResource,
    NotFound,
    ProtocolError,
    UnknownMethod,
)
from .models import COLLECTION_PATH, Request, Result, StatusCode, Success
from .ports import CategoryStorePort
from .request import field_text

logger = logging.getLogger(__name__)

# Ids beyond 19 digits can never have been allocated.
_ID_SEGMENT = re.compile(r"[+-]?[0-9]{1,19}")
_ITEM_PREFIX = ("", "api", "categories")


def parse_id(segment: str) -> int | None:
    """Parse an id path segment, returning None if it is not an integer."""
    if _ID_SEGMENT.fullmatch(segment):
        return int(segment)
    return None


def item_id(path: str) -> int | None:
    """Return the id addressed by an item path, or None for any other shape."""
    segments = path.split("/")
    if len(segments) != 4 or tuple(segments[:3]) != _ITEM_PREFIX:
        return None
    return parse_id(segments[3])


def _is_blank(path: str) -> bool:
    return not path.strip()


class Dispatcher:
    """Routes requests to method handlers backed by a CategoryStorePort."""

    def __init__(self, store: CategoryStorePort):
        """Initialize the dispatcher.

        Args:
            store: Category store shared by all connections.
        """
        self.store = store
        self._handlers: dict[str, Callable[[Request], Success]] = {
            "create": self._handle_create,
            "update": self._handle_update,
            "read": self._handle_read,
            "delete": self._handle_delete,
            "echo": self._handle_echo,
        }

    def dispatch(self, request: Request) -> Result:
        """Produce the Result for a validated request."""
        handler = self._handlers.get(request.method)
        try:
            if handler is None:
                raise UnknownMethod()
            return handler(request)
        except ProtocolError as e:
            logger.debug(
                f"{request.method} {request.path!r} rejected: {e.reason}",
                extra={"method": request.method, "path": request.path},
            )
            return e.to_result()

    # ------------------------------------------------------------------
    # create / update
    # ------------------------------------------------------------------

    def _read_body(self, request: Request) -> dict[str, Any]:
        """Check path and body presence, then decode the body object."""
        if _is_blank(request.path):
            raise MissingResource()
        if request.body is None:
            raise MissingBody()
        try:
            body = json.loads(request.body)
        except ValueError as e:
            raise InvalidBody() from e
        if not isinstance(body, dict) or "name" not in body:
            raise InvalidBody()
        return body

    def _handle_create(self, request: Request) -> Success:
        body = self._read_body(request)
        if request.path != COLLECTION_PATH:
            raise BadRequest()

        category = self.store.create(field_text(body["name"]))
        logger.info(
            f"Created category {category.cid}",
            extra={"cid": category.cid, "category_name": category.name},
        )
        return Success(StatusCode.CREATED, json.dumps(category.to_dict()))

    def _handle_update(self, request: Request) -> Success:
        body = self._read_body(request)
        cid = item_id(request.path)
        if cid is None:
            raise BadRequest()

        if not self.store.rename(cid, field_text(body["name"])):
            raise NotFound()
        logger.info(f"Updated category {cid}", extra={"cid": cid})
        return Success(StatusCode.UPDATED, "Updated")

    # ------------------------------------------------------------------
    # read / delete
    # ------------------------------------------------------------------

    def _check_resource(self, request: Request) -> None:
        """Reject blank paths and four-segment paths with a non-integer id.

        Paths with any other segment count pass through and are checked
        by the method handler.
        """
        if _is_blank(request.path):
            raise MissingResource()
        segments = request.path.split("/")
        if len(segments) == 4 and parse_id(segments[3]) is None:
            raise BadRequest()

    def _handle_read(self, request: Request) -> Success:
        self._check_resource(request)
        if request.path == COLLECTION_PATH:
            categories = [c.to_dict() for c in self.store.list_all()]
            return Success(StatusCode.OK, json.dumps(categories))

        cid = item_id(request.path)
        if cid is None:
            raise BadRequest()
        category = self.store.get(cid)
        if category is None:
            raise NotFound()
        return Success(StatusCode.OK, json.dumps(category.to_dict()))

    def _handle_delete(self, request: Request) -> Success:
        self._check_resource(request)
        cid = item_id(request.path)
        if cid is None:
            raise BadRequest()

        if not self.store.delete(cid):
            raise NotFound()
        logger.info(f"Deleted category {cid}", extra={"cid": cid})
        return Success(StatusCode.OK, "Ok")

    # ------------------------------------------------------------------
    # echo
    # ------------------------------------------------------------------

    def _handle_echo(self, request: Request) -> Success:
        if request.body is None:
            raise MissingBody()
        return Success(StatusCode.OK, request.body)
