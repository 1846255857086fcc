"""Core protocol logic for catserver.

This package contains zero external dependencies and represents
the pure protocol semantics: request validation, dispatch over the
category collection, and the response envelope. Stores, transports
and the CLI are handled by the adapters package.
"""

from .models import (
    COLLECTION_PATH,
    Category,
    Failure,
    Request,
    Result,
    StatusCode,
    Success,
)

__all__ = [
    "COLLECTION_PATH",
    "Category",
    "Failure",
    "Request",
    "Result",
    "StatusCode",
    "Success",
]
