"""Domain models for the catserver protocol.

All models in this module use only Python standard library types,
ensuring zero external dependencies in the core domain.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, TypeAlias

COLLECTION_PATH = "/api/categories"


class StatusCode(IntEnum):
    """Numeric status codes carried in the response envelope.

    1-3 are the success family, 4-6 the failure family.
    """

    OK = 1
    CREATED = 2
    UPDATED = 3
    BAD_REQUEST = 4
    NOT_FOUND = 5
    ERROR = 6

    @property
    def is_success(self) -> bool:
        return self <= StatusCode.UPDATED


@dataclass
class Category:
    """A single record in the category collection.

    Mutable so the store can rename it in place; the store hands out
    copies, never the instance it owns.
    """

    cid: int
    name: str

    def __post_init__(self) -> None:
        """Validate category invariants on creation."""
        if self.cid < 1:
            raise ValueError(f"cid must be positive, got {self.cid}")

    def to_dict(self) -> dict[str, Any]:
        return {"cid": self.cid, "name": self.name}


@dataclass(frozen=True)
class Request:
    """A parsed protocol request.

    ``body`` is None when the field was absent from the payload, which
    is distinct from an empty string.
    """

    method: str
    date: int
    path: str = ""
    body: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Wire representation, omitting the optional fields when unset."""
        data: dict[str, Any] = {"method": self.method, "date": self.date}
        if self.path:
            data["path"] = self.path
        if self.body is not None:
            data["body"] = self.body
        return data


@dataclass(frozen=True)
class Success:
    """Successful outcome of a request."""

    code: StatusCode
    payload: str

    def __post_init__(self) -> None:
        if not self.code.is_success:
            raise ValueError(f"{self.code!r} is not a success code")


@dataclass(frozen=True)
class Failure:
    """Failed outcome of a request, with the reason shown to the client."""

    code: StatusCode
    reason: str

    def __post_init__(self) -> None:
        if self.code.is_success:
            raise ValueError(f"{self.code!r} is not a failure code")


Result: TypeAlias = Success | Failure
