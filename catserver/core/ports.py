"""Port interfaces for the catserver protocol.

These abstract base classes define the boundaries between core
domain logic and external adapters. Implementations live in the
adapters/ package.

Port Interface Categories:

1. **Driven Ports** (core calls out to adapters)
   - CategoryStorePort: Hold and mutate the category collection

2. **Driving Ports** (adapters call into core)
   - ProtocolPort: One raw request payload in, one raw response out
"""

from abc import ABC, abstractmethod

from .models import Category


# ============================================================================
# DRIVEN PORTS (Core calls out to adapters)
# ============================================================================


class CategoryStorePort(ABC):
    """Port for the category collection.

    Implementations are shared by every connection worker, so each
    method must be atomic with respect to all the others. Returned
    categories are copies; mutating them does not affect the store.
    """

    @abstractmethod
    def get(self, cid: int) -> Category | None:
        """Look up a single category.

        Args:
            cid: Identifier of the category.

        Returns:
            A copy of the category, or None if no record has that id.
        """

    @abstractmethod
    def list_all(self) -> list[Category]:
        """Return copies of every category in iteration order.

        The order is insertion order and is not stable across
        deletions followed by creations.
        """

    @abstractmethod
    def create(self, name: str) -> Category:
        """Allocate a new id and insert a category under it.

        Args:
            name: Name of the new category.

        Returns:
            A copy of the inserted category.
        """

    @abstractmethod
    def rename(self, cid: int, name: str) -> bool:
        """Replace the name of an existing category.

        Returns:
            True if the category existed and was renamed, False otherwise.
        """

    @abstractmethod
    def delete(self, cid: int) -> bool:
        """Remove a category.

        Returns:
            True if the category existed and was removed, False otherwise.
        """

    @abstractmethod
    def count(self) -> int:
        """Number of categories currently stored.

        Introspection only: the composition root logs it after seeding
        and tests assert on it. No protocol method exposes it.
        """


# ============================================================================
# DRIVING PORTS (Adapters call into core)
# ============================================================================


class ProtocolPort(ABC):
    """Port for processing one request/response exchange.

    Transport adapters hand over the complete raw payload of a
    connection and write back whatever bytes are returned.
    """

    @abstractmethod
    def handle(self, payload: bytes) -> bytes:
        """Process a raw request payload.

        Args:
            payload: Raw bytes received from the client.

        Returns:
            Raw bytes of the JSON response envelope. Never raises;
            every failure is reported inside the envelope.
        """
