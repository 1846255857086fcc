"""Fake implementations of core ports for testing.

These in-memory implementations allow core logic to be tested
without real adapters:

- FakeCategoryStorePort: Dict-backed store that records every call
- FakeProtocolPort: Canned responses with captured payloads
"""

from .protocol import FakeProtocolPort
from .store import FakeCategoryStorePort

__all__ = [
    "FakeCategoryStorePort",
    "FakeProtocolPort",
]
