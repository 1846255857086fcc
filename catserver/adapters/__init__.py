"""External adapters for catserver.

This package contains everything that touches the outside world and
provides implementations of the core port interfaces.

Adapter Organization:

- store/: Category collection storage (in-memory)
- transport/: TCP server and client for the wire protocol
- cli/: Interactive command handlers
"""
