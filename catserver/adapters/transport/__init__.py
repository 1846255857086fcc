"""Transport adapters.

Carry one request/response exchange per TCP connection:
- tcp_server: threaded server driving ProtocolPort
- client: asyncio client for talking to a running server
"""
