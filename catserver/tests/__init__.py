"""Test suite for catserver.

Organized into three categories:

1. core/: Unit tests for the protocol core
   - No I/O, fast execution
   - Uses in-memory fakes for ports

2. adapters/: Tests for adapter implementations
   - Store thread safety, TCP round trips, CLI formatting

3. fakes/: Port implementations for testing
   - In-memory CategoryStorePort and ProtocolPort
"""
