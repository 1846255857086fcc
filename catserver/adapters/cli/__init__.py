"""CLI adapters.

Provides command handlers for interactive use of the protocol
without a network connection.
"""
