"""Unit tests for the protocol core."""
