"""catserver: a one-shot JSON request/response protocol over TCP."""

__version__ = "0.1.0"
