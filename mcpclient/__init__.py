"""Model Context Protocol client over a pluggable JSON-RPC transport."""

__version__ = "0.1.0"
__all__ = ["client"]