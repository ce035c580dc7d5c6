"""Chronicle: audit instrumentation for application operations."""

__version__ = "0.1.0"
