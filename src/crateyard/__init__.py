"""registry-backed package source: index sync, metadata lookup, verified downloads."""

__version__ = "0.1.0"
