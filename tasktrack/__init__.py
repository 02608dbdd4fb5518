"""Task-tracking REST backend with bearer-token auth and per-task ownership."""

__version__ = "0.1.0"
