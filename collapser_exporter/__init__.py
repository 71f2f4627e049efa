"""Prometheus exporter for request-collapser runtime metrics."""
from __future__ import annotations

from .version import __version__, get_version

__all__ = ["__version__", "get_version"]
