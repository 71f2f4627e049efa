"""
Standardized label names for collapser Prometheus metrics.

This module centralizes label keys to avoid typos and drift.
"""
from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType


class MetricLabel(str, Enum):
    collapser_name = "collapser_name"


def collapser_labels(collapser_name: str) -> Mapping[str, str]:
    """Read-only label set shared by every gauge of one collapser."""
    return MappingProxyType({MetricLabel.collapser_name.value: str(collapser_name)})


__all__ = [
    "MetricLabel",
    "collapser_labels",
]
