"""Collapser exporter exception hierarchy.

A small exception tree so callers can tell configuration problems apart from
registration conflicts. Registration errors also derive from ValueError to
match how prometheus_client reports duplicated timeseries.
"""
from __future__ import annotations


class CollapserExporterError(Exception):
    """Base class for all collapser exporter exceptions."""


class ConfigError(CollapserExporterError):
    """Configuration-related issues (unparseable env values, invalid namespace)."""


class RegistrationError(CollapserExporterError, ValueError):
    """A gauge could not be added to the collector."""


class DuplicateGaugeError(RegistrationError):
    """Same fully qualified name and label values registered twice."""


class InvalidMetricNameError(RegistrationError):
    """Metric or label name rejected by Prometheus naming rules."""


class PublisherAlreadyInitializedError(CollapserExporterError, RuntimeError):
    """initialize() called on a publisher that already registered its gauges."""


__all__ = [
    "CollapserExporterError",
    "ConfigError",
    "RegistrationError",
    "DuplicateGaugeError",
    "InvalidMetricNameError",
    "PublisherAlreadyInitializedError",
]
