"""Collapser metrics facade.

Re-exports the pieces host applications wire together: a ``GaugeCollector``
attached to a prometheus_client registry, and a ``CollapserPublisherFactory``
handing out one ``CollapserMetricsPublisher`` per collapser name.
"""
from __future__ import annotations

from .collector import GaugeCollector, GaugeRegistrar, qualified_name
from .events import CollapserEvent
from .factory import CollapserPublisherFactory, register
from .labels import MetricLabel, collapser_labels
from .publisher import PERCENTILES, SUBSYSTEM, CollapserMetricsPublisher
from .source import CollapserMetricsSource, CollapserPropertiesSource

__all__ = [
    "CollapserEvent",
    "CollapserMetricsPublisher",
    "CollapserMetricsSource",
    "CollapserPropertiesSource",
    "CollapserPublisherFactory",
    "GaugeCollector",
    "GaugeRegistrar",
    "MetricLabel",
    "PERCENTILES",
    "SUBSYSTEM",
    "collapser_labels",
    "qualified_name",
    "register",
]
