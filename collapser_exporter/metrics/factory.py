"""Publisher cache keyed by collapser name.

Collapsers are created lazily by the host application, often from several
threads at once. ``CollapserPublisherFactory`` makes sure each collapser name
gets exactly one publisher and that its ``initialize()`` runs once, so callers
never trip over duplicate gauge registration.

Typical wiring::

    factory = register("exampleapp", export_properties=True)
    factory.get_publisher_for_collapser("UserLookup", metrics, properties)
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from types import MappingProxyType

from prometheus_client.registry import REGISTRY, CollectorRegistry

from .collector import GaugeCollector, GaugeRegistrar
from .publisher import CollapserMetricsPublisher
from .source import CollapserMetricsSource, CollapserPropertiesSource

logger = logging.getLogger(__name__)


class CollapserPublisherFactory:
    def __init__(self, collector: GaugeRegistrar, export_properties: bool = False) -> None:
        self.collector = collector
        self.export_properties = export_properties
        self._publishers: dict[str, CollapserMetricsPublisher] = {}
        self._lock = threading.Lock()

    def get_publisher_for_collapser(self, collapser_name: str, metrics: CollapserMetricsSource,
                                    properties: CollapserPropertiesSource) -> CollapserMetricsPublisher:
        """Return the publisher for ``collapser_name``, creating and initializing it once.

        Sources passed on later calls for an already known name are ignored; the
        first publisher keeps reading the sources it was created with. The
        publisher is cached before ``initialize()`` runs: if registration fails,
        that error reaches the first caller and later lookups return the same
        (partially registered) publisher instead of re-registering its gauges.
        """
        with self._lock:
            existing = self._publishers.get(collapser_name)
            if existing is not None:
                return existing
            publisher = CollapserMetricsPublisher(
                self.collector, collapser_name, metrics, properties, self.export_properties,
            )
            self._publishers[collapser_name] = publisher
            publisher.initialize()
        logger.info("Collapser metrics publisher created (collapser=%s)", collapser_name)
        return publisher

    def publishers(self) -> Mapping[str, CollapserMetricsPublisher]:
        with self._lock:
            return MappingProxyType(dict(self._publishers))


def register(namespace: str = '', registry: CollectorRegistry = REGISTRY,
             export_properties: bool = False) -> CollapserPublisherFactory:
    """Attach a fresh GaugeCollector to ``registry`` and return a factory writing to it."""
    collector = GaugeCollector(namespace).register(registry)
    return CollapserPublisherFactory(collector, export_properties=export_properties)


__all__ = ["CollapserPublisherFactory", "register"]
