"""Lazily evaluated gauge collector for prometheus_client.

``GaugeCollector`` implements the single registry operation the collapser
publishers need::

    add_gauge(subsystem, name, documentation, labels, value)

``value`` is a zero-argument callable. Nothing is sampled at registration time;
every ``collect()`` (one per scrape) calls each read function and yields a
``GaugeMetricFamily`` per fully qualified name. Exceptions raised by a read
function propagate to the scrape caller unchanged.

Fully qualified names are ``<namespace>_<subsystem>_<name>`` with empty parts
skipped, so ``GaugeCollector("exampleapp")`` exposes
``exampleapp_hystrix_collapser_count_batches``.
"""
from __future__ import annotations

import logging
import re
import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import REGISTRY, Collector, CollectorRegistry

from ..utils.exceptions import DuplicateGaugeError, InvalidMetricNameError

logger = logging.getLogger(__name__)

ReadFunction = Callable[[], float]

_METRIC_NAME_RE = re.compile(r'^[a-zA-Z_:][a-zA-Z0-9_:]*$')
_LABEL_NAME_RE = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')


@dataclass
class _GaugeFamily:
    name: str
    documentation: str
    label_names: tuple[str, ...]
    children: dict[tuple[str, ...], ReadFunction] = field(default_factory=dict)


class GaugeRegistrar(Protocol):
    def add_gauge(self, subsystem: str, name: str, documentation: str,
                  labels: Mapping[str, str], value: ReadFunction) -> None: ...


def qualified_name(namespace: str, subsystem: str, name: str) -> str:
    return '_'.join(part for part in (namespace, subsystem, name) if part)


def _validate(full_name: str, label_names: Iterable[str]) -> None:
    if not _METRIC_NAME_RE.match(full_name):
        raise InvalidMetricNameError(f"Invalid metric name: {full_name!r}")
    for label in label_names:
        if not _LABEL_NAME_RE.match(label) or label.startswith('__'):
            raise InvalidMetricNameError(f"Invalid label name {label!r} for metric {full_name}")


class GaugeCollector(Collector):
    def __init__(self, namespace: str = '') -> None:
        self.namespace = namespace
        self._families: dict[str, _GaugeFamily] = {}
        self._lock = threading.Lock()

    def add_gauge(self, subsystem: str, name: str, documentation: str,
                  labels: Mapping[str, str], value: ReadFunction) -> None:
        full_name = qualified_name(self.namespace, subsystem, name)
        label_names = tuple(sorted(labels))
        _validate(full_name, label_names)
        label_values = tuple(str(labels[k]) for k in label_names)
        with self._lock:
            family = self._families.get(full_name)
            if family is None:
                family = _GaugeFamily(full_name, documentation, label_names)
                self._families[full_name] = family
            elif family.label_names != label_names:
                raise DuplicateGaugeError(
                    f"Gauge {full_name} already registered with labels {list(family.label_names)}, got {list(label_names)}"
                )
            if label_values in family.children:
                raise DuplicateGaugeError(
                    f"Duplicated timeseries in GaugeCollector: {full_name}{dict(zip(label_names, label_values))}"
                )
            family.children[label_values] = value
        logger.debug("gauge registered name=%s labels=%s", full_name, dict(labels))

    def names(self) -> list[str]:
        with self._lock:
            return sorted(self._families)

    def describe(self) -> Iterable[Any]:
        # Gauges are added after the collector joins a registry; publish no
        # up-front names so registration does not sample read functions.
        return iter(())

    def collect(self) -> Iterable[GaugeMetricFamily]:
        with self._lock:
            snapshot = [
                (f.name, f.documentation, f.label_names, list(f.children.items()))
                for f in self._families.values()
            ]
        for name, documentation, label_names, children in snapshot:
            metric = GaugeMetricFamily(name, documentation, labels=list(label_names))
            for label_values, read in children:
                metric.add_metric(list(label_values), read())
            yield metric

    def register(self, registry: CollectorRegistry = REGISTRY) -> GaugeCollector:
        registry.register(self)
        logger.info("GaugeCollector registered (namespace=%r)", self.namespace)
        return self


__all__ = ["GaugeCollector", "GaugeRegistrar", "ReadFunction", "qualified_name"]
