"""Per-collapser gauge publisher.

One ``CollapserMetricsPublisher`` exists per collapser name. ``initialize()``
binds a fixed catalog of gauges to read functions over the collapser's live
metrics source (and, optionally, its live properties); values are only read
when the collector is scraped.

Exposed names (subsystem ``hystrix_collapser``, label ``collapser_name``):

  count_requests_batched, count_batches, count_responses_from_cache
  rolling_requests_batched, rolling_batches, rolling_count_responses_from_cache
  batch_size_mean, batch_size_percentile_{25,50,75,90,99,995}
  shard_size_mean, shard_size_percentile_{25,50,75,90,99,995}
  property_value_* (only with export_properties)

``rolling_count_responses_from_cache`` does not follow the ``rolling_`` pattern
of its siblings; dashboards already query it under that name.
"""
from __future__ import annotations

import functools
import logging
from collections.abc import Callable

from ..utils.exceptions import PublisherAlreadyInitializedError
from .collector import GaugeRegistrar
from .events import CollapserEvent
from .labels import collapser_labels
from .source import CollapserMetricsSource, CollapserPropertiesSource

logger = logging.getLogger(__name__)

SUBSYSTEM = "hystrix_collapser"

CUMULATIVE_DOC = "These are cumulative counts since the start of the application."
ROLLING_DOC = "These are \"point in time\" counts representing the last X seconds."
BATCH_DOC = "Collapser the batch size metric."
SHARD_DOC = "Collapser shard size metric."
PROPERTY_DOC = "Configuration property partitioned by collapser_name."

# (metric suffix, percentile passed to the source)
PERCENTILES: tuple[tuple[str, float], ...] = (
    ("25", 25.0),
    ("50", 50.0),
    ("75", 75.0),
    ("90", 90.0),
    ("99", 99.0),
    ("995", 99.5),
)

CUMULATIVE_COUNTS: tuple[tuple[str, CollapserEvent], ...] = (
    ("count_requests_batched", CollapserEvent.COLLAPSER_REQUEST_BATCHED),
    ("count_batches", CollapserEvent.COLLAPSER_BATCH),
    ("count_responses_from_cache", CollapserEvent.RESPONSE_FROM_CACHE),
)

ROLLING_COUNTS: tuple[tuple[str, CollapserEvent], ...] = (
    ("rolling_requests_batched", CollapserEvent.COLLAPSER_REQUEST_BATCHED),
    ("rolling_batches", CollapserEvent.COLLAPSER_BATCH),
    ("rolling_count_responses_from_cache", CollapserEvent.RESPONSE_FROM_CACHE),
)


class CollapserMetricsPublisher:
    def __init__(self, collector: GaugeRegistrar, collapser_name: str,
                 metrics: CollapserMetricsSource, properties: CollapserPropertiesSource,
                 export_properties: bool = False) -> None:
        self.collapser_name = collapser_name
        self.labels = collapser_labels(collapser_name)
        self.export_properties = export_properties
        self._collector = collector
        self._metrics = metrics
        self._properties = properties
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self) -> None:
        """Register every gauge for this collapser. Must run exactly once."""
        if self._initialized:
            raise PublisherAlreadyInitializedError(
                f"Metrics publisher for collapser {self.collapser_name!r} already initialized"
            )
        self._initialized = True
        metrics = self._metrics

        for name, event in CUMULATIVE_COUNTS:
            self._add(name, CUMULATIVE_DOC, functools.partial(metrics.get_cumulative_count, event))
        for name, event in ROLLING_COUNTS:
            self._add(name, ROLLING_DOC, functools.partial(metrics.get_rolling_count, event))

        self._add("batch_size_mean", BATCH_DOC, metrics.get_batch_size_mean)
        for suffix, percentile in PERCENTILES:
            self._add(f"batch_size_percentile_{suffix}", BATCH_DOC,
                      functools.partial(metrics.get_batch_size_percentile, percentile))

        self._add("shard_size_mean", SHARD_DOC, metrics.get_shard_size_mean)
        for suffix, percentile in PERCENTILES:
            self._add(f"shard_size_percentile_{suffix}", SHARD_DOC,
                      functools.partial(metrics.get_shard_size_percentile, percentile))

        if self.export_properties:
            props = self._properties
            self._add("property_value_rolling_statistical_window_in_milliseconds", PROPERTY_DOC,
                      props.metrics_rolling_statistical_window_in_milliseconds)
            self._add("property_value_request_cache_enabled", PROPERTY_DOC,
                      _as_flag(props.request_cache_enabled))
            self._add("property_value_max_requests_in_batch", PROPERTY_DOC,
                      props.max_requests_in_batch)
            self._add("property_value_timer_delay_in_milliseconds", PROPERTY_DOC,
                      props.timer_delay_in_milliseconds)

        logger.debug(
            "collapser metrics registered collapser=%s export_properties=%s",
            self.collapser_name, self.export_properties,
        )

    def _add(self, name: str, documentation: str, read: Callable[[], float]) -> None:
        self._collector.add_gauge(SUBSYSTEM, name, documentation, self.labels, read)


def _as_flag(read: Callable[[], bool]) -> Callable[[], int]:
    def _flag() -> int:
        return 1 if read() else 0
    return _flag


__all__ = [
    "CollapserMetricsPublisher",
    "SUBSYSTEM",
    "PERCENTILES",
]
