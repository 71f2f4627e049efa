"""Pytest fixtures for collapser exporter tests.

Every test gets its own CollectorRegistry so gauges never leak into the
process-wide prometheus_client REGISTRY.
"""
from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from collapser_exporter.metrics.collector import GaugeCollector
from collapser_exporter.metrics.events import CollapserEvent


class FakeCollapserMetrics:
    """Mutable stand-in for a collapser's live metrics."""

    def __init__(self):
        self.cumulative = {event: 0 for event in CollapserEvent}
        self.rolling = {event: 0 for event in CollapserEvent}
        self.batch_mean = 0.0
        self.shard_mean = 0.0
        self.batch_percentile_calls: list[float] = []
        self.shard_percentile_calls: list[float] = []

    def get_cumulative_count(self, event):
        return self.cumulative[event]

    def get_rolling_count(self, event):
        return self.rolling[event]

    def get_batch_size_mean(self):
        return self.batch_mean

    def get_batch_size_percentile(self, percentile):
        self.batch_percentile_calls.append(percentile)
        return percentile * 2

    def get_shard_size_mean(self):
        return self.shard_mean

    def get_shard_size_percentile(self, percentile):
        self.shard_percentile_calls.append(percentile)
        return percentile / 2


class FakeCollapserProperties:
    def __init__(self):
        self.window_ms = 10000
        self.cache_enabled = True
        self.max_requests = 100
        self.timer_delay_ms = 10
        self.reads = 0

    def metrics_rolling_statistical_window_in_milliseconds(self):
        self.reads += 1
        return self.window_ms

    def request_cache_enabled(self):
        self.reads += 1
        return self.cache_enabled

    def max_requests_in_batch(self):
        self.reads += 1
        return self.max_requests

    def timer_delay_in_milliseconds(self):
        self.reads += 1
        return self.timer_delay_ms


@pytest.fixture()
def registry():
    return CollectorRegistry()


@pytest.fixture()
def collector(registry):
    return GaugeCollector().register(registry)


@pytest.fixture()
def source():
    return FakeCollapserMetrics()


@pytest.fixture()
def properties():
    return FakeCollapserProperties()


@pytest.fixture()
def make_source():
    return FakeCollapserMetrics


@pytest.fixture()
def make_properties():
    return FakeCollapserProperties
