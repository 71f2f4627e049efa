"""Tests for CollapserMetricsPublisher gauge registration and lazy reads."""
from __future__ import annotations

import pytest

from collapser_exporter.metrics.events import CollapserEvent
from collapser_exporter.metrics.publisher import PERCENTILES, SUBSYSTEM, CollapserMetricsPublisher
from collapser_exporter.utils.exceptions import PublisherAlreadyInitializedError

BASE_NAMES = {
    "count_requests_batched",
    "count_batches",
    "count_responses_from_cache",
    "rolling_requests_batched",
    "rolling_batches",
    "rolling_count_responses_from_cache",
    "batch_size_mean",
    "batch_size_percentile_25",
    "batch_size_percentile_50",
    "batch_size_percentile_75",
    "batch_size_percentile_90",
    "batch_size_percentile_99",
    "batch_size_percentile_995",
    "shard_size_mean",
    "shard_size_percentile_25",
    "shard_size_percentile_50",
    "shard_size_percentile_75",
    "shard_size_percentile_90",
    "shard_size_percentile_99",
    "shard_size_percentile_995",
}
PROPERTY_NAMES = {
    "property_value_rolling_statistical_window_in_milliseconds",
    "property_value_request_cache_enabled",
    "property_value_max_requests_in_batch",
    "property_value_timer_delay_in_milliseconds",
}


class RecordingRegistrar:
    def __init__(self):
        self.calls = []

    def add_gauge(self, subsystem, name, documentation, labels, value):
        self.calls.append((subsystem, name, documentation, labels, value))


def _sample(registry, name, collapser="UserLookup"):
    return registry.get_sample_value(f"{SUBSYSTEM}_{name}", {"collapser_name": collapser})


def test_registers_base_gauges_without_properties(source, properties):
    rec = RecordingRegistrar()
    CollapserMetricsPublisher(rec, "UserLookup", source, properties).initialize()
    names = {c[1] for c in rec.calls}
    assert len(rec.calls) == len(BASE_NAMES)
    assert names == BASE_NAMES
    assert all(c[0] == SUBSYSTEM for c in rec.calls)


def test_registers_property_gauges_when_enabled(source, properties):
    rec = RecordingRegistrar()
    CollapserMetricsPublisher(rec, "UserLookup", source, properties, export_properties=True).initialize()
    names = {c[1] for c in rec.calls}
    assert len(rec.calls) == len(BASE_NAMES) + 4
    assert names == BASE_NAMES | PROPERTY_NAMES


def test_every_gauge_carries_only_collapser_label(source, properties):
    rec = RecordingRegistrar()
    CollapserMetricsPublisher(rec, "UserLookup", source, properties, export_properties=True).initialize()
    for _, _, _, labels, _ in rec.calls:
        assert dict(labels) == {"collapser_name": "UserLookup"}


def test_label_set_is_read_only(source, properties):
    pub = CollapserMetricsPublisher(RecordingRegistrar(), "UserLookup", source, properties)
    with pytest.raises(TypeError):
        pub.labels["collapser_name"] = "other"  # type: ignore[index]


def test_construction_does_not_register(source, properties):
    rec = RecordingRegistrar()
    pub = CollapserMetricsPublisher(rec, "UserLookup", source, properties, export_properties=True)
    assert rec.calls == []
    assert not pub.initialized


def test_documentation_strings(source, properties):
    rec = RecordingRegistrar()
    CollapserMetricsPublisher(rec, "UserLookup", source, properties, export_properties=True).initialize()
    docs = {c[1]: c[2] for c in rec.calls}
    assert docs["count_batches"] == "These are cumulative counts since the start of the application."
    assert docs["rolling_batches"] == "These are \"point in time\" counts representing the last X seconds."
    assert docs["batch_size_percentile_90"] == "Collapser the batch size metric."
    assert docs["shard_size_mean"] == "Collapser shard size metric."
    assert docs["property_value_max_requests_in_batch"] == "Configuration property partitioned by collapser_name."


def test_cumulative_count_is_read_at_scrape_time(registry, collector, source, properties):
    source.cumulative[CollapserEvent.COLLAPSER_REQUEST_BATCHED] = 42
    CollapserMetricsPublisher(collector, "UserLookup", source, properties).initialize()
    assert _sample(registry, "count_requests_batched") == 42
    source.cumulative[CollapserEvent.COLLAPSER_REQUEST_BATCHED] += 5
    assert _sample(registry, "count_requests_batched") == 47


def test_counts_map_to_expected_events(registry, collector, source, properties):
    source.cumulative.update({
        CollapserEvent.COLLAPSER_REQUEST_BATCHED: 1,
        CollapserEvent.COLLAPSER_BATCH: 2,
        CollapserEvent.RESPONSE_FROM_CACHE: 3,
    })
    source.rolling.update({
        CollapserEvent.COLLAPSER_REQUEST_BATCHED: 10,
        CollapserEvent.COLLAPSER_BATCH: 20,
        CollapserEvent.RESPONSE_FROM_CACHE: 30,
    })
    CollapserMetricsPublisher(collector, "UserLookup", source, properties).initialize()
    assert _sample(registry, "count_requests_batched") == 1
    assert _sample(registry, "count_batches") == 2
    assert _sample(registry, "count_responses_from_cache") == 3
    assert _sample(registry, "rolling_requests_batched") == 10
    assert _sample(registry, "rolling_batches") == 20
    assert _sample(registry, "rolling_count_responses_from_cache") == 30


def test_percentiles_pass_exact_values(registry, collector, source, properties):
    CollapserMetricsPublisher(collector, "UserLookup", source, properties).initialize()
    assert source.batch_percentile_calls == []
    expected = [25.0, 50.0, 75.0, 90.0, 99.0, 99.5]
    assert [p for _, p in PERCENTILES] == expected
    families = {f.name: f for f in collector.collect()}
    assert source.batch_percentile_calls == expected
    assert source.shard_percentile_calls == expected
    assert families["hystrix_collapser_batch_size_percentile_995"].samples[0].value == 199.0
    assert families["hystrix_collapser_shard_size_percentile_995"].samples[0].value == 49.75
    assert families["hystrix_collapser_shard_size_percentile_25"].samples[0].value == 12.5


def test_means_follow_source(registry, collector, source, properties):
    CollapserMetricsPublisher(collector, "UserLookup", source, properties).initialize()
    source.batch_mean = 3.5
    source.shard_mean = 1.25
    assert _sample(registry, "batch_size_mean") == 3.5
    assert _sample(registry, "shard_size_mean") == 1.25


def test_properties_not_exported_by_default(registry, collector, source, properties):
    CollapserMetricsPublisher(collector, "UserLookup", source, properties).initialize()
    properties.max_requests = 7
    for name in PROPERTY_NAMES:
        assert _sample(registry, name) is None
    assert properties.reads == 0


def test_property_gauges_track_live_values(registry, collector, source, properties):
    CollapserMetricsPublisher(collector, "UserLookup", source, properties, export_properties=True).initialize()
    assert properties.reads == 0
    assert _sample(registry, "property_value_max_requests_in_batch") == 100
    assert _sample(registry, "property_value_rolling_statistical_window_in_milliseconds") == 10000
    assert _sample(registry, "property_value_timer_delay_in_milliseconds") == 10
    properties.max_requests = 250
    properties.timer_delay_ms = 25
    assert _sample(registry, "property_value_max_requests_in_batch") == 250
    assert _sample(registry, "property_value_timer_delay_in_milliseconds") == 25


def test_boolean_property_is_one_or_zero(source, properties):
    rec = RecordingRegistrar()
    CollapserMetricsPublisher(rec, "UserLookup", source, properties, export_properties=True).initialize()
    read = {c[1]: c[4] for c in rec.calls}["property_value_request_cache_enabled"]
    properties.cache_enabled = True
    assert read() == 1
    properties.cache_enabled = False
    assert read() == 0


def test_second_initialize_fails_fast(source, properties):
    rec = RecordingRegistrar()
    pub = CollapserMetricsPublisher(rec, "UserLookup", source, properties)
    pub.initialize()
    with pytest.raises(PublisherAlreadyInitializedError):
        pub.initialize()
    assert len(rec.calls) == len(BASE_NAMES)
    assert pub.initialized


def test_source_errors_propagate_to_scrape(registry, collector, source, properties):
    def boom():
        raise RuntimeError("metrics not ready")
    source.get_batch_size_mean = boom
    CollapserMetricsPublisher(collector, "UserLookup", source, properties).initialize()
    with pytest.raises(RuntimeError, match="metrics not ready"):
        registry.get_sample_value(f"{SUBSYSTEM}_batch_size_mean", {"collapser_name": "UserLookup"})


def test_two_collapsers_are_independent(registry, collector, make_source, properties):
    a, b = make_source(), make_source()
    a.cumulative[CollapserEvent.COLLAPSER_BATCH] = 3
    b.cumulative[CollapserEvent.COLLAPSER_BATCH] = 9
    CollapserMetricsPublisher(collector, "A", a, properties).initialize()
    CollapserMetricsPublisher(collector, "B", b, properties).initialize()
    assert _sample(registry, "count_batches", "A") == 3
    assert _sample(registry, "count_batches", "B") == 9
    a.cumulative[CollapserEvent.COLLAPSER_BATCH] = 4
    assert _sample(registry, "count_batches", "A") == 4
    assert _sample(registry, "count_batches", "B") == 9


def test_same_name_twice_is_a_registration_conflict(collector, source, properties):
    CollapserMetricsPublisher(collector, "A", source, properties).initialize()
    with pytest.raises(ValueError):
        CollapserMetricsPublisher(collector, "A", source, properties).initialize()
