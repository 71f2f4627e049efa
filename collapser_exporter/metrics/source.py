"""Read-side contracts for the data a collapser publisher exports.

Both sources are owned and updated elsewhere (the collapser's batching code and
its dynamic configuration). The exporter only ever calls these accessors, at
scrape time, possibly from several threads at once; implementations must be
safe for concurrent reads.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from .events import CollapserEvent


@runtime_checkable
class CollapserMetricsSource(Protocol):
    def get_cumulative_count(self, event: CollapserEvent) -> int:
        """Total occurrences of ``event`` since process start."""
        ...

    def get_rolling_count(self, event: CollapserEvent) -> int:
        """Occurrences of ``event`` within the current rolling window."""
        ...

    def get_batch_size_mean(self) -> float: ...

    def get_batch_size_percentile(self, percentile: float) -> float:
        """Batch size at ``percentile`` (0-100, fractional allowed)."""
        ...

    def get_shard_size_mean(self) -> float: ...

    def get_shard_size_percentile(self, percentile: float) -> float: ...


@runtime_checkable
class CollapserPropertiesSource(Protocol):
    def metrics_rolling_statistical_window_in_milliseconds(self) -> int: ...

    def request_cache_enabled(self) -> bool: ...

    def max_requests_in_batch(self) -> int: ...

    def timer_delay_in_milliseconds(self) -> int: ...


__all__ = ["CollapserMetricsSource", "CollapserPropertiesSource"]
