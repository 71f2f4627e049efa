"""Collapser properties sources.

``EnvCollapserProperties`` re-reads the environment on every call so operators
can change a running collapser's configuration (and see the change on the next
scrape). Each key resolves in order:

  1. COLLAPSER_<NAME>_<KEY>      (instance override, NAME upper-cased, non
                                  alphanumerics replaced with '_')
  2. COLLAPSER_DEFAULT_<KEY>     (process-wide default)
  3. built-in default below

Keys: METRICS_ROLLING_STATISTICAL_WINDOW_IN_MILLISECONDS, REQUEST_CACHE_ENABLED,
MAX_REQUESTS_IN_BATCH, TIMER_DELAY_IN_MILLISECONDS.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass

from ..utils.env_flags import is_falsy, is_truthy
from ..utils.exceptions import ConfigError

DEFAULT_ROLLING_STATISTICAL_WINDOW_MS = 10000
DEFAULT_REQUEST_CACHE_ENABLED = True
DEFAULT_MAX_REQUESTS_IN_BATCH = 2147483647
DEFAULT_TIMER_DELAY_MS = 10


@dataclass(frozen=True)
class StaticCollapserProperties:
    """Fixed property values, for collapsers whose configuration never changes."""
    rolling_statistical_window_in_milliseconds: int = DEFAULT_ROLLING_STATISTICAL_WINDOW_MS
    request_cache: bool = DEFAULT_REQUEST_CACHE_ENABLED
    max_requests: int = DEFAULT_MAX_REQUESTS_IN_BATCH
    timer_delay: int = DEFAULT_TIMER_DELAY_MS

    def metrics_rolling_statistical_window_in_milliseconds(self) -> int:
        return self.rolling_statistical_window_in_milliseconds

    def request_cache_enabled(self) -> bool:
        return self.request_cache

    def max_requests_in_batch(self) -> int:
        return self.max_requests

    def timer_delay_in_milliseconds(self) -> int:
        return self.timer_delay


def _env_key(collapser_name: str) -> str:
    return re.sub(r'[^A-Za-z0-9]+', '_', collapser_name).strip('_').upper()


class EnvCollapserProperties:
    def __init__(self, collapser_name: str, defaults: StaticCollapserProperties | None = None) -> None:
        self.collapser_name = collapser_name
        self.defaults = defaults or StaticCollapserProperties()
        self._prefix = f"COLLAPSER_{_env_key(collapser_name)}_"

    def _lookup(self, key: str) -> tuple[str, str] | None:
        for var in (self._prefix + key, "COLLAPSER_DEFAULT_" + key):
            raw = os.environ.get(var)
            if raw is not None and raw.strip():
                return var, raw.strip()
        return None

    def _int(self, key: str, default: int) -> int:
        found = self._lookup(key)
        if found is None:
            return default
        var, raw = found
        try:
            return int(raw)
        except ValueError:
            raise ConfigError(f"{var} must be an integer, got {raw!r}") from None

    def _bool(self, key: str, default: bool) -> bool:
        found = self._lookup(key)
        if found is None:
            return default
        var, raw = found
        if is_truthy(raw):
            return True
        if is_falsy(raw):
            return False
        raise ConfigError(f"{var} must be a boolean flag, got {raw!r}")

    def metrics_rolling_statistical_window_in_milliseconds(self) -> int:
        return self._int("METRICS_ROLLING_STATISTICAL_WINDOW_IN_MILLISECONDS",
                         self.defaults.metrics_rolling_statistical_window_in_milliseconds())

    def request_cache_enabled(self) -> bool:
        return self._bool("REQUEST_CACHE_ENABLED", self.defaults.request_cache_enabled())

    def max_requests_in_batch(self) -> int:
        return self._int("MAX_REQUESTS_IN_BATCH", self.defaults.max_requests_in_batch())

    def timer_delay_in_milliseconds(self) -> int:
        return self._int("TIMER_DELAY_IN_MILLISECONDS", self.defaults.timer_delay_in_milliseconds())


__all__ = [
    "EnvCollapserProperties",
    "StaticCollapserProperties",
    "DEFAULT_ROLLING_STATISTICAL_WINDOW_MS",
    "DEFAULT_REQUEST_CACHE_ENABLED",
    "DEFAULT_MAX_REQUESTS_IN_BATCH",
    "DEFAULT_TIMER_DELAY_MS",
]
