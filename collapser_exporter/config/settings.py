"""Exporter settings resolved from the environment.

Environment Flags:
  COLLAPSER_METRICS_NAMESPACE=<name>       -> metric name prefix (default: none)
  COLLAPSER_METRICS_EXPORT_PROPERTIES=1    -> also export property_value_* gauges
  COLLAPSER_METRICS_LOG_LEVEL=DEBUG        -> root log level used by bootstrap()
"""
from __future__ import annotations

import re
from dataclasses import dataclass

from ..utils.env_flags import env_str, is_truthy_env
from ..utils.exceptions import ConfigError

_NAMESPACE_RE = re.compile(r'^[a-zA-Z_][a-zA-Z0-9_]*$')


@dataclass(frozen=True)
class ExporterSettings:
    namespace: str = ''
    export_properties: bool = False
    log_level: str = 'INFO'

    def __post_init__(self) -> None:
        if self.namespace and not _NAMESPACE_RE.match(self.namespace):
            raise ConfigError(f"Invalid metrics namespace: {self.namespace!r}")

    @classmethod
    def from_env(cls) -> ExporterSettings:
        return cls(
            namespace=env_str('COLLAPSER_METRICS_NAMESPACE'),
            export_properties=is_truthy_env('COLLAPSER_METRICS_EXPORT_PROPERTIES'),
            log_level=env_str('COLLAPSER_METRICS_LOG_LEVEL', 'INFO').upper(),
        )


__all__ = ["ExporterSettings"]
