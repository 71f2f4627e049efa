"""Startup wiring for the collapser exporter.

Centralizes common startup concerns so host applications stay thin:
- dotenv/environment loading
- logging initialization
- settings resolution (ExporterSettings.from_env)
- GaugeCollector registration and publisher factory creation

Serving ``/metrics`` is left to the host (e.g. prometheus_client.start_http_server
on the same registry).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv
from prometheus_client.registry import REGISTRY, CollectorRegistry

from .config.settings import ExporterSettings
from .metrics.collector import GaugeCollector
from .metrics.factory import CollapserPublisherFactory
from .utils.logging_utils import setup_logging
from .version import get_version

logger = logging.getLogger(__name__)


@dataclass
class BootContext:
    settings: ExporterSettings
    collector: GaugeCollector
    factory: CollapserPublisherFactory


def bootstrap(
    registry: CollectorRegistry = REGISTRY,
    settings: ExporterSettings | None = None,
    load_env: bool = True,
    configure_logging: bool = True,
    log_file: str | None = None,
) -> BootContext:
    """Perform startup sequence and return BootContext.

    Parameters
    ----------
    registry: prometheus_client registry the collector is attached to
    settings: explicit settings; resolved from the environment when omitted
    load_env: read a ``.env`` file found from the working directory upward
              (existing environment variables win)
    configure_logging: install root handlers via setup_logging
    log_file: optional log file path passed to setup_logging
    """
    if load_env:
        load_dotenv(find_dotenv(usecwd=True), override=False)
    if settings is None:
        settings = ExporterSettings.from_env()
    if configure_logging:
        setup_logging(settings.log_level, log_file)

    collector = GaugeCollector(settings.namespace).register(registry)
    factory = CollapserPublisherFactory(collector, export_properties=settings.export_properties)
    logger.info(
        "Collapser exporter %s ready (namespace=%r export_properties=%s)",
        get_version(), settings.namespace, settings.export_properties,
    )
    return BootContext(settings=settings, collector=collector, factory=factory)


__all__ = ["BootContext", "bootstrap"]
