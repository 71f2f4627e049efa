from __future__ import annotations

from .properties import EnvCollapserProperties, StaticCollapserProperties
from .settings import ExporterSettings

__all__ = ["EnvCollapserProperties", "ExporterSettings", "StaticCollapserProperties"]
