"""Event kinds a collapser metrics source counts."""
from __future__ import annotations

from enum import Enum


class CollapserEvent(str, Enum):
    COLLAPSER_REQUEST_BATCHED = "collapser_request_batched"
    COLLAPSER_BATCH = "collapser_batch"
    RESPONSE_FROM_CACHE = "response_from_cache"


__all__ = ["CollapserEvent"]
