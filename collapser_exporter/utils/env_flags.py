"""Environment flag helpers.

Consolidates the common pattern of interpreting environment variables as boolean
feature flags using the canonical truthy set {"1","true","yes","on"} (case-insensitive).

Usage examples:
    from collapser_exporter.utils.env_flags import is_truthy_env
    if is_truthy_env('COLLAPSER_METRICS_EXPORT_PROPERTIES'):
        ...
"""
from __future__ import annotations

import os

TRUTHY_SET: set[str] = {"1","true","yes","on"}
FALSY_SET: set[str] = {"0","false","no","off"}

def is_truthy(value: str | None) -> bool:
    if not value:
        return False
    return value.strip().lower() in TRUTHY_SET

def is_falsy(value: str | None) -> bool:
    if not value:
        return False
    return value.strip().lower() in FALSY_SET

def is_truthy_env(name: str, default: str | None = None) -> bool:
    return is_truthy(os.getenv(name, default or ''))

def env_str(name: str, default: str = '') -> str:
    """Return stripped env value, falling back to default when unset or blank."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip()

__all__ = [
    'TRUTHY_SET',
    'FALSY_SET',
    'is_truthy',
    'is_falsy',
    'is_truthy_env',
    'env_str',
]
