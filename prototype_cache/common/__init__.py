"""
Common utilities shared across the prototype cache.

This package is intentionally small and focused on pure, dependency-free
helpers (e.g., code-to-label conversion for display).
"""

from .labels import (
    UNKNOWN_LABEL,
    license_type_label,
    release_flag_label,
    status_label,
    thanks_flag_label,
)

__all__ = [
    "UNKNOWN_LABEL",
    "status_label",
    "release_flag_label",
    "license_type_label",
    "thanks_flag_label",
]
