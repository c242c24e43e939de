"""
Normalizer

Transforms loosely-typed upstream prototype records into the canonical shape
used by the store and repository.

Key responsibilities:
- Split pipe-delimited list fields (string_parsers)
- Convert regional timestamps to canonical UTC (timestamps)
- Map whole records with per-field default policies (normalize)
"""

from .normalize import normalize_prototype, normalize_prototypes
from .string_parsers import split_list
from .timestamps import LOCAL_UTC_OFFSET, normalize_timestamp

__all__ = [
    "normalize_prototype",
    "normalize_prototypes",
    "normalize_timestamp",
    "split_list",
    "LOCAL_UTC_OFFSET",
]
