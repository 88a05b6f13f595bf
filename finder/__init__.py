"""Kolej Finder - dormitory resident lookup."""
from finder.core import (
    Person,
    FinderError,
    FilterValidationError,
    EmptyResultError,
    CacheLoadError,
    TransientFetchError,
)
from finder.filters import QueryFilter, compile_filter

__version__ = "0.1.0"

__all__ = [
    "Person",
    "QueryFilter",
    "compile_filter",
    "FinderError",
    "FilterValidationError",
    "EmptyResultError",
    "CacheLoadError",
    "TransientFetchError",
]
