"""Facility directory search adapters.

This module provides:
- BaseSearchAdapter: shared HTTP handling and the search() contract
- WamSearchAdapter: WAM NET name search (HTML result table)
- parse_search_results: result-page parser, usable on saved pages
- get_adapter: build the configured adapter
- AdapterError hierarchy
"""

from .base import BaseSearchAdapter
from .exceptions import (
    AdapterConfigurationError,
    AdapterError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)
from .factory import get_adapter
from .wam import WamSearchAdapter, parse_search_results

__all__ = [
    "BaseSearchAdapter",
    "WamSearchAdapter",
    "parse_search_results",
    "get_adapter",
    "AdapterError",
    "AdapterHTTPError",
    "AdapterTimeoutError",
    "AdapterResponseError",
    "AdapterConfigurationError",
]
