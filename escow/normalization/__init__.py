"""Normalization of free-text facility names and Japanese addresses.

This module provides:
- normalize_address / normalize_name: pure canonicalization functions
- extract_region: prefecture + municipality split used by address fallback matching
- MatchableFacility: original and normalized variants of a name/address pair
- The literal rule tables (prefectures, substitution rules) in .rules
"""

from .models import AddressRegion, MatchableFacility
from .rules import PREFECTURES
from .service import (
    collapse_whitespace,
    extract_region,
    fold_width,
    normalize_address,
    normalize_name,
)

__all__ = [
    "normalize_address",
    "normalize_name",
    "extract_region",
    "fold_width",
    "collapse_whitespace",
    "AddressRegion",
    "MatchableFacility",
    "PREFECTURES",
]
