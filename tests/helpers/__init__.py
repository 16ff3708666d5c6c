"""Test helper utilities for escow tests."""

from .fixture_adapter import FixtureSearchAdapter, load_fixture_results

__all__ = ["FixtureSearchAdapter", "load_fixture_results"]
