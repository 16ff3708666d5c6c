"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

from .duration import DurationParseError, parse_duration

# Below this the directory starts refusing requests
POLITE_DELAY_SECONDS = 2
LONG_TIMEOUT_SECONDS = 120


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    lookup = config_dict.get("lookup", {})
    if not isinstance(lookup, dict):
        return warning_messages

    for key in ("request_delay_min", "request_delay_max"):
        value = lookup.get(key)
        if not isinstance(value, str):
            continue
        try:
            seconds = parse_duration(value)
        except DurationParseError:
            # Reported by model validation
            continue
        if seconds < POLITE_DELAY_SECONDS:
            warning_messages.append(
                f"Short {key} ({value}) may get requests throttled by the directory"
            )

    timeout = lookup.get("request_timeout")
    if isinstance(timeout, int) and timeout > LONG_TIMEOUT_SECONDS:
        warning_messages.append(
            f"Long request_timeout ({timeout}s) makes a stalled lookup block the run for minutes"
        )

    search_url = lookup.get("search_url")
    if isinstance(search_url, str) and search_url.strip().startswith("http://"):
        warning_messages.append(f"search_url uses plain http: {search_url.strip()}")

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
