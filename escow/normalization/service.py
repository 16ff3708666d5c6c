"""Name and address normalization.

Both functions are pure and total: any string, including the empty string,
yields a normalized string.

Address pipeline, in order:
1. Fold full-width digits and Latin letters to half-width
2. Strip all whitespace, including U+3000
3. Unify the dash glyphs ー－‐− to "-"
4. 丁目 -> "-"
5. 番 / 番地 -> "-"
6. Remove 号
7. Collapse runs of "-"
8. Strip a trailing "-"
"""

import re
from typing import Iterable, Optional

from .models import AddressRegion
from .rules import (
    ADDRESS_RULES,
    MUNICIPALITY_PATTERN,
    NAME_RULES,
    PREFECTURES,
    WIDTH_FOLD_TABLE,
    SubstitutionRule,
)


def fold_width(text: str) -> str:
    """Map full-width digits and Latin letters to their ASCII forms."""
    return text.translate(WIDTH_FOLD_TABLE)


def _apply_rules(text: str, rules: Iterable[SubstitutionRule]) -> str:
    for rule in rules:
        text = rule.pattern.sub(rule.replacement, text)
    return text


def normalize_address(text: str) -> str:
    """Canonicalize a Japanese address for comparison.

    Example:
        >>> normalize_address("東京都千代田区霞が関１丁目２番地３号")
        '東京都千代田区霞が関1-2-3'

    Args:
        text: Free-text address

    Returns:
        Normalized address
    """
    if not text:
        return ""

    result = text
    # Removing 号 can join 丁 and 目; rerun until stable so the output is idempotent
    while True:
        normalized = _apply_rules(fold_width(result), ADDRESS_RULES)
        if normalized == result:
            return normalized
        result = normalized


def normalize_name(text: str) -> str:
    """Canonicalize a facility name: no whitespace, half-width parentheses.

    Example:
        >>> normalize_name("デイサービス　さくら（本館）")
        'デイサービスさくら(本館)'
    """
    if not text:
        return ""
    return _apply_rules(text, NAME_RULES)


def extract_region(normalized_address: str) -> Optional[AddressRegion]:
    """Split the prefecture and first municipality token off an address.

    Args:
        normalized_address: Output of normalize_address()

    Returns:
        AddressRegion, or None if the address does not start with a prefecture
    """
    for prefecture in PREFECTURES:
        if normalized_address.startswith(prefecture):
            remainder = normalized_address[len(prefecture):]
            match = MUNICIPALITY_PATTERN.match(remainder)
            return AddressRegion(
                prefecture=prefecture,
                municipality=match.group(0) if match else None,
            )
    return None


def collapse_whitespace(text: str) -> str:
    """Trim and collapse inner whitespace runs (used for CSV and HTML cells)."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()
