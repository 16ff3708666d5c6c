"""Literal rule tables for Japanese address and facility-name normalization.

Addresses are not parsed; they are rewritten by an ordered list of text
substitutions and compared against a fixed table of prefecture names.
"""

import re
from typing import NamedTuple, Pattern, Tuple

PREFECTURES: Tuple[str, ...] = (
    "北海道",
    "青森県", "岩手県", "宮城県", "秋田県", "山形県", "福島県",
    "茨城県", "栃木県", "群馬県", "埼玉県", "千葉県", "東京都", "神奈川県",
    "新潟県", "富山県", "石川県", "福井県", "山梨県", "長野県",
    "岐阜県", "静岡県", "愛知県", "三重県",
    "滋賀県", "京都府", "大阪府", "兵庫県", "奈良県", "和歌山県",
    "鳥取県", "島根県", "岡山県", "広島県", "山口県",
    "徳島県", "香川県", "愛媛県", "高知県",
    "福岡県", "佐賀県", "長崎県", "熊本県", "大分県", "宮崎県", "鹿児島県",
    "沖縄県",
)

MUNICIPAL_UNIT_MARKERS = "市区町村"

# First run of characters up to and including one municipal-unit marker
MUNICIPALITY_PATTERN: Pattern[str] = re.compile(
    rf"^[^{MUNICIPAL_UNIT_MARKERS}]+[{MUNICIPAL_UNIT_MARKERS}]"
)

CANONICAL_DASH = "-"

# Full-width digits and Latin letters map to ASCII by a fixed code point offset
_FULLWIDTH_OFFSET = 0xFEE0
WIDTH_FOLD_TABLE = str.maketrans({
    chr(code): chr(code - _FULLWIDTH_OFFSET)
    for start, end in (("０", "９"), ("Ａ", "Ｚ"), ("ａ", "ｚ"))
    for code in range(ord(start), ord(end) + 1)
})


class SubstitutionRule(NamedTuple):
    """One step of a normalization pipeline."""

    name: str
    pattern: Pattern[str]
    replacement: str


# Applied after width folding, in this order. Whitespace must go before dash
# unification and the suffix rules.
ADDRESS_RULES: Tuple[SubstitutionRule, ...] = (
    SubstitutionRule("strip_whitespace", re.compile(r"[\s　]+"), ""),
    SubstitutionRule("unify_dashes", re.compile(r"[ー－‐−]"), CANONICAL_DASH),
    SubstitutionRule("block_suffix", re.compile(r"丁目"), CANONICAL_DASH),
    SubstitutionRule("lot_suffix", re.compile(r"番地?"), CANONICAL_DASH),
    SubstitutionRule("building_suffix", re.compile(r"号"), ""),
    SubstitutionRule("collapse_dashes", re.compile(r"-{2,}"), CANONICAL_DASH),
    SubstitutionRule("strip_trailing_dash", re.compile(r"-$"), ""),
)

NAME_RULES: Tuple[SubstitutionRule, ...] = (
    SubstitutionRule("strip_whitespace", re.compile(r"[\s　]+"), ""),
    SubstitutionRule("open_paren", re.compile(r"（"), "("),
    SubstitutionRule("close_paren", re.compile(r"）"), ")"),
)
