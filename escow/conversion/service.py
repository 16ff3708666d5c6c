"""Conversion of extracted herd events into billing submission records.

Every function here is deterministic and total: malformed or unexpected
text maps to a documented fallback value instead of raising.

Classification codes:
    1 授精 (artificial insemination, also the breeding default)
    2 移植 (embryo transfer)
    3 発情 (estrus observation)
    4 妊鑑＋ (pregnancy check positive)
    5 妊鑑− (pregnancy check negative)
    6 妊鑑+- (pregnancy check undetermined, the pregnancy default)
"""

import re
from typing import List

from escow.domain.models import (
    BreedingRecord,
    ClassificationCode,
    PregnancyRecord,
    SubmissionRecord,
)

# Owner codes were confirmed against 5-, 6- and 7-digit cow numbers only
CONFIRMED_OWNER_SOURCE_LENGTHS = frozenset({5, 6, 7})

_OWNER_PAD_WIDTH = 6
_OWNER_PREFIX_LENGTH = 3

_NON_DIGIT = re.compile(r"\D")

# Checked in order; first hit wins
_BREEDING_KEYWORDS = (
    (ClassificationCode.EMBRYO_TRANSFER, ("移植", "et")),
    (ClassificationCode.INSEMINATION, ("授精", "ai")),
    (ClassificationCode.ESTRUS, ("発情",)),
)

# 未受胎 contains 受胎, so the negative keywords are checked first
_PREGNANCY_NEGATIVE_KEYWORDS = ("未受胎", "不受胎", "空胎", "−")
_PREGNANCY_NEGATIVE_LITERALS = ("-",)
_PREGNANCY_POSITIVE_KEYWORDS = ("受胎", "＋")
_PREGNANCY_POSITIVE_LITERALS = ("+",)

CLASSIFICATION_LABELS = {
    ClassificationCode.INSEMINATION.value: "授精",
    ClassificationCode.EMBRYO_TRANSFER.value: "移植",
    ClassificationCode.ESTRUS.value: "発情",
    ClassificationCode.PREGNANT.value: "妊鑑＋",
    ClassificationCode.OPEN.value: "妊鑑−",
    ClassificationCode.UNDETERMINED.value: "妊鑑+-",
}


def _digits(raw: str) -> str:
    return _NON_DIGIT.sub("", raw or "")


def extract_owner_id(raw: str) -> str:
    """Derive the owner code from the leading digits of a cow number.

    Steps:
    1. Keep only the digits
    2. Fewer than 3 digits: return them unchanged
    3. 5 or fewer digits: left-pad to 6 with zeros, then take the first 3
    4. 6 or more digits: take the first 3
    5. Drop leading zeros

    Examples:
        >>> extract_owner_id("20016")
        '20'
        >>> extract_owner_id("185776")
        '185'
        >>> extract_owner_id("1073956")
        '107'

    Args:
        raw: Cow number as displayed (may contain non-digits)

    Returns:
        Owner code
    """
    digits = _digits(raw)
    if len(digits) < _OWNER_PREFIX_LENGTH:
        return digits

    if len(digits) < _OWNER_PAD_WIDTH:
        prefix = digits.zfill(_OWNER_PAD_WIDTH)[:_OWNER_PREFIX_LENGTH]
    else:
        prefix = digits[:_OWNER_PREFIX_LENGTH]

    return str(int(prefix))


def is_ambiguous_owner_source(raw: str) -> bool:
    """True when the cow number's digit count has no confirmed owner-code rule.

    extract_owner_id() still returns a value for these; callers surface them
    for operator confirmation.
    """
    return len(_digits(raw)) not in CONFIRMED_OWNER_SOURCE_LENGTHS


def get_classification_id(method: str) -> str:
    """Map a free-text breeding method to a classification code.

    Matching is case-insensitive substring search. Embryo-transfer keywords
    (移植, ET) take precedence over insemination keywords (授精, AI), then
    estrus (発情). Anything else is insemination.
    """
    lowered = (method or "").lower()
    for code, keywords in _BREEDING_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return code.value
    return ClassificationCode.INSEMINATION.value


def get_pregnancy_classification_id(result: str) -> str:
    """Map a free-text pregnancy-check result to a classification code.

    Examples:
        >>> get_pregnancy_classification_id("受胎")
        '4'
        >>> get_pregnancy_classification_id("未受胎")
        '5'
        >>> get_pregnancy_classification_id("不明")
        '6'
    """
    text = (result or "").strip()
    lowered = text.lower()

    if text in _PREGNANCY_NEGATIVE_LITERALS or any(k in lowered for k in _PREGNANCY_NEGATIVE_KEYWORDS):
        return ClassificationCode.OPEN.value
    if text in _PREGNANCY_POSITIVE_LITERALS or any(k in lowered for k in _PREGNANCY_POSITIVE_KEYWORDS):
        return ClassificationCode.PREGNANT.value
    return ClassificationCode.UNDETERMINED.value


def format_date(date: str) -> str:
    """Replace every '/' with '-'. No calendar validation."""
    return (date or "").replace("/", "-")


def convert_breeding_record(record: BreedingRecord) -> SubmissionRecord:
    """Build the billing entry for one breeding event."""
    return SubmissionRecord(
        date=format_date(record.date),
        owner_id=extract_owner_id(record.cow_no),
        individual_id=record.individual_id,
        classification_code=get_classification_id(record.method),
        content_id=record.semen_no,
        quantity=1,
        price=0,
        memo="",
    )


def convert_pregnancy_record(record: PregnancyRecord) -> SubmissionRecord:
    """Build the billing entry for one pregnancy check. No content id."""
    return SubmissionRecord(
        date=format_date(record.date),
        owner_id=extract_owner_id(record.cow_no),
        individual_id=record.individual_id,
        classification_code=get_pregnancy_classification_id(record.result),
        content_id="",
        quantity=1,
        price=0,
        memo="",
    )


def convert_breeding_records(records: List[BreedingRecord]) -> List[SubmissionRecord]:
    return [convert_breeding_record(record) for record in records]


def convert_pregnancy_records(records: List[PregnancyRecord]) -> List[SubmissionRecord]:
    return [convert_pregnancy_record(record) for record in records]
