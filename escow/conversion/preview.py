"""Fixed-width preview tables shown to the operator before submission.

Column widths are computed in terminal cells: East Asian wide and
full-width characters occupy two cells, so Japanese headers and values
line up in a monospace terminal.
"""

import unicodedata
from typing import List, Sequence

from escow.domain.models import BreedingRecord, PregnancyRecord, SubmissionRecord

from .service import CLASSIFICATION_LABELS, is_ambiguous_owner_source

AMBIGUOUS_OWNER_MARK = "要確認"


def display_width(text: str) -> int:
    """Number of terminal cells needed to print ``text``."""
    return sum(2 if unicodedata.east_asian_width(ch) in ("W", "F") else 1 for ch in text)


def pad_cell(text: str, width: int) -> str:
    """Left-align ``text`` in a cell ``width`` terminal cells wide."""
    return text + " " * max(width - display_width(text), 0)


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Render a pipe-delimited table with a separator row under the headers.

    Example:
        >>> print(render_table(["牛番号", "区分"], [["20016", "授精"]]))
        | 牛番号 | 区分 |
        |--------|------|
        | 20016  | 授精 |
    """
    widths = [display_width(h) for h in headers]
    for row in rows:
        for idx, cell in enumerate(row):
            widths[idx] = max(widths[idx], display_width(cell))

    def _line(cells: Sequence[str]) -> str:
        return "| " + " | ".join(pad_cell(c, w) for c, w in zip(cells, widths)) + " |"

    lines = [_line(headers), "|" + "|".join("-" * (w + 2) for w in widths) + "|"]
    lines.extend(_line(row) for row in rows)
    return "\n".join(lines)


def _owner_check(cow_no: str) -> str:
    return AMBIGUOUS_OWNER_MARK if is_ambiguous_owner_source(cow_no) else ""


def render_breeding_preview(
    records: Sequence[BreedingRecord], submissions: Sequence[SubmissionRecord]
) -> str:
    """Render the breeding conversion preview.

    Args:
        records: Extracted breeding events
        submissions: Their converted entries, index-aligned with ``records``

    Returns:
        Titled table text
    """
    rows: List[List[str]] = []
    for record, submission in zip(records, submissions):
        rows.append([
            record.cow_no,
            submission.owner_id,
            submission.individual_id,
            CLASSIFICATION_LABELS.get(submission.classification_code, submission.classification_code),
            submission.content_id,
            _owner_check(record.cow_no),
        ])
    table = render_table(["牛番号", "畜主ID", "個体識別番号", "区分", "精液番号", "確認"], rows)
    return f"=== 繁殖データ変換プレビュー ({len(rows)}件) ===\n\n{table}\n"


def render_pregnancy_preview(
    records: Sequence[PregnancyRecord], submissions: Sequence[SubmissionRecord]
) -> str:
    """Render the pregnancy-check conversion preview."""
    rows: List[List[str]] = []
    for record, submission in zip(records, submissions):
        rows.append([
            record.cow_no,
            submission.owner_id,
            submission.individual_id,
            record.result,
            CLASSIFICATION_LABELS.get(submission.classification_code, submission.classification_code),
            _owner_check(record.cow_no),
        ])
    table = render_table(["牛番号", "畜主ID", "個体識別番号", "結果", "区分", "確認"], rows)
    return f"=== 妊娠診断データ変換プレビュー ({len(rows)}件) ===\n\n{table}\n"
