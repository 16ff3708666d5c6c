"""CSV export of lookup outcomes.

Output format:
- UTF-8 with a byte-order mark, so spreadsheet tools detect the encoding
- every field double-quoted, embedded quotes doubled
- "\\n" line endings
- one row per matched candidate; one row with empty match columns for an
  outcome without matches
- error outcomes are left out and only counted in the summary
"""

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional

from escow.domain.models import JobLog, MatchOutcome
from escow.logging import get_logger
from escow.utils.timestamps import today_iso

logger = get_logger(__name__, component="reporting")

CSV_HEADERS = [
    "入力事業所名",
    "入力住所",
    "見つかった",
    "マッチ件数",
    "マッチ事業所名",
    "マッチ住所",
    "サービス種類",
    "事業所番号",
    "詳細URL",
]


@dataclass
class ExportSummary:
    """What an export wrote.

    Attributes:
        path: The CSV file written
        exported: Outcomes written (errors excluded)
        found: Exported outcomes with at least one match
        not_found: Exported outcomes without matches
        errors: Error outcomes left out of the file
        row_count: Data rows written (excluding the header)
    """

    path: Path
    exported: int = 0
    found: int = 0
    not_found: int = 0
    errors: int = 0
    row_count: int = 0


def default_export_path(data_dir: Path, date: Optional[str] = None) -> Path:
    """``<data_dir>/wam_search_<YYYY-MM-DD>.csv``, today's date by default."""
    return Path(data_dir) / f"wam_search_{date or today_iso()}.csv"


def outcome_rows(outcome: MatchOutcome) -> Iterator[List[str]]:
    """Yield the CSV rows for one outcome."""
    if not outcome.matches:
        yield [
            outcome.input_name,
            outcome.input_address,
            "TRUE" if outcome.found else "FALSE",
            "0",
            "", "", "", "", "",
        ]
        return

    match_count = str(len(outcome.matches))
    for match in outcome.matches:
        yield [
            outcome.input_name,
            outcome.input_address,
            "TRUE",
            match_count,
            match.name,
            match.address,
            match.service_type,
            match.registry_id,
            match.detail_locator,
        ]


def export_job_log_csv(job_log: JobLog, path: Path) -> ExportSummary:
    """Write the job log's non-error outcomes as a CSV table.

    Args:
        job_log: Log to export
        path: Destination CSV file

    Returns:
        ExportSummary with counts
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    summary = ExportSummary(path=path)

    with open(path, "w", encoding="utf-8-sig", newline="") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(CSV_HEADERS)

        for outcome in job_log.outcomes:
            if outcome.is_error:
                summary.errors += 1
                continue
            summary.exported += 1
            if outcome.found:
                summary.found += 1
            else:
                summary.not_found += 1
            for row in outcome_rows(outcome):
                writer.writerow(row)
                summary.row_count += 1

    logger.info(
        f"Exported {summary.exported} outcomes to {path}",
        extra={
            "event": "reporting.export.completed",
            "path": str(path),
            "exported": summary.exported,
            "found": summary.found,
            "not_found": summary.not_found,
            "errors_excluded": summary.errors,
            "row_count": summary.row_count,
        },
    )
    return summary
