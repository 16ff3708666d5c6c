"""Input CSV parsing for facility lookups.

Expected layout: a header row, then ``name,address`` rows. Quoting follows
RFC 4180 (``"`` around fields, ``""`` inside them). Extra columns are
ignored.
"""

import csv
import io
from pathlib import Path
from typing import List

from escow.domain.models import InputRecord
from escow.logging import get_logger

logger = get_logger(__name__, component="ingestion")

MIN_FIELDS = 2


def parse_input_rows(text: str) -> List[InputRecord]:
    """Parse CSV text into InputRecords.

    Lenient parsing:
    1. The first non-blank row is the header and is skipped
    2. Blank rows are skipped
    3. Rows with fewer than two fields are skipped (logged at DEBUG)
    4. Name and address are stripped of surrounding whitespace

    Args:
        text: CSV document text

    Returns:
        InputRecords in file order
    """
    records: List[InputRecord] = []
    header_seen = False

    for line_number, row in enumerate(csv.reader(io.StringIO(text)), start=1):
        if not any(cell.strip() for cell in row):
            continue
        if not header_seen:
            header_seen = True
            continue
        if len(row) < MIN_FIELDS:
            logger.debug(
                "Skipping short input row",
                extra={
                    "event": "ingestion.row.skipped",
                    "line_number": line_number,
                    "field_count": len(row),
                },
            )
            continue
        records.append(InputRecord(name=row[0].strip(), address=row[1].strip()))

    return records


def parse_input_csv(path: Path) -> List[InputRecord]:
    """Read and parse an input CSV file (UTF-8, with or without BOM).

    Raises:
        FileNotFoundError: If the file does not exist
    """
    text = Path(path).read_text(encoding="utf-8-sig")
    records = parse_input_rows(text)

    logger.info(
        f"Parsed {len(records)} input records from {path}",
        extra={
            "event": "ingestion.file.parsed",
            "path": str(path),
            "record_count": len(records),
        },
    )
    return records


def write_input_csv(path: Path, records: List[InputRecord]) -> Path:
    """Write records in the input CSV layout, e.g. to requeue failed lookups."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8-sig", newline="") as f:
        writer = csv.writer(f, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
        writer.writerow(["事業所名", "住所"])
        for record in records:
            writer.writerow([record.name, record.address])
    return path
