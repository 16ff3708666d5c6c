"""Batch files for the breeding/pregnancy submission workflow.

Layout under the data directory (one set per calendar date):
- breeding-<date>.json, pregnancy-<date>.json: extracted records, written
  by the extraction step
- <kind>-<date>-inputs.json: converted SubmissionRecords, a plain JSON
  array the operator may edit before submission
"""

import json
from pathlib import Path
from typing import List, Optional, Type

from pydantic import TypeAdapter, ValidationError

from escow.domain.models import (
    BreedingRecord,
    ExtractionBatch,
    PregnancyRecord,
    SubmissionRecord,
)
from escow.logging import get_logger

from .exceptions import SubmissionFileError
from .files import write_json_atomic

logger = get_logger(__name__, component="submission_store")

BREEDING = "breeding"
PREGNANCY = "pregnancy"
ALL = "all"

_SUBMISSION_LIST = TypeAdapter(List[SubmissionRecord])


class SubmissionBatchStore:
    """Reads extracted batches and reads/writes reviewed submission files."""

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def extraction_path(self, kind: str, date: str) -> Path:
        return self.data_dir / f"{kind}-{date}.json"

    def submission_path(self, kind: str, date: str) -> Path:
        return self.data_dir / f"{kind}-{date}-inputs.json"

    def load_breeding_batch(self, date: str) -> Optional[ExtractionBatch[BreedingRecord]]:
        return self._load_batch(self.extraction_path(BREEDING, date), ExtractionBatch[BreedingRecord])

    def load_pregnancy_batch(self, date: str) -> Optional[ExtractionBatch[PregnancyRecord]]:
        return self._load_batch(self.extraction_path(PREGNANCY, date), ExtractionBatch[PregnancyRecord])

    def _load_batch(self, path: Path, model: Type[ExtractionBatch]) -> Optional[ExtractionBatch]:
        """Load one extraction file; None when the extractor produced none for that date."""
        if not path.exists():
            logger.info(
                f"No extraction file at {path}",
                extra={"event": "submission_store.batch.missing", "path": str(path)},
            )
            return None

        try:
            batch = model.model_validate_json(path.read_text(encoding="utf-8"))
        except ValidationError as e:
            raise SubmissionFileError(f"Invalid extraction file {path}: {e}", path=path) from e
        except OSError as e:
            raise SubmissionFileError(f"Failed to read {path}: {e}", path=path) from e

        logger.info(
            f"Loaded {len(batch.records)} extracted records from {path.name}",
            extra={
                "event": "submission_store.batch.loaded",
                "path": str(path),
                "record_count": len(batch.records),
            },
        )
        return batch

    def save_submissions(self, path: Path, submissions: List[SubmissionRecord]) -> Path:
        """Write a submission list as an editable, pretty-printed JSON array."""
        payload = _SUBMISSION_LIST.dump_python(submissions, mode="json", by_alias=True)
        try:
            write_json_atomic(path, payload)
        except OSError as e:
            raise SubmissionFileError(f"Failed to write {path}: {e}", path=path) from e

        logger.info(
            f"Saved {len(submissions)} submission entries to {path.name}",
            extra={
                "event": "submission_store.submissions.saved",
                "path": str(path),
                "record_count": len(submissions),
            },
        )
        return path

    def load_submissions(self, path: Path) -> List[SubmissionRecord]:
        """Re-read a submission file, honoring any edits made during review.

        Raises:
            SubmissionFileError: If the file is missing, not JSON, or an
                entry fails validation
        """
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise SubmissionFileError(f"Submission file not found: {path}", path=path) from e
        except json.JSONDecodeError as e:
            raise SubmissionFileError(
                f"Submission file {path} is not valid JSON (line {e.lineno}, column {e.colno})",
                path=path,
            ) from e
        except OSError as e:
            raise SubmissionFileError(f"Failed to read {path}: {e}", path=path) from e

        try:
            submissions = _SUBMISSION_LIST.validate_python(raw)
        except ValidationError as e:
            raise SubmissionFileError(f"Invalid entry in {path}: {e}", path=path) from e

        logger.info(
            f"Reloaded {len(submissions)} reviewed entries from {path.name}",
            extra={
                "event": "submission_store.submissions.reloaded",
                "path": str(path),
                "record_count": len(submissions),
            },
        )
        return submissions
