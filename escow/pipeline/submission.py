"""Submission preparation: extracted records → converted, reviewable batch."""

from pathlib import Path
from typing import List

from escow.conversion.preview import render_breeding_preview, render_pregnancy_preview
from escow.conversion.service import (
    convert_breeding_records,
    convert_pregnancy_records,
    is_ambiguous_owner_source,
)
from escow.domain.models import SubmissionRecord
from escow.logging import get_logger
from escow.persistence.submission_store import ALL, BREEDING, PREGNANCY, SubmissionBatchStore

from .exceptions import NoSubmissionDataError
from .models import PreparedSubmission

logger = get_logger(__name__, component="pipeline")

DATA_TYPES = (ALL, BREEDING, PREGNANCY)


class SubmissionPipeline:
    """
    Converts one day's extracted records and stops at the review checkpoint.

    ``prepare`` writes the editable submission file(s); the operator may edit
    them; ``load_reviewed`` re-reads the file so those edits are what gets
    submitted.
    """

    def __init__(self, store: SubmissionBatchStore):
        self.store = store

    def prepare(self, date: str, data_type: str = ALL) -> PreparedSubmission:
        """
        Convert the extracted batch(es) for ``date`` and write submission files.

        Each record type gets its own ``<kind>-<date>-inputs.json``; with
        ``data_type="all"`` the combined list is also written to
        ``all-<date>-inputs.json``, which is the file to review.

        Raises:
            ValueError: If data_type is not one of all/breeding/pregnancy
            NoSubmissionDataError: If there is nothing to convert
            SubmissionFileError: If an extraction file is invalid
        """
        if data_type not in DATA_TYPES:
            raise ValueError(f"data_type must be one of {', '.join(DATA_TYPES)}, got: {data_type}")

        combined: List[SubmissionRecord] = []
        previews: List[str] = []
        review_path = None
        breeding_count = pregnancy_count = ambiguous = 0

        if data_type in (ALL, BREEDING):
            batch = self.store.load_breeding_batch(date)
            if batch and batch.records:
                submissions = convert_breeding_records(batch.records)
                ambiguous += self._warn_ambiguous_owners([r.cow_no for r in batch.records], BREEDING)
                previews.append(render_breeding_preview(batch.records, submissions))
                review_path = self.store.save_submissions(
                    self.store.submission_path(BREEDING, date), submissions
                )
                combined.extend(submissions)
                breeding_count = len(submissions)

        if data_type in (ALL, PREGNANCY):
            batch = self.store.load_pregnancy_batch(date)
            if batch and batch.records:
                submissions = convert_pregnancy_records(batch.records)
                ambiguous += self._warn_ambiguous_owners([r.cow_no for r in batch.records], PREGNANCY)
                previews.append(render_pregnancy_preview(batch.records, submissions))
                review_path = self.store.save_submissions(
                    self.store.submission_path(PREGNANCY, date), submissions
                )
                combined.extend(submissions)
                pregnancy_count = len(submissions)

        if not combined:
            logger.info(
                f"No {data_type} records for {date}",
                extra={"event": "submission.prepare.no_data", "date": date, "data_type": data_type},
            )
            raise NoSubmissionDataError(date, data_type)

        if data_type == ALL:
            review_path = self.store.save_submissions(self.store.submission_path(ALL, date), combined)

        logger.info(
            f"Prepared {len(combined)} submission entries for review",
            extra={
                "event": "submission.prepare.completed",
                "date": date,
                "data_type": data_type,
                "breeding_count": breeding_count,
                "pregnancy_count": pregnancy_count,
                "ambiguous_owner_count": ambiguous,
                "path": str(review_path),
            },
        )
        return PreparedSubmission(
            path=review_path,
            previews=previews,
            breeding_count=breeding_count,
            pregnancy_count=pregnancy_count,
            ambiguous_owner_count=ambiguous,
        )

    def load_reviewed(self, path: Path) -> List[SubmissionRecord]:
        """Re-read a submission file after the review pause."""
        return self.store.load_submissions(Path(path))

    @staticmethod
    def _warn_ambiguous_owners(cow_numbers: List[str], kind: str) -> int:
        flagged = [c for c in cow_numbers if is_ambiguous_owner_source(c)]
        for cow_no in flagged:
            logger.warning(
                f"Owner id derived from '{cow_no}' needs confirmation",
                extra={"event": "submission.owner_id.ambiguous", "cow_no": cow_no, "kind": kind},
            )
        return len(flagged)
