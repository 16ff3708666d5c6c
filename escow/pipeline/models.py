"""Data models for pipeline execution tracking and reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List


@dataclass
class LookupRunResult:
    """
    Results from one lookup run over an input batch.

    Attributes:
        run_started_at: UTC timestamp when the run began
        run_finished_at: UTC timestamp when the run ended
        total_input: Records in the input batch
        skipped_already_processed: Records dropped because the log already
            has an outcome for them (or they repeat within the batch)
        processed: Outcomes appended during this run
        found: Of those, outcomes with at least one match
        not_found: Of those, outcomes with no match
        errors: Of those, error outcomes
        cancelled: Whether the operator interrupted the run
        duration_seconds: Wall time of the run
    """

    run_started_at: datetime
    run_finished_at: datetime
    total_input: int = 0
    skipped_already_processed: int = 0
    processed: int = 0
    found: int = 0
    not_found: int = 0
    errors: int = 0
    cancelled: bool = False
    duration_seconds: float = 0.0

    def __post_init__(self):
        if self.duration_seconds == 0.0:
            delta = self.run_finished_at - self.run_started_at
            self.duration_seconds = delta.total_seconds()


@dataclass
class PreparedSubmission:
    """
    A converted submission batch waiting for operator review.

    Attributes:
        path: The editable submission file that was written
        previews: Rendered preview tables, one per record type
        breeding_count: Converted breeding entries
        pregnancy_count: Converted pregnancy entries
        ambiguous_owner_count: Entries whose owner id needs confirmation
    """

    path: Path
    previews: List[str] = field(default_factory=list)
    breeding_count: int = 0
    pregnancy_count: int = 0
    ambiguous_owner_count: int = 0

    @property
    def total(self) -> int:
        return self.breeding_count + self.pregnancy_count
