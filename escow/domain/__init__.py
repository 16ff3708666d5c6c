"""Domain models for escow."""

from .models import (
    FINGERPRINT_SEPARATOR,
    BreedingRecord,
    CandidateRecord,
    ClassificationCode,
    ExtractionBatch,
    InputRecord,
    JobLog,
    JobTotals,
    MatchOutcome,
    OutcomeError,
    PregnancyRecord,
    SubmissionRecord,
    fingerprint,
)

__all__ = [
    "InputRecord",
    "CandidateRecord",
    "MatchOutcome",
    "OutcomeError",
    "JobLog",
    "JobTotals",
    "BreedingRecord",
    "PregnancyRecord",
    "ExtractionBatch",
    "ClassificationCode",
    "SubmissionRecord",
    "fingerprint",
    "FINGERPRINT_SEPARATOR",
]
