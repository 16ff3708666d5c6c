"""Durable, resumable job log for facility lookups.

The log is one JSON document rewritten in full on every append. The
orchestrator owns the JobLog value: it loads it once, passes it into
``append`` for every processed record, and keeps the returned value.
There is no module-level log state.

Resumability: records whose fingerprint already appears in the log are
filtered out before a batch starts, so re-running an interrupted batch
neither reprocesses nor duplicates recorded outcomes. Error outcomes count
as processed and are not retried automatically.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Set

from pydantic import ValidationError

from escow.domain.models import InputRecord, JobLog, MatchOutcome
from escow.logging import get_logger

from .exceptions import JobLogCorruptedError, PersistenceError
from .files import write_json_atomic

logger = get_logger(__name__, component="job_store")


class JobStateStore:
    """File-backed store for one batch's JobLog.

    At most one process may own a given log file at a time; the store does
    no locking.
    """

    def __init__(self, path: Path, logger_instance: Optional[logging.Logger] = None):
        """Initialize the store.

        Args:
            path: Location of the JSON job log
            logger_instance: Optional logger (defaults to module logger)
        """
        self.path = Path(path)
        self.logger = logger_instance or logger

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> JobLog:
        """Load the job log.

        Returns:
            The persisted JobLog, or an empty one if the file does not exist
            or is empty

        Raises:
            JobLogCorruptedError: If the file exists but is not a valid log
            PersistenceError: If the file cannot be read
        """
        if not self.path.exists():
            self.logger.info(
                "No job log found, starting a new one",
                extra={"event": "job_store.load.empty", "path": str(self.path)},
            )
            return JobLog.empty()

        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to read job log {self.path}: {e}", path=self.path) from e

        if not text.strip():
            return JobLog.empty()

        try:
            job_log = JobLog.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as e:
            self.logger.error(
                "Job log is corrupted",
                extra={
                    "event": "job_store.load.corrupted",
                    "path": str(self.path),
                    "error_type": type(e).__name__,
                },
            )
            raise JobLogCorruptedError(
                f"Job log {self.path} is not a valid job log: {e}", path=self.path
            ) from e

        self.logger.info(
            f"Loaded job log with {job_log.totals.processed} outcomes",
            extra={
                "event": "job_store.load.succeeded",
                "path": str(self.path),
                "processed": job_log.totals.processed,
                "found": job_log.totals.found,
                "not_found": job_log.totals.not_found,
                "errors": job_log.totals.errors,
            },
        )
        return job_log

    def save(self, job_log: JobLog) -> None:
        """Atomically replace the persisted snapshot with ``job_log``."""
        try:
            write_json_atomic(self.path, job_log.model_dump(mode="json", by_alias=True))
        except OSError as e:
            raise PersistenceError(f"Failed to write job log {self.path}: {e}", path=self.path) from e

    def append(self, job_log: JobLog, outcome: MatchOutcome, now: Optional[datetime] = None) -> JobLog:
        """Append one outcome and persist the whole log.

        Args:
            job_log: The caller's current log value (not modified)
            outcome: Outcome for one processed input record
            now: Optional lastUpdated timestamp (defaults to utc_now())

        Returns:
            The new JobLog, already persisted
        """
        updated = job_log.with_outcome(outcome, now)
        self.save(updated)

        self.logger.debug(
            "Outcome appended",
            extra={
                "event": "job_store.appended",
                "input_name": outcome.input_name,
                "processed": updated.totals.processed,
            },
        )
        return updated

    @staticmethod
    def processed_fingerprints(job_log: JobLog) -> Set[str]:
        return job_log.processed_fingerprints()

    @staticmethod
    def pending_records(job_log: JobLog, records: Iterable[InputRecord]) -> List[InputRecord]:
        """Filter a batch down to records that have no outcome yet.

        Records already in the log are dropped, as are repeats of the same
        fingerprint within ``records`` (first occurrence kept), so each
        fingerprint is processed at most once per log.
        """
        seen = job_log.processed_fingerprints()
        pending = []
        for record in records:
            if record.fingerprint in seen:
                continue
            seen.add(record.fingerprint)
            pending.append(record)
        return pending
