"""Lookup orchestration: input batch → directory search → matcher → job log."""

import random
import time
from typing import Callable, List, Optional, Sequence
from uuid import uuid4

from escow.adapters.base import BaseSearchAdapter
from escow.adapters.exceptions import AdapterError
from escow.domain.models import InputRecord, JobLog, MatchOutcome
from escow.logging import get_logger
from escow.logging.context import log_context
from escow.matching.engine import FacilityMatcher
from escow.persistence.job_store import JobStateStore
from escow.utils.timestamps import utc_now

from .models import LookupRunResult

logger = get_logger(__name__, component="pipeline")


class LookupPipeline:
    """
    Looks up every pending input record once and records the outcome.

    The pipeline owns the JobLog value for the duration of a run: it loads it
    once, passes it to ``JobStateStore.append`` for every outcome and keeps
    the returned value. Every append is persisted before the next lookup
    starts, so an interrupted run resumes where it stopped.
    """

    def __init__(
        self,
        adapter: BaseSearchAdapter,
        store: JobStateStore,
        matcher: Optional[FacilityMatcher] = None,
        delay_min: float = 2.0,
        delay_max: float = 4.0,
        sleep: Callable[[float], None] = time.sleep,
        uniform: Callable[[float, float], float] = random.uniform,
    ):
        """
        Initialize the lookup pipeline.

        Args:
            adapter: Directory search adapter
            store: Job log store for this batch
            matcher: Candidate matcher (defaults to FacilityMatcher())
            delay_min: Shortest pause between two lookups, in seconds
            delay_max: Longest pause between two lookups, in seconds
            sleep: Sleep function (injectable for tests)
            uniform: Random delay source (injectable for tests)
        """
        if delay_min < 0 or delay_max < delay_min:
            raise ValueError(f"Invalid delay range: {delay_min}..{delay_max}")
        self.adapter = adapter
        self.store = store
        self.matcher = matcher or FacilityMatcher()
        self.delay_min = delay_min
        self.delay_max = delay_max
        self._sleep = sleep
        self._uniform = uniform

    def run(self, records: Sequence[InputRecord]) -> LookupRunResult:
        """
        Process the records that have no outcome in the job log yet.

        This method:
        1. Loads the job log and filters out already-processed records
        2. For each pending record: search → match → append outcome
        3. Turns any per-record failure into an error outcome and continues
        4. Pauses a random delay between lookups (not after the last one)
        5. Stops cleanly on KeyboardInterrupt, leaving the log valid

        Returns:
            LookupRunResult with counts for this run only

        Raises:
            JobLogCorruptedError: If the existing log cannot be read
            PersistenceError: If an outcome cannot be persisted
        """
        run_started_at = utc_now()
        run_id = uuid4().hex

        with log_context(run_id=run_id, job_log=str(self.store.path)):
            job_log = self.store.load()
            pending = self.store.pending_records(job_log, records)
            skipped = len(records) - len(pending)

            logger.info(
                f"Lookup run started: {len(pending)} pending of {len(records)} records",
                extra={
                    "event": "lookup.run.started",
                    "total_input": len(records),
                    "pending": len(pending),
                    "skipped_already_processed": skipped,
                },
            )

            appended: List[MatchOutcome] = []
            cancelled = False

            try:
                for index, record in enumerate(pending):
                    if index > 0:
                        self._pause()
                    job_log, outcome = self._process_record(job_log, record, index, len(pending))
                    appended.append(outcome)
            except KeyboardInterrupt:
                cancelled = True
                logger.warning(
                    "Lookup run interrupted; progress so far is saved",
                    extra={
                        "event": "lookup.run.cancelled",
                        "processed": len(appended),
                        "remaining": len(pending) - len(appended),
                    },
                )

            result = LookupRunResult(
                run_started_at=run_started_at,
                run_finished_at=utc_now(),
                total_input=len(records),
                skipped_already_processed=skipped,
                processed=len(appended),
                found=sum(1 for o in appended if o.found),
                not_found=sum(1 for o in appended if not o.found and not o.is_error),
                errors=sum(1 for o in appended if o.is_error),
                cancelled=cancelled,
            )

            logger.info(
                "Lookup run completed",
                extra={
                    "event": "lookup.run.completed",
                    "duration_ms": int(result.duration_seconds * 1000),
                    "processed": result.processed,
                    "found": result.found,
                    "not_found": result.not_found,
                    "errors": result.errors,
                    "cancelled": result.cancelled,
                    "log_total": job_log.totals.processed,
                },
            )
            return result

    def _process_record(self, job_log: JobLog, record: InputRecord, index: int, total: int):
        with log_context(input_name=record.name):
            logger.info(
                f"[{index + 1}/{total}] Looking up {record.name}",
                extra={"event": "lookup.record.started", "position": index + 1, "total": total},
            )
            outcome = self._lookup(record)
            job_log = self.store.append(job_log, outcome)
            return job_log, outcome

    def _lookup(self, record: InputRecord) -> MatchOutcome:
        """Search and match one record; failures become an error outcome."""
        try:
            candidates = self.adapter.search(record.name)
            evaluation = self.matcher.evaluate(record, candidates)
        except AdapterError as e:
            logger.error(
                f"Lookup failed: {e}",
                extra={"event": "lookup.record.error", "error_type": type(e).__name__},
            )
            return MatchOutcome.from_error(record, str(e))
        except Exception as e:
            logger.exception(
                f"Unexpected error during lookup: {e}",
                extra={"event": "lookup.record.error", "error_type": type(e).__name__},
            )
            return MatchOutcome.from_error(record, f"{type(e).__name__}: {e}")

        outcome = MatchOutcome.from_matches(record, evaluation.matches)
        if outcome.found:
            logger.info(
                f"Matched {len(outcome.matches)} of {len(candidates)} candidates",
                extra={
                    "event": "lookup.record.matched",
                    "candidate_count": len(candidates),
                    "match_count": len(outcome.matches),
                },
            )
        else:
            logger.info(
                f"No match among {len(candidates)} candidates",
                extra={"event": "lookup.record.not_found", "candidate_count": len(candidates)},
            )
        return outcome

    def _pause(self) -> None:
        delay = self._uniform(self.delay_min, self.delay_max)
        logger.debug(
            f"Waiting {delay:.1f}s before next lookup",
            extra={"event": "lookup.delay", "delay_seconds": round(delay, 3)},
        )
        self._sleep(delay)
