"""Read-only statistics and failed-record views over a job log."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from escow.domain.models import InputRecord, JobLog
from escow.persistence.job_store import JobStateStore
from escow.utils.timestamps import format_local_timestamp


@dataclass
class JobStats:
    """Outcome counts for one job log.

    Attributes:
        total: Outcomes recorded
        found: Outcomes with at least one match
        not_found: Outcomes with no match and no error
        errors: Outcomes whose lookup failed
        last_updated: Time of the last append (UTC), if any
    """

    total: int
    found: int
    not_found: int
    errors: int
    last_updated: Optional[datetime] = None

    def render(self) -> str:
        last = format_local_timestamp(self.last_updated) if self.last_updated else "-"
        return "\n".join([
            "=== 検索結果統計 ===",
            f"総検索数: {self.total}",
            f"見つかった: {self.found}件",
            f"見つからなかった: {self.not_found}件",
            f"エラー: {self.errors}件",
            f"最終更新: {last}",
        ])


def compute_job_stats(job_log: JobLog) -> JobStats:
    totals = job_log.totals
    return JobStats(
        total=totals.processed,
        found=totals.found,
        not_found=totals.not_found,
        errors=totals.errors,
        last_updated=job_log.last_updated,
    )


def failed_records(job_log: JobLog) -> List[InputRecord]:
    """Input records whose lookup failed, in log order, one per fingerprint.

    These are never retried automatically; writing them to a new input CSV
    and running them against a fresh job log is the recovery path.
    """
    seen = set()
    records = []
    for outcome in job_log.failed_outcomes():
        if outcome.fingerprint in seen:
            continue
        seen.add(outcome.fingerprint)
        records.append(outcome.to_input_record())
    return records


def load_job_stats(store: JobStateStore) -> Optional[JobStats]:
    """Statistics for the store's log, or None when no log has been written yet."""
    if not store.exists():
        return None
    return compute_job_stats(store.load())
