"""Reports over a job log: CSV export, statistics, failed-record lists."""

from .export import (
    CSV_HEADERS,
    ExportSummary,
    default_export_path,
    export_job_log_csv,
    outcome_rows,
)
from .stats import JobStats, compute_job_stats, failed_records, load_job_stats

__all__ = [
    "export_job_log_csv",
    "default_export_path",
    "outcome_rows",
    "ExportSummary",
    "CSV_HEADERS",
    "JobStats",
    "compute_job_stats",
    "failed_records",
    "load_job_stats",
]
