"""File-based persistence for job logs and submission batches.

Public API:
    - JobStateStore: load/append/resume the lookup job log
    - SubmissionBatchStore: extraction batches and reviewed submission files
    - write_json_atomic: temp-file + fsync + os.replace document writes

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - JobLogCorruptedError: Existing job log could not be parsed
    - SubmissionFileError: Batch or submission file missing or invalid

Example usage:
    >>> from escow.persistence import JobStateStore
    >>> store = JobStateStore(Path("data/output.json"))
    >>> job_log = store.load()
    >>> pending = store.pending_records(job_log, records)
"""

from .exceptions import JobLogCorruptedError, PersistenceError, SubmissionFileError
from .files import write_json_atomic
from .job_store import JobStateStore
from .submission_store import ALL, BREEDING, PREGNANCY, SubmissionBatchStore

__all__ = [
    "JobStateStore",
    "SubmissionBatchStore",
    "write_json_atomic",
    "BREEDING",
    "PREGNANCY",
    "ALL",
    "PersistenceError",
    "JobLogCorruptedError",
    "SubmissionFileError",
]
