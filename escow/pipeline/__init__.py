"""Pipeline orchestration for facility lookups and submission preparation."""

from .exceptions import NoSubmissionDataError, PipelineError
from .models import LookupRunResult, PreparedSubmission
from .runner import LookupPipeline
from .submission import SubmissionPipeline

__all__ = [
    "LookupPipeline",
    "SubmissionPipeline",
    "LookupRunResult",
    "PreparedSubmission",
    "PipelineError",
    "NoSubmissionDataError",
]
