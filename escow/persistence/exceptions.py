"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError for easy catching.
"""

from pathlib import Path
from typing import Optional


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path


class JobLogCorruptedError(PersistenceError):
    """Raised when an existing job log cannot be parsed or validated.

    The log is never silently replaced with an empty one: the next append
    would overwrite every recorded outcome.
    """

    pass


class SubmissionFileError(PersistenceError):
    """Raised when a batch file (extracted records or reviewed submissions) is invalid.

    Examples:
    - File missing for the requested date
    - Invalid JSON after an operator edit
    - A record failing validation (unknown classification code, negative quantity)
    """

    pass
