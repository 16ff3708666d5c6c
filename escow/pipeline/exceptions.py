"""Custom exceptions for pipeline orchestration."""


class PipelineError(Exception):
    """Base exception for pipeline failures that stop a whole run."""

    pass


class NoSubmissionDataError(PipelineError):
    """No extracted records exist for the requested date and type."""

    def __init__(self, date: str, data_type: str) -> None:
        super().__init__(f"No {data_type} records to convert for {date}")
        self.date = date
        self.data_type = data_type
