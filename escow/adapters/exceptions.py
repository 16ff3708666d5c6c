"""Custom exceptions for facility directory search adapters."""


class AdapterError(Exception):
    """Base exception for all adapter errors.

    The lookup pipeline catches this for one record, records an error
    outcome, and moves on to the next record.
    """

    pass


class AdapterHTTPError(AdapterError):
    """The directory answered with a 4xx/5xx status, or the connection failed.

    ``status_code`` is 0 when no HTTP response was received.
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class AdapterTimeoutError(AdapterError):
    """The directory did not answer within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class AdapterResponseError(AdapterError):
    """A response arrived but could not be decoded or parsed as a result page."""

    pass


class AdapterConfigurationError(AdapterError):
    """Invalid adapter settings (timeout out of range, empty user agent, bad URL)."""

    pass
