"""Base class for facility directory search adapters.

An adapter turns one facility name into the directory's candidate rows.
Matching those rows against the input is the matcher's job, not the
adapter's.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import requests

from escow.config.models import DEFAULT_USER_AGENT
from escow.domain.models import CandidateRecord
from escow.logging import get_logger

from .exceptions import (
    AdapterConfigurationError,
    AdapterHTTPError,
    AdapterResponseError,
    AdapterTimeoutError,
)

logger = get_logger(__name__, component="adapter")


class BaseSearchAdapter(ABC):
    """Shared HTTP handling for search adapters.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    def __init__(self, timeout: int = 30, user_agent: str = DEFAULT_USER_AGENT) -> None:
        """Initialize adapter.

        Args:
            timeout: HTTP request timeout in seconds (5-300)
            user_agent: User-Agent header for requests

        Raises:
            AdapterConfigurationError: If timeout is outside 5-300 or user_agent is empty
        """
        if not 5 <= timeout <= 300:
            raise AdapterConfigurationError(
                f"Timeout must be between 5 and 300 seconds, got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise AdapterConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

    @abstractmethod
    def search(self, name: str) -> List[CandidateRecord]:
        """Search the directory by facility name.

        Args:
            name: Facility name as written in the input

        Returns:
            Candidate rows in the order the directory lists them; empty when
            the directory has no result

        Raises:
            AdapterError: If the search could not be completed
        """

    def close(self) -> None:
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def _fetch_html(self, url: str, params: Optional[Dict[str, str]] = None) -> str:
        """GET a page and return its decoded text.

        Raises:
            AdapterHTTPError: On 4xx/5xx status or connection failure
            AdapterTimeoutError: On request timeout
            AdapterResponseError: If the body cannot be decoded
        """
        try:
            logger.debug(
                f"HTTP GET {url}",
                extra={
                    "event": "adapter.fetch.request",
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            response = self._session.get(url, params=params, timeout=self.timeout)

            if response.status_code >= 400:
                is_retryable = response.status_code >= 500
                logger.log(
                    logging.WARNING if is_retryable else logging.ERROR,
                    f"HTTP {response.status_code} error from {url}",
                    extra={
                        "event": "adapter.fetch.retryable_error" if is_retryable else "adapter.fetch.error",
                        "status_code": response.status_code,
                        "url": url,
                    },
                )
                raise AdapterHTTPError(
                    f"HTTP {response.status_code}: {response.reason}",
                    status_code=response.status_code,
                    url=url,
                )

            # Lotus Domino pages often omit a charset; trust the body's meta tag
            if not response.encoding or response.encoding.lower() == "iso-8859-1":
                response.encoding = response.apparent_encoding

            try:
                text = response.text
            except (LookupError, UnicodeDecodeError) as e:
                raise AdapterResponseError(f"Failed to decode response from {url}: {e}") from e

            logger.debug(
                "HTTP request succeeded",
                extra={
                    "event": "adapter.fetch.succeeded",
                    "status_code": response.status_code,
                    "url": url,
                    "bytes": len(response.content),
                },
            )
            return text

        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={
                    "event": "adapter.fetch.retryable_error",
                    "error_type": "Timeout",
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise AdapterTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds",
                url=url,
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={
                    "event": "adapter.fetch.error",
                    "error_type": type(e).__name__,
                    "url": url,
                },
            )
            raise AdapterHTTPError(
                f"Request to {url} failed: {e}",
                status_code=0,
                url=url,
            ) from e
