"""WAM NET facility directory adapter.

The directory's name search renders results as an HTML table in which each
facility is a ``<tr id="datarow_N">`` with at least five cells:

    0 service type | 1 facility name | 2 address | 3 map link | 4 detail link

The map link's query string carries the registration number as
``jno=<digits>``.
"""

import re
from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from escow.config.models import DEFAULT_QUERY_PARAM, DEFAULT_SEARCH_URL, DEFAULT_USER_AGENT
from escow.domain.models import CandidateRecord
from escow.logging import get_logger
from escow.normalization.service import collapse_whitespace

from .base import BaseSearchAdapter
from .exceptions import AdapterConfigurationError

logger = get_logger(__name__, component="adapter")


RESULT_ROW_SELECTOR = 'tr[id^="datarow_"]'
MIN_RESULT_CELLS = 5
_REGISTRY_ID_PATTERN = re.compile(r"jno=(\d+)")


def _link_href(cell) -> Optional[str]:
    anchor = cell.find("a", href=True)
    return anchor["href"] if anchor else None


def parse_search_results(html: str, base_url: Optional[str] = None) -> List[CandidateRecord]:
    """Extract candidate rows from a result page.

    Rows with fewer than five cells are skipped. A missing map or detail
    link leaves the registry id or detail locator empty.

    Args:
        html: Result page markup
        base_url: If given, relative detail links are resolved against it

    Returns:
        Candidates in page order
    """
    soup = BeautifulSoup(html, "html.parser")
    candidates: List[CandidateRecord] = []

    for row in soup.select(RESULT_ROW_SELECTOR):
        cells = row.find_all("td")
        if len(cells) < MIN_RESULT_CELLS:
            logger.debug(
                "Skipping result row with too few cells",
                extra={
                    "event": "adapter.parse.row_skipped",
                    "row_id": row.get("id"),
                    "cell_count": len(cells),
                },
            )
            continue

        registry_id = ""
        map_href = _link_href(cells[3])
        if map_href:
            match = _REGISTRY_ID_PATTERN.search(map_href)
            if match:
                registry_id = match.group(1)

        detail_locator = _link_href(cells[4]) or ""
        if detail_locator and base_url:
            detail_locator = urljoin(base_url, detail_locator)

        candidates.append(
            CandidateRecord(
                service_type=collapse_whitespace(cells[0].get_text()),
                name=collapse_whitespace(cells[1].get_text()),
                address=collapse_whitespace(cells[2].get_text()),
                registry_id=registry_id,
                detail_locator=detail_locator,
            )
        )

    return candidates


class WamSearchAdapter(BaseSearchAdapter):
    """Searches WAM NET by facility name.

    API Details:
        Endpoint: configurable, defaults to the byname view
        Method: GET, name passed in ``query_param``
        Authentication: None (public)
        Response: HTML result page
    """

    ADAPTER_NAME = "wam"

    def __init__(
        self,
        search_url: str = DEFAULT_SEARCH_URL,
        query_param: str = DEFAULT_QUERY_PARAM,
        timeout: int = 30,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent)
        if not search_url.startswith(("http://", "https://")):
            raise AdapterConfigurationError(f"search_url must be an http(s) URL, got: {search_url}")
        if not query_param.strip():
            raise AdapterConfigurationError("query_param cannot be empty")
        self.search_url = search_url
        self.query_param = query_param.strip()

    def search(self, name: str) -> List[CandidateRecord]:
        html = self._fetch_html(self.search_url, params={self.query_param: name})
        candidates = parse_search_results(html, base_url=self.search_url)

        logger.info(
            f"Directory returned {len(candidates)} candidates",
            extra={
                "event": "adapter.search.completed",
                "adapter": self.ADAPTER_NAME,
                "query": name,
                "count": len(candidates),
            },
        )
        return candidates
