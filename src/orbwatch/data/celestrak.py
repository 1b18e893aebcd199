"""CelesTrak GP feed client.

Fetches raw three-line element text; parsing is left to the sync pipeline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import requests

from orbwatch.errors import FeedFetchError
from orbwatch.utils.constants import CELESTRAK_GP_URL, DEFAULT_HTTP_TIMEOUT_S

logger = logging.getLogger(__name__)


@dataclass
class CelestrakClient:
    """Client for the public CelesTrak GP endpoint.

    Attributes:
        timeout: HTTP timeout in seconds for each request.
        base_url: GP endpoint used to expand bare group names.
    """

    timeout: float = DEFAULT_HTTP_TIMEOUT_S
    base_url: str = CELESTRAK_GP_URL
    _session: requests.Session = field(default_factory=requests.Session, repr=False)

    def group_url(self, group: str) -> str:
        """URL of the TLE-format feed for a CelesTrak group name."""
        return f"{self.base_url}?GROUP={group}&FORMAT=tle"

    def fetch(self, source: str) -> str:
        """Fetch raw feed text.

        Args:
            source: A full URL, or a CelesTrak group name such as ``"stations"``.

        Returns:
            The response body as text.

        Raises:
            FeedFetchError: On any transport or HTTP status failure.
        """
        url = source if source.startswith(("http://", "https://")) else self.group_url(source)
        logger.info("Fetching TLEs from %s", url)
        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FeedFetchError(source, str(e)) from e
        return response.text
