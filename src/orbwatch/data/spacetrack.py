"""Space-Track.org feed client.

Provides authenticated access to the Space-Track GP catalog, returning
three-line element text in the same shape as the CelesTrak feeds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import requests

from orbwatch.errors import FeedFetchError
from orbwatch.utils.constants import DEFAULT_HTTP_TIMEOUT_S

logger = logging.getLogger(__name__)


@dataclass
class SpaceTrackClient:
    """Client for the Space-Track.org REST API.

    Requires a Space-Track account. Register at https://www.space-track.org.

    Attributes:
        identity: Space-Track username/email.
        password: Space-Track password.
        timeout: HTTP timeout in seconds for each request.
    """

    identity: str
    password: str
    timeout: float = DEFAULT_HTTP_TIMEOUT_S
    _session: requests.Session = field(default_factory=requests.Session, repr=False)
    _authenticated: bool = field(default=False, repr=False)

    BASE_URL = "https://www.space-track.org"
    LOGIN_URL = f"{BASE_URL}/ajaxauth/login"

    def _login(self) -> None:
        """Authenticate with Space-Track.

        Stores session cookies for subsequent requests.

        Raises:
            requests.HTTPError: If authentication fails.
        """
        response = self._session.post(
            self.LOGIN_URL,
            data={"identity": self.identity, "password": self.password},
            timeout=self.timeout,
        )
        response.raise_for_status()

        if "error" in response.text.lower() or response.status_code != 200:
            logger.error("Space-Track authentication failed")
            raise requests.HTTPError(f"Space-Track authentication failed: {response.text}")

        logger.debug("Space-Track authentication successful")
        self._authenticated = True

    def _request(self, url: str) -> str:
        """Make authenticated request to Space-Track.

        Raises:
            requests.HTTPError: If the request fails.
        """
        if not self._authenticated:
            self._login()

        response = self._session.get(url, timeout=self.timeout)

        # If we get a 401, try re-authenticating once
        if response.status_code == 401:
            self._authenticated = False
            self._login()
            response = self._session.get(url, timeout=self.timeout)

        response.raise_for_status()
        return response.text

    def query_url(self, predicate: str) -> str:
        """Full 3LE query URL for a ``class/gp`` predicate.

        Example predicate: ``"OBJECT_TYPE/DEBRIS/EPOCH/>now-3"``.
        """
        predicate = predicate.strip("/")
        return (
            f"{self.BASE_URL}/basicspacedata/query/class/gp/"
            f"{predicate}/orderby/NORAD_CAT_ID/format/3le"
        )

    def fetch(self, source: str) -> str:
        """Fetch a GP query as three-line element text.

        Title lines come back as ``"0 NAME"``; the ``"0 "`` prefix is removed
        so names match the CelesTrak feeds.

        Args:
            source: A ``class/gp`` query predicate.

        Returns:
            Feed text with one name line and two element lines per object.

        Raises:
            FeedFetchError: On any transport, login or HTTP status failure.
        """
        try:
            text = self._request(self.query_url(source))
        except requests.RequestException as e:
            raise FeedFetchError(source, str(e)) from e

        return "\n".join(
            line[2:] if line.startswith("0 ") else line
            for line in text.splitlines()
        )
