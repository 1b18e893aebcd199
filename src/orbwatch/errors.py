"""Exception types raised across component boundaries."""

from __future__ import annotations


class OrbwatchError(Exception):
    """Base class for orbwatch errors."""


class FeedFetchError(OrbwatchError):
    """A feed source could not be fetched.

    Attributes:
        source: The feed source that failed.
    """

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"Failed to fetch feed {source}: {message}")
        self.source = source


class ConfigurationError(OrbwatchError):
    """A component was constructed without a required collaborator."""
