"""Tracked objects and three-line element feed parsing.

Element lines are kept as opaque text here. Only the propagator interprets
them, so a malformed set is still a valid catalog entry: it simply never
produces a position sample.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class Classification(str, enum.Enum):
    """Category label attached to a tracked object by its source feed."""

    STATION = "STATION"
    DEBRIS = "DEBRIS"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str | Classification) -> Classification:
        """Map a feed label to a classification, ``UNKNOWN`` if unrecognized."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            logger.debug("Unrecognized classification %r, using UNKNOWN", value)
            return cls.UNKNOWN


@dataclass(frozen=True)
class ElementSet:
    """The two raw TLE lines of one object."""

    line1: str
    line2: str

    def __str__(self) -> str:
        return f"{self.line1}\n{self.line2}"


@dataclass(frozen=True)
class TrackedObject:
    """An object in the catalog.

    Attributes:
        name: Display name, unique within the catalog.
        line1: Raw TLE line 1.
        line2: Raw TLE line 2.
        classification: Label of the feed that last updated the object.
        id: Stable key assigned by the store on first save.
    """

    name: str
    line1: str
    line2: str
    classification: Classification = Classification.UNKNOWN
    id: int | None = None

    @property
    def elements(self) -> ElementSet:
        return ElementSet(self.line1, self.line2)


@dataclass(frozen=True)
class FeedRecord:
    """One {name, line1, line2} triple read from a feed."""

    name: str
    line1: str
    line2: str


def parse_feed(text: str) -> list[FeedRecord]:
    """Parse raw feed text into name/line1/line2 triples.

    Lines may end in CRLF or LF. Blank and whitespace-only lines are
    discarded before grouping, so triples are counted over the remaining
    lines: a feed with L non-blank lines yields L // 3 records, and a blank
    line inside a record does not shift the records after it. A trailing
    group with fewer than three lines is dropped.

    Args:
        text: Raw feed text.

    Returns:
        The complete triples, in feed order.
    """
    lines = [l.strip() for l in text.splitlines() if l.strip()]
    complete = len(lines) - len(lines) % 3

    records = [
        FeedRecord(name=lines[i], line1=lines[i + 1], line2=lines[i + 2])
        for i in range(0, complete, 3)
    ]

    if complete < len(lines):
        logger.debug("Dropped %d trailing feed line(s)", len(lines) - complete)
    logger.debug("Parsed %d records from feed", len(records))
    return records
