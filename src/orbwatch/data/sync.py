"""Catalog sync: fetch element-set feeds and upsert them into the store."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Iterable, Protocol

from orbwatch.core.elements import Classification, TrackedObject, parse_feed
from orbwatch.data.store import CatalogStore
from orbwatch.errors import FeedFetchError
from orbwatch.utils.constants import DEFAULT_FEEDS

logger = logging.getLogger(__name__)


class FeedFetcher(Protocol):
    """Anything that turns a feed source into raw text, raising FeedFetchError."""

    def fetch(self, source: str) -> str: ...


@dataclass(frozen=True)
class Feed:
    """A feed source and the classification given to every object in it."""

    source: str
    classification: Classification = Classification.UNKNOWN

    @classmethod
    def of(cls, source: str, classification: str | Classification) -> Feed:
        return cls(source, Classification.parse(classification))


@dataclass(frozen=True)
class FeedResult:
    """Outcome of syncing one feed.

    Attributes:
        source: The feed source.
        created: Objects created from this feed.
        updated: Existing objects updated in place.
        error: Error message if the feed was skipped or could not be stored.
    """

    source: str
    created: int = 0
    updated: int = 0
    error: str | None = None

    @property
    def count(self) -> int:
        return self.created + self.updated

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SyncResult:
    feeds: list[FeedResult] = field(default_factory=list)

    @property
    def counts(self) -> dict[str, int]:
        """Created-or-updated count per feed source."""
        return {f.source: f.count for f in self.feeds}

    @property
    def total(self) -> int:
        return sum(f.count for f in self.feeds)

    @property
    def failed(self) -> list[str]:
        return [f.source for f in self.feeds if not f.ok]


class CatalogSync:
    """Ingests raw feeds into a catalog store.

    Each feed is committed with a single ``save_all`` call. A feed that cannot
    be fetched or stored is logged and skipped; the rest of the sync
    continues.

    Args:
        store: Catalog store to upsert into.
        fetcher: Feed client used to fetch each source.
    """

    def __init__(self, store: CatalogStore, fetcher: FeedFetcher) -> None:
        self._store = store
        self._fetcher = fetcher

    def ingest(self, feeds: Iterable[Feed | tuple[str, str]]) -> SyncResult:
        """Sync feeds in order.

        Args:
            feeds: ``Feed`` objects or ``(source, classification)`` pairs.

        Returns:
            Per-feed created/updated counts.
        """
        result = SyncResult()
        for feed in feeds:
            if not isinstance(feed, Feed):
                feed = Feed.of(*feed)
            result.feeds.append(self._ingest_feed(feed))

        logger.info("Sync complete: %d objects created or updated, %d feed(s) failed",
                    result.total, len(result.failed))
        return result

    def sync_default(self) -> SyncResult:
        """Sync the default station and debris feeds."""
        return self.ingest(DEFAULT_FEEDS)

    def _ingest_feed(self, feed: Feed) -> FeedResult:
        try:
            text = self._fetcher.fetch(feed.source)
        except FeedFetchError as e:
            logger.error("Skipping feed %s: %s", feed.source, e)
            return FeedResult(feed.source, error=str(e))

        try:
            created, updated = self._upsert(feed, text)
        except Exception as e:
            logger.exception("Failed to ingest feed %s", feed.source)
            return FeedResult(feed.source, error=str(e))

        logger.info("Feed %s: %d created, %d updated (%s)",
                    feed.source, created, updated, feed.classification.value)
        return FeedResult(feed.source, created=created, updated=updated)

    def _upsert(self, feed: Feed, text: str) -> tuple[int, int]:
        records = parse_feed(text)
        existing = {obj.name: obj for obj in self._store.all()}

        # Keyed by name so a name repeated within the feed stays one object
        pending: dict[str, TrackedObject] = {}
        created = updated = 0
        for rec in records:
            current = pending.get(rec.name) or existing.get(rec.name)
            if current is None:
                obj = TrackedObject(
                    name=rec.name,
                    line1=rec.line1,
                    line2=rec.line2,
                    classification=feed.classification,
                )
                created += 1
            else:
                obj = dataclasses.replace(
                    current,
                    line1=rec.line1,
                    line2=rec.line2,
                    classification=feed.classification,
                )
                updated += 1
            pending[rec.name] = obj

        if pending:
            self._store.save_all(list(pending.values()))
        return created, updated
