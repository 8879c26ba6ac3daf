"""Ordered fallback across live listing sources."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Protocol, Sequence

from pipelines.model import PropertyRecord
from pipelines.sources.listings import PRIMARY_FEED, SECONDARY_FEED

logger = logging.getLogger(__name__)


class ListingSource(Protocol):
    name: str

    def fetch(self, city: str, state: str, limit: int) -> Awaitable[list[PropertyRecord] | None]:
        ...


@dataclass(frozen=True)
class SourceResult:
    provider: str
    records: list[PropertyRecord]


DEFAULT_SOURCES: tuple[ListingSource, ...] = (PRIMARY_FEED, SECONDARY_FEED)


async def collect_listings(
    city: str,
    state: str,
    limit: int,
    sources: Sequence[ListingSource] = DEFAULT_SOURCES,
) -> SourceResult | None:
    """Try ``sources`` in order and return the first non-empty result.

    ``None`` means every source was unconfigured, failed or came back empty.
    """

    for source in sources:
        records = await source.fetch(city, state, limit)
        if records:
            logger.info(
                "Using %d live records from %s for %s, %s", len(records), source.name, city, state
            )
            return SourceResult(provider=source.name, records=records[:limit])
        logger.info("Source %s had no records for %s, %s", source.name, city, state)
    return None


__all__ = ["DEFAULT_SOURCES", "ListingSource", "SourceResult", "collect_listings"]
