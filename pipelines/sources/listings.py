"""Live listing feed adapter."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping

import httpx

from pipelines.common import coerce_float, coerce_int, fetch_json, first_present
from pipelines.model import PropertyRecord

logger = logging.getLogger(__name__)

_COLLECTION_KEYS = ("listings", "properties", "results", "data", "homes")


@dataclass(frozen=True)
class ListingFeedSource:
    """A JSON listing endpoint configured through ``<prefix>_URL``/``<prefix>_KEY``.

    The feed is queried with ``city``, ``state_code`` and ``limit`` parameters
    and may answer with a bare list or an object wrapping one. Both flat records
    (``price``, ``latitude``) and nested ones (``list_price``,
    ``location.address.coordinate.lat``) are understood.
    """

    name: str
    env_prefix: str
    key_header: str = "X-Api-Key"

    def _config(self) -> tuple[str | None, str | None]:
        return os.getenv(f"{self.env_prefix}_URL"), os.getenv(f"{self.env_prefix}_KEY")

    async def fetch(self, city: str, state: str, limit: int) -> list[PropertyRecord] | None:
        """Return live records, or ``None`` when the feed is unconfigured or failing."""

        url, api_key = self._config()
        if not url or not api_key:
            logger.warning(
                "%s listing feed not configured. Set %s_URL and %s_KEY to enable it.",
                self.name,
                self.env_prefix,
                self.env_prefix,
            )
            return None

        params = {"city": city, "state_code": state, "limit": limit}
        try:
            payload = await fetch_json(url, headers={self.key_header: api_key}, params=params)
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "%s listing feed returned HTTP %s for %s, %s; skipping.",
                self.name,
                exc.response.status_code,
                city,
                state,
            )
            return None
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            logger.warning("%s listing feed failed for %s, %s: %s", self.name, city, state, exc)
            return None

        records = [
            record
            for index, raw in enumerate(_extract_items(payload))
            if (record := parse_listing(raw, index, provider=self.name, city=city, state=state))
        ]
        logger.info(
            "%s listing feed returned %d usable records for %s, %s", self.name, len(records), city, state
        )
        return records


def _extract_items(payload: Any) -> list[Mapping[str, Any]]:
    if isinstance(payload, list):
        items = payload
    elif isinstance(payload, Mapping):
        items = next(
            (payload[key] for key in _COLLECTION_KEYS if isinstance(payload.get(key), list)),
            [],
        )
    else:
        items = []
    return [item for item in items if isinstance(item, Mapping)]


def parse_listing(
    raw: Mapping[str, Any],
    index: int,
    *,
    provider: str,
    city: str,
    state: str,
) -> PropertyRecord | None:
    """Map one feed item to a live ``PropertyRecord``; unusable items give ``None``."""

    price = coerce_float(first_present(raw, "price", "list_price", "listPrice", "listing.price"))
    lat = coerce_float(
        first_present(raw, "lat", "latitude", "location.address.coordinate.lat", "location.lat")
    )
    lng = coerce_float(
        first_present(raw, "lng", "lon", "longitude", "location.address.coordinate.lon", "location.lng")
    )
    if price is None or price <= 0 or lat is None or lng is None:
        logger.debug("Dropping listing %s from %s: missing price or coordinates", index, provider)
        return None

    street = first_present(raw, "address", "formattedAddress", "location.address.line")
    if isinstance(street, Mapping):
        street = first_present(street, "line", "street", "full")
    sqft = coerce_float(
        first_present(raw, "square_footage", "squareFootage", "sqft", "description.sqft")
    )
    bedrooms = coerce_int(first_present(raw, "bedrooms", "beds", "description.beds"))
    bathrooms = coerce_float(first_present(raw, "bathrooms", "baths", "description.baths"))
    identifier = first_present(raw, "id", "property_id", "listing_id", "mls_number")

    return PropertyRecord(
        id=f"{provider}-{identifier if identifier is not None else index}",
        address=str(street or "Address unavailable"),
        city=str(first_present(raw, "city", "location.address.city") or city),
        state=str(first_present(raw, "state", "state_code", "location.address.state_code") or state),
        lat=lat,
        lng=lng,
        price=price,
        square_footage=sqft if sqft and sqft > 0 else None,
        bedrooms=bedrooms if bedrooms is not None and bedrooms >= 0 else None,
        bathrooms=bathrooms if bathrooms is not None and bathrooms >= 0 else None,
        year_built=coerce_int(first_present(raw, "year_built", "yearBuilt", "description.year_built")),
        property_type=str(
            first_present(raw, "property_type", "propertyType", "description.type") or "House"
        ),
        source="live",
        provider=provider,
        mls_number=(
            str(mls) if (mls := first_present(raw, "mls_number", "mlsNumber", "mls.id")) else None
        ),
    )


PRIMARY_FEED = ListingFeedSource(name="primary", env_prefix="LISTINGS_PRIMARY")
SECONDARY_FEED = ListingFeedSource(name="secondary", env_prefix="LISTINGS_SECONDARY")

__all__ = ["ListingFeedSource", "PRIMARY_FEED", "SECONDARY_FEED", "parse_listing"]
