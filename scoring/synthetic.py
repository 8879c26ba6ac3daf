"""Deterministic stand-in records for markets without live data.

Each generated item owns a ``random.Random`` seeded from the market key and
the item's index, so a given ``(baseline, offset)`` always reproduces the same
record, including its appreciation noise.
"""

from __future__ import annotations

import logging
import math
import random
import zlib
from datetime import date, timedelta
from typing import Any

from pipelines.model import (
    InfrastructureProject,
    MarketBaseline,
    PermitRecord,
    PropertyRecord,
    TransitProject,
)
from scoring.appreciation import DEFAULT_HORIZON_MONTHS, score_record
from scoring.baselines import DEFAULT_BASELINE, street_names
from scoring import permits as permit_metrics

logger = logging.getLogger(__name__)

PROVIDER = "market_analysis"
PRICE_RANGE = (0.7, 1.3)
SQFT_RANGE = (800, 2800)
BEDROOM_RANGE = (1, 4)
BATHROOM_RANGE = (1, 3)
YEAR_BUILT_RANGE = (1970, 2023)
PROPERTY_TYPES = ("House", "Condo", "Townhouse")

DEFAULT_PERMIT_COUNT = 50
PERMIT_SUBTYPES: dict[str, tuple[str, ...]] = {
    "residential": (
        "Single Family Home",
        "Apartment Complex",
        "Condominium",
        "Townhouse",
        "Affordable Housing",
    ),
    "commercial": ("Office Building", "Retail Store", "Restaurant", "Hotel", "Warehouse"),
    "mixed_use": ("Mixed Use Development", "Live/Work Space", "Transit-Oriented Development"),
    "infrastructure": ("Road Improvement", "Water System", "Electrical Grid", "Telecommunications"),
    "renovation": ("Home Renovation", "Building Modernization", "Historic Restoration"),
}
PERMIT_STATUSES = ("filed", "approved", "in_progress", "completed", "rejected")
PERMIT_BASE_VALUATION = {
    "residential": 500_000,
    "commercial": 2_000_000,
    "mixed_use": 5_000_000,
    "infrastructure": 1_000_000,
    "renovation": 100_000,
}
PERMIT_BASE_SQFT = {
    "residential": 2000,
    "commercial": 10_000,
    "mixed_use": 50_000,
    "infrastructure": 5000,
    "renovation": 1500,
}
PERMIT_STREETS = (
    "Main St", "Oak Ave", "Pine St", "Cedar Dr", "Elm St", "First Ave", "Second St", "Park Blvd",
)

TRANSIT_NAMES = {
    "subway": ("Metro Line", "Underground Extension", "Subway Expansion"),
    "light_rail": ("Light Rail Line", "Tram Extension", "Rail Connection"),
    "bus_rapid_transit": ("BRT Line", "Express Bus Route", "Rapid Transit"),
    "highway": ("Highway Expansion", "Interchange Upgrade", "Express Lanes"),
    "bridge": ("Bridge Project", "River Crossing", "Overpass Construction"),
}
TRANSIT_STATUSES = ("proposed", "planned", "approved", "construction", "completed")

INFRASTRUCTURE_NAMES = {
    "school": ("Elementary School", "High School", "Community College", "University Campus"),
    "hospital": ("Medical Center", "General Hospital", "Specialty Clinic", "Emergency Center"),
    "park": ("Community Park", "Recreation Center", "Sports Complex", "Green Space"),
    "shopping_center": ("Shopping Mall", "Retail Complex", "Outlet Center", "Mixed-Use Retail"),
    "office_complex": ("Business Park", "Corporate Center", "Tech Campus", "Office Tower"),
    "stadium": ("Sports Stadium", "Arena", "Convention Center", "Entertainment Complex"),
    "airport": ("Airport Expansion", "Regional Airport", "Airfield", "Aviation Center"),
}
INFRASTRUCTURE_BASE_INVESTMENT = {
    "school": 50_000_000,
    "hospital": 200_000_000,
    "park": 20_000_000,
    "shopping_center": 100_000_000,
    "office_complex": 150_000_000,
    "stadium": 500_000_000,
    "airport": 1_000_000_000,
}
INFRASTRUCTURE_STATUSES = ("proposed", "approved", "construction", "completed")


def seeded_rng(key: str, kind: str, index: int) -> random.Random:
    """A generator private to one item; crc32 keeps seeds stable across processes."""

    return random.Random(zlib.crc32(f"{kind}:{key}:{index}".encode("utf-8")))


def coordinate_offset(index: int) -> tuple[float, float]:
    """Jitter for the ``index``-th record around the market centre."""

    lat = math.sin(index * 0.1) * 0.02 + ((index % 10) - 5) * 0.002
    lng = math.cos(index * 0.1) * 0.02 + ((index % 7) - 3) * 0.003
    return lat, lng


def _usable(baseline: MarketBaseline) -> MarketBaseline:
    median = baseline.median_home_price
    if median and math.isfinite(median) and median > 0:
        return baseline
    logger.warning(
        "Baseline for %s, %s has no usable median price; using %s.",
        baseline.city,
        baseline.state,
        DEFAULT_BASELINE.median_home_price,
    )
    return baseline.model_copy(update={"median_home_price": DEFAULT_BASELINE.median_home_price})


def _non_negative(raw: Any) -> int:
    try:
        return max(0, int(raw or 0))
    except (TypeError, ValueError, OverflowError):
        return 0


def generate(
    baseline: MarketBaseline,
    count: int,
    offset_start: int = 0,
    horizon_months: int = DEFAULT_HORIZON_MONTHS,
) -> list[PropertyRecord]:
    """Produce ``count`` scored synthetic records starting at ``offset_start``."""

    baseline = _usable(baseline)
    count = _non_negative(count)
    offset_start = _non_negative(offset_start)
    streets = street_names(baseline.city)
    records = []
    for index in range(offset_start, offset_start + count):
        rng = seeded_rng(baseline.key, "property", index)
        d_lat, d_lng = coordinate_offset(index)
        record = PropertyRecord(
            id=f"synthetic-{baseline.key.replace(',', '-').replace(' ', '_')}-{index}",
            address=f"{rng.randint(100, 9999)} {rng.choice(streets)}",
            city=baseline.city,
            state=baseline.state,
            lat=baseline.lat + d_lat,
            lng=baseline.lng + d_lng,
            price=round(baseline.median_home_price * rng.uniform(*PRICE_RANGE)),
            square_footage=rng.randint(*SQFT_RANGE),
            bedrooms=rng.randint(*BEDROOM_RANGE),
            bathrooms=rng.randint(*BATHROOM_RANGE),
            year_built=rng.randint(*YEAR_BUILT_RANGE),
            property_type=rng.choice(PROPERTY_TYPES),
            source="synthetic",
            provider=PROVIDER,
            mls_number=f"MLS{rng.randint(100000, 999999)}",
        )
        records.append(score_record(record, baseline, horizon_months, rng))
    logger.debug("Generated %d synthetic records for %s", len(records), baseline.key)
    return records


def _permit_units(rng: random.Random, permit_type: str, subtype: str) -> int:
    if permit_type == "residential":
        if "Single Family" in subtype:
            return 1
        if "Apartment" in subtype or "Affordable" in subtype:
            return rng.randint(20, 219)
        if "Condominium" in subtype:
            return rng.randint(5, 54)
        if "Townhouse" in subtype:
            return rng.randint(3, 14)
    if permit_type == "mixed_use":
        return rng.randint(10, 109)
    return 1


def generate_permits(
    baseline: MarketBaseline,
    count: int = DEFAULT_PERMIT_COUNT,
    *,
    as_of: date | None = None,
) -> list[PermitRecord]:
    """Synthetic permits filed over the two years before ``as_of``, newest first."""

    as_of = as_of or date.today()
    permits = []
    for index in range(_non_negative(count)):
        rng = seeded_rng(baseline.key, "permit", index)
        permit_type = rng.choice(tuple(PERMIT_SUBTYPES))
        subtype = rng.choice(PERMIT_SUBTYPES[permit_type])
        valuation = math.floor(PERMIT_BASE_VALUATION[permit_type] * rng.uniform(0.3, 2.3))
        square_footage = math.floor(PERMIT_BASE_SQFT[permit_type] * rng.uniform(0.5, 3.5))
        units = _permit_units(rng, permit_type, subtype)
        permits.append(
            PermitRecord(
                id=f"permit_{baseline.city}_{index}",
                permit_number=f"P{index:06d}",
                type=permit_type,
                subtype=subtype,
                status=rng.choice(PERMIT_STATUSES),
                address=f"{rng.randint(100, 9999)} {rng.choice(PERMIT_STREETS)}",
                city=baseline.city,
                state=baseline.state,
                lat=baseline.lat + rng.uniform(-0.05, 0.05),
                lng=baseline.lng + rng.uniform(-0.05, 0.05),
                filed_date=as_of - timedelta(days=rng.randrange(730)),
                valuation=valuation,
                square_footage=square_footage,
                units=units,
                description=f"{subtype} - {valuation:,} investment",
                impact_score=permit_metrics.impact_score(
                    permit_type, valuation, units, square_footage
                ),
                gentrification_potential=permit_metrics.gentrification_potential(
                    permit_type, valuation, subtype
                ),
                impact_radius=permit_metrics.impact_radius(valuation, permit_type),
            )
        )
    return sorted(permits, key=lambda p: p.filed_date, reverse=True)


def generate_transit_projects(baseline: MarketBaseline) -> list[TransitProject]:
    rng = seeded_rng(baseline.key, "transit", 0)
    projects = []
    for index in range(rng.randint(2, 5)):
        project_type = rng.choice(tuple(TRANSIT_NAMES))
        projects.append(
            TransitProject(
                id=f"transit_{baseline.city}_{index}",
                name=f"{rng.choice(TRANSIT_NAMES[project_type])} {index + 1}",
                type=project_type,
                status=rng.choice(TRANSIT_STATUSES),
                budget=rng.randrange(100_000_000, 2_100_000_000),
            )
        )
    return projects


def generate_infrastructure_projects(baseline: MarketBaseline) -> list[InfrastructureProject]:
    rng = seeded_rng(baseline.key, "infrastructure", 0)
    projects = []
    for index in range(rng.randint(3, 8)):
        project_type = rng.choice(tuple(INFRASTRUCTURE_NAMES))
        projects.append(
            InfrastructureProject(
                id=f"infrastructure_{baseline.city}_{index}",
                name=f"{rng.choice(INFRASTRUCTURE_NAMES[project_type])} {index + 1}",
                type=project_type,
                status=rng.choice(INFRASTRUCTURE_STATUSES),
                investment=math.floor(
                    INFRASTRUCTURE_BASE_INVESTMENT[project_type] * rng.uniform(0.5, 2.0)
                ),
            )
        )
    return projects


__all__ = [
    "coordinate_offset",
    "generate",
    "generate_infrastructure_projects",
    "generate_permits",
    "generate_transit_projects",
    "seeded_rng",
]
