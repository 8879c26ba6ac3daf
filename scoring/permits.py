"""Metrics derived from building-permit activity."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Mapping, Sequence

from pipelines.model import PermitRecord
from scoring.normalize import round_half_up

EARTH_RADIUS_MILES = 3959
CLUSTER_RADIUS_MILES = 1.0
CLUSTER_MIN_PERMITS = 5
HIGH_IMPACT_THRESHOLD = 70
DEFAULT_IMPACT_SCORE = 50.0
DEFAULT_GENTRIFICATION_POTENTIAL = 30.0

TYPE_IMPACT_POINTS: Mapping[str, int] = {
    "mixed_use": 10,
    "commercial": 8,
    "residential": 6,
    "infrastructure": 5,
    "renovation": 3,
}


def impact_score(permit_type: str, valuation: float, units: int, square_footage: float) -> int:
    """0-100 score: valuation (40) + units (30) + size (20) + type (10)."""

    points = min(40.0, valuation / 10_000_000 * 40)
    points += min(30.0, units / 100 * 30)
    points += min(20.0, square_footage / 50_000 * 20)
    points += TYPE_IMPACT_POINTS.get(permit_type, 0)
    return int(round_half_up(points))


def gentrification_potential(permit_type: str, valuation: float, subtype: str) -> int:
    potential = 0
    lowered = subtype.lower()
    if permit_type == "mixed_use":
        potential += 30
    if permit_type == "commercial" and "office" in lowered:
        potential += 25
    if valuation > 5_000_000:
        potential += 20
    if valuation > 10_000_000:
        potential += 15
    if "luxury" in lowered:
        potential += 20
    if "premium" in lowered:
        potential += 15
    return min(100, potential)


def property_value_impact(permit_type: str, valuation: float, units: int) -> int:
    """Expected nearby value uplift in percent, capped at 15."""

    impact = {"mixed_use": 8, "commercial": 6, "residential": 4, "infrastructure": 3}.get(
        permit_type, 0
    )
    if valuation > 5_000_000:
        impact += 3
    if valuation > 10_000_000:
        impact += 2
    if units > 50:
        impact += 2
    if units > 100:
        impact += 1
    return min(15, impact)


def impact_radius(valuation: float, permit_type: str) -> float:
    radius = 0.5
    if valuation > 10_000_000:
        radius += 1.5
    elif valuation > 5_000_000:
        radius += 1.0
    elif valuation > 1_000_000:
        radius += 0.5
    radius += {"infrastructure": 1.0, "mixed_use": 0.5, "commercial": 0.3}.get(permit_type, 0.0)
    return round_half_up(radius, 1)


def effective_impact(permit: PermitRecord) -> float:
    return permit.impact_score if permit.impact_score is not None else DEFAULT_IMPACT_SCORE


def effective_gentrification(permit: PermitRecord) -> float:
    if permit.gentrification_potential is not None:
        return permit.gentrification_potential
    return DEFAULT_GENTRIFICATION_POTENTIAL


def distance_miles(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance using the haversine formula."""

    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def activity_score(
    permits: Sequence[PermitRecord],
    lat: float,
    lng: float,
    *,
    radius_miles: float = 2.0,
    as_of: date | None = None,
) -> int:
    """Score recent (six month) permit activity around a point."""

    nearby = [p for p in permits if distance_miles(lat, lng, p.lat, p.lng) <= radius_miles]
    if not nearby:
        return 0
    cutoff = (as_of or date.today()) - timedelta(days=182)
    recent = [p for p in nearby if p.filed_date > cutoff]
    total_value = sum(p.valuation for p in recent)
    total_units = sum(p.units for p in recent)
    activity = min(100.0, len(recent) / 10 * 100)
    value = min(100.0, total_value / 10_000_000 * 100)
    units = min(100.0, total_units / 100 * 100)
    return int(round_half_up((activity + value + units) / 3))


@dataclass(frozen=True)
class DevelopmentCluster:
    name: str
    center: tuple[float, float]
    permit_ids: tuple[str, ...]
    total_investment: float
    total_units: int
    average_impact_score: int
    gentrification_risk: int
    property_value_increase: float
    rental_price_increase: float


def _build_cluster(members: Sequence[PermitRecord]) -> DevelopmentCluster:
    count = len(members)
    total_investment = sum(p.valuation for p in members)
    total_units = sum(p.units for p in members)
    avg_impact = sum(effective_impact(p) for p in members) / count
    avg_gentrification = sum(effective_gentrification(p) for p in members) / count
    return DevelopmentCluster(
        name=f"{members[0].city} Development Cluster",
        center=(
            sum(p.lat for p in members) / count,
            sum(p.lng for p in members) / count,
        ),
        permit_ids=tuple(p.id for p in members),
        total_investment=total_investment,
        total_units=total_units,
        average_impact_score=int(round_half_up(avg_impact)),
        gentrification_risk=int(round_half_up(avg_gentrification)),
        property_value_increase=min(25.0, total_investment / 10_000_000 * 5),
        rental_price_increase=min(20.0, total_units / 100 * 3),
    )


def development_clusters(permits: Sequence[PermitRecord]) -> list[DevelopmentCluster]:
    """Greedy grouping of permits that sit within one mile of a seed permit."""

    clusters: list[DevelopmentCluster] = []
    claimed: set[str] = set()
    for seed in permits:
        if seed.id in claimed:
            continue
        members = [
            p
            for p in permits
            if p.id not in claimed
            and distance_miles(seed.lat, seed.lng, p.lat, p.lng) <= CLUSTER_RADIUS_MILES
        ]
        if len(members) >= CLUSTER_MIN_PERMITS:
            clusters.append(_build_cluster(members))
            claimed.update(p.id for p in members)
    return sorted(clusters, key=lambda c: c.total_investment, reverse=True)


def hot_spots(permits: Sequence[PermitRecord], limit: int = 10) -> list[PermitRecord]:
    """Highest-impact permits above the high-impact threshold."""

    high = [p for p in permits if effective_impact(p) > HIGH_IMPACT_THRESHOLD]
    return sorted(high, key=effective_impact, reverse=True)[:limit]


__all__ = [
    "DevelopmentCluster",
    "HIGH_IMPACT_THRESHOLD",
    "activity_score",
    "development_clusters",
    "distance_miles",
    "effective_gentrification",
    "effective_impact",
    "gentrification_potential",
    "hot_spots",
    "impact_radius",
    "impact_score",
    "property_value_impact",
]
