"""One, three and five year ROI projections."""

from __future__ import annotations

from typing import Sequence

from pipelines.model import PermitRecord, RentalSummary, RoiProjections, TransitProject
from scoring.normalize import round_half_up
from scoring.permits import HIGH_IMPACT_THRESHOLD, effective_impact

DEFAULT_BASE_ROI = 5.0
DEVELOPMENT_BOOST_PER_PERMIT = 0.3
TRANSIT_BOOST_PER_PROJECT = 0.2


def development_boost(permits: Sequence[PermitRecord] | None) -> float:
    high_impact = sum(1 for p in permits or () if effective_impact(p) > HIGH_IMPACT_THRESHOLD)
    return high_impact * DEVELOPMENT_BOOST_PER_PERMIT


def transit_boost(transit_projects: Sequence[TransitProject] | None) -> float:
    building = sum(1 for t in transit_projects or () if t.status == "construction")
    return building * TRANSIT_BOOST_PER_PROJECT


def project_roi(
    rental_summary: RentalSummary | None = None,
    permits: Sequence[PermitRecord] | None = None,
    transit_projects: Sequence[TransitProject] | None = None,
) -> RoiProjections:
    """ROI percentages; unbounded, rounded to two decimals."""

    base = DEFAULT_BASE_ROI
    if rental_summary is not None and rental_summary.average_net_yield:
        base = rental_summary.average_net_yield
    development = development_boost(permits)
    transit = transit_boost(transit_projects)
    return RoiProjections(
        one_year=round_half_up(base + development * 0.3, 2),
        three_year=round_half_up(base + development * 0.7 + transit * 0.5, 2),
        five_year=round_half_up(base + development + transit, 2),
    )


__all__ = ["development_boost", "project_roi", "transit_boost"]
