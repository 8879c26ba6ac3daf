"""City-level composite scores.

Every function here is a pure function of a ``MarketBaseline`` plus optional
auxiliary signals. ``None`` for permits, projects or the rental summary means
"no data" and each formula defines its own empty-input behaviour.
"""

from __future__ import annotations

from typing import Sequence

from pipelines.model import (
    CompositeScoreSet,
    InfrastructureProject,
    MarketBaseline,
    PermitRecord,
    RentalSummary,
    RiskAssessment,
    TransitProject,
)
from scoring.normalize import (
    WeightedFactor,
    clamp,
    employment_rate_excess,
    linear,
    mean_of_clamped,
    round_score,
    weighted_sum,
)
from scoring.permits import effective_gentrification, effective_impact
from scoring.roi import project_roi

EMPTY_RENTAL_SUMMARY = RentalSummary()

# Investment adjustments
EXPENSIVE_MARKET_PRICE = 800_000
EXPENSIVE_MARKET_PENALTY = 0.85
PRICEY_MARKET_PRICE = 500_000
PRICEY_MARKET_PENALTY = 0.95
EMERGING_APPRECIATION = 15
EMERGING_MAX_PRICE = 300_000
EMERGING_BONUS = 1.10
HIGH_CRIME_INDEX = 50
HIGH_CRIME_PENALTY = 0.90
DEFAULT_CLIMATE_RISK = 30.0

NEUTRAL_FUTURE_VALUE = 50.0
NO_PERMIT_GENTRIFICATION = 20
NO_PERMIT_APPROVAL_SCORE = 30.0
NO_PERMIT_DEVELOPMENT_RISK = 30.0
DEFAULT_INVESTOR_INTEREST = 50.0
ACTIVE_PROJECT_STATUSES = frozenset({"approved", "construction"})
ACTIVE_PERMIT_STATUSES = frozenset({"approved", "in_progress"})


def _rental(summary: RentalSummary | None) -> RentalSummary:
    return summary if summary is not None else EMPTY_RENTAL_SUMMARY


def _gross_yield(baseline: MarketBaseline, rental: RentalSummary) -> float:
    if rental.average_gross_yield is not None:
        return rental.average_gross_yield
    return baseline.rental_yield


def _rent_growth(baseline: MarketBaseline, rental: RentalSummary) -> float | None:
    if rental.rent_growth_rate is not None:
        return rental.rent_growth_rate
    return baseline.rent_growth_rate


def investment_factors(
    baseline: MarketBaseline,
    permits: Sequence[PermitRecord] | None = None,
    rental_summary: RentalSummary | None = None,
) -> list[WeightedFactor]:
    rental = _rental(rental_summary)
    climate = baseline.climate_risk_score
    return [
        WeightedFactor("appreciation", baseline.trailing_appreciation, 0.20, linear(4.0)),
        WeightedFactor("rental_yield", _gross_yield(baseline, rental), 0.20, linear(10.0)),
        WeightedFactor("employment", baseline.employment_rate, 0.15, employment_rate_excess),
        WeightedFactor("permit_volume", len(permits or ()), 0.15, linear(1 / 5)),
        WeightedFactor("walkability", baseline.walk_score, 0.10),
        WeightedFactor("affordability", baseline.affordability_index, 0.10),
        WeightedFactor("future_value", baseline.future_value_score, 0.05),
        WeightedFactor(
            "climate_safety",
            100 - climate if climate is not None else DEFAULT_CLIMATE_RISK,
            0.05,
        ),
    ]


def investment_weighted_sum(
    baseline: MarketBaseline,
    permits: Sequence[PermitRecord] | None = None,
    rental_summary: RentalSummary | None = None,
) -> float:
    """The investment score before market adjustments and rounding."""

    return weighted_sum(investment_factors(baseline, permits, rental_summary))


def investment_score(
    baseline: MarketBaseline,
    permits: Sequence[PermitRecord] | None = None,
    rental_summary: RentalSummary | None = None,
) -> int:
    score = investment_weighted_sum(baseline, permits, rental_summary)
    price = baseline.median_home_price
    if price > EXPENSIVE_MARKET_PRICE:
        score *= EXPENSIVE_MARKET_PENALTY
    elif price > PRICEY_MARKET_PRICE:
        score *= PRICEY_MARKET_PENALTY
    if baseline.trailing_appreciation > EMERGING_APPRECIATION and price < EMERGING_MAX_PRICE:
        score *= EMERGING_BONUS
    if baseline.crime_rate is not None and baseline.crime_rate > HIGH_CRIME_INDEX:
        score *= HIGH_CRIME_PENALTY
    return round_score(score)


def _active(projects: Sequence[TransitProject | InfrastructureProject] | None) -> int:
    return sum(1 for project in projects or () if project.status in ACTIVE_PROJECT_STATUSES)


def future_value_score(
    baseline: MarketBaseline,
    permits: Sequence[PermitRecord] | None = None,
    transit_projects: Sequence[TransitProject] | None = None,
    infrastructure_projects: Sequence[InfrastructureProject] | None = None,
) -> int:
    value = baseline.future_value_score or NEUTRAL_FUTURE_VALUE
    permits = permits or ()
    average_impact = (
        sum(effective_impact(p) for p in permits) / len(permits) if permits else NEUTRAL_FUTURE_VALUE
    )
    value += (average_impact - NEUTRAL_FUTURE_VALUE) * 0.2
    value += min(15.0, _active(transit_projects) * 2)
    value += min(10.0, _active(infrastructure_projects) * 1.5)
    if baseline.trailing_appreciation > 10:
        value += 5
    return round_score(value)


def gentrification_risk(permits: Sequence[PermitRecord] | None = None) -> int:
    if not permits:
        return NO_PERMIT_GENTRIFICATION
    count = len(permits)
    luxury_ratio = sum(1 for p in permits if effective_gentrification(p) > 50) / count
    high_value_ratio = sum(1 for p in permits if p.valuation > 1_000_000) / count
    average_valuation = sum(p.valuation for p in permits) / count
    valuation_score = min(100.0, average_valuation / 2_000_000 * 100)
    return round_score(luxury_ratio * 30 + high_value_ratio * 30 + valuation_score * 0.4)


def _population_tier(population: int | None) -> float:
    if population is None:
        return 40.0
    if population > 500_000:
        return 80.0
    if population > 100_000:
        return 60.0
    return 40.0


def market_momentum(
    baseline: MarketBaseline,
    permits: Sequence[PermitRecord] | None = None,
    rental_summary: RentalSummary | None = None,
) -> int:
    """Mean of five pre-clamped momentum signals."""

    rental = _rental(rental_summary)
    rent_growth = _rent_growth(baseline, rental)
    permits = permits or ()
    if permits:
        approval = sum(1 for p in permits if p.status in ACTIVE_PERMIT_STATUSES) / len(permits) * 100
    else:
        approval = NO_PERMIT_APPROVAL_SCORE
    investor_interest = baseline.investor_interest
    return round_score(
        mean_of_clamped(
            [
                baseline.trailing_appreciation * 5,
                rent_growth * 10 if rent_growth is not None else None,
                approval,
                investor_interest if investor_interest is not None else DEFAULT_INVESTOR_INTEREST,
                _population_tier(baseline.population),
            ]
        )
    )


def risk_level(overall: float) -> str:
    if overall > 60:
        return "HIGH"
    if overall > 30:
        return "MEDIUM"
    return "LOW"


def risk_assessment(
    baseline: MarketBaseline,
    permits: Sequence[PermitRecord] | None = None,
    rental_summary: RentalSummary | None = None,
) -> RiskAssessment:
    rental = _rental(rental_summary)
    permits = permits or ()
    market = clamp((rental.vacancy_rate or 0.0) * 100)
    if permits:
        development = clamp(sum(1 for p in permits if p.status == "rejected") / len(permits) * 100)
    else:
        development = NO_PERMIT_DEVELOPMENT_RISK
    economic = clamp((100 - baseline.employment_rate) * 2)
    climate = clamp(
        baseline.climate_risk_score
        if baseline.climate_risk_score is not None
        else DEFAULT_CLIMATE_RISK
    )
    affordability = (
        clamp(100 - baseline.affordability_index)
        if baseline.affordability_index is not None
        else 0.0
    )
    overall = (market + development + economic + climate + affordability) / 5
    return RiskAssessment(
        overall=round_score(overall),
        market=round_score(market),
        development=round_score(development),
        economic=round_score(economic),
        climate=round_score(climate),
        affordability=round_score(affordability),
        level=risk_level(overall),
    )


def compute_city_scores(
    baseline: MarketBaseline,
    permits: Sequence[PermitRecord] | None = None,
    rental_summary: RentalSummary | None = None,
    transit_projects: Sequence[TransitProject] | None = None,
    infrastructure_projects: Sequence[InfrastructureProject] | None = None,
) -> CompositeScoreSet:
    """Compute every composite score for one market in a single pass."""

    return CompositeScoreSet(
        city=baseline.city,
        state=baseline.state,
        investment_score=investment_score(baseline, permits, rental_summary),
        future_value_score=future_value_score(
            baseline, permits, transit_projects, infrastructure_projects
        ),
        market_momentum=market_momentum(baseline, permits, rental_summary),
        gentrification_risk=gentrification_risk(permits),
        risk_assessment=risk_assessment(baseline, permits, rental_summary),
        roi_projections=project_roi(rental_summary, permits, transit_projects),
    )


__all__ = [
    "compute_city_scores",
    "future_value_score",
    "gentrification_risk",
    "investment_factors",
    "investment_score",
    "investment_weighted_sum",
    "market_momentum",
    "risk_assessment",
    "risk_level",
]
