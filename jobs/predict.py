"""End-to-end prediction and city scoring jobs."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Sequence

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from pipelines.model import (
    CompositeScoreSet,
    DataSourceLabel,
    MarketBaseline,
    MarketConditions,
    PermitRecord,
    PredictionEnvelope,
    PropertyRecord,
    RentalSummary,
)
from pipelines.sources.chain import DEFAULT_SOURCES, ListingSource, collect_listings
from scoring import baselines, synthetic
from scoring.appreciation import normalize_horizon, score_record
from scoring.composite import compute_city_scores
from scoring.errors import NoDataAvailableError
from scoring.normalize import round_half_up
from scoring.permits import (
    DevelopmentCluster,
    activity_score,
    development_clusters,
    effective_impact,
    hot_spots,
    property_value_impact,
)
from scoring.ranking import Selection, clamp_limit, select, sort_key_or_default

load_dotenv()

logger = logging.getLogger(__name__)

ACTIVE_PERMIT_STATUSES = frozenset({"approved", "in_progress"})
TOP_MARKETS_SORT_KEY = "future_score"


def market_conditions(baseline: MarketBaseline) -> MarketConditions:
    return MarketConditions(
        housing_supply=baseline.inventory_level,
        demand_index=round_half_up(10 - baseline.inventory_level, 2),
        market_sentiment=baseline.market_strength * 10,
    )


def _data_source(live_count: int, synthetic_count: int) -> DataSourceLabel:
    if live_count and synthetic_count:
        return "mixed"
    if live_count:
        return "live"
    return "synthetic"


async def predict(
    region: str | None = None,
    limit: Any = None,
    timeframe: Any = None,
    sort: str | None = None,
    *,
    sources: Sequence[ListingSource] = DEFAULT_SOURCES,
) -> PredictionEnvelope:
    """Rank scored property predictions for a free-text region.

    Live records come from the first listing source that answers; any shortfall
    against ``limit`` is filled with synthetic records for the same market.
    """

    cleaned = baselines.clean_region(region)
    baseline = baselines.resolve_region(cleaned)
    count = clamp_limit(limit)
    months = normalize_horizon(timeframe)
    sort_key = sort_key_or_default(sort)

    result = await collect_listings(baseline.city, baseline.state, count, sources)
    live = [score_record(record, baseline, months) for record in (result.records if result else [])]
    shortfall = count - len(live)
    generated: list[PropertyRecord] = []
    if shortfall > 0:
        logger.info(
            "Topping up %s with %d synthetic records (%d live)", baseline.key, shortfall, len(live)
        )
        generated = synthetic.generate(
            baseline, shortfall, offset_start=len(live), horizon_months=months
        )

    candidates = [*live, *generated]
    if not candidates:
        raise NoDataAvailableError(f"No property data available for region '{cleaned}'.")

    selection = select(candidates, count, sort_key)
    return PredictionEnvelope(
        region=cleaned,
        city=baseline.city,
        state=baseline.state,
        timeframe_months=months,
        predictions=selection.items,
        stats=selection.stats,
        data_source=_data_source(len(live), len(generated)),
        market_conditions=market_conditions(baseline),
    )


class DevelopmentSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_permits: int
    total_valuation: float
    active_projects: int
    average_impact_score: float
    average_value_impact: float
    activity_score: int
    hot_spots: list[PermitRecord]
    clusters: list[DevelopmentCluster]


class CityScoreReport(BaseModel):
    """Composite scores for one market together with the signals behind them."""

    model_config = ConfigDict(frozen=True)

    baseline: MarketBaseline
    rental_summary: RentalSummary
    scores: CompositeScoreSet
    development: DevelopmentSummary
    appreciation_factors: tuple[str, ...]


def summarize_development(
    permits: Sequence[PermitRecord],
    center: tuple[float, float] | None = None,
    *,
    as_of: date | None = None,
) -> DevelopmentSummary:
    """Roll permits up into totals, averages and hot spots.

    ``activity_score`` measures recent permitting around ``center`` and is 0
    when no centre is given.
    """

    count = len(permits)
    value_impacts = [property_value_impact(p.type, p.valuation, p.units) for p in permits]
    return DevelopmentSummary(
        total_permits=count,
        total_valuation=sum(p.valuation for p in permits),
        active_projects=sum(1 for p in permits if p.status in ACTIVE_PERMIT_STATUSES),
        average_impact_score=(
            round_half_up(sum(effective_impact(p) for p in permits) / count, 1) if count else 0.0
        ),
        average_value_impact=round_half_up(sum(value_impacts) / count, 1) if count else 0.0,
        activity_score=activity_score(permits, *center, as_of=as_of) if center else 0,
        hot_spots=hot_spots(permits),
        clusters=development_clusters(permits),
    )


async def score_city(
    city: str | None,
    state: str | None,
    *,
    as_of: date | None = None,
) -> CityScoreReport:
    """Composite scores for ``city``/``state``.

    Without a state the city is read as a free-text region; unknown markets use
    the default baseline.
    """

    if city and state:
        baseline = baselines.resolve(city, state)
    else:
        baseline = baselines.resolve_region(city)
    permits, transit, infrastructure = await asyncio.gather(
        asyncio.to_thread(synthetic.generate_permits, baseline, as_of=as_of),
        asyncio.to_thread(synthetic.generate_transit_projects, baseline),
        asyncio.to_thread(synthetic.generate_infrastructure_projects, baseline),
    )
    rental = baselines.resolve_rental_summary(baseline.city, baseline.state)
    logger.info(
        "Scoring %s with %d permits, %d transit and %d infrastructure projects",
        baseline.key,
        len(permits),
        len(transit),
        len(infrastructure),
    )
    return CityScoreReport(
        baseline=baseline,
        rental_summary=rental,
        scores=compute_city_scores(baseline, permits, rental, transit, infrastructure),
        development=summarize_development(permits, (baseline.lat, baseline.lng), as_of=as_of),
        appreciation_factors=baselines.appreciation_factors(baseline.city),
    )


def top_markets(limit: Any = 10, sort: str | None = TOP_MARKETS_SORT_KEY) -> Selection[MarketBaseline]:
    """Rank every known market; ``sort`` accepts any ranking key."""

    return select(baselines.iter_markets(), limit, sort_key_or_default(sort, TOP_MARKETS_SORT_KEY))


__all__ = [
    "CityScoreReport",
    "DevelopmentSummary",
    "market_conditions",
    "predict",
    "score_city",
    "summarize_development",
    "top_markets",
]
