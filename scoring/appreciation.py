"""Per-property appreciation, confidence and risk model."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any

from pipelines.model import MarketBaseline, PropertyRecord
from scoring.baselines import appreciation_factors
from scoring.normalize import clamp, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_MONTHS = 12
SYNTHETIC_CONFIDENCE_CEILING = 85.0

# Appreciation multiplier adjustments
CHEAP_PRICE_RATIO = 0.8
CHEAP_BONUS = 0.2
LUXURY_PRICE_RATIO = 1.5
LUXURY_BONUS = 0.1
LARGE_HOME_SQFT = 2000
LARGE_HOME_BONUS = 0.1
MARKET_NOISE = 0.15

# Confidence
BASE_CONFIDENCE = 75.0
CONFIDENCE_BOUNDS = (60.0, 95.0)
ASSUMED_SQFT = 1200
PLAUSIBLE_PRICE_PER_SQFT = (50.0, 500.0)

# Risk
BASE_RISK = 30.0
RISK_BOUNDS = (15.0, 75.0)


@dataclass(frozen=True)
class PropertyScore:
    appreciation: float
    confidence: float
    risk_score: float


def normalize_horizon(raw: Any) -> int:
    """Coerce a horizon in months to a positive integer, defaulting to 12."""

    try:
        months = int(raw)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_HORIZON_MONTHS
    if months <= 0:
        return DEFAULT_HORIZON_MONTHS
    return months


def appreciation_multiplier(
    price: float,
    square_footage: float | None,
    baseline: MarketBaseline,
    rng: random.Random | None = None,
) -> float:
    multiplier = 1.0
    median = baseline.median_home_price
    if price < median * CHEAP_PRICE_RATIO:
        multiplier += CHEAP_BONUS
    elif price > median * LUXURY_PRICE_RATIO:
        multiplier += LUXURY_BONUS
    if square_footage and square_footage > LARGE_HOME_SQFT:
        multiplier += LARGE_HOME_BONUS
    source = rng if rng is not None else random
    multiplier += source.uniform(-MARKET_NOISE, MARKET_NOISE)
    return multiplier


def project_appreciation(
    price: float,
    square_footage: float | None,
    baseline: MarketBaseline,
    horizon_months: Any = DEFAULT_HORIZON_MONTHS,
    rng: random.Random | None = None,
) -> float:
    """Projected appreciation in percent over ``horizon_months``."""

    months = normalize_horizon(horizon_months)
    multiplier = appreciation_multiplier(price, square_footage, baseline, rng)
    return baseline.appreciation_rate * multiplier * months / 12


def price_per_sqft(price: float, square_footage: float | None) -> float:
    return price / (square_footage or ASSUMED_SQFT)


def confidence_score(record: PropertyRecord, baseline: MarketBaseline) -> float:
    confidence = BASE_CONFIDENCE
    if baseline.market_strength > 7:
        confidence += 10
    if baseline.market_strength < 5:
        confidence -= 10
    if record.has_complete_details:
        confidence += 5
    low, high = PLAUSIBLE_PRICE_PER_SQFT
    if low < price_per_sqft(record.price, record.square_footage) < high:
        confidence += 5
    confidence = clamp(confidence, *CONFIDENCE_BOUNDS)
    if record.source == "synthetic":
        confidence = min(confidence, SYNTHETIC_CONFIDENCE_CEILING)
    return confidence


def risk_score(record: PropertyRecord, baseline: MarketBaseline) -> float:
    risk = BASE_RISK
    if baseline.volatility > 0.15:
        risk += 10
    if record.price > baseline.median_home_price * 2:
        risk += 15
    if baseline.inventory_level > 6:
        risk += 10
    return clamp(risk, *RISK_BOUNDS)


def score(
    record: PropertyRecord,
    baseline: MarketBaseline,
    horizon_months: Any = DEFAULT_HORIZON_MONTHS,
    rng: random.Random | None = None,
) -> PropertyScore:
    """Appreciation, confidence and risk for one property."""

    appreciation = project_appreciation(
        record.price, record.square_footage, baseline, horizon_months, rng
    )
    return PropertyScore(
        appreciation=round_half_up(appreciation, 2),
        confidence=confidence_score(record, baseline),
        risk_score=risk_score(record, baseline),
    )


def score_record(
    record: PropertyRecord,
    baseline: MarketBaseline,
    horizon_months: Any = DEFAULT_HORIZON_MONTHS,
    rng: random.Random | None = None,
) -> PropertyRecord:
    """Return a copy of ``record`` with its derived fields filled in."""

    months = normalize_horizon(horizon_months)
    result = score(record, baseline, months, rng)
    return record.model_copy(
        update={
            "appreciation": result.appreciation,
            "confidence": result.confidence,
            "risk_score": result.risk_score,
            "price_per_sqft": round_half_up(price_per_sqft(record.price, record.square_footage), 2),
            "timeframe_months": months,
            "factors": appreciation_factors(baseline.city),
        }
    )


__all__ = [
    "DEFAULT_HORIZON_MONTHS",
    "PropertyScore",
    "SYNTHETIC_CONFIDENCE_CEILING",
    "confidence_score",
    "normalize_horizon",
    "project_appreciation",
    "risk_score",
    "score",
    "score_record",
]
