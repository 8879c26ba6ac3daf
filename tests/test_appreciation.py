import random

import pytest

from scoring import appreciation
from scoring.baselines import resolve


@pytest.fixture()
def austin():
    return resolve("Austin", "TX")


def test_austin_scenario(austin, property_factory):
    record = property_factory(price=350000, square_footage=1800)

    result = appreciation.score(record, austin, 12)

    # cheap-home bonus only: 6.5 * (1.2 +/- 0.15)
    assert 6.5 * 1.05 - 0.01 <= result.appreciation <= 6.5 * 1.35 + 0.01
    assert result.confidence >= 80
    assert result.risk_score <= 45


def test_price_tier_bonuses_are_exclusive(austin):
    rng = random.Random(7)
    noise = random.Random(7).uniform(-0.15, 0.15)

    cheap = appreciation.appreciation_multiplier(100000, 1500, austin, rng)
    assert cheap == pytest.approx(1.2 + noise)

    rng = random.Random(7)
    luxury = appreciation.appreciation_multiplier(900000, 2500, austin, rng)
    assert luxury == pytest.approx(1.0 + 0.1 + 0.1 + noise)


def test_horizon_scales_linearly(austin):
    one_year = appreciation.project_appreciation(485000, 1500, austin, 12, random.Random(1))
    two_years = appreciation.project_appreciation(485000, 1500, austin, 24, random.Random(1))

    assert two_years == pytest.approx(one_year * 2)


@pytest.mark.parametrize("raw", [0, -6, None, "soon", 3.9, float("inf"), float("-inf")])
def test_non_positive_or_invalid_horizon_defaults(raw):
    expected = 3 if raw == 3.9 else 12
    assert appreciation.normalize_horizon(raw) == expected


def test_zero_horizon_projects_a_full_year(austin):
    zero = appreciation.project_appreciation(485000, 1500, austin, 0, random.Random(3))
    year = appreciation.project_appreciation(485000, 1500, austin, 12, random.Random(3))

    assert zero == pytest.approx(year)


def test_confidence_penalizes_weak_markets_and_sparse_records(austin, property_factory):
    weak = austin.model_copy(update={"market_strength": 4})
    sparse = property_factory(square_footage=None, bedrooms=None, price=2_000_000)

    assert appreciation.confidence_score(sparse, weak) == 65


def test_synthetic_confidence_is_capped(austin, property_factory):
    record = property_factory(source="synthetic")
    assert appreciation.confidence_score(record, austin) == appreciation.SYNTHETIC_CONFIDENCE_CEILING


def test_risk_score_accumulates_and_clamps(austin, property_factory):
    volatile = austin.model_copy(update={"volatility": 0.3, "inventory_level": 7})
    record = property_factory(price=1_200_000)

    assert appreciation.risk_score(record, volatile) == 65
    assert appreciation.risk_score(property_factory(), austin) == 30


def test_score_record_fills_derived_fields(austin, property_factory):
    record = property_factory()
    scored = appreciation.score_record(record, austin, 6, random.Random(5))

    assert record.appreciation is None
    assert scored.timeframe_months == 6
    assert scored.price_per_sqft == pytest.approx(194.44)
    assert scored.factors == ("Tech hub expansion", "No state income tax")
    assert scored.appreciation == round(scored.appreciation, 2)
