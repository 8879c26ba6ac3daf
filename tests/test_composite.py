import pytest

from pipelines.model import InfrastructureProject, TransitProject
from scoring import composite
from scoring.baselines import DEFAULT_BASELINE, DEFAULT_RENTAL_SUMMARY, resolve
from scoring.normalize import round_half_up


def _transit(index, status):
    return TransitProject(id=f"t{index}", name=f"Line {index}", type="light_rail", status=status)


def _infrastructure(index, status):
    return InfrastructureProject(id=f"i{index}", name=f"Park {index}", type="park", status=status)


def test_investment_weighted_sum_for_default_market():
    # appreciation 24*.2 + yield 60*.2 + employment 66.7*.15 + climate 30*.05
    assert composite.investment_weighted_sum(DEFAULT_BASELINE) == pytest.approx(28.305)
    assert composite.investment_score(DEFAULT_BASELINE) == 28


def test_expensive_market_penalty_lowers_score():
    pricey = DEFAULT_BASELINE.model_copy(update={"median_home_price": 900000})

    unadjusted = composite.investment_weighted_sum(pricey)
    score = composite.investment_score(pricey)

    assert score < unadjusted
    assert score == round_half_up(unadjusted * 0.85)


def test_mid_price_penalty_is_exclusive_with_high_price_penalty():
    mid = DEFAULT_BASELINE.model_copy(update={"median_home_price": 600000})
    assert composite.investment_score(mid) == round_half_up(composite.investment_weighted_sum(mid) * 0.95)


def test_emerging_bonus_and_crime_penalty_stack():
    emerging = DEFAULT_BASELINE.model_copy(
        update={"median_home_price": 250000, "price_appreciation_yoy": 20.0, "crime_rate": 60.0}
    )
    expected = round_half_up(composite.investment_weighted_sum(emerging) * 1.1 * 0.9)

    assert composite.investment_score(emerging) == expected


def test_permit_volume_raises_investment(permit_factory):
    permits = [permit_factory(i) for i in range(250)]

    with_permits = composite.investment_weighted_sum(DEFAULT_BASELINE, permits)
    assert with_permits == pytest.approx(28.305 + 50 * 0.15)


def test_future_value_combines_development_signals(permit_factory):
    permits = [permit_factory(i, impact_score=80) for i in range(2)]
    transit = [_transit(0, "approved"), _transit(1, "construction"), _transit(2, "proposed")]
    infrastructure = [_infrastructure(0, "construction"), _infrastructure(1, "completed")]

    score = composite.future_value_score(DEFAULT_BASELINE, permits, transit, infrastructure)

    # 50 + (80 - 50) * 0.2 + 2 * 2 + 1 * 1.5
    assert score == 62


def test_future_value_caps_project_bonuses_and_clamps():
    austin = resolve("Austin", "TX")
    transit = [_transit(i, "construction") for i in range(20)]
    infrastructure = [_infrastructure(i, "approved") for i in range(20)]

    assert composite.future_value_score(austin, None, transit, infrastructure) == 100


def test_future_value_without_signals_is_neutral():
    assert composite.future_value_score(DEFAULT_BASELINE) == 50


def test_gentrification_risk(permit_factory):
    assert composite.gentrification_risk([]) == 20
    assert composite.gentrification_risk(None) == 20

    permits = [
        permit_factory(0, gentrification_potential=60, valuation=2_000_000),
        permit_factory(1, valuation=0),
    ]
    # 0.5 * 30 + 0.5 * 30 + 50 * 0.4
    assert composite.gentrification_risk(permits) == 50


def test_market_momentum_defaults():
    assert composite.market_momentum(DEFAULT_BASELINE) == 30


def test_market_momentum_uses_permit_approvals(permit_factory):
    permits = [permit_factory(0, status="approved"), permit_factory(1, status="rejected")]
    rental = DEFAULT_RENTAL_SUMMARY

    # (30 + 55 + 50 + 50 + 40) / 5
    assert composite.market_momentum(DEFAULT_BASELINE, permits, rental) == 45


def test_risk_assessment_without_permits():
    risk = composite.risk_assessment(DEFAULT_BASELINE, None, DEFAULT_RENTAL_SUMMARY)

    assert risk.market == 8
    assert risk.development == 30
    assert risk.economic == 10
    assert risk.climate == 30
    assert risk.affordability == 0
    assert risk.overall == 16
    assert risk.level == "LOW"


def test_risk_assessment_rejected_permit_ratio(permit_factory):
    permits = [permit_factory(i, status="rejected" if i == 0 else "approved") for i in range(4)]
    risk = composite.risk_assessment(DEFAULT_BASELINE, permits)

    assert risk.development == 25


@pytest.mark.parametrize("overall,level", [(61, "HIGH"), (60, "MEDIUM"), (31, "MEDIUM"), (30, "LOW")])
def test_risk_level_thresholds(overall, level):
    assert composite.risk_level(overall) == level


def test_scores_stay_on_scale_for_extreme_inputs(permit_factory):
    extreme = DEFAULT_BASELINE.model_copy(
        update={
            "median_home_price": 50_000,
            "price_appreciation_yoy": 900.0,
            "employment_rate": 0.0,
            "walk_score": 400.0,
            "affordability_index": -80.0,
            "climate_risk_score": 250.0,
            "investor_interest": 1000.0,
            "population": 10_000_000,
            "future_value_score": 500.0,
        }
    )
    permits = [permit_factory(i, valuation=90_000_000, status="rejected") for i in range(600)]

    scores = composite.compute_city_scores(extreme, permits, DEFAULT_RENTAL_SUMMARY)

    for value in (
        scores.investment_score,
        scores.future_value_score,
        scores.market_momentum,
        scores.gentrification_risk,
        scores.risk_assessment.overall,
        scores.risk_assessment.market,
        scores.risk_assessment.development,
        scores.risk_assessment.economic,
        scores.risk_assessment.climate,
        scores.risk_assessment.affordability,
    ):
        assert 0 <= value <= 100


def test_compute_city_scores_for_austin():
    austin = resolve("Austin", "TX")
    scores = composite.compute_city_scores(austin)

    assert scores.city == "Austin"
    assert scores.gentrification_risk == 20
    assert scores.roi_projections.one_year == pytest.approx(5.0)
    assert 0 < scores.investment_score <= 100
