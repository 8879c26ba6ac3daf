from datetime import date

import pytest

from scoring import synthetic
from scoring.appreciation import SYNTHETIC_CONFIDENCE_CEILING
from scoring.baselines import DEFAULT_BASELINE, resolve


@pytest.fixture()
def austin():
    return resolve("Austin", "TX")


def test_generate_is_reproducible(austin):
    first = synthetic.generate(austin, 25, offset_start=5)
    second = synthetic.generate(austin, 25, offset_start=5)

    assert first == second


def test_coordinate_jitter_comes_from_index(austin):
    records = synthetic.generate(austin, 3, offset_start=40)

    for index, record in zip(range(40, 43), records):
        d_lat, d_lng = synthetic.coordinate_offset(index)
        assert record.lat == pytest.approx(austin.lat + d_lat)
        assert record.lng == pytest.approx(austin.lng + d_lng)


def test_offsets_continue_the_same_sequence(austin):
    whole = synthetic.generate(austin, 10)
    tail = synthetic.generate(austin, 4, offset_start=6)

    assert whole[6:] == tail


def test_ten_records_all_synthetic_and_capped(austin):
    records = synthetic.generate(austin, 10)

    assert len(records) == 10
    assert len({r.id for r in records}) == 10
    for record in records:
        assert record.source == "synthetic"
        assert record.confidence <= SYNTHETIC_CONFIDENCE_CEILING
        assert 0.7 * austin.median_home_price <= record.price <= 1.3 * austin.median_home_price
        assert 800 <= record.square_footage <= 2800
        assert 1 <= record.bedrooms <= 4
        assert 1970 <= record.year_built <= 2023
        assert record.appreciation is not None


def test_unusable_median_is_replaced(austin):
    broken = austin.model_copy(update={"median_home_price": 0})

    records = synthetic.generate(broken, 5)

    assert len(records) == 5
    for record in records:
        assert 0.7 * DEFAULT_BASELINE.median_home_price <= record.price <= 1.3 * DEFAULT_BASELINE.median_home_price


@pytest.mark.parametrize("count", [0, -3, None, "abc", float("inf"), float("-inf"), float("nan")])
def test_empty_or_invalid_count_yields_nothing(austin, count):
    assert synthetic.generate(austin, count) == []


def test_permits_are_reproducible_and_scored(austin):
    as_of = date(2025, 6, 30)
    permits = synthetic.generate_permits(austin, 30, as_of=as_of)

    assert permits == synthetic.generate_permits(austin, 30, as_of=as_of)
    assert len(permits) == 30
    assert [p.filed_date for p in permits] == sorted((p.filed_date for p in permits), reverse=True)
    for permit in permits:
        assert 0 <= permit.impact_score <= 100
        assert 0 <= permit.gentrification_potential <= 100
        assert (as_of - permit.filed_date).days < 730


def test_project_generators_are_bounded(austin):
    transit = synthetic.generate_transit_projects(austin)
    infrastructure = synthetic.generate_infrastructure_projects(austin)

    assert 2 <= len(transit) <= 5
    assert 3 <= len(infrastructure) <= 8
    assert transit == synthetic.generate_transit_projects(austin)
    assert infrastructure == synthetic.generate_infrastructure_projects(austin)
