from datetime import date, timedelta

import pytest

from scoring import permits as permit_metrics


def test_impact_score_components():
    assert permit_metrics.impact_score("mixed_use", 10_000_000, 100, 50_000) == 100
    assert permit_metrics.impact_score("mixed_use", 50_000_000, 900, 500_000) == 100
    assert permit_metrics.impact_score("residential", 500_000, 1, 0) == 8


def test_gentrification_potential():
    assert permit_metrics.gentrification_potential("mixed_use", 12_000_000, "Luxury Tower") == 85
    assert permit_metrics.gentrification_potential("commercial", 1_000_000, "Office Building") == 25
    assert permit_metrics.gentrification_potential("renovation", 50_000, "Home Renovation") == 0


def test_property_value_impact_is_capped():
    assert permit_metrics.property_value_impact("mixed_use", 20_000_000, 200) == 15
    assert permit_metrics.property_value_impact("residential", 100_000, 1) == 4


@pytest.mark.parametrize(
    "valuation,permit_type,expected",
    [(12_000_000, "infrastructure", 3.0), (2_000_000, "residential", 1.0), (6_000_000, "commercial", 1.8)],
)
def test_impact_radius(valuation, permit_type, expected):
    assert permit_metrics.impact_radius(valuation, permit_type) == pytest.approx(expected)


def test_distance_miles_austin_to_dallas():
    assert permit_metrics.distance_miles(30.2672, -97.7431, 32.7767, -96.7970) == pytest.approx(182, abs=5)
    assert permit_metrics.distance_miles(30.0, -97.0, 30.0, -97.0) == 0


def test_clusters_need_five_nearby_permits(permit_factory):
    nearby = [permit_factory(i, lat=30.2672 + i * 0.001) for i in range(5)]
    far = [permit_factory(10 + i, lat=31.5 + i * 0.001) for i in range(4)]

    clusters = permit_metrics.development_clusters([*nearby, *far])

    assert len(clusters) == 1
    cluster = clusters[0]
    assert set(cluster.permit_ids) == {p.id for p in nearby}
    assert cluster.total_investment == 2_500_000
    assert cluster.name == "Austin Development Cluster"
    assert cluster.gentrification_risk == 30


def test_clusters_sorted_by_investment(permit_factory):
    small = [permit_factory(i, valuation=100_000) for i in range(5)]
    large = [permit_factory(10 + i, lat=32.0, valuation=9_000_000) for i in range(5)]

    clusters = permit_metrics.development_clusters([*small, *large])

    assert [c.total_investment for c in clusters] == [45_000_000, 500_000]


def test_activity_score_counts_recent_nearby_permits(permit_factory):
    as_of = date(2025, 6, 30)
    recent = [
        permit_factory(i, filed_date=as_of - timedelta(days=10), valuation=1_000_000, units=10)
        for i in range(10)
    ]
    stale = [permit_factory(20, filed_date=as_of - timedelta(days=400))]

    assert permit_metrics.activity_score([*recent, *stale], 30.2672, -97.7431, as_of=as_of) == 100
    assert permit_metrics.activity_score(stale, 30.2672, -97.7431, as_of=as_of) == 0
    assert permit_metrics.activity_score(recent, 40.0, -74.0, as_of=as_of) == 0


def test_hot_spots_keep_only_high_impact(permit_factory):
    permits = [
        permit_factory(0, impact_score=75),
        permit_factory(1, impact_score=90),
        permit_factory(2, impact_score=70),
        permit_factory(3),
    ]

    assert [p.id for p in permit_metrics.hot_spots(permits)] == ["permit-1", "permit-0"]
