from datetime import date

import pytest
from pydantic import ValidationError

from pipelines.model import MarketBaseline, PermitRecord, PredictionEnvelope, PropertyRecord


def test_property_record_serialization_roundtrip():
    payload = {
        "id": "live-1",
        "address": "  500 Congress Ave ",
        "city": "Austin",
        "state": "TX",
        "lat": 30.27,
        "lng": -97.74,
        "price": "485000",
        "square_footage": 1800,
        "bedrooms": 3,
        "bathrooms": 2.5,
        "source": "live",
    }

    record = PropertyRecord(**payload)

    assert record.price == pytest.approx(485000.0)
    assert record.address == "500 Congress Ave"
    assert record.has_complete_details

    serialized = record.model_dump()
    assert serialized["source"] == "live"
    assert PropertyRecord(**serialized) == record


def test_property_record_is_immutable(property_factory):
    record = property_factory()
    with pytest.raises(ValidationError):
        record.price = 1


@pytest.mark.parametrize(
    "overrides",
    [{"price": 0}, {"price": "not-a-number"}, {"source": "scraped"}, {"confidence": 140}],
)
def test_property_record_rejects_bad_values(property_factory, overrides):
    with pytest.raises(ValidationError):
        property_factory(**overrides)


def test_market_baseline_properties():
    baseline = MarketBaseline(
        city=" Boise ",
        state="ID",
        median_home_price=450000,
        appreciation_rate=5.0,
        market_strength=6,
        volatility=0.1,
        inventory_level=3.0,
        employment_rate=96.0,
        rental_yield=5.0,
    )

    assert baseline.key == "boise,id"
    assert baseline.trailing_appreciation == 5.0
    assert baseline.model_copy(update={"price_appreciation_yoy": 11.0}).trailing_appreciation == 11.0


def test_permit_record_parses_iso_dates(permit_factory):
    permit = permit_factory(filed_date="2024-02-29")

    assert permit.filed_date == date(2024, 2, 29)
    with pytest.raises(ValidationError):
        PermitRecord(**{**permit.model_dump(), "status": "pending"})


def test_envelope_records_generation_time(property_factory):
    envelope = PredictionEnvelope(
        region="austin",
        city="Austin",
        state="TX",
        timeframe_months=12,
        predictions=[property_factory()],
        stats={"total_count": 1, "average_appreciation": 0.0, "high_confidence_count": 0},
        data_source="live",
        market_conditions={"housing_supply": 2.8, "demand_index": 7.2, "market_sentiment": 80},
    )

    assert envelope.generated_at.tzinfo is not None
    assert envelope.model_dump(mode="json")["predictions"][0]["id"] == "p-0"
