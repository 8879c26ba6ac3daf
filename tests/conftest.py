from datetime import date

import pytest

from pipelines.model import PermitRecord, PropertyRecord

LISTING_ENV_VARS = (
    "LISTINGS_PRIMARY_URL",
    "LISTINGS_PRIMARY_KEY",
    "LISTINGS_SECONDARY_URL",
    "LISTINGS_SECONDARY_KEY",
)


@pytest.fixture(autouse=True)
def no_live_feeds(monkeypatch):
    for name in LISTING_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def make_property(index: int = 0, **overrides) -> PropertyRecord:
    fields = {
        "id": f"p-{index}",
        "address": f"{100 + index} Main St",
        "city": "Austin",
        "state": "TX",
        "lat": 30.2672,
        "lng": -97.7431,
        "price": 350000,
        "square_footage": 1800,
        "bedrooms": 3,
        "bathrooms": 2,
        "source": "live",
    }
    fields.update(overrides)
    return PropertyRecord(**fields)


def make_permit(index: int = 0, **overrides) -> PermitRecord:
    fields = {
        "id": f"permit-{index}",
        "permit_number": f"P{index:06d}",
        "type": "residential",
        "subtype": "Single Family Home",
        "status": "approved",
        "address": f"{200 + index} Oak Ave",
        "city": "Austin",
        "state": "TX",
        "lat": 30.2672,
        "lng": -97.7431,
        "filed_date": date(2025, 6, 1),
        "valuation": 500000,
    }
    fields.update(overrides)
    return PermitRecord(**fields)


@pytest.fixture()
def property_factory():
    return make_property


@pytest.fixture()
def permit_factory():
    return make_permit
