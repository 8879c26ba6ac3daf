"""Static reference data for tracked markets and the lookups that read it.

All tables are built once at import time and exposed read-only, so lookups
are safe to call from any number of concurrent requests.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Mapping

from pipelines.model import MarketBaseline, RentalSummary

logger = logging.getLogger(__name__)

DEFAULT_REGION = "austin"
DEFAULT_COORDINATES: tuple[float, float] = (39.8283, -98.5795)  # geographic center of the US

DEFAULT_BASELINE = MarketBaseline(
    city="Unknown",
    state="",
    median_home_price=400000,
    appreciation_rate=6.0,
    market_strength=7,
    volatility=0.15,
    inventory_level=3.5,
    employment_rate=95.0,
    rental_yield=6.0,
    lat=DEFAULT_COORDINATES[0],
    lng=DEFAULT_COORDINATES[1],
    is_default=True,
)

MARKET_BASELINES: tuple[MarketBaseline, ...] = (
    MarketBaseline(
        city="Austin", state="TX", lat=30.2672, lng=-97.7431,
        median_home_price=485000, appreciation_rate=6.5, market_strength=8,
        volatility=0.12, inventory_level=2.8, employment_rate=96.8, rental_yield=5.8,
        population=964254, price_appreciation_yoy=22.4, rent_growth_rate=8.9,
        crime_rate=34.2, walk_score=42, transit_score=35, climate_risk_score=45,
        investor_interest=92, affordability_index=58, future_value_score=94,
    ),
    MarketBaseline(
        city="Miami", state="FL", lat=25.7617, lng=-80.1918,
        median_home_price=625000, appreciation_rate=8.2, market_strength=9,
        volatility=0.15, inventory_level=3.2, employment_rate=93.8, rental_yield=4.8,
        population=467963, price_appreciation_yoy=24.8, rent_growth_rate=9.2,
        crime_rate=41.5, walk_score=77, transit_score=58, climate_risk_score=78,
        investor_interest=94, affordability_index=35, future_value_score=86,
    ),
    MarketBaseline(
        city="Phoenix", state="AZ", lat=33.4484, lng=-112.0740,
        median_home_price=485000, appreciation_rate=7.8, market_strength=8,
        volatility=0.18, inventory_level=2.5, employment_rate=95.8, rental_yield=6.8,
        population=1608139, price_appreciation_yoy=26.4, rent_growth_rate=9.8,
        crime_rate=45.2, walk_score=41, transit_score=35, climate_risk_score=62,
        investor_interest=86, affordability_index=58, future_value_score=88,
    ),
    MarketBaseline(
        city="Tampa", state="FL", lat=27.9506, lng=-82.4572,
        median_home_price=465000, appreciation_rate=9.1, market_strength=9,
        volatility=0.14, inventory_level=2.9, employment_rate=95.2, rental_yield=6.8,
        population=399700, price_appreciation_yoy=28.7, rent_growth_rate=11.5,
        crime_rate=38.9, walk_score=54, transit_score=42, climate_risk_score=68,
        investor_interest=89, affordability_index=68, future_value_score=91,
    ),
    MarketBaseline(
        city="Nashville", state="TN", lat=36.1627, lng=-86.7816,
        median_home_price=465000, appreciation_rate=7.5, market_strength=8,
        volatility=0.13, inventory_level=3.1, employment_rate=96.8, rental_yield=6.8,
        population=689447, price_appreciation_yoy=22.8, rent_growth_rate=9.5,
        crime_rate=45.8, walk_score=28, transit_score=24, climate_risk_score=38,
        investor_interest=89, affordability_index=58, future_value_score=91,
    ),
    MarketBaseline(
        city="Denver", state="CO", lat=39.7392, lng=-104.9903,
        median_home_price=565000, appreciation_rate=6.8, market_strength=7,
        volatility=0.16, inventory_level=3.5, employment_rate=96.5, rental_yield=5.2,
        population=715522, price_appreciation_yoy=18.2, rent_growth_rate=7.8,
        crime_rate=42.8, walk_score=61, transit_score=47, climate_risk_score=35,
        investor_interest=85, affordability_index=52, future_value_score=86,
    ),
    MarketBaseline(
        city="Seattle", state="WA", lat=47.6062, lng=-122.3321,
        median_home_price=785000, appreciation_rate=5.9, market_strength=7,
        volatility=0.19, inventory_level=4.2, employment_rate=96.8, rental_yield=3.8,
        population=749256, price_appreciation_yoy=11.5, rent_growth_rate=5.8,
        crime_rate=38.7, walk_score=73, transit_score=59, climate_risk_score=22,
        investor_interest=88, affordability_index=38, future_value_score=87,
    ),
    MarketBaseline(
        city="Portland", state="OR", lat=45.5152, lng=-122.6784,
        median_home_price=585000, appreciation_rate=5.5, market_strength=6,
        volatility=0.17, inventory_level=4.8, employment_rate=95.8, rental_yield=4.2,
        population=652503, price_appreciation_yoy=12.8, rent_growth_rate=6.2,
        crime_rate=42.5, walk_score=66, transit_score=54, climate_risk_score=25,
        investor_interest=78, affordability_index=48, future_value_score=82,
    ),
    MarketBaseline(
        city="San Francisco", state="CA", lat=37.7749, lng=-122.4194,
        median_home_price=1200000, appreciation_rate=4.2, market_strength=6,
        volatility=0.22, inventory_level=5.1, employment_rate=96.2, rental_yield=2.8,
        population=873965, price_appreciation_yoy=8.5, rent_growth_rate=4.2,
        crime_rate=38.2, walk_score=88, transit_score=80, climate_risk_score=25,
        investor_interest=95, affordability_index=15, future_value_score=88,
    ),
    MarketBaseline(
        city="Los Angeles", state="CA", lat=34.0522, lng=-118.2437,
        median_home_price=800000, appreciation_rate=5.8, market_strength=7,
        volatility=0.20, inventory_level=4.5, employment_rate=94.8, rental_yield=3.2,
        population=3971883, price_appreciation_yoy=12.3, rent_growth_rate=5.1,
        crime_rate=42.1, walk_score=67, transit_score=53, climate_risk_score=35,
        investor_interest=90, affordability_index=22, future_value_score=85,
    ),
    MarketBaseline(
        city="Boston", state="MA", lat=42.3601, lng=-71.0589,
        median_home_price=785000, appreciation_rate=6.2, market_strength=7,
        volatility=0.14, inventory_level=3.8, employment_rate=96.5, rental_yield=3.8,
        population=695506, price_appreciation_yoy=9.8, rent_growth_rate=4.5,
        crime_rate=32.8, walk_score=82, transit_score=72, climate_risk_score=28,
        investor_interest=88, affordability_index=35, future_value_score=85,
    ),
    MarketBaseline(
        city="New York", state="NY", lat=40.7128, lng=-74.0060,
        median_home_price=1200000, appreciation_rate=4.8, market_strength=6,
        volatility=0.21, inventory_level=5.5, employment_rate=95.1, rental_yield=3.1,
        population=8336817, price_appreciation_yoy=9.2, rent_growth_rate=3.8,
        crime_rate=35.6, walk_score=89, transit_score=82, climate_risk_score=32,
        investor_interest=98, affordability_index=12, future_value_score=91,
    ),
    MarketBaseline(
        city="Chicago", state="IL", lat=41.8781, lng=-87.6298,
        median_home_price=385000, appreciation_rate=4.5, market_strength=6,
        volatility=0.13, inventory_level=4.2, employment_rate=94.5, rental_yield=5.8,
        population=2693976, price_appreciation_yoy=8.5, rent_growth_rate=4.8,
        crime_rate=48.2, walk_score=77, transit_score=65, climate_risk_score=35,
        investor_interest=82, affordability_index=65, future_value_score=78,
    ),
    MarketBaseline(
        city="Atlanta", state="GA", lat=33.7490, lng=-84.3880,
        median_home_price=425000, appreciation_rate=7.2, market_strength=8,
        volatility=0.15, inventory_level=3.0, employment_rate=95.8, rental_yield=6.2,
        population=498715, price_appreciation_yoy=20.2, rent_growth_rate=8.8,
        crime_rate=52.3, walk_score=48, transit_score=45, climate_risk_score=42,
        investor_interest=85, affordability_index=68, future_value_score=85,
    ),
    MarketBaseline(
        city="Dallas", state="TX", lat=32.7767, lng=-96.7970,
        median_home_price=425000, appreciation_rate=6.8, market_strength=8,
        volatility=0.14, inventory_level=2.8, employment_rate=95.2, rental_yield=6.2,
        population=1343573, price_appreciation_yoy=19.8, rent_growth_rate=7.5,
        crime_rate=45.7, walk_score=46, transit_score=42, climate_risk_score=48,
        investor_interest=88, affordability_index=65, future_value_score=87,
    ),
    MarketBaseline(
        city="Houston", state="TX", lat=29.7604, lng=-95.3698,
        median_home_price=385000, appreciation_rate=5.9, market_strength=7,
        volatility=0.16, inventory_level=3.5, employment_rate=94.5, rental_yield=7.8,
        population=2304580, price_appreciation_yoy=16.3, rent_growth_rate=6.8,
        crime_rate=52.1, walk_score=47, transit_score=38, climate_risk_score=55,
        investor_interest=82, affordability_index=78, future_value_score=82,
    ),
    MarketBaseline(
        city="Charlotte", state="NC", lat=35.2271, lng=-80.8431,
        median_home_price=385000, appreciation_rate=8.5, market_strength=9,
        volatility=0.12, inventory_level=2.2, employment_rate=96.2, rental_yield=7.5,
        population=874579, price_appreciation_yoy=19.5, rent_growth_rate=8.2,
        crime_rate=42.8, walk_score=26, transit_score=22, climate_risk_score=38,
        investor_interest=84, affordability_index=72, future_value_score=87,
    ),
    MarketBaseline(
        city="Orlando", state="FL", lat=28.5383, lng=-81.3792,
        median_home_price=425000, appreciation_rate=9.8, market_strength=9,
        volatility=0.17, inventory_level=2.1, employment_rate=96.1, rental_yield=7.2,
        population=307573, price_appreciation_yoy=25.3, rent_growth_rate=10.8,
        crime_rate=42.3, walk_score=48, transit_score=38, climate_risk_score=65,
        investor_interest=82, affordability_index=72, future_value_score=84,
    ),
    MarketBaseline(
        city="Las Vegas", state="NV", lat=36.1699, lng=-115.1398,
        median_home_price=465000, appreciation_rate=8.9, market_strength=8,
        volatility=0.20, inventory_level=2.8, employment_rate=94.2, rental_yield=6.5,
        population=651319, price_appreciation_yoy=21.8, rent_growth_rate=8.5,
        crime_rate=48.5, walk_score=42, transit_score=38, climate_risk_score=55,
        investor_interest=85, affordability_index=62, future_value_score=82,
    ),
    MarketBaseline(
        city="Raleigh", state="NC", lat=35.7796, lng=-78.6382,
        median_home_price=425000, appreciation_rate=8.2, market_strength=8,
        volatility=0.13, inventory_level=2.5, employment_rate=97.2, rental_yield=6.8,
        population=474069, price_appreciation_yoy=17.8, rent_growth_rate=7.8,
        crime_rate=32.4, walk_score=31, transit_score=28, climate_risk_score=35,
        investor_interest=82, affordability_index=75, future_value_score=89,
    ),
)

# Short names users type into the region box, on top of plain city names.
REGION_ALIASES: Mapping[str, tuple[str, str]] = MappingProxyType(
    {
        "sf": ("San Francisco", "CA"),
        "la": ("Los Angeles", "CA"),
        "nyc": ("New York", "NY"),
        **{baseline.city.lower(): (baseline.city, baseline.state) for baseline in MARKET_BASELINES},
    }
)

STREET_NAMES: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "austin": ("Congress Ave", "South Lamar", "Barton Springs Rd", "Guadalupe St", "Riverside Dr"),
        "miami": ("Biscayne Blvd", "Ocean Drive", "Collins Ave", "Flagler St", "Coral Way"),
        "phoenix": ("Central Ave", "Camelback Rd", "Indian School Rd", "Thomas Rd", "McDowell Rd"),
        "tampa": ("Bayshore Blvd", "Kennedy Blvd", "Dale Mabry Hwy", "Westshore Blvd", "Armenia Ave"),
        "nashville": ("Broadway", "Music Row", "Demonbreun St", "West End Ave", "Charlotte Ave"),
        "denver": ("Colfax Ave", "16th Street", "Broadway", "Speer Blvd", "Federal Blvd"),
        "seattle": ("Pike St", "Pine St", "Capitol Hill", "Fremont Ave", "Queen Anne Ave"),
        "atlanta": ("Peachtree St", "Ponce de Leon Ave", "Piedmont Ave", "North Ave", "Marietta St"),
        "dallas": ("McKinney Ave", "Greenville Ave", "Lemmon Ave", "Ross Ave", "Commerce St"),
        "charlotte": ("Trade St", "Tryon St", "Independence Blvd", "Sharon Rd", "Park Rd"),
        "orlando": ("Orange Ave", "Colonial Dr", "International Dr", "Sand Lake Rd", "Kirkman Rd"),
        "las vegas": ("Las Vegas Blvd", "Flamingo Rd", "Sahara Ave", "Charleston Blvd", "Tropicana Ave"),
        "raleigh": ("Glenwood Ave", "Hillsborough St", "Capital Blvd", "Six Forks Rd", "Falls of Neuse Rd"),
    }
)
DEFAULT_STREET_NAMES: tuple[str, ...] = ("Main St", "First St", "Oak Ave", "Pine St", "Elm St")

APPRECIATION_FACTORS: Mapping[str, tuple[str, ...]] = MappingProxyType(
    {
        "austin": ("Tech hub expansion", "No state income tax", "Music scene growth"),
        "miami": ("International business hub", "Waterfront premium", "Tourism recovery"),
        "phoenix": ("Retiree influx", "Business relocations", "Affordable housing"),
        "tampa": ("Port expansion", "Healthcare growth", "Sports venues"),
        "nashville": ("Music industry", "Healthcare sector", "Business friendly"),
        "denver": ("Cannabis industry", "Outdoor lifestyle", "Aerospace growth"),
        "seattle": ("Tech giants", "Coffee culture", "Port activity"),
        "atlanta": ("Airport hub", "Film industry", "Corporate headquarters"),
    }
)
DEFAULT_APPRECIATION_FACTORS: tuple[str, ...] = (
    "Strong job market growth",
    "Population influx",
    "Limited housing supply",
    "Infrastructure development",
)


def _rental(
    median_rent: float,
    median_purchase_price: float,
    gross: float,
    net: float,
    cash_flow: float,
    rent_growth: float,
    vacancy: float,
    days_on_market: float,
    price_to_rent: float,
) -> RentalSummary:
    return RentalSummary(
        median_rent=median_rent,
        median_purchase_price=median_purchase_price,
        average_gross_yield=gross,
        average_net_yield=net,
        average_cash_flow=cash_flow,
        rent_growth_rate=rent_growth,
        vacancy_rate=vacancy,
        days_on_market=days_on_market,
        price_to_rent_ratio=price_to_rent,
    )


RENTAL_SUMMARIES: Mapping[str, RentalSummary] = MappingProxyType(
    {
        "cleveland,oh": _rental(1200, 95000, 15.2, 11.8, 450, 4.2, 0.12, 35, 6.6),
        "detroit,mi": _rental(1100, 75000, 17.6, 13.2, 520, 5.8, 0.15, 42, 5.7),
        "memphis,tn": _rental(1300, 125000, 12.5, 9.2, 380, 4.8, 0.10, 28, 8.0),
        "austin,tx": _rental(2200, 485000, 5.4, 3.8, 150, 8.9, 0.06, 18, 18.4),
        "dallas,tx": _rental(1800, 425000, 5.1, 3.5, 120, 7.5, 0.08, 22, 19.7),
        "houston,tx": _rental(1600, 295000, 6.5, 4.8, 280, 6.8, 0.09, 25, 15.4),
        "miami,fl": _rental(2800, 585000, 5.7, 3.9, 185, 9.2, 0.07, 15, 17.4),
        "tampa,fl": _rental(1900, 385000, 5.9, 4.2, 220, 11.5, 0.05, 12, 16.9),
        "phoenix,az": _rental(1850, 485000, 4.6, 3.2, 125, 9.8, 0.06, 16, 21.9),
        "las vegas,nv": _rental(1650, 425000, 4.7, 3.3, 145, 8.5, 0.07, 19, 21.5),
    }
)
DEFAULT_RENTAL_SUMMARY = _rental(1500, 350000, 6.0, 4.2, 200, 5.5, 0.08, 25, 15.0)


def _normalize_key(city: str | None, state: str | None) -> str:
    city_part = " ".join((city or "").split()).lower()
    state_part = " ".join((state or "").split()).lower()
    return f"{city_part},{state_part}"


_BASELINE_INDEX: Mapping[str, MarketBaseline] = MappingProxyType(
    {_normalize_key(b.city, b.state): b for b in MARKET_BASELINES}
)


def resolve(city: str | None, state: str | None) -> MarketBaseline:
    """Return the baseline for ``city``/``state``, or the default baseline on a miss.

    Matching ignores case and surrounding/duplicated whitespace. The default
    baseline keeps the requested labels so downstream records read naturally.
    """

    baseline = _BASELINE_INDEX.get(_normalize_key(city, state))
    if baseline is not None:
        return baseline
    logger.info("No baseline for %r, %r; using default market metrics.", city, state)
    label = " ".join((city or "").split()).title() or DEFAULT_BASELINE.city
    return DEFAULT_BASELINE.model_copy(
        update={"city": label, "state": " ".join((state or "").split()).upper()}
    )


def clean_region(raw: str | None) -> str:
    """Lower-case, trim and cut a free-text region at its first comma."""

    region = (raw or "").lower().strip()
    if "," in region:
        region = region.split(",", 1)[0].strip()
    return region or DEFAULT_REGION


def region_to_city(region: str | None) -> tuple[str, str]:
    cleaned = clean_region(region)
    if cleaned in REGION_ALIASES:
        return REGION_ALIASES[cleaned]
    return " ".join(cleaned.split()).title(), ""


def resolve_region(region: str | None) -> MarketBaseline:
    city, state = region_to_city(region)
    return resolve(city, state)


def resolve_rental_summary(city: str | None, state: str | None) -> RentalSummary:
    return RENTAL_SUMMARIES.get(_normalize_key(city, state), DEFAULT_RENTAL_SUMMARY)


def street_names(city: str | None) -> tuple[str, ...]:
    return STREET_NAMES.get(" ".join((city or "").split()).lower(), DEFAULT_STREET_NAMES)


def appreciation_factors(city: str | None, count: int = 2) -> tuple[str, ...]:
    factors = APPRECIATION_FACTORS.get(
        " ".join((city or "").split()).lower(), DEFAULT_APPRECIATION_FACTORS
    )
    return factors[:count]


def iter_markets(keys: Iterable[str] | None = None) -> tuple[MarketBaseline, ...]:
    """Known baselines, optionally restricted to ``"city,state"`` keys."""

    if keys is None:
        return MARKET_BASELINES
    selected = []
    for key in keys:
        city, _, state = key.partition(",")
        baseline = _BASELINE_INDEX.get(_normalize_key(city, state))
        if baseline:
            selected.append(baseline)
    return tuple(selected)


__all__ = [
    "DEFAULT_BASELINE",
    "DEFAULT_REGION",
    "DEFAULT_RENTAL_SUMMARY",
    "MARKET_BASELINES",
    "REGION_ALIASES",
    "RENTAL_SUMMARIES",
    "appreciation_factors",
    "clean_region",
    "iter_markets",
    "region_to_city",
    "resolve",
    "resolve_region",
    "resolve_rental_summary",
    "street_names",
]
