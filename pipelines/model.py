"""Canonical data models shared by the listing sources, scoring engine and API."""

from __future__ import annotations

from datetime import UTC, date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

RecordSource = Literal["live", "synthetic"]
DataSourceLabel = Literal["live", "synthetic", "mixed"]
PermitType = Literal["residential", "commercial", "mixed_use", "infrastructure", "renovation"]
PermitStatus = Literal["filed", "approved", "in_progress", "completed", "rejected"]
TransitStatus = Literal["proposed", "planned", "approved", "construction", "completed"]
InfrastructureStatus = Literal["proposed", "approved", "construction", "completed"]
RiskLevel = Literal["LOW", "MEDIUM", "HIGH"]


class PropertyRecord(BaseModel):
    """One housing unit, either from a live feed or synthesized."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., description="Stable identifier within a response.")
    address: str = Field(..., description="Street address as displayed to users.")
    city: str
    state: str
    lat: float
    lng: float
    price: float = Field(..., gt=0, description="Listing or assessed price in USD.")
    square_footage: Optional[float] = Field(default=None, gt=0)
    bedrooms: Optional[int] = Field(default=None, ge=0)
    bathrooms: Optional[float] = Field(default=None, ge=0)
    year_built: Optional[int] = None
    property_type: str = "House"
    source: RecordSource = Field(
        ..., description="Provenance tag: 'live' for feed records, 'synthetic' for generated ones."
    )
    provider: str = Field(
        default="unknown", description="Name of the feed or generator that produced the record."
    )
    mls_number: Optional[str] = None
    timeframe_months: Optional[int] = None
    appreciation: Optional[float] = Field(
        default=None, description="Projected appreciation in percent over the horizon."
    )
    confidence: Optional[float] = Field(default=None, ge=0, le=100)
    risk_score: Optional[float] = Field(default=None, ge=0, le=100)
    price_per_sqft: Optional[float] = None
    factors: tuple[str, ...] = ()

    @property
    def has_complete_details(self) -> bool:
        return bool(self.square_footage and self.bedrooms and self.bathrooms)


class MarketBaseline(BaseModel):
    """Reference metrics for one city/state market."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    city: str
    state: str
    median_home_price: float = Field(..., gt=0)
    appreciation_rate: float = Field(..., description="Projected annual appreciation, percent.")
    market_strength: float = Field(..., ge=0, le=10)
    volatility: float = Field(..., ge=0, description="Fractional price volatility (0.15 = 15%).")
    inventory_level: float = Field(..., ge=0, description="Months of supply.")
    employment_rate: float = Field(..., ge=0, le=100, description="Employment rate, percent.")
    rental_yield: float = Field(..., ge=0, description="Gross rental yield, percent.")
    lat: float = 39.8283
    lng: float = -98.5795
    population: Optional[int] = None
    price_appreciation_yoy: Optional[float] = Field(
        default=None, description="Trailing twelve-month price change, percent."
    )
    rent_growth_rate: Optional[float] = None
    crime_rate: Optional[float] = None
    walk_score: Optional[float] = None
    transit_score: Optional[float] = None
    climate_risk_score: Optional[float] = None
    investor_interest: Optional[float] = None
    affordability_index: Optional[float] = None
    future_value_score: Optional[float] = None
    is_default: bool = Field(
        default=False, description="True when the market was not found and defaults were used."
    )

    @property
    def key(self) -> str:
        return f"{self.city.strip().lower()},{self.state.strip().lower()}"

    @property
    def trailing_appreciation(self) -> float:
        if self.price_appreciation_yoy is not None:
            return self.price_appreciation_yoy
        return self.appreciation_rate


class RentalSummary(BaseModel):
    """City-level rental market overview."""

    model_config = ConfigDict(frozen=True)

    median_rent: Optional[float] = None
    median_purchase_price: Optional[float] = None
    average_gross_yield: Optional[float] = None
    average_net_yield: Optional[float] = None
    average_cash_flow: Optional[float] = None
    rent_growth_rate: Optional[float] = None
    vacancy_rate: Optional[float] = Field(default=None, ge=0, le=1)
    days_on_market: Optional[float] = None
    price_to_rent_ratio: Optional[float] = None


class PermitRecord(BaseModel):
    """A building permit filed within a market."""

    model_config = ConfigDict(frozen=True)

    id: str
    permit_number: str
    type: PermitType
    subtype: str
    status: PermitStatus
    address: str
    city: str
    state: str
    lat: float
    lng: float
    filed_date: date
    valuation: float = Field(..., ge=0)
    square_footage: float = Field(default=0, ge=0)
    units: int = Field(default=1, ge=0)
    description: str = ""
    impact_score: Optional[float] = Field(default=None, ge=0, le=100)
    gentrification_potential: Optional[float] = Field(default=None, ge=0, le=100)
    impact_radius: Optional[float] = None


class TransitProject(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: Literal["subway", "light_rail", "bus_rapid_transit", "highway", "bridge"]
    status: TransitStatus
    budget: float = 0


class InfrastructureProject(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: Literal[
        "school", "hospital", "park", "shopping_center", "office_complex", "stadium", "airport"
    ]
    status: InfrastructureStatus
    investment: float = 0


class RiskAssessment(BaseModel):
    model_config = ConfigDict(frozen=True)

    overall: int
    market: int
    development: int
    economic: int
    climate: int
    affordability: int
    level: RiskLevel


class RoiProjections(BaseModel):
    model_config = ConfigDict(frozen=True)

    one_year: float
    three_year: float
    five_year: float


class CompositeScoreSet(BaseModel):
    """Every composite score computed for one city in one request."""

    model_config = ConfigDict(frozen=True)

    city: str
    state: str
    investment_score: int = Field(..., ge=0, le=100)
    future_value_score: int = Field(..., ge=0, le=100)
    market_momentum: int = Field(..., ge=0, le=100)
    gentrification_risk: int = Field(..., ge=0, le=100)
    risk_assessment: RiskAssessment
    roi_projections: RoiProjections


class PredictionStats(BaseModel):
    """Aggregates computed over the full candidate set, before truncation."""

    model_config = ConfigDict(frozen=True)

    total_count: int
    average_appreciation: float
    high_confidence_count: int


class MarketConditions(BaseModel):
    model_config = ConfigDict(frozen=True)

    housing_supply: float
    demand_index: float
    market_sentiment: float


class PredictionEnvelope(BaseModel):
    """Response body for a ranked prediction request."""

    region: str
    city: str
    state: str
    timeframe_months: int
    predictions: list[PropertyRecord]
    stats: PredictionStats
    data_source: DataSourceLabel
    market_conditions: MarketConditions
    generated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


__all__ = [
    "CompositeScoreSet",
    "DataSourceLabel",
    "InfrastructureProject",
    "MarketBaseline",
    "MarketConditions",
    "PermitRecord",
    "PredictionEnvelope",
    "PredictionStats",
    "PropertyRecord",
    "RentalSummary",
    "RiskAssessment",
    "RoiProjections",
    "TransitProject",
]
