from typing import Literal

from pydantic import BaseModel, Field

from truefare.schemas.offers import CarOption, FlightOption, HotelOption

Severity = Literal["low", "medium", "high"]
CategoryStatus = Literal["ok", "empty", "unavailable", "not_requested"]


class MistakeFareSignal(BaseModel):
    """Radar verdict. A best-effort estimate, never a guarantee."""

    likely: bool
    severity: Severity
    expected_price: float
    ratio: float | None = None
    is_estimate: bool = True

    model_config = {"frozen": True}


class Bundle(BaseModel):
    """One flight plus optional hotel and car. Recomputed on every selection."""

    flight: FlightOption
    hotel: HotelOption | None = None
    car: CarOption | None = None
    true_total: int
    deal_rank: int = Field(ge=0, le=100)
    badges: list[str] = Field(default_factory=list)
    mistake_fare: MistakeFareSignal

    model_config = {"frozen": True}


class FlightInsight(BaseModel):
    flight_id: str
    true_total: int
    expected_price: float
    mistake_fare: MistakeFareSignal


class SearchResult(BaseModel):
    bundles: list[Bundle]
    flights: list[FlightOption]
    hotels: list[HotelOption]
    cars: list[CarOption]
    flight_insights: list[FlightInsight]
    status: dict[str, CategoryStatus]
    notices: list[str] = Field(default_factory=list)


class ExplainResponse(BaseModel):
    explanation: str
    generated: bool
