"""Priced offers as handed over by provider clients. Read-only to the engine."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

FareBrand = Literal["basic", "standard", "flex"]

# Ceiling for any single price or fee. Keeps true totals finite.
MAX_AMOUNT = 1_000_000


class FlightLeg(BaseModel):
    origin: str
    destination: str
    depart_at: datetime
    arrive_at: datetime
    carrier: str
    flight_number: str
    aircraft: str | None = None
    duration_minutes: int = Field(ge=0)

    model_config = {"frozen": True, "allow_inf_nan": False}

    @field_validator("origin", "destination", "carrier")
    @classmethod
    def _upper_code(cls, v: str) -> str:
        return v.strip().upper()


class FlightOption(BaseModel):
    id: str
    price: float = Field(ge=0, le=MAX_AMOUNT)
    currency: str = "USD"
    legs: list[FlightLeg] = Field(min_length=1)
    fare_brand: FareBrand
    bag_included: bool = False
    seat_pitch: float | None = Field(default=None, gt=0)
    on_time_score: float | None = Field(default=None, ge=0, le=1)
    provider: str = "OTHER"

    model_config = {"frozen": True, "allow_inf_nan": False}

    @property
    def total_duration_minutes(self) -> int:
        return sum(leg.duration_minutes for leg in self.legs)

    @property
    def connections(self) -> int:
        return max(0, len(self.legs) - 1)

    @property
    def is_nonstop(self) -> bool:
        return len(self.legs) == 1


class HotelOption(BaseModel):
    id: str
    name: str
    stars: float | None = Field(default=None, ge=0, le=5)
    nightly_base: float = Field(ge=0, le=MAX_AMOUNT)
    taxes_fees_night: float = Field(default=0, ge=0, le=MAX_AMOUNT)
    resort_fee_night: float | None = Field(default=None, ge=0, le=MAX_AMOUNT)
    parking_night: float | None = Field(default=None, ge=0, le=MAX_AMOUNT)
    walk_to_center_min: float | None = Field(default=None, ge=0)
    provider: str = "OTHER"

    model_config = {"frozen": True, "allow_inf_nan": False}

    @property
    def has_resort_fee(self) -> bool:
        return bool(self.resort_fee_night)


class CarOption(BaseModel):
    id: str
    vendor: str
    car_class: str
    base_total: float = Field(ge=0, le=MAX_AMOUNT)
    airport_facility_fee: float | None = Field(default=None, ge=0, le=MAX_AMOUNT)
    concession_recovery_fee: float | None = Field(default=None, ge=0, le=MAX_AMOUNT)
    one_way_drop_fee: float | None = Field(default=None, ge=0, le=MAX_AMOUNT)
    counterless: bool | None = None
    off_airport_shuttle_min: float | None = Field(default=None, ge=0)
    provider: str = "OTHER"

    model_config = {"frozen": True, "allow_inf_nan": False}
