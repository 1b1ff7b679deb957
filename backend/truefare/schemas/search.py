from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, field_validator

CabinClass = Literal["economy", "premium", "business", "first"]


class SearchParams(BaseModel):
    """One user search. Immutable once the search executes."""

    origins: list[str] = Field(min_length=1)
    destination: str
    depart_date: date
    nights: int = Field(gt=0)
    flex_days: int = Field(default=0, ge=0)
    adults: int = Field(default=1, ge=1)
    cabin: CabinClass = "economy"
    include_hotels: bool = True
    include_cars: bool = True

    model_config = {"frozen": True}

    @field_validator("origins")
    @classmethod
    def _normalize_origins(cls, v: list[str]) -> list[str]:
        codes = [code.strip().upper() for code in v]
        if any(not code for code in codes):
            raise ValueError("origin codes must be non-empty")
        return codes

    @field_validator("destination")
    @classmethod
    def _normalize_destination(cls, v: str) -> str:
        code = v.strip().upper()
        if not code:
            raise ValueError("destination must be non-empty")
        return code

    def cache_key(self) -> str:
        """Normalized key covering every field that changes provider results."""
        origins = ",".join(sorted(set(self.origins)))
        return (
            f"{origins}:{self.destination}:{self.depart_date.isoformat()}:"
            f"{self.nights}n:{self.flex_days}f:{self.adults}a:{self.cabin}:"
            f"h{int(self.include_hotels)}:c{int(self.include_cars)}"
        )


class Selection(BaseModel):
    """Indices of the currently selected offers. None = let the engine pick."""

    flight: int = Field(default=0, ge=0)
    hotel: int | None = Field(default=None, ge=0)
    car: int | None = Field(default=None, ge=0)


class SearchRequest(BaseModel):
    params: SearchParams
    selection: Selection = Field(default_factory=Selection)
