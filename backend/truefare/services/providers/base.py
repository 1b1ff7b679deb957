"""Provider interface shared by every offer source."""

from abc import ABC, abstractmethod
from typing import Any

from truefare.schemas.offers import CarOption, FlightOption, HotelOption
from truefare.schemas.search import SearchParams


class ProviderError(Exception):
    """A provider could not deliver offers.

    Providers raise this instead of returning placeholder data, so callers can
    tell "no data available" apart from a real result.
    """

    def __init__(
        self,
        message: str,
        *,
        category: str,
        error_type: str = "unknown",
        http_status: int | None = None,
        raw_payload: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.category = category
        self.error_type = error_type
        self.http_status = http_status
        self.raw_payload = raw_payload or {}


class OfferProvider(ABC):
    """Fetches raw priced offers for one search."""

    name = "base"

    @abstractmethod
    async def fetch_flights(self, params: SearchParams) -> list[FlightOption]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_hotels(self, params: SearchParams) -> list[HotelOption]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_cars(self, params: SearchParams) -> list[CarOption]:
        raise NotImplementedError

    async def close(self) -> None:
        return None
