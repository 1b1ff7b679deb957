"""Search orchestrator — fans out to flight, hotel and car providers and ranks the bundles."""

import asyncio
import logging
import time
from collections.abc import Awaitable
from dataclasses import dataclass, field

from truefare.config import settings
from truefare.schemas.bundle import FlightInsight, SearchResult
from truefare.schemas.offers import CarOption, FlightOption, HotelOption
from truefare.schemas.search import SearchParams, Selection
from truefare.services.bundle_assembler import assemble_bundles, flight_signal
from truefare.services.cache_service import CacheService, cache_service
from truefare.services.engine_config import EngineConfig, engine_config
from truefare.services.fee_model import true_total_flight
from truefare.services.providers.base import OfferProvider, ProviderError
from truefare.services.providers.http_provider import HttpOfferProvider

logger = logging.getLogger(__name__)

ESTIMATE_NOTICE = (
    "Mistake-fare flags compare prices with a simple duration-based baseline. "
    "They are estimates, not confirmed pricing errors."
)


class SearchValidationError(ValueError):
    """The request cannot be executed as given."""


class FlightSearchUnavailable(Exception):
    """Flights are mandatory; without them the whole search fails. Safe to retry."""

    retryable = True

    def __init__(self, message: str, *, error_type: str = "unknown"):
        super().__init__(message)
        self.error_type = error_type


@dataclass
class OfferSnapshot:
    """Provider results for one search, as cached."""
    flights: list[FlightOption]
    hotels: list[HotelOption] = field(default_factory=list)
    cars: list[CarOption] = field(default_factory=list)
    status: dict[str, str] = field(default_factory=dict)

    @property
    def degraded(self) -> bool:
        return any(s == "unavailable" for s in self.status.values())

    def to_dict(self) -> dict:
        return {
            "flights": [f.model_dump(mode="json") for f in self.flights],
            "hotels": [h.model_dump(mode="json") for h in self.hotels],
            "cars": [c.model_dump(mode="json") for c in self.cars],
            "status": dict(self.status),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "OfferSnapshot":
        return cls(
            flights=[FlightOption.model_validate(f) for f in data.get("flights", [])],
            hotels=[HotelOption.model_validate(h) for h in data.get("hotels", [])],
            cars=[CarOption.model_validate(c) for c in data.get("cars", [])],
            status=dict(data.get("status", {})),
        )


class SearchOrchestrator:
    """Coordinates provider calls and hands the results to the deal engine."""

    def __init__(
        self,
        provider: OfferProvider,
        cache: CacheService | None = None,
        timeout_seconds: float | None = None,
        config: EngineConfig = engine_config,
    ):
        self.provider = provider
        self.cache = cache
        self.timeout_seconds = timeout_seconds or settings.provider_timeout_seconds
        self.config = config

    async def search(self, params: SearchParams, selection: Selection | None = None) -> SearchResult:
        """Execute a search and return bundles sorted by deal rank.

        Raises FlightSearchUnavailable when flights cannot be fetched and
        SearchValidationError when the selection does not fit the offers.
        """
        start_time = time.monotonic()
        selection = selection or Selection()

        snapshot = await self.collect_offers(params)
        result = self.build_result(params, snapshot, selection)

        elapsed_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            f"Search {params.cache_key()} -> {len(result.bundles)} bundles "
            f"(status={snapshot.status}, {elapsed_ms}ms)"
        )
        return result

    async def collect_offers(self, params: SearchParams) -> OfferSnapshot:
        if self.cache is not None:
            cached = await self.cache.get_offers(params)
            if cached:
                try:
                    return OfferSnapshot.from_dict(cached)
                except ValueError as e:
                    logger.warning(f"Ignoring unreadable cached offers for {params.cache_key()}: {e}")

        snapshot = await self._fetch_all(params)

        if self.cache is not None and not snapshot.degraded:
            await self.cache.set_offers(params, snapshot.to_dict())
        return snapshot

    async def _fetch_all(self, params: SearchParams) -> OfferSnapshot:
        categories = ["flights"]
        coros = [self._with_timeout("flights", self.provider.fetch_flights(params))]
        if params.include_hotels:
            categories.append("hotels")
            coros.append(self._with_timeout("hotels", self.provider.fetch_hotels(params)))
        if params.include_cars:
            categories.append("cars")
            coros.append(self._with_timeout("cars", self.provider.fetch_cars(params)))

        # Wait for every call to settle; one failure never cancels the others.
        results = await asyncio.gather(*coros, return_exceptions=True)
        outcome = dict(zip(categories, results))

        flights = outcome["flights"]
        if isinstance(flights, BaseException):
            error_type = getattr(flights, "error_type", "unknown")
            logger.error(f"Flight search failed for {params.cache_key()}: {flights}")
            raise FlightSearchUnavailable(
                "Flight offers are unavailable right now. Please try again.",
                error_type=error_type,
            ) from flights
        if not flights:
            logger.error(f"Flight search returned no offers for {params.cache_key()}")
            raise FlightSearchUnavailable("No flights found for this search.", error_type="empty")

        snapshot = OfferSnapshot(flights=list(flights), status={"flights": "ok"})
        for category in ("hotels", "cars"):
            if category not in outcome:
                snapshot.status[category] = "not_requested"
                continue
            result = outcome[category]
            if isinstance(result, BaseException):
                logger.warning(f"{category} provider failed, continuing without it: {result}")
                snapshot.status[category] = "unavailable"
            elif not result:
                snapshot.status[category] = "empty"
            else:
                setattr(snapshot, category, list(result))
                snapshot.status[category] = "ok"
        return snapshot

    async def _with_timeout(self, category: str, coro: Awaitable[list]) -> list:
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            raise ProviderError(
                f"{category} provider timed out after {self.timeout_seconds}s",
                category=category,
                error_type="timeout",
            ) from e

    def build_result(
        self,
        params: SearchParams,
        snapshot: OfferSnapshot,
        selection: Selection,
    ) -> SearchResult:
        """Pure ranking step over an offer snapshot."""
        if selection.flight >= len(snapshot.flights):
            raise SearchValidationError(
                f"flight selection {selection.flight} out of range (0..{len(snapshot.flights) - 1})"
            )
        flight = snapshot.flights[selection.flight]
        hotels = _selected(snapshot.hotels, selection.hotel, "hotel")
        cars = _selected(snapshot.cars, selection.car, "car")

        bundles = assemble_bundles(flight, params, hotels, cars, self.config)

        insights = []
        for f in snapshot.flights:
            signal = flight_signal(f, params, self.config)
            insights.append(FlightInsight(
                flight_id=f.id,
                true_total=true_total_flight(f, params.adults, self.config.fees),
                expected_price=signal.expected_price,
                mistake_fare=signal,
            ))

        notices = _category_notices(snapshot.status)
        if any(i.mistake_fare.likely for i in insights):
            notices.append(ESTIMATE_NOTICE)

        return SearchResult(
            bundles=bundles,
            flights=snapshot.flights,
            hotels=snapshot.hotels,
            cars=snapshot.cars,
            flight_insights=insights,
            status=snapshot.status,
            notices=notices,
        )


def _selected(offers: list, index: int | None, label: str) -> list:
    if index is None or not offers:
        return offers
    if index >= len(offers):
        raise SearchValidationError(f"{label} selection {index} out of range (0..{len(offers) - 1})")
    return [offers[index]]


def _category_notices(status: dict[str, str]) -> list[str]:
    notices = []
    for category, label in (("hotels", "hotel"), ("cars", "car rental")):
        state = status.get(category)
        if state == "unavailable":
            notices.append(f"No real-time {label} data available right now.")
        elif state == "empty":
            notices.append(f"No {label} offers found for this search.")
    return notices


def _build_default_orchestrator() -> SearchOrchestrator:
    cache = cache_service if settings.search_cache_enabled else None
    provider = HttpOfferProvider()
    if provider.worst_case_seconds > settings.provider_timeout_seconds:
        logger.warning(
            f"Provider retries need up to {provider.worst_case_seconds}s but calls are cut off after "
            f"{settings.provider_timeout_seconds}s; later attempts will not run"
        )
    return SearchOrchestrator(provider=provider, cache=cache)


search_orchestrator = _build_default_orchestrator()
