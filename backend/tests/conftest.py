from datetime import date, datetime, timedelta

import pytest

from truefare.schemas.offers import CarOption, FlightLeg, FlightOption, HotelOption
from truefare.schemas.search import SearchParams
from truefare.services.providers.base import OfferProvider, ProviderError

DEPART = date(2026, 11, 20)


def make_leg(origin="BOS", destination="TPA", minutes=180, hour=9, flight_number="DL456", carrier="DL"):
    depart_at = datetime(DEPART.year, DEPART.month, DEPART.day, hour, 0)
    return FlightLeg(
        origin=origin,
        destination=destination,
        depart_at=depart_at,
        arrive_at=depart_at + timedelta(minutes=minutes),
        carrier=carrier,
        flight_number=flight_number,
        duration_minutes=minutes,
    )


def make_flight(id="F1", price=234.0, fare_brand="basic", legs=None, **kwargs):
    return FlightOption(
        id=id,
        price=price,
        legs=legs or [make_leg(minutes=285)],
        fare_brand=fare_brand,
        provider="TEST",
        **kwargs,
    )


def make_params(**overrides):
    values = {
        "origins": ["BOS"],
        "destination": "TPA",
        "depart_date": DEPART,
        "nights": 3,
        "adults": 1,
        "cabin": "economy",
        "include_hotels": True,
        "include_cars": True,
    }
    values.update(overrides)
    return SearchParams(**values)


def sample_flights():
    return [
        FlightOption(
            id="F1", price=138, fare_brand="basic", bag_included=False, seat_pitch=28, on_time_score=0.65,
            legs=[make_leg(minutes=182, hour=7, flight_number="NK123", carrier="NK")], provider="TEST",
        ),
        FlightOption(
            id="F2", price=189, fare_brand="standard", bag_included=True, seat_pitch=31, on_time_score=0.8,
            legs=[make_leg(minutes=180, hour=9, flight_number="DL456")], provider="TEST",
        ),
        FlightOption(
            id="F3", price=260, fare_brand="flex", bag_included=True, seat_pitch=32, on_time_score=0.88,
            legs=[
                make_leg(destination="ATL", minutes=110, hour=12, flight_number="DL789"),
                make_leg(origin="ATL", minutes=93, hour=16, flight_number="DL101"),
            ],
            provider="TEST",
        ),
    ]


def sample_hotels():
    return [
        HotelOption(id="H1", name="Harbourview Suites", stars=4, nightly_base=129, taxes_fees_night=22,
                    resort_fee_night=15, parking_night=25, walk_to_center_min=10, provider="TEST"),
        HotelOption(id="H2", name="Downtown Modern", stars=4.5, nightly_base=149, taxes_fees_night=28,
                    resort_fee_night=0, parking_night=35, walk_to_center_min=6, provider="TEST"),
        HotelOption(id="H3", name="Seabreeze Tower", stars=4, nightly_base=115, taxes_fees_night=20,
                    resort_fee_night=25, parking_night=20, walk_to_center_min=14, provider="TEST"),
    ]


def sample_cars():
    return [
        CarOption(id="C1", vendor="Alamo", car_class="Midsize", base_total=78, airport_facility_fee=12,
                  concession_recovery_fee=9, counterless=True, provider="TEST"),
        CarOption(id="C2", vendor="Avis", car_class="Compact", base_total=69, airport_facility_fee=12,
                  concession_recovery_fee=9, off_airport_shuttle_min=8, provider="TEST"),
    ]


class StubProvider(OfferProvider):
    """In-memory provider. A category set to an Exception raises it."""

    name = "stub"

    def __init__(self, flights=None, hotels=None, cars=None):
        self.flights = sample_flights() if flights is None else flights
        self.hotels = sample_hotels() if hotels is None else hotels
        self.cars = sample_cars() if cars is None else cars
        self.calls = []

    async def _answer(self, category, value):
        self.calls.append(category)
        if isinstance(value, Exception):
            raise value
        return list(value)

    async def fetch_flights(self, params):
        return await self._answer("flights", self.flights)

    async def fetch_hotels(self, params):
        return await self._answer("hotels", self.hotels)

    async def fetch_cars(self, params):
        return await self._answer("cars", self.cars)


class MemoryCache:
    """Stands in for CacheService without Redis."""

    def __init__(self):
        self.store = {}

    async def get_offers(self, params):
        return self.store.get(params.cache_key())

    async def set_offers(self, params, snapshot):
        self.store[params.cache_key()] = snapshot

    async def get_explanation(self, bundle_payload):
        return self.store.get(("explain", bundle_payload["true_total"], bundle_payload["flight"]["id"]))

    async def set_explanation(self, bundle_payload, text):
        self.store[("explain", bundle_payload["true_total"], bundle_payload["flight"]["id"])] = text


def provider_down(category):
    return ProviderError(f"{category} down", category=category, error_type="network")


@pytest.fixture
def params():
    return make_params()


@pytest.fixture
def stub_provider():
    return StubProvider()
