"""Fee model — turns headline prices into comparable true totals.

Flight extras are an *expected* ancillary spend derived from the fare brand
(bag fee plus probability-weighted seat selection). They are a heuristic, not
a quote from the carrier.
"""

import math
from decimal import ROUND_HALF_UP, Decimal

from truefare.schemas.offers import CarOption, FlightOption, HotelOption
from truefare.services.engine_config import FeeTables, engine_config


def round_currency(amount: float) -> int:
    """Round half-up to the nearest whole currency unit."""
    if not math.isfinite(amount):
        raise ValueError(f"Cannot round non-finite amount: {amount}")
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def estimate_flight_extras(
    offer: FlightOption,
    passenger_count: int,
    fees: FeeTables = engine_config.fees,
) -> int:
    """Expected bag + seat-selection spend for all passengers."""
    if passenger_count < 1:
        raise ValueError("passenger_count must be at least 1")
    brand = fees.for_brand(offer.fare_brand)
    bag = brand.carry_on * passenger_count
    seat = brand.expected_seat_cost * passenger_count
    return round_currency(bag + seat)


def true_total_flight(
    offer: FlightOption,
    passenger_count: int,
    fees: FeeTables = engine_config.fees,
) -> int:
    return round_currency(offer.price + estimate_flight_extras(offer, passenger_count, fees))


def hotel_true_total(offer: HotelOption, nights: int) -> int:
    nightly = (
        offer.nightly_base
        + offer.taxes_fees_night
        + (offer.resort_fee_night or 0)
        + (offer.parking_night or 0)
    )
    return round_currency(nightly * nights)


def car_true_total(offer: CarOption) -> int:
    return round_currency(
        offer.base_total
        + (offer.airport_facility_fee or 0)
        + (offer.concession_recovery_fee or 0)
        + (offer.one_way_drop_fee or 0)
    )
