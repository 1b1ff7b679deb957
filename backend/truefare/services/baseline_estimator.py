"""Baseline estimator — order-of-magnitude "fair price" for an itinerary.

Deliberately naive: flying hours times a fixed per-cabin hourly rate. No
historical fares or market feed are consulted, so the result is a sanity
reference for the mistake-fare radar, not a price prediction.
"""

from collections.abc import Sequence

from truefare.schemas.offers import FlightLeg
from truefare.services.engine_config import BaselineRates, engine_config


def total_duration_minutes(legs: Sequence[FlightLeg]) -> int:
    return sum(leg.duration_minutes for leg in legs)


def naive_expected_price(
    legs: Sequence[FlightLeg],
    cabin: str,
    rates: BaselineRates = engine_config.baseline,
) -> float:
    if not legs:
        raise ValueError("cannot estimate a baseline for an itinerary without legs")
    hours = total_duration_minutes(legs) / 60
    return hours * rates.per_hour(cabin)
