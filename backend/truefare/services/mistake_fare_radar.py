"""Mistake-fare radar — flags fares priced far below their heuristic baseline."""

import math

from truefare.schemas.bundle import MistakeFareSignal
from truefare.schemas.offers import FlightOption
from truefare.services.engine_config import MistakeFareThresholds, engine_config


def detect_mistake_fare(
    offer: FlightOption,
    expected_price: float,
    thresholds: MistakeFareThresholds = engine_config.mistake_fare,
) -> MistakeFareSignal:
    """Classify a fare as high / medium / low mistake-fare likelihood.

    Thresholds are inclusive: a price at exactly 70% of the baseline is
    "medium". Never raises; without a usable baseline the fare is "low".
    """
    if not math.isfinite(expected_price) or expected_price <= 0:
        return MistakeFareSignal(likely=False, severity="low", expected_price=expected_price)

    # Comparing the ratio keeps the boundary exact for float inputs.
    ratio = offer.price / expected_price
    if ratio <= thresholds.high:
        likely, severity = True, "high"
    elif ratio <= thresholds.medium:
        likely, severity = True, "medium"
    else:
        likely, severity = False, "low"

    return MistakeFareSignal(
        likely=likely,
        severity=severity,
        expected_price=round(expected_price, 2),
        ratio=round(ratio, 4),
    )
