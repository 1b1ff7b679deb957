"""Bundle assembler — combines a selected flight with an optional hotel and car."""

import logging
from collections.abc import Sequence

from truefare.schemas.bundle import Bundle, MistakeFareSignal
from truefare.schemas.offers import CarOption, FlightOption, HotelOption
from truefare.schemas.search import SearchParams
from truefare.services.baseline_estimator import naive_expected_price
from truefare.services.deal_ranker import deal_rank_score
from truefare.services.engine_config import EngineConfig, engine_config
from truefare.services.fee_model import car_true_total, hotel_true_total, true_total_flight
from truefare.services.mistake_fare_radar import detect_mistake_fare

logger = logging.getLogger(__name__)

BADGE_NONSTOP = "Nonstop"
BADGE_NO_RESORT_FEE = "No resort fee"
BADGE_COUNTERLESS = "Counterless pickup"
BADGE_MISTAKE_FARE = "Mistake fare candidate"


def bundle_true_total(
    flight: FlightOption,
    params: SearchParams,
    hotel: HotelOption | None = None,
    car: CarOption | None = None,
    config: EngineConfig = engine_config,
) -> int:
    """Sum of the true totals of the present components."""
    total = true_total_flight(flight, params.adults, config.fees)
    if hotel is not None:
        total += hotel_true_total(hotel, params.nights)
    if car is not None:
        total += car_true_total(car)
    return total


def flight_signal(
    flight: FlightOption,
    params: SearchParams,
    config: EngineConfig = engine_config,
) -> MistakeFareSignal:
    expected = naive_expected_price(flight.legs, params.cabin, config.baseline)
    return detect_mistake_fare(flight, expected, config.mistake_fare)


def derive_badges(
    flight: FlightOption,
    signal: MistakeFareSignal,
    hotel: HotelOption | None = None,
    car: CarOption | None = None,
) -> list[str]:
    """Advisory UI hints. They never feed back into the deal rank."""
    badges = []
    if flight.is_nonstop:
        badges.append(BADGE_NONSTOP)
    if hotel is not None and not hotel.has_resort_fee:
        badges.append(BADGE_NO_RESORT_FEE)
    if car is not None and car.counterless:
        badges.append(BADGE_COUNTERLESS)
    if signal.likely:
        badges.append(BADGE_MISTAKE_FARE)
    return badges


def assemble_bundle(
    flight: FlightOption,
    params: SearchParams,
    hotel: HotelOption | None = None,
    car: CarOption | None = None,
    reference_price: float | None = None,
    config: EngineConfig = engine_config,
) -> Bundle:
    """Build one bundle.

    Without an explicit reference price the bundle is normalized against its
    own true total x 1.2, which only makes sense for relative ranking.
    """
    true_total = bundle_true_total(flight, params, hotel, car, config)
    if reference_price is None:
        reference_price = true_total * config.bundles.reference_price_factor

    deal_rank = deal_rank_score(
        true_total, flight, reference_price, hotel, car,
        weights=config.weights, params=config.ranking,
    )
    signal = flight_signal(flight, params, config)

    return Bundle(
        flight=flight,
        hotel=hotel,
        car=car,
        true_total=true_total,
        deal_rank=deal_rank,
        badges=derive_badges(flight, signal, hotel, car),
        mistake_fare=signal,
    )


def assemble_bundles(
    flight: FlightOption,
    params: SearchParams,
    hotels: Sequence[HotelOption] = (),
    cars: Sequence[CarOption] = (),
    config: EngineConfig = engine_config,
) -> list[Bundle]:
    """Enumerate the flight against candidate hotels and cars, best first.

    Every combination is normalized against the first (anchor) combination so
    the price term differs between bundles of the same search.
    """
    hotel_set: list[HotelOption | None] = list(hotels[: config.bundles.max_hotel_candidates]) or [None]
    car_set: list[CarOption | None] = list(cars[: config.bundles.max_car_candidates]) or [None]

    anchor_total = bundle_true_total(flight, params, hotel_set[0], car_set[0], config)
    reference_price = max(anchor_total, 1) * config.bundles.reference_price_factor

    bundles = [
        assemble_bundle(flight, params, hotel, car, reference_price, config)
        for hotel in hotel_set
        for car in car_set
    ]
    bundles.sort(key=lambda b: b.deal_rank, reverse=True)
    logger.debug(f"Assembled {len(bundles)} bundles for flight {flight.id}")
    return bundles
