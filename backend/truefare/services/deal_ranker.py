"""Deal ranker — one 0-100 desirability score for a flight, optionally with hotel and car.

Price competitiveness dominates, followed by flying time, connection risk and
comfort, hotel location, and finally car pickup friction. The weights are hand
tuned (see engine_config.RankingWeights), not learned.
"""

from dataclasses import asdict, dataclass

from truefare.schemas.offers import CarOption, FlightOption, HotelOption
from truefare.services.engine_config import RankingParams, RankingWeights, engine_config
from truefare.services.fee_model import round_currency


@dataclass(frozen=True)
class ScoreBreakdown:
    price: float
    time: float          # 1 - time penalty
    connection: float    # 1 - connection risk
    comfort: float
    location: float
    car: float
    score: int

    def to_dict(self) -> dict:
        return asdict(self)


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def price_competitiveness(true_total: float, reference_price: float) -> float:
    return _clamp(reference_price / max(true_total, 1), 0.0, 1.0)


def time_penalty(flight: FlightOption, params: RankingParams = engine_config.ranking) -> float:
    return min(1.0, flight.total_duration_minutes / params.max_trip_minutes)


def connection_risk(flight: FlightOption, params: RankingParams = engine_config.ranking) -> float:
    if flight.connections == 0:
        return params.nonstop_risk
    return min(1.0, params.nonstop_risk + params.risk_per_connection * flight.connections)


def comfort_score(flight: FlightOption, params: RankingParams = engine_config.ranking) -> float:
    pitch = flight.seat_pitch if flight.seat_pitch is not None else params.default_seat_pitch
    on_time = flight.on_time_score if flight.on_time_score is not None else params.default_on_time
    pitch_score = _clamp((pitch - params.min_seat_pitch) / params.seat_pitch_span, 0.0, 1.0)
    return params.pitch_share * pitch_score + params.on_time_share * on_time


def location_score(hotel: HotelOption | None, params: RankingParams = engine_config.ranking) -> float:
    walk = params.default_walk_minutes
    if hotel is not None and hotel.walk_to_center_min is not None:
        walk = hotel.walk_to_center_min
    return _clamp((params.max_walk_minutes - walk) / params.max_walk_minutes, 0.0, 1.0)


def car_term(car: CarOption | None, params: RankingParams = engine_config.ranking) -> float:
    """Small bonus for counterless pickup, penalty for an off-airport shuttle."""
    bonus = params.counterless_bonus if car is not None and car.counterless else 0.0
    shuttle = car.off_airport_shuttle_min if car is not None else None
    penalty = params.shuttle_penalty if (shuttle or 0) > 0 else 0.0
    return params.car_base + bonus - penalty


def score_breakdown(
    true_total: float,
    flight: FlightOption,
    reference_price: float,
    hotel: HotelOption | None = None,
    car: CarOption | None = None,
    weights: RankingWeights = engine_config.weights,
    params: RankingParams = engine_config.ranking,
) -> ScoreBreakdown:
    if not flight.legs:
        raise ValueError(f"flight {flight.id!r} has no legs and cannot be scored")

    price = price_competitiveness(true_total, reference_price)
    time = 1 - time_penalty(flight, params)
    connection = 1 - connection_risk(flight, params)
    comfort = comfort_score(flight, params)
    location = location_score(hotel, params)
    car_value = car_term(car, params)

    composite = 100 * (
        weights.price * price
        + weights.time * time
        + weights.connection * connection
        + weights.comfort * comfort
        + weights.location * location
        + weights.car * car_value
    )
    score = round_currency(_clamp(composite, 0.0, 100.0))

    return ScoreBreakdown(
        price=round(price, 4),
        time=round(time, 4),
        connection=round(connection, 4),
        comfort=round(comfort, 4),
        location=round(location, 4),
        car=round(car_value, 4),
        score=score,
    )


def deal_rank_score(
    true_total: float,
    flight: FlightOption,
    reference_price: float,
    hotel: HotelOption | None = None,
    car: CarOption | None = None,
    weights: RankingWeights = engine_config.weights,
    params: RankingParams = engine_config.ranking,
) -> int:
    """Composite deal rank, an integer in [0, 100]."""
    return score_breakdown(true_total, flight, reference_price, hotel, car, weights, params).score
