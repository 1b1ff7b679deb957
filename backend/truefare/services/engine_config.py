"""Deal engine configuration — single source for fee tables, baselines and weights.

All values are heuristics chosen by hand, not fitted to data. Tune them here;
the fee model, baseline estimator, radar and ranker take them as keyword
arguments so tests can inject alternatives.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class FareBrandFees:
    """Expected ancillary fees for one fare brand (USD, per passenger)."""
    carry_on: float
    checked: float
    seat_probability: float  # chance the traveler pays for seat selection
    seat_fee: float

    @property
    def expected_seat_cost(self) -> float:
        return self.seat_probability * self.seat_fee


@dataclass(frozen=True)
class FeeTables:
    """Per-brand bag and seat-selection estimates.

    Only the carry-on fee is charged into the flight true total; the checked
    fee is kept alongside so it can be tuned without a table change.
    """
    basic: FareBrandFees = field(default_factory=lambda: FareBrandFees(35.0, 35.0, 0.8, 25.0))
    standard: FareBrandFees = field(default_factory=lambda: FareBrandFees(0.0, 35.0, 0.35, 18.0))
    flex: FareBrandFees = field(default_factory=lambda: FareBrandFees(0.0, 0.0, 0.1, 0.0))

    def for_brand(self, fare_brand: str) -> FareBrandFees:
        fees = getattr(self, fare_brand, None)
        if not isinstance(fees, FareBrandFees):
            raise ValueError(f"Unknown fare brand: {fare_brand!r}")
        return fees


@dataclass(frozen=True)
class BaselineRates:
    """Per-hour fair-price rates by cabin (USD). Monotonic economy → first."""
    economy: float = 70.0
    premium: float = 110.0
    business: float = 200.0
    first: float = 310.0

    def per_hour(self, cabin: str) -> float:
        rate = getattr(self, cabin, None)
        if not isinstance(rate, (int, float)):
            raise ValueError(f"Unknown cabin class: {cabin!r}")
        return rate


@dataclass(frozen=True)
class MistakeFareThresholds:
    """Price/baseline ratios at or below which a fare is flagged."""
    high: float = 0.55
    medium: float = 0.70


@dataclass(frozen=True)
class RankingWeights:
    """Deal rank weights. Price first, then duration, then risk and comfort,
    then hotel location, with car factors as a tie-breaker."""
    price: float = 0.42
    time: float = 0.18
    connection: float = 0.14
    comfort: float = 0.14
    location: float = 0.08
    car: float = 0.04


@dataclass(frozen=True)
class RankingParams:
    """Normalization constants and defaults for missing offer attributes."""
    max_trip_minutes: int = 12 * 60        # 12h of flying = full time penalty
    nonstop_risk: float = 0.1
    risk_per_connection: float = 0.15
    min_seat_pitch: float = 28.0           # 28" scores 0
    seat_pitch_span: float = 10.0          # 38" scores 1
    default_seat_pitch: float = 31.0
    default_on_time: float = 0.7
    pitch_share: float = 0.6
    on_time_share: float = 0.4
    max_walk_minutes: float = 30.0
    default_walk_minutes: float = 20.0
    car_base: float = 0.05
    counterless_bonus: float = 0.05
    shuttle_penalty: float = 0.2


@dataclass(frozen=True)
class BundleParams:
    """How bundles are enumerated and normalized."""
    reference_price_factor: float = 1.2    # "20% over what I'm paying"
    max_hotel_candidates: int = 3
    max_car_candidates: int = 2


@dataclass(frozen=True)
class EngineConfig:
    """Top-level config aggregating all sub-configs."""
    fees: FeeTables = field(default_factory=FeeTables)
    baseline: BaselineRates = field(default_factory=BaselineRates)
    mistake_fare: MistakeFareThresholds = field(default_factory=MistakeFareThresholds)
    weights: RankingWeights = field(default_factory=RankingWeights)
    ranking: RankingParams = field(default_factory=RankingParams)
    bundles: BundleParams = field(default_factory=BundleParams)


# Singleton — import this everywhere
engine_config = EngineConfig()
