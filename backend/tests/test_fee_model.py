import math

import pytest
from pydantic import ValidationError

from conftest import make_flight
from truefare.schemas.offers import MAX_AMOUNT, CarOption, HotelOption
from truefare.services.engine_config import FareBrandFees, FeeTables
from truefare.services.fee_model import (
    car_true_total,
    estimate_flight_extras,
    hotel_true_total,
    round_currency,
    true_total_flight,
)


def test_basic_fare_adds_carry_on_and_expected_seat_fee():
    flight = make_flight(price=234, fare_brand="basic")
    # 234 + 35 bag + 0.8 * 25 seat
    assert true_total_flight(flight, 1) == 289


def test_extras_scale_with_passengers():
    flight = make_flight(price=234, fare_brand="basic")
    assert estimate_flight_extras(flight, 3) == 165
    assert true_total_flight(flight, 3) == 234 + 165


def test_standard_and_flex_brands():
    standard = make_flight(price=189, fare_brand="standard")
    flex = make_flight(price=260, fare_brand="flex")
    # 0.35 * 18 = 6.3 expected seat spend
    assert true_total_flight(standard, 1) == 195
    assert true_total_flight(flex, 1) == 260


@pytest.mark.parametrize("brand", ["basic", "standard", "flex"])
@pytest.mark.parametrize("passengers", [1, 2, 5])
@pytest.mark.parametrize("price", [0, 99, 149.5, 1200])
def test_true_total_never_below_headline_price(brand, passengers, price):
    flight = make_flight(price=price, fare_brand=brand)
    assert true_total_flight(flight, passengers) >= flight.price


def test_rejects_zero_passengers():
    with pytest.raises(ValueError):
        true_total_flight(make_flight(), 0)


def test_injected_fee_table():
    fees = FeeTables(basic=FareBrandFees(carry_on=50, checked=60, seat_probability=1.0, seat_fee=10))
    assert true_total_flight(make_flight(price=100, fare_brand="basic"), 1, fees) == 160


def test_hotel_total_sums_nightly_components():
    hotel = HotelOption(id="H1", name="Harbourview", nightly_base=129, taxes_fees_night=22,
                        resort_fee_night=15, parking_night=25)
    assert hotel_true_total(hotel, 3) == 3 * (129 + 22 + 15 + 25)


def test_hotel_optional_fees_default_to_zero():
    hotel = HotelOption(id="H9", name="Plain Inn", nightly_base=100, taxes_fees_night=12)
    assert hotel_true_total(hotel, 2) == 224


def test_hotel_total_rounds_half_up():
    hotel = HotelOption(id="H9", name="Odd Rates", nightly_base=100.25, taxes_fees_night=0)
    assert hotel_true_total(hotel, 2) == 201  # 200.5


def test_car_total_includes_all_fees():
    car = CarOption(id="C1", vendor="Alamo", car_class="Midsize", base_total=78,
                    airport_facility_fee=12, concession_recovery_fee=9, one_way_drop_fee=50)
    assert car_true_total(car) == 149


def test_car_optional_fees_default_to_zero():
    car = CarOption(id="C2", vendor="Avis", car_class="Compact", base_total=69.4)
    assert car_true_total(car) == 69


def test_round_currency_is_half_up():
    assert round_currency(2.5) == 3
    assert round_currency(3.5) == 4
    assert round_currency(4.49) == 4


@pytest.mark.parametrize("amount", [math.inf, -math.inf, math.nan])
def test_round_currency_rejects_non_finite(amount):
    with pytest.raises(ValueError):
        round_currency(amount)


@pytest.mark.parametrize("price", [math.inf, math.nan])
def test_flight_rejects_non_finite_price(price):
    with pytest.raises(ValidationError):
        make_flight(price=price)


def test_hotel_rejects_infinite_fee():
    with pytest.raises(ValidationError):
        HotelOption(id="H", name="Inf Inn", nightly_base=100, resort_fee_night=math.inf)


def test_amounts_above_ceiling_are_rejected():
    # Two near-max floats would overflow to inf once summed over the stay.
    with pytest.raises(ValidationError):
        HotelOption(id="H", name="Huge", nightly_base=1e308, taxes_fees_night=1e308)
    with pytest.raises(ValidationError):
        CarOption(id="C", vendor="V", car_class="X", base_total=MAX_AMOUNT + 1)


def test_largest_allowed_amounts_stay_finite():
    hotel = HotelOption(
        id="H", name="Max", nightly_base=MAX_AMOUNT, taxes_fees_night=MAX_AMOUNT,
        resort_fee_night=MAX_AMOUNT, parking_night=MAX_AMOUNT,
    )
    assert hotel_true_total(hotel, 30) == 4 * MAX_AMOUNT * 30
