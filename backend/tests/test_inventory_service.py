"""
Inventory counter tests.
"""

import pytest

from eightbit.errors import ConstraintViolation, NotFoundError, ReferentialIntegrityError
from eightbit.services import inventory_service
from eightbit.validation import ValidationError


def test_stock_game(db_session, chrono_trigger):
    row = inventory_service.stock_game(game_id=chrono_trigger, units_on_hand=10, price=59.99)
    assert row == {"game_id": chrono_trigger, "units_on_hand": 10, "units_sold": 0, "price": "59.99"}


def test_stock_unknown_game(db_session):
    with pytest.raises(ReferentialIntegrityError):
        inventory_service.stock_game(game_id=31337, units_on_hand=1, price="1.00")


def test_stock_twice(db_session, chrono_trigger):
    inventory_service.stock_game(game_id=chrono_trigger, units_on_hand=1, price="1.00")
    with pytest.raises(ConstraintViolation):
        inventory_service.stock_game(game_id=chrono_trigger, units_on_hand=2, price="2.00")


@pytest.mark.parametrize("kwargs", [
    {"units_on_hand": -1, "price": "1.00"},
    {"units_sold": -1, "price": "1.00"},
    {"price": "-5.00"},
    {"price": None},
])
def test_stock_rejects_bad_values(db_session, chrono_trigger, kwargs):
    with pytest.raises(ValidationError):
        inventory_service.stock_game(game_id=chrono_trigger, **kwargs)


def test_adjust_inventory(db_session, chrono_trigger):
    inventory_service.stock_game(game_id=chrono_trigger, units_on_hand=10, price="59.99")

    row = inventory_service.adjust_inventory(game_id=chrono_trigger, on_hand_delta=-3, sold_delta=3, price="49.99")
    assert row["units_on_hand"] == 7
    assert row["units_sold"] == 3
    assert row["price"] == "49.99"


def test_adjust_refuses_negative_counters(db_session, chrono_trigger):
    inventory_service.stock_game(game_id=chrono_trigger, units_on_hand=2, price="59.99")

    with pytest.raises(ConstraintViolation):
        inventory_service.adjust_inventory(game_id=chrono_trigger, on_hand_delta=-3, sold_delta=3)

    assert inventory_service.get_inventory(chrono_trigger)["units_on_hand"] == 2
    assert inventory_service.get_inventory(chrono_trigger)["units_sold"] == 0


def test_adjust_unstocked_game(db_session, chrono_trigger):
    with pytest.raises(NotFoundError):
        inventory_service.adjust_inventory(game_id=chrono_trigger, on_hand_delta=1)
