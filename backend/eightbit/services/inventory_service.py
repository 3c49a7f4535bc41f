# Overview: Service-layer operations for game inventory counters.

from __future__ import annotations

from decimal import Decimal

from ..errors import ConstraintViolation, NotFoundError, ReferentialIntegrityError
from ..extensions import db
from ..models import GameInventory, GameItem
from ..validation import ModelValidationPolicy, enforce_rules_inventory, validate_payload
from .concurrency import atomic, lock_for_update

INVENTORY_POLICY = ModelValidationPolicy(
    writable_fields={"game_id", "units_on_hand", "units_sold", "price"},
    required_on_create={"game_id", "price"},
)


def stock_game(*, game_id: int, units_on_hand: int = 0, price, units_sold: int = 0) -> dict:
    """
    Create the inventory row for a catalog game.

    Raises:
        ValidationError: negative counters or price
        ReferentialIntegrityError: the game does not exist
        ConstraintViolation: the game already has an inventory row
    """
    patch = validate_payload(
        model=GameInventory,
        payload={
            "game_id": game_id,
            "units_on_hand": units_on_hand,
            "units_sold": units_sold,
            "price": price,
        },
        policy=INVENTORY_POLICY,
        partial=False,
    )
    enforce_rules_inventory(patch)

    with atomic() as session:
        if session.get(GameItem, patch["game_id"]) is None:
            raise ReferentialIntegrityError(f"Game item {patch['game_id']} does not exist")
        if session.get(GameInventory, patch["game_id"]) is not None:
            raise ConstraintViolation(f"Game item {patch['game_id']} is already stocked")

        row = GameInventory(**patch)
        session.add(row)
        session.flush()
        result = row.to_dict()
    return result


def get_inventory(game_id: int) -> dict | None:
    row = db.session.get(GameInventory, game_id)
    return row.to_dict() if row else None


def adjust_inventory(
    *,
    game_id: int,
    on_hand_delta: int = 0,
    sold_delta: int = 0,
    price: Decimal | str | None = None,
) -> dict:
    """
    Apply deltas to the counters (and optionally reprice) in one transaction.

    Raises:
        NotFoundError: the game is not stocked
        ConstraintViolation: a counter would go negative
    """
    payload = {"units_on_hand": on_hand_delta, "units_sold": sold_delta}
    if price is not None:
        payload["price"] = price
    patch = validate_payload(
        model=GameInventory,
        payload=payload,
        policy=INVENTORY_POLICY,
        partial=True,
    )
    new_price = patch.get("price")
    if new_price is not None:
        enforce_rules_inventory({"price": new_price})

    with atomic() as session:
        query = session.query(GameInventory).filter(GameInventory.game_id == game_id).populate_existing()
        row = lock_for_update(query).first()
        if row is None:
            raise NotFoundError(f"Game item {game_id} has no inventory row")

        on_hand = row.units_on_hand + patch["units_on_hand"]
        sold = row.units_sold + patch["units_sold"]
        if on_hand < 0:
            raise ConstraintViolation(f"Unit_on_hand cannot go below 0 (would be {on_hand})")
        if sold < 0:
            raise ConstraintViolation(f"Unit_sold cannot go below 0 (would be {sold})")

        row.units_on_hand = on_hand
        row.units_sold = sold
        if new_price is not None:
            row.price = new_price
        session.flush()
        result = row.to_dict()
    return result
