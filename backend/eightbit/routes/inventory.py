# Overview: Flask API routes for game inventory counters.

from flask import Blueprint, request

from ..decorators import require_auth, require_permission
from ..errors import ConstraintViolation, NotFoundError, ReferentialIntegrityError
from ..permissions import MANAGE_INVENTORY
from ..services import inventory_service
from ..validation import ValidationError

inventory_bp = Blueprint("inventory", __name__, url_prefix="/api/inventory")


@inventory_bp.get("/<int:game_id>")
@require_auth
@require_permission(MANAGE_INVENTORY)
def get_inventory_route(game_id: int):
    row = inventory_service.get_inventory(game_id)
    if row is None:
        return {"error": "Game is not stocked"}, 404
    return row


@inventory_bp.post("/<int:game_id>")
@require_auth
@require_permission(MANAGE_INVENTORY)
def stock_game_route(game_id: int):
    """Body: price (required), units_on_hand, units_sold."""
    payload = request.get_json(silent=True) or {}
    try:
        row = inventory_service.stock_game(
            game_id=game_id,
            units_on_hand=payload.get("units_on_hand", 0),
            units_sold=payload.get("units_sold", 0),
            price=payload.get("price"),
        )
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ReferentialIntegrityError as e:
        return {"error": str(e)}, 404
    except ConstraintViolation as e:
        return {"error": str(e)}, 409
    return row, 201


@inventory_bp.post("/<int:game_id>/adjust")
@require_auth
@require_permission(MANAGE_INVENTORY)
def adjust_inventory_route(game_id: int):
    """Body: on_hand_delta, sold_delta, price (all optional)."""
    payload = request.get_json(silent=True) or {}
    try:
        return inventory_service.adjust_inventory(
            game_id=game_id,
            on_hand_delta=payload.get("on_hand_delta", 0),
            sold_delta=payload.get("sold_delta", 0),
            price=payload.get("price"),
        )
    except ValidationError as e:
        return {"error": str(e)}, 400
    except NotFoundError as e:
        return {"error": str(e)}, 404
    except ConstraintViolation as e:
        return {"error": str(e)}, 409
