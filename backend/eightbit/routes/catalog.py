# Overview: Flask API routes for game catalog operations; parses input and returns JSON responses.

"""
Game catalog routes.

SECURITY: All routes require authentication; each route requires the matching
catalog permission (held by the game_manager role).

Update and delete take the caller's last-read state in "expected"; a mismatch
answers 412 so the caller can re-read and retry.
"""
from flask import Blueprint, current_app, request

from ..decorators import require_auth, require_permission
from ..errors import ConstraintViolation, CreationError, PreconditionFailedError, ReferentialIntegrityError
from ..permissions import CREATE_GAME_ITEM, DELETE_GAME_ITEM, READ_GAME_ITEM, UPDATE_GAME_ITEM
from ..services import catalog_service
from ..services.catalog_service import GameItemState
from ..validation import ValidationError

catalog_bp = Blueprint("catalog", __name__, url_prefix="/api/games")


@catalog_bp.post("")
@require_auth
@require_permission(CREATE_GAME_ITEM)
def create_game_item_route():
    payload = request.get_json(silent=True) or {}

    try:
        game_id = catalog_service.create_game_item(
            name=payload.get("name"),
            platform=payload.get("platform"),
            genre=payload.get("genre"),
            release_year=payload.get("release_year"),
            units_sold=payload.get("units_sold", 0),
            description=payload.get("description"),
        )
    except ValidationError as e:
        return {"error": str(e)}, 400
    except CreationError as e:
        current_app.logger.exception("Failed to create game item")
        return {"error": str(e)}, 500

    return {"id": game_id, "game_item": catalog_service.read_game_item(game_id)}, 201


@catalog_bp.get("")
@require_auth
@require_permission(READ_GAME_ITEM)
def list_game_items_route():
    items = catalog_service.list_game_items()
    return {"items": items, "count": len(items)}


@catalog_bp.get("/<int:game_id>")
@require_auth
@require_permission(READ_GAME_ITEM)
def read_game_item_route(game_id: int):
    """Absence is a valid outcome: 200 with game_item = null."""
    return {"game_item": catalog_service.read_game_item(game_id)}


@catalog_bp.put("/<int:game_id>")
@require_auth
@require_permission(UPDATE_GAME_ITEM)
def update_game_item_route(game_id: int):
    """
    Body:
    - expected: {name, platform, units_sold} as last read
    - new: {name, platform, units_sold}
    """
    payload = request.get_json(silent=True) or {}

    try:
        expected = GameItemState.from_dict(payload.get("expected"), label="expected")
        new = GameItemState.from_dict(payload.get("new"), label="new")
        updated = catalog_service.update_game_item(game_id=game_id, expected=expected, new=new)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except PreconditionFailedError as e:
        return {"error": str(e)}, 412
    except ConstraintViolation as e:
        return {"error": str(e)}, 409

    return {"game_item": updated}


@catalog_bp.delete("/<int:game_id>")
@require_auth
@require_permission(DELETE_GAME_ITEM)
def delete_game_item_route(game_id: int):
    """Body: expected: {name, platform, units_sold} as last read."""
    payload = request.get_json(silent=True) or {}

    try:
        expected = GameItemState.from_dict(payload.get("expected"), label="expected")
        catalog_service.delete_game_item(game_id=game_id, expected=expected)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except PreconditionFailedError as e:
        return {"error": str(e)}, 412
    except ReferentialIntegrityError as e:
        return {"error": str(e)}, 409

    return {"deleted": True, "id": game_id}
