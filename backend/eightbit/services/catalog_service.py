# backend/eightbit/services/catalog_service.py
"""
Game Catalog Gateway

Every Game_item mutation in the application goes through this module. Each
operation is one transaction that performs the write and appends exactly one
Audit_log row; if either fails, both roll back.

Update and delete are guarded by a match-before-mutate check: the caller
passes the state it last read (GameItemState), and the row is changed only if
it still matches that state field by field. The check is the WHERE clause of
the UPDATE/DELETE itself, so no concurrent writer can land between check and
write. Zero affected rows means the precondition failed. There is no version
column and no retry loop.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError

from ..errors import ConstraintViolation, CreationError, PreconditionFailedError, ReferentialIntegrityError
from ..extensions import db
from ..models import GameInventory, GameItem
from ..validation import ModelValidationPolicy, ValidationError, enforce_rules_game_item, validate_payload
from .audit_service import AUDITED_TABLE, CHANGED_BY_MAX, append_audit_entry, current_principal, gateway_scope
from .concurrency import atomic

logger = logging.getLogger(__name__)

GAME_ITEM_POLICY = ModelValidationPolicy(
    writable_fields={"name", "platform", "genre", "release_year", "units_sold", "description"},
    required_on_create={"name", "platform", "release_year", "units_sold", "description"},
)

STATE_POLICY = ModelValidationPolicy(
    writable_fields={"name", "platform", "units_sold"},
    required_on_create={"name", "platform", "units_sold"},
)


@dataclass(frozen=True)
class GameItemState:
    """The three catalog fields update/delete match on and overwrite."""
    name: str
    platform: str
    units_sold: int

    @classmethod
    def from_dict(cls, data: dict | None, *, label: str = "state") -> "GameItemState":
        if not isinstance(data, dict):
            raise ValidationError(f"{label} must be an object with name, platform, units_sold")
        patch = validate_payload(model=GameItem, payload=data, policy=STATE_POLICY, partial=False)
        enforce_rules_game_item(patch)
        return cls(name=patch["name"], platform=patch["platform"], units_sold=patch["units_sold"])

    def validated(self) -> "GameItemState":
        return GameItemState.from_dict(
            {"name": self.name, "platform": self.platform, "units_sold": self.units_sold}
        )


def _matching_row(game_id: int, expected: GameItemState) -> tuple:
    return (
        GameItem.id == game_id,
        GameItem.name == expected.name,
        GameItem.platform == expected.platform,
        GameItem.units_sold == expected.units_sold,
    )


def _acting_principal(actor: str | None) -> str:
    return (actor or current_principal())[:CHANGED_BY_MAX]


def create_game_item(
    *,
    name: str,
    platform: str,
    genre: str | None,
    release_year: str,
    units_sold: int,
    description: str,
    actor: str | None = None,
) -> int:
    """
    Insert a catalog entry and its INSERT audit row.

    Returns:
        The newly assigned Game_id.

    Raises:
        ValidationError: input rejected before any transaction starts
        CreationError: the insert or the audit append failed; nothing was kept
    """
    patch = validate_payload(
        model=GameItem,
        payload={
            "name": name,
            "platform": platform,
            "genre": genre,
            "release_year": release_year,
            "units_sold": units_sold,
            "description": description,
        },
        policy=GAME_ITEM_POLICY,
        partial=False,
    )
    enforce_rules_game_item(patch)
    principal = _acting_principal(actor)

    try:
        with gateway_scope(db.session), atomic() as session:
            item = GameItem(**patch)
            session.add(item)
            session.flush()  # ensure item.id exists before audit append
            append_audit_entry(
                table_name=AUDITED_TABLE,
                action_type="INSERT",
                record_id=item.id,
                changed_by=principal,
            )
            game_id = item.id
    except (ConstraintViolation, SQLAlchemyError) as exc:
        logger.error("Game item create failed: %s", exc)
        raise CreationError("Error creating game item record") from exc

    logger.info("Game item %s created by %s", game_id, principal)
    return game_id


def read_game_item(game_id: int) -> dict | None:
    """Full row for game_id, or None when no such game exists."""
    item = db.session.get(GameItem, game_id)
    return item.to_dict() if item else None


def list_game_items() -> list[dict]:
    items = db.session.query(GameItem).order_by(GameItem.id.asc()).all()
    return [item.to_dict() for item in items]


def update_game_item(
    *,
    game_id: int,
    expected: GameItemState,
    new: GameItemState,
    actor: str | None = None,
) -> dict:
    """
    Overwrite name/platform/units_sold if the row still matches `expected`.

    Raises:
        PreconditionFailedError: no row with game_id matches `expected`
        ConstraintViolation: the engine rejected the new values
    """
    expected = expected.validated()
    new = new.validated()
    principal = _acting_principal(actor)

    with gateway_scope(db.session), atomic() as session:
        outcome = session.execute(
            update(GameItem)
            .where(*_matching_row(game_id, expected))
            .values(name=new.name, platform=new.platform, units_sold=new.units_sold)
            .execution_options(synchronize_session=False)
        )
        if outcome.rowcount == 0:
            logger.warning("Game item %s update rejected: state changed or missing", game_id)
            raise PreconditionFailedError("No matching record found for update")

        append_audit_entry(
            table_name=AUDITED_TABLE,
            action_type="UPDATE",
            record_id=game_id,
            changed_by=principal,
        )
        result = session.get(GameItem, game_id, populate_existing=True).to_dict()

    logger.info("Game item %s updated by %s", game_id, principal)
    return result


def delete_game_item(
    *,
    game_id: int,
    expected: GameItemState,
    actor: str | None = None,
) -> None:
    """
    Remove the row if it still matches `expected`.

    No cascade: a game with a Game_inventory row is refused.

    Raises:
        PreconditionFailedError: no row with game_id matches `expected`
        ReferentialIntegrityError: the game is still stocked
    """
    expected = expected.validated()
    principal = _acting_principal(actor)

    with gateway_scope(db.session), atomic() as session:
        stocked = session.query(GameInventory.game_id).filter(GameInventory.game_id == game_id).first()
        if stocked is not None:
            # a stale caller still gets the precondition failure first
            if session.query(GameItem.id).filter(*_matching_row(game_id, expected)).first() is None:
                logger.warning("Game item %s delete rejected: state changed or missing", game_id)
                raise PreconditionFailedError("No matching record found for deletion")
            raise ReferentialIntegrityError(
                f"Game item {game_id} is still referenced by {GameInventory.__tablename__}"
            )

        # a Game_inventory row inserted since the check fails here on the foreign key
        outcome = session.execute(
            delete(GameItem)
            .where(*_matching_row(game_id, expected))
            .execution_options(synchronize_session=False)
        )
        if outcome.rowcount == 0:
            logger.warning("Game item %s delete rejected: state changed or missing", game_id)
            raise PreconditionFailedError("No matching record found for deletion")

        append_audit_entry(
            table_name=AUDITED_TABLE,
            action_type="DELETE",
            record_id=game_id,
            changed_by=principal,
        )

    logger.info("Game item %s deleted by %s", game_id, principal)
