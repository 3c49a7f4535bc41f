from __future__ import annotations

from ..extensions import db


def _money(value) -> str | None:
    return None if value is None else f"{value:.2f}"


class GameItem(db.Model):
    """
    Game catalog entry.

    Column names follow the store's published schema (Game_item.*).

    AUDITED: Inserts, updates and deletes must go through
    services.catalog_service; the session guard in services.audit_service
    rejects any other path.

    Unit_sold here is the catalog's own counter that the CRUD procedures
    match against; Game_inventory.Unit_sold drives the sales report.
    """
    __tablename__ = "Game_item"
    __table_args__ = (
        db.CheckConstraint('"Unit_sold" >= 0', name="ck_game_item_unit_sold_non_negative"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column("Game_id", db.Integer, primary_key=True)
    name = db.Column("Game_name", db.String(256), nullable=False)
    platform = db.Column("Game_platform", db.String(100), nullable=False)
    genre = db.Column("Game_genre", db.String(50), nullable=True)
    release_year = db.Column("Release_year", db.String(4), nullable=False)
    units_sold = db.Column("Unit_sold", db.Integer, nullable=False, default=0, server_default="0")
    description = db.Column("Game_item_description", db.String(1024), nullable=False)

    def __repr__(self) -> str:
        return f"<GameItem id={self.id} name={self.name!r} platform={self.platform!r}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "platform": self.platform,
            "genre": self.genre,
            "release_year": self.release_year,
            "units_sold": self.units_sold,
            "description": self.description,
        }


class GameInventory(db.Model):
    """
    Stock and sales counters for one game (1:1 with Game_item, optional until stocked).

    No cascade: a game that still has an inventory row cannot be deleted.
    """
    __tablename__ = "Game_inventory"
    __table_args__ = (
        db.CheckConstraint('"Unit_on_hand" >= 0', name="ck_game_inventory_on_hand_non_negative"),
        db.CheckConstraint('"Unit_sold" >= 0', name="ck_game_inventory_sold_non_negative"),
        db.CheckConstraint('"Price" >= 0', name="ck_game_inventory_price_non_negative"),
    )

    game_id = db.Column("Game_id", db.Integer, db.ForeignKey("Game_item.Game_id"), primary_key=True, autoincrement=False)
    units_on_hand = db.Column("Unit_on_hand", db.Integer, nullable=False, default=0, server_default="0")
    units_sold = db.Column("Unit_sold", db.Integer, nullable=False, default=0, server_default="0")
    price = db.Column("Price", db.Numeric(9, 2), nullable=False)

    game = db.relationship("GameItem", backref=db.backref("inventory", uselist=False, lazy=True, passive_deletes="all"))

    def to_dict(self) -> dict:
        return {
            "game_id": self.game_id,
            "units_on_hand": self.units_on_hand,
            "units_sold": self.units_sold,
            "price": _money(self.price),
        }
