from __future__ import annotations

from ..extensions import db
from eightbit.time_utils import to_utc_z
from .catalog import _money


class CustomerAddress(db.Model):
    """
    Postal address. Root entity; referenced (never owned) by Customer.
    """
    __tablename__ = "Customer_address"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column("Address_id", db.Integer, primary_key=True)
    street_address = db.Column("Street_address", db.String(100), nullable=False)
    city = db.Column("City", db.String(168), nullable=False)
    state = db.Column("State", db.String(2), nullable=False)
    zip_code = db.Column("Zip_code", db.String(10), nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "street_address": self.street_address,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
        }


class Customer(db.Model):
    __tablename__ = "Customer"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column("Customer_id", db.Integer, primary_key=True)
    first_name = db.Column("Customer_first_name", db.String(256), nullable=False)
    last_name = db.Column("Customer_last_name", db.String(256), nullable=False)
    address_id = db.Column(
        "Address_id",
        db.Integer,
        db.ForeignKey("Customer_address.Address_id", name="fk_Customer_Customer_address"),
        nullable=False,
        index=True,
    )
    phone_number = db.Column("Phone_number", db.String(11), nullable=False)

    address = db.relationship("CustomerAddress", backref=db.backref("customers", lazy=True, passive_deletes="all"))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "address_id": self.address_id,
            "phone_number": self.phone_number,
        }


class Invoice(db.Model):
    """
    Purchase invoice for a customer.

    IMMUTABLE: Created once, never updated or deleted.
    """
    __tablename__ = "Invoice"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column("Invoice_id", db.Integer, primary_key=True)
    customer_id = db.Column(
        "Customer_id",
        db.Integer,
        db.ForeignKey("Customer.Customer_id", name="fk_Invoice_Customer"),
        nullable=False,
        index=True,
    )
    item_amount = db.Column("Item_amount", db.Integer, nullable=False)
    subtotal = db.Column("Subtotal", db.Numeric(9, 2), nullable=False)
    tax = db.Column("Tax", db.Numeric(9, 2), nullable=False)
    created_at = db.Column("Created_at", db.DateTime, nullable=False, server_default=db.func.now())

    customer = db.relationship("Customer", backref=db.backref("invoices", lazy=True, passive_deletes="all"))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "item_amount": self.item_amount,
            "subtotal": _money(self.subtotal),
            "tax": _money(self.tax),
            "created_at": to_utc_z(self.created_at),
        }
