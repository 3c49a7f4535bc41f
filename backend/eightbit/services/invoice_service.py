# Overview: Service-layer operations for invoices. Create and read only; invoices are immutable.

from __future__ import annotations

from ..errors import ReferentialIntegrityError
from ..extensions import db
from ..models import Customer, Invoice
from ..validation import ModelValidationPolicy, enforce_rules_invoice, validate_payload
from .concurrency import atomic

INVOICE_POLICY = ModelValidationPolicy(
    writable_fields={"customer_id", "item_amount", "subtotal", "tax"},
    required_on_create={"customer_id", "item_amount", "subtotal", "tax"},
)


def create_invoice(*, payload: dict) -> dict:
    """
    Record a purchase. Created_at is assigned by the database.

    Raises:
        ValidationError: bad input
        ReferentialIntegrityError: customer_id does not exist
    """
    patch = validate_payload(model=Invoice, payload=payload, policy=INVOICE_POLICY, partial=False)
    enforce_rules_invoice(patch)

    with atomic() as session:
        if session.get(Customer, patch["customer_id"]) is None:
            raise ReferentialIntegrityError(f"Customer {patch['customer_id']} does not exist")
        invoice = Invoice(**patch)
        session.add(invoice)
        session.flush()
        session.refresh(invoice)  # load server-side Created_at
        result = invoice.to_dict()
    return result


def get_invoice(invoice_id: int) -> dict | None:
    invoice = db.session.get(Invoice, invoice_id)
    return invoice.to_dict() if invoice else None


def list_invoices(*, customer_id: int | None = None) -> list[dict]:
    query = db.session.query(Invoice)
    if customer_id is not None:
        query = query.filter(Invoice.customer_id == customer_id)
    return [invoice.to_dict() for invoice in query.order_by(Invoice.id.asc()).all()]
