# Overview: Flask API routes for addresses, customers and invoices.

from flask import Blueprint, request

from ..decorators import require_auth, require_permission
from ..errors import ReferentialIntegrityError
from ..permissions import MANAGE_CUSTOMERS
from ..services import customer_service, invoice_service
from ..validation import ValidationError

customers_bp = Blueprint("customers", __name__, url_prefix="/api")


@customers_bp.post("/addresses")
@require_auth
@require_permission(MANAGE_CUSTOMERS)
def create_address_route():
    payload = request.get_json(silent=True) or {}
    try:
        return customer_service.create_address(payload=payload), 201
    except ValidationError as e:
        return {"error": str(e)}, 400


@customers_bp.get("/addresses/<int:address_id>")
@require_auth
@require_permission(MANAGE_CUSTOMERS)
def get_address_route(address_id: int):
    address = customer_service.get_address(address_id)
    if address is None:
        return {"error": "Address not found"}, 404
    return address


@customers_bp.delete("/addresses/<int:address_id>")
@require_auth
@require_permission(MANAGE_CUSTOMERS)
def delete_address_route(address_id: int):
    try:
        deleted = customer_service.delete_address(address_id=address_id)
    except ReferentialIntegrityError as e:
        return {"error": str(e)}, 409
    if not deleted:
        return {"error": "Address not found"}, 404
    return {"deleted": True, "id": address_id}


@customers_bp.post("/customers")
@require_auth
@require_permission(MANAGE_CUSTOMERS)
def create_customer_route():
    payload = request.get_json(silent=True) or {}
    try:
        return customer_service.create_customer(payload=payload), 201
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ReferentialIntegrityError as e:
        return {"error": str(e)}, 409


@customers_bp.get("/customers/<int:customer_id>")
@require_auth
@require_permission(MANAGE_CUSTOMERS)
def get_customer_route(customer_id: int):
    customer = customer_service.get_customer(customer_id)
    if customer is None:
        return {"error": "Customer not found"}, 404
    return customer


@customers_bp.post("/invoices")
@require_auth
@require_permission(MANAGE_CUSTOMERS)
def create_invoice_route():
    payload = request.get_json(silent=True) or {}
    try:
        return invoice_service.create_invoice(payload=payload), 201
    except ValidationError as e:
        return {"error": str(e)}, 400
    except ReferentialIntegrityError as e:
        return {"error": str(e)}, 409


@customers_bp.get("/invoices")
@require_auth
@require_permission(MANAGE_CUSTOMERS)
def list_invoices_route():
    customer_id = request.args.get("customer_id", type=int)
    items = invoice_service.list_invoices(customer_id=customer_id)
    return {"items": items, "count": len(items)}


@customers_bp.get("/invoices/<int:invoice_id>")
@require_auth
@require_permission(MANAGE_CUSTOMERS)
def get_invoice_route(invoice_id: int):
    invoice = invoice_service.get_invoice(invoice_id)
    if invoice is None:
        return {"error": "Invoice not found"}, 404
    return invoice
