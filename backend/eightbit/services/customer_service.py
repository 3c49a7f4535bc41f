# Overview: Service-layer operations for customers and their addresses.

from __future__ import annotations

from ..errors import ReferentialIntegrityError
from ..extensions import db
from ..models import Customer, CustomerAddress
from ..validation import (
    ModelValidationPolicy,
    enforce_rules_address,
    enforce_rules_customer,
    validate_payload,
)
from .concurrency import atomic

ADDRESS_POLICY = ModelValidationPolicy(
    writable_fields={"street_address", "city", "state", "zip_code"},
    required_on_create={"street_address", "city", "state", "zip_code"},
)

CUSTOMER_POLICY = ModelValidationPolicy(
    writable_fields={"first_name", "last_name", "address_id", "phone_number"},
    required_on_create={"first_name", "last_name", "address_id", "phone_number"},
)


def create_address(*, payload: dict) -> dict:
    patch = validate_payload(model=CustomerAddress, payload=payload, policy=ADDRESS_POLICY, partial=False)
    enforce_rules_address(patch)

    with atomic() as session:
        address = CustomerAddress(**patch)
        session.add(address)
        session.flush()
        result = address.to_dict()
    return result


def get_address(address_id: int) -> dict | None:
    address = db.session.get(CustomerAddress, address_id)
    return address.to_dict() if address else None


def delete_address(*, address_id: int) -> bool:
    """
    Delete an address nobody references.

    Returns:
        True if deleted, False if not found

    Raises:
        ReferentialIntegrityError: a customer still points at the address
    """
    with atomic() as session:
        address = session.get(CustomerAddress, address_id)
        if address is None:
            return False

        in_use = session.query(Customer.id).filter(Customer.address_id == address_id).first()
        if in_use is not None:
            raise ReferentialIntegrityError(
                f"Address {address_id} is still referenced by {Customer.__tablename__}"
            )
        session.delete(address)
    return True


def create_customer(*, payload: dict) -> dict:
    """
    Raises:
        ValidationError: bad input
        ReferentialIntegrityError: address_id does not exist
    """
    patch = validate_payload(model=Customer, payload=payload, policy=CUSTOMER_POLICY, partial=False)
    enforce_rules_customer(patch)

    with atomic() as session:
        if session.get(CustomerAddress, patch["address_id"]) is None:
            raise ReferentialIntegrityError(f"Address {patch['address_id']} does not exist")
        customer = Customer(**patch)
        session.add(customer)
        session.flush()
        result = customer.to_dict()
    return result


def get_customer(customer_id: int) -> dict | None:
    customer = db.session.get(Customer, customer_id)
    if not customer:
        return None
    data = customer.to_dict()
    data["address"] = customer.address.to_dict() if customer.address else None
    return data
