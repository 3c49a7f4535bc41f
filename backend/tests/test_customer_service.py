"""
Address, customer and invoice tests, including referential integrity.
"""

from decimal import Decimal

import pytest

from eightbit.errors import ReferentialIntegrityError
from eightbit.models import Customer, CustomerAddress, Invoice
from eightbit.services import customer_service, invoice_service
from eightbit.services.concurrency import atomic
from eightbit.validation import ValidationError


class TestAddresses:

    def test_state_is_normalized_to_upper_case(self, db_session):
        address = customer_service.create_address(payload={
            "street_address": "456 Oak Ave", "city": "Los Angeles", "state": "ca", "zip_code": "90001",
        })
        assert address["state"] == "CA"
        assert customer_service.get_address(address["id"]) == address

    @pytest.mark.parametrize("state", ["New York", "N", "N1"])
    def test_state_must_be_two_letters(self, db_session, state):
        with pytest.raises(ValidationError):
            customer_service.create_address(payload={
                "street_address": "1 Elm", "city": "Albany", "state": state, "zip_code": "12207",
            })

    def test_zip_code_length_is_bounded(self, db_session):
        with pytest.raises(ValidationError, match="max length"):
            customer_service.create_address(payload={
                "street_address": "1 Elm", "city": "Albany", "state": "NY", "zip_code": "12207-0000-1",
            })

    def test_unreferenced_address_can_be_deleted(self, db_session, address):
        assert customer_service.delete_address(address_id=address["id"]) is True
        assert customer_service.get_address(address["id"]) is None
        assert customer_service.delete_address(address_id=address["id"]) is False

    def test_referenced_address_cannot_be_deleted(self, db_session, address, customer):
        with pytest.raises(ReferentialIntegrityError):
            customer_service.delete_address(address_id=address["id"])

        assert customer_service.get_address(address["id"]) is not None
        assert customer_service.get_customer(customer["id"]) is not None


class TestCustomers:

    def test_create_and_get(self, db_session, address, customer):
        fetched = customer_service.get_customer(customer["id"])
        assert fetched["first_name"] == "John"
        assert fetched["address"] == address

    def test_unknown_address_is_rejected(self, db_session):
        with pytest.raises(ReferentialIntegrityError):
            customer_service.create_customer(payload={
                "first_name": "Jane", "last_name": "Smith", "address_id": 999, "phone_number": "98765432101",
            })
        assert db_session.query(Customer).count() == 0

    def test_address_is_required(self, db_session):
        with pytest.raises(ValidationError, match="address_id"):
            customer_service.create_customer(payload={
                "first_name": "Jane", "last_name": "Smith", "phone_number": "98765432101",
            })

    @pytest.mark.parametrize("phone", ["123456789012", "555-CALL-NOW"])
    def test_phone_number_rules(self, db_session, address, phone):
        with pytest.raises(ValidationError):
            customer_service.create_customer(payload={
                "first_name": "Jane", "last_name": "Smith", "address_id": address["id"], "phone_number": phone,
            })

    def test_phone_separators_are_stripped(self, db_session, address):
        customer = customer_service.create_customer(payload={
            "first_name": "Jane", "last_name": "Smith", "address_id": address["id"],
            "phone_number": "555-1234567",
        })
        assert customer["phone_number"] == "5551234567"


class TestEngineForeignKeys:
    """The engine enforces foreign keys even when a service check is skipped."""

    def test_dangling_customer_insert_is_referential_error(self, db_session):
        with pytest.raises(ReferentialIntegrityError):
            with atomic() as session:
                session.add(Customer(
                    first_name="Ghost", last_name="Row", address_id=12345, phone_number="1",
                ))
        assert db_session.query(Customer).count() == 0

    def test_parent_delete_is_referential_error(self, db_session, address, customer):
        with pytest.raises(ReferentialIntegrityError):
            with atomic() as session:
                session.delete(session.get(CustomerAddress, address["id"]))
        assert db_session.query(CustomerAddress).count() == 1


class TestInvoices:

    def test_create_defaults_created_at(self, db_session, customer):
        invoice = invoice_service.create_invoice(payload={
            "customer_id": customer["id"], "item_amount": 2, "subtotal": "119.98", "tax": 9.6,
        })

        assert invoice["subtotal"] == "119.98"
        assert invoice["tax"] == "9.60"
        assert invoice["created_at"].endswith("Z")
        assert invoice_service.get_invoice(invoice["id"]) == invoice

    def test_unknown_customer_is_rejected(self, db_session):
        with pytest.raises(ReferentialIntegrityError):
            invoice_service.create_invoice(payload={
                "customer_id": 77, "item_amount": 1, "subtotal": "49.99", "tax": "4.00",
            })
        assert db_session.query(Invoice).count() == 0

    @pytest.mark.parametrize("field,value", [
        ("item_amount", -1),
        ("subtotal", "-0.01"),
        ("tax", "1.234"),
    ])
    def test_invalid_amounts(self, db_session, customer, field, value):
        payload = {"customer_id": customer["id"], "item_amount": 1, "subtotal": "10.00", "tax": "0.80"}
        payload[field] = value
        with pytest.raises(ValidationError):
            invoice_service.create_invoice(payload=payload)

    def test_list_by_customer(self, db_session, address, customer):
        other = customer_service.create_customer(payload={
            "first_name": "Jane", "last_name": "Smith", "address_id": address["id"], "phone_number": "98765432101",
        })
        for cid, subtotal in ((customer["id"], "119.98"), (other["id"], "49.99"), (customer["id"], "179.97")):
            invoice_service.create_invoice(payload={
                "customer_id": cid, "item_amount": 1, "subtotal": subtotal, "tax": "1.00",
            })

        johns = invoice_service.list_invoices(customer_id=customer["id"])
        assert [Decimal(i["subtotal"]) for i in johns] == [Decimal("119.98"), Decimal("179.97")]
        assert len(invoice_service.list_invoices()) == 3
