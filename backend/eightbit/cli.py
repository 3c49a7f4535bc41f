# Overview: Flask CLI command group for schema bootstrap, sample data, and inspection.

# backend/eightbit/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to eightbit (PowerShell: $env:FLASK_APP="eightbit").
# - Use: python -m flask store <command> [options]
#
# - python -m flask store reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask store seed
#   Load the sample addresses, games, customers, inventory, employees and invoices.
# - python -m flask store audit-log --limit 20
#   Print the most recent audit entries.
# - python -m flask store report vw_game_sales_report
#   Print a report view.

import json
from datetime import date
from decimal import Decimal

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import GameItem
from .services import (
    audit_service,
    catalog_service,
    customer_service,
    inventory_service,
    invoice_service,
    reporting_service,
    staff_service,
)

SAMPLE_ADDRESSES = [
    {"street_address": "123 Main St", "city": "New York", "state": "NY", "zip_code": "10001"},
    {"street_address": "456 Oak Ave", "city": "Los Angeles", "state": "CA", "zip_code": "90001"},
]

SAMPLE_GAMES = [
    {
        "name": "Super Mario Odyssey",
        "platform": "Nintendo Switch",
        "genre": "Platform",
        "release_year": "2017",
        "units_sold": 0,
        "description": "A 3D platform adventure game",
    },
    {
        "name": "The Legend of Zelda",
        "platform": "Nintendo Switch",
        "genre": "Action-Adventure",
        "release_year": "2022",
        "units_sold": 0,
        "description": "An epic adventure game",
    },
]

SAMPLE_CUSTOMERS = [
    ("John", "Doe", "12345678901"),
    ("Jane", "Smith", "98765432101"),
]

# (units_on_hand, units_sold, price) per sample game
SAMPLE_STOCK = [
    (10, 5, Decimal("59.99")),
    (15, 3, Decimal("49.99")),
]

SAMPLE_EMPLOYEES = [
    ("Bob", "Johnson", date(1990, 5, 15), date(2023, 1, 1), Decimal("15.50"), "Sales Associate"),
    ("Alice", "Williams", date(1988, 3, 22), date(2023, 1, 15), Decimal("18.75"), "Manager"),
]

# (customer index, item_amount, subtotal, tax)
SAMPLE_INVOICES = [
    (0, 2, Decimal("119.98"), Decimal("9.60")),
    (1, 1, Decimal("49.99"), Decimal("4.00")),
    (0, 3, Decimal("179.97"), Decimal("14.40")),
]


@click.group('store')
def store_group():
    """Game store schema and data commands."""


@store_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask store seed' to load sample data.")


def seed_sample_data() -> dict:
    """
    Load the sample data set. Games go through the catalog gateway so the
    audit log records their inserts.
    """
    address_ids = [customer_service.create_address(payload=a)["id"] for a in SAMPLE_ADDRESSES]

    game_ids = [catalog_service.create_game_item(**g) for g in SAMPLE_GAMES]

    customer_ids = []
    for (first, last, phone), address_id in zip(SAMPLE_CUSTOMERS, address_ids):
        customer = customer_service.create_customer(payload={
            "first_name": first,
            "last_name": last,
            "address_id": address_id,
            "phone_number": phone,
        })
        customer_ids.append(customer["id"])

    for game_id, (on_hand, sold, price) in zip(game_ids, SAMPLE_STOCK):
        inventory_service.stock_game(game_id=game_id, units_on_hand=on_hand, units_sold=sold, price=price)

    employee_ids = []
    for first, last, dob, start, wage, position in SAMPLE_EMPLOYEES:
        employee = staff_service.create_employee(payload={"first_name": first, "last_name": last, "dob": dob})
        staff_service.add_pay_rate(payload={
            "employee_id": employee["id"],
            "start_date": start,
            "end_date": None,
            "wage": wage,
            "position": position,
        })
        employee_ids.append(employee["id"])

    invoice_ids = []
    for customer_index, item_amount, subtotal, tax in SAMPLE_INVOICES:
        invoice = invoice_service.create_invoice(payload={
            "customer_id": customer_ids[customer_index],
            "item_amount": item_amount,
            "subtotal": subtotal,
            "tax": tax,
        })
        invoice_ids.append(invoice["id"])

    return {
        "addresses": address_ids,
        "games": game_ids,
        "customers": customer_ids,
        "employees": employee_ids,
        "invoices": invoice_ids,
    }


@store_group.command('seed')
@with_appcontext
def seed():
    """Load the sample data set (refuses to run on a non-empty catalog)."""
    if db.session.query(GameItem.id).first() is not None:
        raise click.ClickException("Catalog is not empty; run 'store reset-db --yes' first.")

    created = seed_sample_data()
    for entity, ids in created.items():
        click.echo(f"PASS {entity}: {len(ids)} created")


@store_group.command('audit-log')
@click.option('--limit', default=20, show_default=True, help='Number of entries')
@click.option('--record-id', type=int, default=None, help='Filter by record id')
@with_appcontext
def audit_log(limit, record_id):
    """Print the most recent audit entries, oldest first."""
    entries = audit_service.list_audit_entries(record_id=record_id, limit=limit)
    if not entries:
        click.echo("No audit entries.")
        return
    for e in entries:
        click.echo(
            f"{e['id']:>5}  {e['changed_at']}  {e['table_name']:<12} {e['action_type']:<6} "
            f"record={e['record_id']}  by={e['changed_by']}"
        )


@store_group.command('report')
@click.argument('view_name', type=click.Choice(sorted(reporting_service.REPORT_VIEWS)))
@with_appcontext
def report(view_name):
    """Print a report view as JSON lines."""
    result = reporting_service.run_view(view_name)
    for row in result["rows"]:
        click.echo(json.dumps(row))
    click.echo(f"({result['count']} rows)")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(store_group)
