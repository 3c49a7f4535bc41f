"""
Pytest fixtures for the 8bit store backend tests.

Provides an in-memory database, per-test table cleanup, a test client, and
bearer-token helpers for the role fixtures.
"""

import pytest
from eightbit import create_app
from eightbit.extensions import db
from eightbit.services import catalog_service, customer_service, staff_service


MANAGER_TOKEN = "manager-token"
ADMIN_TOKEN = "admin-token"
CLERK_TOKEN = "clerk-token"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'DEFAULT_PRINCIPAL': 'tester@localhost',
        'ACCESS_TOKENS': {
            MANAGER_TOKEN: {"principal": "game_user@localhost", "roles": ["game_manager"]},
            ADMIN_TOKEN: {"principal": "owner@localhost", "roles": ["store_admin"]},
            CLERK_TOKEN: {"principal": "clerk@localhost", "roles": []},
        },
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema; Core statements on the connection
        # sidestep the audited-table guard
        connection = db.session.connection()
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            connection.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def chrono_trigger(db_session):
    """Create a catalog game through the gateway; returns its id."""
    return catalog_service.create_game_item(
        name="Chrono Trigger",
        platform="SNES",
        genre="RPG",
        release_year="1995",
        units_sold=0,
        description="Time-travel role-playing game",
    )


@pytest.fixture(scope='function')
def address(db_session):
    return customer_service.create_address(payload={
        "street_address": "123 Main St",
        "city": "New York",
        "state": "NY",
        "zip_code": "10001",
    })


@pytest.fixture(scope='function')
def customer(db_session, address):
    return customer_service.create_customer(payload={
        "first_name": "John",
        "last_name": "Doe",
        "address_id": address["id"],
        "phone_number": "12345678901",
    })


@pytest.fixture(scope='function')
def employee(db_session):
    return staff_service.create_employee(payload={
        "first_name": "Bob",
        "last_name": "Johnson",
        "dob": "1990-05-15",
    })


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}
