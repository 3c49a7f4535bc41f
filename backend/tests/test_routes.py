"""
HTTP surface tests.

Verifies:
- Unauthenticated requests return 401
- game_manager reaches exactly the four catalog operations (403 elsewhere)
- Catalog CRUD status codes, including 412 for a stale expected state
- Audit entries carry the authenticated principal
"""

import pytest

from conftest import ADMIN_TOKEN, CLERK_TOKEN, MANAGER_TOKEN, auth_headers


GAME = {
    "name": "Chrono Trigger",
    "platform": "SNES",
    "genre": "RPG",
    "release_year": "1995",
    "units_sold": 0,
    "description": "Time-travel role-playing game",
}


def _create(client, token=MANAGER_TOKEN, **overrides):
    return client.post("/api/games", json={**GAME, **overrides}, headers=auth_headers(token))


class TestAccessControl:

    @pytest.mark.parametrize("method,path", [
        ("GET", "/api/games"),
        ("POST", "/api/games"),
        ("GET", "/api/games/1"),
        ("PUT", "/api/games/1"),
        ("DELETE", "/api/games/1"),
        ("GET", "/api/reports/vw_game_sales_report"),
        ("GET", "/api/audit-log"),
        ("POST", "/api/customers"),
        ("POST", "/api/employees"),
        ("GET", "/api/inventory/1"),
    ])
    def test_requires_token(self, client, db_session, method, path):
        assert client.open(path, method=method).status_code == 401
        assert client.open(path, method=method, headers=auth_headers("wrong")).status_code == 401

    @pytest.mark.parametrize("method,path", [
        ("GET", "/api/reports/vw_game_sales_report"),
        ("GET", "/api/audit-log"),
        ("POST", "/api/addresses"),
        ("POST", "/api/employees"),
        ("POST", "/api/inventory/1"),
    ])
    def test_game_manager_limited_to_catalog(self, client, db_session, method, path):
        response = client.open(path, method=method, json={}, headers=auth_headers(MANAGER_TOKEN))
        assert response.status_code == 403

    def test_role_less_token_cannot_touch_catalog(self, client, db_session):
        assert client.get("/api/games", headers=auth_headers(CLERK_TOKEN)).status_code == 403


class TestCatalogRoutes:

    def test_create_and_read(self, client, db_session):
        created = _create(client)
        assert created.status_code == 201
        game_id = created.json["id"]

        response = client.get(f"/api/games/{game_id}", headers=auth_headers(MANAGER_TOKEN))
        assert response.status_code == 200
        assert response.json["game_item"]["name"] == "Chrono Trigger"
        assert response.json["game_item"]["release_year"] == "1995"

    def test_read_missing_is_empty(self, client, db_session):
        response = client.get("/api/games/987", headers=auth_headers(MANAGER_TOKEN))
        assert response.status_code == 200
        assert response.json["game_item"] is None

    def test_create_validation(self, client, db_session):
        response = _create(client, release_year="nineteen")
        assert response.status_code == 400

        response = client.post("/api/games", json={"platform": "SNES"}, headers=auth_headers(MANAGER_TOKEN))
        assert response.status_code == 400
        assert "Missing required fields" in response.json["error"]

    def test_update_then_stale_update(self, client, db_session):
        game_id = _create(client).json["id"]
        body = {
            "expected": {"name": "Chrono Trigger", "platform": "SNES", "units_sold": 0},
            "new": {"name": "Chrono Trigger", "platform": "SNES", "units_sold": 1},
        }

        first = client.put(f"/api/games/{game_id}", json=body, headers=auth_headers(MANAGER_TOKEN))
        assert first.status_code == 200
        assert first.json["game_item"]["units_sold"] == 1

        second = client.put(f"/api/games/{game_id}", json=body, headers=auth_headers(MANAGER_TOKEN))
        assert second.status_code == 412

    def test_update_requires_expected_state(self, client, db_session):
        game_id = _create(client).json["id"]
        response = client.put(
            f"/api/games/{game_id}",
            json={"new": {"name": "A", "platform": "B", "units_sold": 1}},
            headers=auth_headers(MANAGER_TOKEN),
        )
        assert response.status_code == 400

    def test_delete(self, client, db_session):
        game_id = _create(client).json["id"]

        stale = client.delete(
            f"/api/games/{game_id}",
            json={"expected": {"name": "Chrono Trigger", "platform": "PS1", "units_sold": 0}},
            headers=auth_headers(MANAGER_TOKEN),
        )
        assert stale.status_code == 412

        ok = client.delete(
            f"/api/games/{game_id}",
            json={"expected": {"name": "Chrono Trigger", "platform": "SNES", "units_sold": 0}},
            headers=auth_headers(MANAGER_TOKEN),
        )
        assert ok.status_code == 200
        assert client.get(f"/api/games/{game_id}", headers=auth_headers(MANAGER_TOKEN)).json["game_item"] is None

    def test_delete_stocked_game_conflicts(self, client, db_session):
        game_id = _create(client).json["id"]
        stocked = client.post(f"/api/inventory/{game_id}", json={"price": "19.99"}, headers=auth_headers(ADMIN_TOKEN))
        assert stocked.status_code == 201

        response = client.delete(
            f"/api/games/{game_id}",
            json={"expected": {"name": "Chrono Trigger", "platform": "SNES", "units_sold": 0}},
            headers=auth_headers(MANAGER_TOKEN),
        )
        assert response.status_code == 409

    def test_audit_log_records_principal(self, client, db_session):
        game_id = _create(client).json["id"]

        response = client.get(f"/api/audit-log?record_id={game_id}", headers=auth_headers(ADMIN_TOKEN))
        assert response.status_code == 200
        assert [(e["action_type"], e["changed_by"]) for e in response.json["items"]] == [
            ("INSERT", "game_user@localhost"),
        ]

    def test_audit_log_limit_returns_latest_entry(self, client, db_session):
        _create(client)
        latest_id = _create(client).json["id"]

        response = client.get("/api/audit-log?limit=1", headers=auth_headers(ADMIN_TOKEN))
        assert response.status_code == 200
        assert [e["record_id"] for e in response.json["items"]] == [latest_id]


class TestStoreRoutes:

    def test_report_keeps_column_order(self, client, db_session):
        game_id = _create(client).json["id"]
        client.post(
            f"/api/inventory/{game_id}",
            json={"price": "59.99", "units_on_hand": 10, "units_sold": 5},
            headers=auth_headers(ADMIN_TOKEN),
        )

        response = client.get("/api/reports/vw_game_sales_report", headers=auth_headers(ADMIN_TOKEN))
        assert response.status_code == 200
        row = response.json["rows"][0]
        assert list(row.keys()) == response.json["columns"]
        assert row["Total_Revenue"] == "299.95"

    def test_unknown_report(self, client, db_session):
        response = client.get("/api/reports/vw_missing", headers=auth_headers(ADMIN_TOKEN))
        assert response.status_code == 404

    def test_address_delete_conflict(self, client, db_session):
        headers = auth_headers(ADMIN_TOKEN)
        address = client.post("/api/addresses", json={
            "street_address": "123 Main St", "city": "New York", "state": "NY", "zip_code": "10001",
        }, headers=headers).json
        customer = client.post("/api/customers", json={
            "first_name": "John", "last_name": "Doe", "address_id": address["id"], "phone_number": "12345678901",
        }, headers=headers)
        assert customer.status_code == 201

        response = client.delete(f"/api/addresses/{address['id']}", headers=headers)
        assert response.status_code == 409
        assert client.get(f"/api/addresses/{address['id']}", headers=headers).status_code == 200

    def test_pay_rate_flow(self, client, db_session):
        headers = auth_headers(ADMIN_TOKEN)
        employee = client.post("/api/employees", json={
            "first_name": "Alice", "last_name": "Williams", "dob": "1988-03-22",
        }, headers=headers).json
        path = f"/api/employees/{employee['id']}/pay-rates"

        assert client.post(path, json={"start_date": "2023-01-15", "wage": "18.75", "position": "Manager"},
                           headers=headers).status_code == 201
        assert client.post(path, json={"start_date": "2024-01-15", "wage": "19.75", "position": "Manager"},
                           headers=headers).status_code == 409
        closed = client.post(f"{path}/2023-01-15/close", json={"end_date": "2024-01-14"}, headers=headers)
        assert closed.status_code == 200
        assert closed.json["end_date"] == "2024-01-14"

    def test_invoice_flow(self, client, db_session):
        headers = auth_headers(ADMIN_TOKEN)
        missing = client.post("/api/invoices", json={
            "customer_id": 5, "item_amount": 1, "subtotal": "49.99", "tax": "4.00",
        }, headers=headers)
        assert missing.status_code == 409
