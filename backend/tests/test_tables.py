"""
Tests for table management and QR lookup.
"""

import pytest

from shared.config.settings import settings


class TestQrLookup:
    """Test GET /api/tables/qr/{qrCode} (public)."""

    def test_resolves_table_branch_and_restaurant(self, client, table, branch):
        response = client.get(f"/api/tables/qr/{table.qr_code}")
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == table.id
        assert data["number"] == 1
        assert data["branch"]["id"] == branch.id
        assert data["branch"]["restaurant"]["name"] == "Test Restaurant"
        assert data["qrUrl"] == f"{settings.public_base_url.rstrip('/')}/table/{table.qr_code}"

    def test_unknown_code(self, client):
        response = client.get("/api/tables/qr/qr-table-0-0")
        assert response.status_code == 404
        assert response.json() == {"error": "Table not found"}

    def test_inactive_table_not_found(self, client, db_session, table):
        table.is_active = False
        db_session.commit()
        response = client.get(f"/api/tables/qr/{table.qr_code}")
        assert response.status_code == 404


class TestTables:
    """Test /api/tables."""

    def test_list_ordered_by_number(self, client, branch, table, manager, auth_headers):
        client.post(
            "/api/tables",
            json={"branchId": branch.id, "number": 3},
            headers=auth_headers(manager),
        )
        client.post(
            "/api/tables",
            json={"branchId": branch.id, "number": 2},
            headers=auth_headers(manager),
        )
        response = client.get(
            "/api/tables", params={"branchId": branch.id}, headers=auth_headers(manager)
        )
        assert response.status_code == 200
        assert [t["number"] for t in response.json()] == [1, 2, 3]

    def test_branch_staff_default_to_own_branch(self, client, table, waiter, auth_headers):
        response = client.get("/api/tables", headers=auth_headers(waiter))
        assert response.status_code == 200
        assert [t["id"] for t in response.json()] == [table.id]

    def test_list_unknown_branch_denied_for_scoped_staff(self, client, owner, auth_headers):
        response = client.get("/api/tables", params={"branchId": 999}, headers=auth_headers(owner))
        assert response.status_code == 403

    def test_list_foreign_branch_denied(self, client, other_branch, owner, auth_headers):
        response = client.get(
            "/api/tables", params={"branchId": other_branch.id}, headers=auth_headers(owner)
        )
        assert response.status_code == 403

    def test_create_assigns_qr_code(self, client, branch, branch_manager, auth_headers):
        response = client.post(
            "/api/tables",
            json={"branchId": branch.id, "number": 7, "capacity": 6},
            headers=auth_headers(branch_manager),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["qrCode"] == f"qr-table-{branch.id}-7"
        assert data["capacity"] == 6
        assert data["qrUrl"].endswith(f"/table/qr-table-{branch.id}-7")

    def test_default_capacity(self, client, branch, owner, auth_headers):
        response = client.post(
            "/api/tables", json={"branchId": branch.id, "number": 2}, headers=auth_headers(owner)
        )
        assert response.json()["capacity"] == 4

    def test_duplicate_number(self, client, branch, table, owner, auth_headers):
        response = client.post(
            "/api/tables", json={"branchId": branch.id, "number": 1}, headers=auth_headers(owner)
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Table number already exists in this branch"}

    def test_same_number_in_other_branch(self, client, second_branch, table, owner, auth_headers):
        response = client.post(
            "/api/tables",
            json={"branchId": second_branch.id, "number": 1},
            headers=auth_headers(owner),
        )
        assert response.status_code == 201

    def test_waiter_cannot_create(self, client, branch, waiter, auth_headers):
        response = client.post(
            "/api/tables", json={"branchId": branch.id, "number": 5}, headers=auth_headers(waiter)
        )
        assert response.status_code == 403

    def test_branch_manager_limited_to_own_branch(
        self, client, second_branch, branch_manager, auth_headers
    ):
        response = client.post(
            "/api/tables",
            json={"branchId": second_branch.id, "number": 5},
            headers=auth_headers(branch_manager),
        )
        assert response.status_code == 403

    def test_unknown_branch(self, client, super_admin, auth_headers):
        response = client.post(
            "/api/tables", json={"branchId": 999, "number": 1}, headers=auth_headers(super_admin)
        )
        assert response.status_code == 404

    def test_capacity_out_of_range(self, client, branch, owner, auth_headers):
        response = client.post(
            "/api/tables",
            json={"branchId": branch.id, "number": 4, "capacity": 0},
            headers=auth_headers(owner),
        )
        assert response.status_code == 400


class TestBranchDetail:
    """Test GET /api/branches/{id}."""

    def test_branch_with_tables(self, client, branch, table, chef, waiter, auth_headers):
        response = client.get(f"/api/branches/{branch.id}", headers=auth_headers(chef))
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Test Branch"
        assert [t["id"] for t in data["tables"]] == [table.id]
        assert data["staffCount"] == 2
        assert data["orderCount"] == 0
        assert data["restaurant"]["name"] == "Test Restaurant"

    def test_foreign_branch(self, client, other_branch, manager, auth_headers):
        response = client.get(f"/api/branches/{other_branch.id}", headers=auth_headers(manager))
        assert response.status_code == 403

    def test_unknown_branch(self, client, super_admin, auth_headers):
        response = client.get("/api/branches/999", headers=auth_headers(super_admin))
        assert response.status_code == 404

    @pytest.mark.parametrize("user", ["manager", "waiter"])
    def test_unknown_branch_hidden_from_scoped_staff(self, client, request, user, auth_headers):
        staff_member = request.getfixturevalue(user)
        response = client.get("/api/branches/999", headers=auth_headers(staff_member))
        assert response.status_code == 403
        assert response.json() == {"error": "Access denied"}
