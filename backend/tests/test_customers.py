# Overview: Pytest coverage for customer CRUD and tenant scoping.

import pytest

from cloudbook.models import Customer

from conftest import count_rows


def _customer(user_id, **overrides):
    payload = {
        "user_id": user_id,
        "customer_id": "C-001",
        "name": "Bob's Deli",
        "delivery": "12 Harbour Rd",
        "email": "bob@deli.test",
        "contact": "555-0199",
    }
    payload.update(overrides)
    return payload


class TestCreateCustomer:

    def test_create_returns_id(self, client, admin_a):
        response = client.post('/api/customers', json=_customer(admin_a.id, status="active"))

        assert response.status_code == 201
        body = response.get_json()
        assert body["message"] == "Customer created successfully"
        assert count_rows(Customer, id=body["customerId"], status="active") == 1

    def test_status_is_optional(self, client, admin_a):
        response = client.post('/api/customers', json=_customer(admin_a.id))
        assert response.status_code == 201

    @pytest.mark.parametrize("field", ["user_id", "customer_id", "name", "delivery", "email", "contact"])
    def test_missing_required_field(self, client, admin_a, field):
        payload = _customer(admin_a.id)
        payload[field] = None

        response = client.post('/api/customers', json=payload)

        assert response.status_code == 400
        assert count_rows(Customer) == 0

    def test_blank_string_counts_as_missing(self, client, admin_a):
        response = client.post('/api/customers', json=_customer(admin_a.id, name="   "))
        assert response.status_code == 400
        assert count_rows(Customer) == 0

    def test_unknown_tenant_is_404(self, client, db_session):
        response = client.post('/api/customers', json=_customer(777))
        assert response.status_code == 404
        assert count_rows(Customer) == 0

    def test_non_object_body(self, client, admin_a):
        response = client.post('/api/customers', json=[_customer(admin_a.id)])
        assert response.status_code == 400


class TestListCustomers:

    def test_tenant_scoped(self, client, admin_a, admin_b):
        client.post('/api/customers', json=_customer(admin_a.id, name="A1"))
        client.post('/api/customers', json=_customer(admin_a.id, name="A2"))
        client.post('/api/customers', json=_customer(admin_b.id, name="B1"))

        response = client.get(f'/api/customers?user_id={admin_a.id}')

        assert response.status_code == 200
        assert [c["name"] for c in response.get_json()["data"]] == ["A1", "A2"]

    def test_unscoped_returns_everything(self, client, admin_a, admin_b):
        client.post('/api/customers', json=_customer(admin_a.id))
        client.post('/api/customers', json=_customer(admin_b.id))

        response = client.get('/api/customers')

        assert response.status_code == 200
        assert len(response.get_json()["data"]) == 2

    def test_unscoped_empty_is_ok(self, client, db_session):
        response = client.get('/api/customers')
        assert response.status_code == 200
        assert response.get_json()["data"] == []

    def test_tenant_without_rows_is_404(self, client, admin_a):
        response = client.get(f'/api/customers?user_id={admin_a.id}')
        assert response.status_code == 404
        assert response.get_json()["message"] == "Customer not found"


class TestUpdateDeleteCustomer:

    def test_update_replaces_editable_fields(self, client, admin_a):
        cid = client.post('/api/customers', json=_customer(admin_a.id, status="active")).get_json()["customerId"]

        response = client.put('/api/customers', json={
            "id": cid,
            "customer_id": "C-002",
            "name": "Bob's Bistro",
            "delivery": "14 Harbour Rd",
            "email": "bob@bistro.test",
            "contact": "555-0200",
        })

        assert response.status_code == 200
        row = client.get(f'/api/customers?user_id={admin_a.id}').get_json()["data"][0]
        assert row["name"] == "Bob's Bistro"
        assert row["customer_id"] == "C-002"
        # full replace: an omitted optional field is cleared
        assert row["status"] is None

    def test_update_requires_id(self, client, admin_a):
        response = client.put('/api/customers', json=_customer(admin_a.id))
        assert response.status_code == 400

    def test_update_unknown_id_is_404(self, client, admin_a):
        client.post('/api/customers', json=_customer(admin_a.id))

        response = client.put('/api/customers', json=dict(_customer(admin_a.id, name="Changed"), id=9999))

        assert response.status_code == 404
        assert count_rows(Customer, name="Changed") == 0
        assert count_rows(Customer, name="Bob's Deli") == 1

    def test_delete(self, client, admin_a):
        cid = client.post('/api/customers', json=_customer(admin_a.id)).get_json()["customerId"]

        response = client.delete('/api/customers', json={"id": cid})

        assert response.status_code == 200
        assert response.get_json()["message"] == "Customer deleted successfully"
        assert count_rows(Customer) == 0

    def test_delete_requires_id(self, client, db_session):
        assert client.delete('/api/customers', json={}).status_code == 400

    def test_delete_unknown_id_is_404(self, client, admin_a):
        client.post('/api/customers', json=_customer(admin_a.id))

        response = client.delete('/api/customers', json={"id": 9999})

        assert response.status_code == 404
        assert count_rows(Customer) == 1
