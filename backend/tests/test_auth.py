# Overview: Pytest coverage for sign up, admin/employee login and token validation.

import jwt
import pytest

from cloudbook.models import Admin, Customer, Employee
from cloudbook.services import auth_service, token_service

from conftest import ADMIN_PASSWORD, auth_headers, count_rows, get_auth_token


SIGN_UP = {
    "name": "Grace",
    "last_name": "Hopper",
    "email": "grace@shop.test",
    "contact": "555-0101",
    "company": "Hopper Goods",
    "address": "7 Pier Rd",
    "role": "admin",
    "password": "s3cret!",
}


class TestSignUp:

    def test_sign_up_creates_admin(self, client, db_session):
        response = client.post('/api/auth/sign-up', json=SIGN_UP)

        assert response.status_code == 201
        body = response.get_json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"
        admin = db_session.get(Admin, body["userId"])
        assert admin.email == "grace@shop.test"
        # stored as a bcrypt hash, never plaintext
        assert admin.password != "s3cret!"
        assert admin.password.startswith("$2")

    def test_sign_up_missing_field_is_rejected(self, client, db_session):
        payload = dict(SIGN_UP, company="   ")
        response = client.post('/api/auth/sign-up', json=payload)

        assert response.status_code == 400
        assert "company" in response.get_json()["message"]
        assert count_rows(Admin) == 0

    def test_duplicate_email_conflicts_without_insert(self, client, db_session):
        assert client.post('/api/auth/sign-up', json=SIGN_UP).status_code == 201

        response = client.post('/api/auth/sign-up', json=dict(SIGN_UP, name="Other"))

        assert response.status_code == 409
        assert response.get_json()["message"] == "Email already exists"
        assert count_rows(Admin, email="grace@shop.test") == 1

    def test_lost_race_on_email_is_409(self, client, db_session, monkeypatch):
        assert client.post('/api/auth/sign-up', json=SIGN_UP).status_code == 201
        # the pre-insert check misses the row a concurrent sign-up just wrote
        monkeypatch.setattr(auth_service, "email_registered", lambda email: False)

        response = client.post('/api/auth/sign-up', json=dict(SIGN_UP, name="Racer"))

        assert response.status_code == 409
        assert response.get_json()["message"] == "Email already exists"
        assert count_rows(Admin, email="grace@shop.test") == 1

    def test_list_admins_hides_secrets(self, client, admin_a):
        response = client.get('/api/auth/sign-up')

        assert response.status_code == 200
        rows = response.get_json()["data"]
        assert [r["email"] for r in rows] == ["owner@acme.test"]
        assert "password" not in rows[0]
        assert "otp" not in rows[0]

    def test_delete_admin_removes_tenant_rows(self, client, admin_a, admin_b, db_session):
        admin_id = admin_a.id
        db_session.add(Customer(
            user_id=admin_id, customer_id="C-1", name="Bob", delivery="Depot", email="b@x.test", contact="1",
        ))
        db_session.add(Customer(
            user_id=admin_b.id, customer_id="C-1", name="Eve", delivery="Depot", email="e@x.test", contact="2",
        ))
        db_session.commit()

        response = client.delete('/api/auth/sign-up', json={"id": admin_id})

        assert response.status_code == 200
        assert count_rows(Admin, id=admin_id) == 0
        assert count_rows(Customer, user_id=admin_id) == 0
        assert count_rows(Customer) == 1

    def test_delete_admin_requires_id(self, client, db_session):
        assert client.delete('/api/auth/sign-up', json={}).status_code == 400

    def test_delete_unknown_admin_is_404(self, client, db_session):
        response = client.delete('/api/auth/sign-up', json={"id": 999})
        assert response.status_code == 404


class TestAdminLogin:

    def test_login_returns_token_and_profile(self, client, admin_a):
        response = client.post('/api/auth/login', json={
            "email": "owner@acme.test",
            "password": ADMIN_PASSWORD,
        })

        assert response.status_code == 200
        body = response.get_json()
        assert body["admin"]["email"] == "owner@acme.test"
        assert "password" not in body["admin"]
        claims = token_service.decode_token(body["token"])
        assert claims["id"] == admin_a.id
        assert claims["company"] == "Acme Wholesale"
        assert claims["exp"] - claims["iat"] == 3600

    def test_login_trims_email(self, client, admin_a):
        response = client.post('/api/auth/login', json={
            "email": "  owner@acme.test ",
            "password": ADMIN_PASSWORD,
        })
        assert response.status_code == 200

    @pytest.mark.parametrize("payload", [
        {"email": "owner@acme.test"},
        {"password": ADMIN_PASSWORD},
        {"email": "", "password": ""},
    ])
    def test_login_missing_credentials(self, client, admin_a, payload):
        assert client.post('/api/auth/login', json=payload).status_code == 400

    def test_login_wrong_password(self, client, admin_a):
        response = client.post('/api/auth/login', json={
            "email": "owner@acme.test",
            "password": "nope",
        })
        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid email or password"

    def test_login_unknown_email(self, client, db_session):
        response = client.post('/api/auth/login', json={
            "email": "ghost@acme.test",
            "password": ADMIN_PASSWORD,
        })
        assert response.status_code == 401
        assert response.get_json()["message"] == "Invalid email or password"


class TestEmployeeLogin:

    def _create_employee(self, client, admin_id, email="clerk@acme.test"):
        response = client.post('/api/employees', json={
            "user_id": admin_id,
            "employee_id": "E-1",
            "name": "Clerk",
            "email": email,
            "contact": "555",
            "department": "Sales",
            "role": "Cashier",
            "status": "active",
            "password": "clerkpass",
        })
        assert response.status_code == 201
        return response.get_json()["employeeId"]

    def test_employee_token_carries_tenant_profile(self, client, admin_a):
        self._create_employee(client, admin_a.id)

        response = client.post('/api/auth/employee-login', json={
            "email": "clerk@acme.test",
            "password": "clerkpass",
        })

        assert response.status_code == 200
        claims = token_service.decode_token(response.get_json()["token"])
        assert claims["id"] == admin_a.id
        assert claims["role"] == "Cashier"
        assert claims["status"] == "active"
        assert claims["company"] == "Acme Wholesale"
        assert claims["address"] == "1 Market St"

    def test_employee_wrong_password(self, client, admin_a):
        self._create_employee(client, admin_a.id)
        response = client.post('/api/auth/employee-login', json={
            "email": "clerk@acme.test",
            "password": "wrong",
        })
        assert response.status_code == 401

    def test_employee_login_requires_both_fields(self, client, db_session):
        response = client.post('/api/auth/employee-login', json={"email": "clerk@acme.test"})
        assert response.status_code == 400

    def test_employee_of_vanished_tenant_is_404(self, client, db_session):
        from cloudbook.services.auth_service import hash_password

        # Orphan row: the tenant was removed outside the ORM cascade.
        db_session.add(Employee(
            user_id=4242, employee_id="E-9", name="Lost", email="lost@acme.test", contact="0",
            department="Ops", role="Clerk", status="active", password=hash_password("pw"),
        ))
        db_session.commit()

        response = client.post('/api/auth/employee-login', json={
            "email": "lost@acme.test",
            "password": "pw",
        })
        assert response.status_code == 404
        assert response.get_json()["message"] == "Admin data not found"


class TestValidate:

    def test_validate_returns_claims(self, client, admin_a):
        token = get_auth_token(client, "owner@acme.test")

        response = client.get('/api/auth/validate', headers=auth_headers(token))

        assert response.status_code == 200
        data = response.get_json()["data"]
        assert data["email"] == "owner@acme.test"
        assert "exp" not in data

    def test_validate_without_token(self, client, db_session):
        assert client.get('/api/auth/validate').status_code == 401

    def test_validate_with_foreign_signature(self, client, admin_a):
        forged = jwt.encode({"id": admin_a.id, "role": "admin"}, "some-other-key-entirely-0123456789", algorithm="HS256")
        response = client.get('/api/auth/validate', headers=auth_headers(forged))
        assert response.status_code == 401
