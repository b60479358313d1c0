"""
Pytest fixtures for CloudBook backend tests.

Provides test database setup, tenant fixtures, a captured OTP outbox and
the test client.
"""

import pytest
from cloudbook import create_app
from cloudbook.extensions import db
from cloudbook.models import Admin
from cloudbook.services import auth_service, mail_service


TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'JWT_SECRET_KEY': 'test-signing-key-with-enough-length-for-hs256',
    'BCRYPT_ROUNDS': 4,
    'MAIL_SUPPRESS_SEND': True,
}

ADMIN_PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app(tmp_path_factory):
    """Create application for testing."""
    config = dict(TEST_CONFIG)
    config['UPLOAD_FOLDER'] = str(tmp_path_factory.mktemp('uploads'))
    app = create_app(config)

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
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def outbox(monkeypatch):
    """Capture OTP emails instead of sending them: list of (to, code)."""
    sent = []
    monkeypatch.setattr(mail_service, 'send_otp_email', lambda to, code: sent.append((to, code)))
    return sent


def make_admin(email: str, **overrides) -> Admin:
    payload = {
        "name": "Ada",
        "last_name": "Owner",
        "email": email,
        "contact": "+1-555-0100",
        "company": "Acme Wholesale",
        "address": "1 Market St",
        "role": "admin",
        "password": ADMIN_PASSWORD,
    }
    payload.update(overrides)
    return auth_service.register_admin(payload)


@pytest.fixture(scope='function')
def admin_a(db_session):
    """Tenant A."""
    return make_admin("owner@acme.test")


@pytest.fixture(scope='function')
def admin_b(db_session):
    """Tenant B."""
    return make_admin("owner@beta.test", company="Beta Retail")


def count_rows(model, **filters) -> int:
    """Row count straight from the database, bypassing the identity map."""
    db.session.expire_all()
    return db.session.query(model).filter_by(**filters).count()


def get_auth_token(client, email: str, password: str = ADMIN_PASSWORD) -> str:
    """Helper to get auth token for an admin."""
    response = client.post('/api/auth/login', json={
        'email': email,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}
