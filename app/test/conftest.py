"""
Pytest configuration and fixtures

Each test gets its own application bound to a fresh in-memory SQLite database.
Domain tests work inside the `session` fixture's app context; API tests use
one test client per account and open short app contexts for assertions.
"""
import os

import pytest

os.environ.setdefault('SECRET_KEY', 'test-secret-key-for-assetverse')

from app import create_app
from app import db as _db
from app.build import insert_critical_data
from app.buisness.core.unit_of_work import atomic
from app.buisness.core.user_directory import UserDirectory
from app.buisness.inventory.inventory_ledger import InventoryLedger
from app.buisness.packages.payment_gateway import PaymentGateway
from app.data.core.asset_info.asset import Asset

TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'WTF_CSRF_ENABLED': False,
    'RATELIMIT_ENABLED': False,
    'SESSION_COOKIE_SECURE': False,
    'REMEMBER_COOKIE_SECURE': False,
    'DEFAULT_CAPACITY_LIMIT': 5,
}

PASSWORD = 'secret123'


class FakePaymentGateway(PaymentGateway):
    """In-memory processor; tests call settle() to mark an intent as paid"""

    def __init__(self):
        self.intents = {}
        self.succeeded = set()

    def create_intent(self, amount_cents, currency, metadata):
        intent_id = f"pi_test_{len(self.intents) + 1}"
        self.intents[intent_id] = {
            'amount': amount_cents,
            'currency': currency,
            'metadata': metadata,
        }
        return {'id': intent_id, 'client_secret': f"{intent_id}_secret"}

    def is_succeeded(self, payment_intent_id):
        return payment_intent_id in self.succeeded

    def settle(self, payment_intent_id):
        self.succeeded.add(payment_intent_id)


def build_app(**overrides):
    config = dict(TEST_CONFIG)
    config.update(overrides)
    application = create_app(config)
    application.extensions['payment_gateway'] = FakePaymentGateway()
    with application.app_context():
        _db.create_all()
        insert_critical_data()
    return application


@pytest.fixture(scope='function')
def app():
    """Create Flask application for testing"""
    application = build_app()
    yield application
    with application.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def gateway(app):
    return app.extensions['payment_gateway']


@pytest.fixture(scope='function')
def session(app):
    """db.session inside an application context"""
    with app.app_context():
        yield _db.session
        _db.session.rollback()


# ========== Domain factories ==========

@pytest.fixture
def directory(session):
    return UserDirectory(session, default_capacity=5, default_avatar='https://img.test/avatar.png')


@pytest.fixture
def make_hr(session, directory):
    """Register an HR account, optionally with a custom capacity"""
    def _make_hr(email='hr@acme.test', company_name='Acme Corp', capacity_limit=None, name='Maya Rahman'):
        user = directory.register_hr(
            name=name,
            email=email,
            password=PASSWORD,
            company_name=company_name,
            company_logo=f'https://img.test/{company_name.lower().replace(" ", "-")}.png',
            date_of_birth='1988-03-14',
        )
        if capacity_limit is not None:
            with atomic(session, 'test_capacity'):
                directory.set_capacity(user.email, capacity_limit, 'basic')
        return user
    return _make_hr


@pytest.fixture
def make_employee(directory):
    def _make_employee(email='tanvir@acme.test', name='Tanvir Hasan', date_of_birth='1995-07-02'):
        return directory.register_employee(
            name=name,
            email=email,
            password=PASSWORD,
            date_of_birth=date_of_birth,
        )
    return _make_employee


@pytest.fixture
def make_asset(session):
    def _make_asset(hr_user, name='Dell Latitude 5440', asset_type=Asset.RETURNABLE, quantity=1):
        with atomic(session, 'test_create_asset'):
            asset = InventoryLedger(session).create_asset(
                hr_user, name, f'https://img.test/{name.lower().replace(" ", "-")}.png', asset_type, quantity
            )
        return asset
    return _make_asset


# ========== API clients ==========

HR_PAYLOAD = {
    'name': 'Maya Rahman',
    'email': 'hr@acme.test',
    'password': PASSWORD,
    'company_name': 'Acme Corp',
    'company_logo': 'https://img.test/acme.png',
    'date_of_birth': '1988-03-14',
}

EMPLOYEE_PAYLOAD = {
    'name': 'Tanvir Hasan',
    'email': 'tanvir@acme.test',
    'password': PASSWORD,
    'date_of_birth': '1995-07-02',
}


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def hr_client(app):
    """Client logged in as a freshly registered HR account"""
    test_client = app.test_client()
    response = test_client.post('/api/auth/register-hr', json=HR_PAYLOAD)
    assert response.status_code == 201, response.get_json()
    return test_client


@pytest.fixture(scope='function')
def employee_client(app):
    """Client logged in as a freshly registered employee"""
    test_client = app.test_client()
    response = test_client.post('/api/auth/register-employee', json=EMPLOYEE_PAYLOAD)
    assert response.status_code == 201, response.get_json()
    return test_client


def register_employee_client(app, email, name, date_of_birth='1996-01-10'):
    """Additional employee clients for multi-member scenarios"""
    test_client = app.test_client()
    response = test_client.post('/api/auth/register-employee', json={
        'name': name,
        'email': email,
        'password': PASSWORD,
        'date_of_birth': date_of_birth,
    })
    assert response.status_code == 201, response.get_json()
    return test_client


def create_asset_via_api(hr_client, name='Dell Latitude 5440', asset_type='Returnable', quantity=1):
    response = hr_client.post('/api/assets', json={
        'name': name,
        'image': 'https://img.test/asset.png',
        'asset_type': asset_type,
        'quantity': quantity,
    })
    assert response.status_code == 201, response.get_json()
    return response.get_json()['asset']
