"""
Shared fixtures: a fresh in-memory database per test, the seeded super
admin, logged-in API clients and small factories for catalog data.

API tests must not keep an app context pushed while they issue requests
(every request would share its `g`, and with it the logged-in user), so
`app` only prepares the schema and `ctx` is opt-in for service tests.
"""
from datetime import date

import pytest

from neonflow import create_app
from neonflow.extensions import db
from neonflow.models import StockItem
from neonflow.services.user_service import UserService

ADMIN_EMAIL = 'admin'
ADMIN_PASSWORD = '22'
STAFF_EMAIL = 'clerk@neonflow.test'
STAFF_PASSWORD = 'clerk-pass'


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        UserService.ensure_admin()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """Pushed app context for calling services directly"""
    with app.app_context():
        yield app


@pytest.fixture
def client(app):
    return app.test_client()


def login(client, email, password):
    return client.post('/api/auth/login', json={'email': email, 'password': password})


@pytest.fixture
def admin_client(app):
    client = app.test_client()
    response = login(client, ADMIN_EMAIL, ADMIN_PASSWORD)
    assert response.status_code == 200
    return client


@pytest.fixture
def staff_user_id(app):
    with app.app_context():
        return UserService.create_user(name='Stock Clerk', email=STAFF_EMAIL, password=STAFF_PASSWORD).id


@pytest.fixture
def staff_client(app, staff_user_id):
    client = app.test_client()
    response = login(client, STAFF_EMAIL, STAFF_PASSWORD)
    assert response.status_code == 200
    return client


@pytest.fixture
def make_item(app):
    """Factory for catalog items written straight to the table; returns the id"""
    def _make(item_id='INV-1', name='Quantum Processor', quantity=100, price=10.0,
              sku=None, category='Electronics', status=StockItem.STATUS_IN_STOCK):
        with app.app_context():
            db.session.add(StockItem(
                id=item_id,
                name=name,
                sku=sku or f"SKU-{item_id}",
                category=category,
                quantity=quantity,
                price=price,
                status=status,
                last_updated=date(2024, 1, 1),
            ))
            db.session.commit()
        return item_id
    return _make


def movement_payload(direction, lines, on='2024-01-01', **extra):
    """Movement body; `lines` holds (item_id, quantity) or (item_id, quantity, ratio)"""
    payload = {
        'date': on,
        'direction': direction,
        'lines': [
            {'item_id': line[0], 'order_quantity': line[1], 'unit_ratio': line[2] if len(line) > 2 else 1}
            for line in lines
        ],
    }
    payload.update(extra)
    return payload
