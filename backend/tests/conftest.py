"""
Pytest fixtures for Tuldok Benta backend tests.

Provides an in-memory database, a test client, and small catalog/sale
builders shared by the route and service tests.
"""

import pytest
from decimal import Decimal

from tuldokbenta import create_app
from tuldokbenta.extensions import db
from tuldokbenta.models import InventoryItem, Service, Operator
from tuldokbenta.services.auth_service import hash_password


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'AUTH_REQUIRED': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app, db_session):
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
def require_login(app):
    """Turn operator auth on for a single test."""
    app.config['AUTH_REQUIRED'] = True
    yield
    app.config['AUTH_REQUIRED'] = False


@pytest.fixture(scope='function')
def widget(db_session):
    """Inventory item Widget @ 5.00, stock 10."""
    item = InventoryItem(item_name="Widget", item_classification="Gadget", price=Decimal("5.00"), stock=10)
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture(scope='function')
def shampoo(db_session):
    """Inventory item Shampoo in the Hair classification."""
    item = InventoryItem(item_name="Shampoo", item_classification="Hair", price=Decimal("3.50"), stock=20)
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture(scope='function')
def haircut(db_session):
    """Service Haircut @ 10.00, one Hair freebie per unit."""
    service = Service(service_name="Haircut", price=Decimal("10.00"), freebies=["Hair"])
    db_session.add(service)
    db_session.commit()
    return service


@pytest.fixture(scope='function')
def operator(db_session):
    """Active operator 'counter' / 'Password123'."""
    op = Operator(username="counter", password_hash=hash_password("Password123"), is_active=True)
    db_session.add(op)
    db_session.commit()
    return op


def item_line(name: str, qty: int, price: str, **extra) -> dict:
    """JSON item line as the web client sends it."""
    line = {"type": "item", "item_name": name, "qty": qty, "price": price}
    line.update(extra)
    return line


def service_line(name: str, qty: int, price: str, freebies=None, **extra) -> dict:
    """JSON service line as the web client sends it."""
    line = {"type": "service", "service_name": name, "qty": qty, "price": price}
    if freebies is not None:
        line["freebies"] = freebies
    line.update(extra)
    return line


def open_sale(client, invoice_number: str, items: list) -> dict:
    """POST an open sale and return the response body; asserts 201."""
    resp = client.post('/api/open-sales', json={'invoice_number': invoice_number, 'items': items})
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for an operator."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}
