import pytest

from src.dashboard import create_app, db
from src.dashboard.services.database_ops import InvoiceStore
from src.dashboard.services.seed_service import seed_database


@pytest.fixture
def app():
    app = create_app("src.dashboard.config.config.TestingConfig")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def seeded(app):
    seed_database()
    return app


@pytest.fixture
def auth_client(seeded, client):
    response = client.post('/login', data={'email': 'user@nextmail.com', 'password': '123456'})
    assert response.status_code == 200
    return client


@pytest.fixture
def store(app):
    return InvoiceStore(db.session)


class FakeStore:
    """Records store calls; optionally fails every call."""

    def __init__(self, error=None, rowcount=1):
        self.error = error
        self.rowcount = rowcount
        self.inserts = []
        self.updates = []
        self.deletes = []

    def insert(self, customer_id, amount, status, date):
        if self.error:
            raise self.error
        self.inserts.append((customer_id, amount, status, date))

    def update(self, invoice_id, customer_id, amount, status):
        if self.error:
            raise self.error
        self.updates.append((invoice_id, customer_id, amount, status))
        return self.rowcount

    def delete(self, invoice_id):
        if self.error:
            raise self.error
        self.deletes.append(invoice_id)
        return self.rowcount


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def failing_store():
    from src.dashboard.utils.exceptions import PersistenceError
    return FakeStore(error=PersistenceError("connection refused"))


@pytest.fixture
def unmatched_store():
    return FakeStore(rowcount=0)
