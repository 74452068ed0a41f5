from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from duedesk.db.schema import metadata
from duedesk.db.store import CustomerStore, get_store
from duedesk.main import app


@pytest.fixture()
def engine(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path/'test.db'}", future=True)
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def store(engine):
    return CustomerStore(engine)


@pytest.fixture()
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def make_customer(store):
    counter = {"n": 0}

    def _make(amount_to_pay="100", amount_paid="0", **kwargs):
        counter["n"] += 1
        n = counter["n"]
        return store.insert(
            name=kwargs.get("name", f"Customer {n}"),
            contact_number=kwargs.get("contact_number", f"555-000{n}"),
            email=kwargs.get("email", f"customer{n}@example.com"),
            amount_to_pay=Decimal(amount_to_pay),
            amount_paid=Decimal(amount_paid),
        )

    return _make
