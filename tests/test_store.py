from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import create_engine

from duedesk.db.schema import customers
from duedesk.db.store import CustomerStore
from duedesk.errors import DuplicateEmailError, NotFoundError, StoreError


def test_insert_and_get(store):
    created = store.insert(
        name="Ada Lovelace",
        contact_number="555-1234",
        email="ada@example.com",
        amount_to_pay=Decimal("120.50"),
        amount_paid=Decimal("20"),
    )

    assert created.id > 0
    assert created.created_at is not None
    assert created.updated_at is not None

    fetched = store.get_by_id(created.id)
    assert fetched.name == "Ada Lovelace"
    assert fetched.amount_to_pay == Decimal("120.50")
    assert fetched.amount_paid == Decimal("20.00")


def test_insert_duplicate_email(store, make_customer):
    make_customer(email="dup@example.com")

    with pytest.raises(DuplicateEmailError):
        make_customer(email="dup@example.com")

    assert store.count() == 1


def test_get_missing(store):
    with pytest.raises(NotFoundError):
        store.get_by_id(999)


def test_list_all_sorting_and_paging(store, make_customer):
    make_customer(name="Charlie", amount_to_pay="30")
    make_customer(name="alice", amount_to_pay="10")
    make_customer(name="Bob", amount_to_pay="20")

    by_amount = store.list_all("amount_to_pay", "desc")
    assert [r.amount_to_pay for r in by_amount] == [
        Decimal("30.00"),
        Decimal("20.00"),
        Decimal("10.00"),
    ]

    page = store.list_all("amount_to_pay", "ASC", limit=2, offset=1)
    assert [r.amount_to_pay for r in page] == [Decimal("20.00"), Decimal("30.00")]


def test_list_all_unknown_sort_falls_back_to_name(store, make_customer):
    make_customer(name="Zed")
    make_customer(name="Amy")

    records = store.list_all("id; DROP TABLE customers", "sideways")

    assert [r.name for r in records] == ["Amy", "Zed"]


def test_update(store, make_customer):
    customer = make_customer(amount_to_pay="100", amount_paid="10")

    updated = store.update(
        customer.id,
        {
            "name": "Renamed",
            "contact_number": "555-9999",
            "email": "renamed@example.com",
            "amount_to_pay": Decimal("200"),
            "amount_paid": Decimal("50"),
        },
    )

    assert updated.id == customer.id
    assert updated.name == "Renamed"
    assert updated.email == "renamed@example.com"
    assert updated.amount_to_pay == Decimal("200.00")
    assert updated.created_at == customer.created_at


def _backdate(store, customer_id):
    stamp = datetime(2000, 1, 1)
    with store.engine.begin() as conn:
        conn.execute(
            customers.update()
            .where(customers.c.id == customer_id)
            .values(updated_at=stamp)
        )
    return stamp


def test_update_refreshes_updated_at(store, make_customer):
    customer = make_customer()
    stamp = _backdate(store, customer.id)

    updated = store.update(customer.id, {"name": "Touched"})

    assert updated.updated_at > stamp
    assert updated.created_at == customer.created_at


def test_set_amount_paid_refreshes_updated_at(store, make_customer):
    customer = make_customer(amount_to_pay="100", amount_paid="0")
    stamp = _backdate(store, customer.id)

    updated = store.set_amount_paid(customer.id, Decimal("10"))

    assert updated.updated_at > stamp


def test_update_ignores_unknown_fields(store, make_customer):
    customer = make_customer()

    updated = store.update(customer.id, {"id": 42, "name": "Kept id"})

    assert updated.id == customer.id
    assert updated.name == "Kept id"


def test_update_email_conflict(store, make_customer):
    make_customer(email="taken@example.com")
    other = make_customer(email="free@example.com")

    with pytest.raises(DuplicateEmailError):
        store.update(other.id, {"email": "taken@example.com"})

    assert store.get_by_id(other.id).email == "free@example.com"


def test_update_missing(store):
    with pytest.raises(NotFoundError):
        store.update(404, {"name": "Nobody"})


def test_set_amount_paid(store, make_customer):
    customer = make_customer(amount_to_pay="100", amount_paid="50")

    updated = store.set_amount_paid(customer.id, Decimal("80"))

    assert updated.amount_paid == Decimal("80.00")
    assert updated.amount_to_pay == Decimal("100.00")


def test_set_amount_paid_missing(store):
    with pytest.raises(NotFoundError):
        store.set_amount_paid(404, Decimal("1"))


def test_delete_returns_deleted_record(store, make_customer):
    customer = make_customer(name="Gone")

    deleted = store.delete(customer.id)

    assert deleted.name == "Gone"
    with pytest.raises(NotFoundError):
        store.get_by_id(customer.id)
    with pytest.raises(NotFoundError):
        store.delete(customer.id)


def test_store_error_without_schema(tmp_path):
    # no tables created
    empty = CustomerStore(create_engine(f"sqlite:///{tmp_path/'empty.db'}", future=True))

    with pytest.raises(StoreError):
        empty.list_all()
    with pytest.raises(StoreError):
        empty.insert("A", "1", "a@example.com")
