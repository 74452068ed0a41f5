# duedesk/db/store.py

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from duedesk.db.engine import get_engine
from duedesk.db.schema import customers
from duedesk.errors import DuplicateEmailError, NotFoundError, StoreError

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "name": customers.c.name,
    "email": customers.c.email,
    "amount_to_pay": customers.c.amount_to_pay,
    "amount_paid": customers.c.amount_paid,
    "created_at": customers.c.created_at,
    "updated_at": customers.c.updated_at,
}

UPDATABLE_FIELDS = ("name", "contact_number", "email", "amount_to_pay", "amount_paid")


@dataclass(frozen=True)
class CustomerRecord:
    id: int
    name: str
    contact_number: str
    email: str
    amount_to_pay: Decimal
    amount_paid: Decimal
    created_at: datetime
    updated_at: datetime


def _row_to_record(row) -> CustomerRecord:
    return CustomerRecord(
        id=row["id"],
        name=row["name"],
        contact_number=row["contact_number"],
        email=row["email"],
        amount_to_pay=row["amount_to_pay"] or Decimal("0"),
        amount_paid=row["amount_paid"] or Decimal("0"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _is_email_conflict(exc: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed: customers.email"
    # postgres: 'duplicate key ... constraint "customers_email_key"'
    return "email" in str(exc.orig).lower()


class CustomerStore:
    """
    Persistence for customer records. Each mutation is a single statement
    run in its own transaction; concurrent writers resolve last-write-wins.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def insert(
        self,
        name: str,
        contact_number: str,
        email: str,
        amount_to_pay: Decimal = Decimal("0"),
        amount_paid: Decimal = Decimal("0"),
    ) -> CustomerRecord:
        stmt = (
            customers.insert()
            .values(
                name=name,
                contact_number=contact_number,
                email=email,
                amount_to_pay=amount_to_pay,
                amount_paid=amount_paid,
            )
            .returning(*customers.c)
        )

        try:
            with self.engine.begin() as conn:
                row = conn.execute(stmt).mappings().one()
        except IntegrityError as exc:
            if _is_email_conflict(exc):
                logger.warning("Duplicate email on insert: %s", email)
                raise DuplicateEmailError() from exc
            logger.exception("Insert rejected by the database")
            raise StoreError() from exc
        except SQLAlchemyError as exc:
            logger.exception("Insert failed")
            raise StoreError() from exc

        logger.info("Created customer id=%s", row["id"])
        return _row_to_record(row)

    def get_by_id(self, customer_id: int) -> CustomerRecord:
        stmt = select(customers).where(customers.c.id == customer_id)

        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as exc:
            logger.exception("Lookup of customer id=%s failed", customer_id)
            raise StoreError() from exc

        if row is None:
            raise NotFoundError()
        return _row_to_record(row)

    def list_all(
        self,
        sort_by: str = "name",
        order: str = "asc",
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[CustomerRecord]:
        """
        Return customers ordered by sort_by/order. Unknown sort fields or
        directions fall back to name ascending.
        """
        column = SORT_FIELDS.get(sort_by, customers.c.name)

        # Sorting
        if (order or "").lower() == "desc":
            order_clause = [column.desc(), customers.c.id.desc()]
        else:
            order_clause = [column.asc(), customers.c.id.asc()]

        stmt = select(customers).order_by(*order_clause)
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset:
            stmt = stmt.offset(offset)

        try:
            with self.engine.connect() as conn:
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as exc:
            logger.exception("Listing customers failed")
            raise StoreError() from exc

        return [_row_to_record(row) for row in rows]

    def count(self) -> int:
        stmt = select(func.count()).select_from(customers)

        try:
            with self.engine.connect() as conn:
                return conn.execute(stmt).scalar_one()
        except SQLAlchemyError as exc:
            logger.exception("Counting customers failed")
            raise StoreError() from exc

    def update(self, customer_id: int, fields: Dict[str, Any]) -> CustomerRecord:
        values = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        if not values:
            return self.get_by_id(customer_id)

        stmt = (
            customers.update()
            .where(customers.c.id == customer_id)
            .values(**values)
            .returning(*customers.c)
        )

        try:
            with self.engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        except IntegrityError as exc:
            if _is_email_conflict(exc):
                logger.warning(
                    "Duplicate email on update of customer id=%s: %s",
                    customer_id,
                    values.get("email"),
                )
                raise DuplicateEmailError(
                    "Email already exists for another customer"
                ) from exc
            logger.exception("Update of customer id=%s rejected", customer_id)
            raise StoreError() from exc
        except SQLAlchemyError as exc:
            logger.exception("Update of customer id=%s failed", customer_id)
            raise StoreError() from exc

        if row is None:
            raise NotFoundError()

        logger.info("Updated customer id=%s", customer_id)
        return _row_to_record(row)

    def set_amount_paid(self, customer_id: int, new_amount_paid: Decimal) -> CustomerRecord:
        stmt = (
            customers.update()
            .where(customers.c.id == customer_id)
            .values(amount_paid=new_amount_paid)
            .returning(*customers.c)
        )

        try:
            with self.engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as exc:
            logger.exception("Payment update of customer id=%s failed", customer_id)
            raise StoreError() from exc

        if row is None:
            raise NotFoundError()

        logger.info("Set amount_paid=%s for customer id=%s", new_amount_paid, customer_id)
        return _row_to_record(row)

    def delete(self, customer_id: int) -> CustomerRecord:
        stmt = (
            customers.delete()
            .where(customers.c.id == customer_id)
            .returning(*customers.c)
        )

        try:
            with self.engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as exc:
            logger.exception("Delete of customer id=%s failed", customer_id)
            raise StoreError() from exc

        if row is None:
            raise NotFoundError()

        logger.info("Deleted customer id=%s", customer_id)
        return _row_to_record(row)


def get_store() -> CustomerStore:
    """FastAPI dependency; tests override it with a store on a scratch database."""
    return CustomerStore(get_engine())
