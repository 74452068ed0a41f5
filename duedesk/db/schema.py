# duedesk/db/schema.py

from sqlalchemy import (
    MetaData, Table, Column, Integer, String,
    Numeric, DateTime, CheckConstraint, func
)

metadata = MetaData()

customers = Table(
    "customers",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String, nullable=False),
    Column("contact_number", String, nullable=False),
    Column("email", String, nullable=False, unique=True),
    Column("amount_to_pay", Numeric(18, 2), nullable=False, server_default="0"),
    Column("amount_paid", Numeric(18, 2), nullable=False, server_default="0"),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column(
        "updated_at",
        DateTime,
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    ),
    CheckConstraint("amount_to_pay >= 0", name="ck_customers_amount_to_pay_nonneg"),
    CheckConstraint("amount_paid >= 0", name="ck_customers_amount_paid_nonneg"),
)
