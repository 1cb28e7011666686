"""Database setup utilities for the live-ops web app."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    func,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

metadata = MetaData()

expenses = Table(
    "expenses",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("date", Date, nullable=False),
    Column("line_items", JSON, nullable=False, default=list),
    Column("salary_cost", Float, nullable=True),
    Column("office_cost", Float, nullable=True),
    Column("kitchen_cost", Float, nullable=True),
    Column("customer_service_cost", Float, nullable=True),
    Column("warehouse_cost", Float, nullable=True),
    Column("other_cost", Float, nullable=True),
    Column("period_type", String(8), nullable=False, default="MONTH"),
    Column("period_value", String(7), nullable=False, default=""),
    Column("payer", String(255), nullable=False, default=""),
    Column("receiver", String(255), nullable=False, default=""),
    Column("accounting", String(255), nullable=False, default=""),
    Column("description", Text, nullable=False, default=""),
    Column("attachment", Text, nullable=False, default=""),
    Column("is_urgent", Boolean, nullable=False, default=False),
    Column(
        "created_at", DateTime(timezone=True), server_default=func.now(), nullable=False
    ),
)

daily_team_reports = Table(
    "daily_team_reports",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("date", Date, nullable=False),
    Column("store_id", String(64), nullable=False),
    Column("session", String(8), nullable=False),
    Column("shift", String(120), nullable=False, default=""),
    Column("hours", Float, nullable=False, default=0),
    Column("salary", Float, nullable=False, default=0),
    Column("account", String(255), nullable=False, default=""),
    Column("person_in_charge", String(255), nullable=False, default=""),
    Column("admin", String(255), nullable=False, default=""),
    Column("products", JSON, nullable=False, default=list),
    Column("attachment", Text, nullable=False, default=""),
    Column(
        "created_at", DateTime(timezone=True), server_default=func.now(), nullable=False
    ),
)

stores = Table(
    "stores",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("name", String(255), nullable=False),
)

personnel = Table(
    "personnel",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("name", String(255), nullable=False),
    Column("position", String(120), nullable=False, default=""),
)

video_metrics = Table(
    "video_metrics",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("upload_date", DateTime, nullable=False),
    Column("store_id", String(64), nullable=False),
    Column("product_id", String(120), nullable=True),
    Column("person_in_charge", String(255), nullable=True),
    Column("sales", Float, nullable=True),
    Column("orders", Integer, nullable=True),
)

live_reports = Table(
    "live_reports",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("date", Date, nullable=False),
    Column("channel_id", String(64), nullable=False),
    Column("host_name", String(255), nullable=True),
    Column("gmv", Float, nullable=True),
    Column("orders", Integer, nullable=True),
)


def create_db_engine(database_url: str) -> Engine:
    """Return a SQLAlchemy engine for the provided URL."""

    return create_engine(database_url, future=True)


def init_schema(engine: Engine) -> None:
    """Create database tables if they do not exist."""

    metadata.create_all(engine)


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Context manager that yields a SQLAlchemy :class:`Session`."""

    with Session(engine, future=True) as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
