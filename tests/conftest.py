"""Root conftest: in-memory SQLite engine and fixtures for the full schema."""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import Connection, create_engine, event, text
from sqlalchemy.engine import Engine

from crewdesk.models.crew import CrewMember
from crewdesk.models.event import Event
from crewdesk.models.job_order import BillingUnit, JobOrder

# Matches Alembic head: 3f1c2a9d7e10 (initial schema)
SCHEMA_DDL = """
CREATE TABLE crew_members (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(36) NOT NULL UNIQUE,
    full_name VARCHAR(255) NOT NULL,
    role VARCHAR(255) NOT NULL DEFAULT '',
    status VARCHAR(32) NOT NULL DEFAULT 'active',
    type VARCHAR(64) NOT NULL DEFAULT '',
    avatar_url TEXT,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
);

CREATE TABLE events (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(36) NOT NULL UNIQUE,
    title VARCHAR(255) NOT NULL,
    job_id VARCHAR(64) NOT NULL DEFAULT '',
    start_date DATE NOT NULL,
    end_date DATE NOT NULL,
    level VARCHAR(32) NOT NULL DEFAULT 'Primary',
    notes TEXT,
    file_url TEXT,
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL,
    deleted_at DATETIME
);

CREATE TABLE event_crew (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id INTEGER NOT NULL REFERENCES events(id) ON DELETE CASCADE,
    crew_member_id INTEGER NOT NULL REFERENCES crew_members(id) ON DELETE CASCADE,
    UNIQUE(event_id, crew_member_id)
);

CREATE TABLE event_vehicles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id INTEGER NOT NULL REFERENCES events(id) ON DELETE CASCADE,
    vehicle_name VARCHAR(255) NOT NULL,
    sort_order INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE event_crew_job_orders (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_id INTEGER NOT NULL REFERENCES events(id) ON DELETE CASCADE,
    crew_id INTEGER NOT NULL REFERENCES crew_members(id) ON DELETE CASCADE,
    rate INTEGER NOT NULL DEFAULT 0,
    currency VARCHAR(8) NOT NULL DEFAULT '',
    unit VARCHAR(16)
);

CREATE TABLE invoices (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    uuid VARCHAR(36) NOT NULL UNIQUE,
    crew_id INTEGER NOT NULL REFERENCES crew_members(id),
    start_date DATE NOT NULL,
    end_date DATE NOT NULL,
    currency VARCHAR(8) NOT NULL DEFAULT '',
    total INTEGER NOT NULL DEFAULT 0,
    job_order_ids TEXT NOT NULL,
    breakdown TEXT NOT NULL,
    created_at DATETIME NOT NULL
);
"""


def _make_engine(url: str = "sqlite:///:memory:", **kwargs) -> Engine:
    engine = create_engine(url, **kwargs)

    @event.listens_for(engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.close()

    return engine


def create_schema(conn: Connection) -> None:
    for statement in SCHEMA_DDL.strip().split(";"):
        stmt = statement.strip()
        if stmt:
            conn.execute(text(stmt))
    conn.commit()


@pytest.fixture()
def db_engine() -> Engine:
    return _make_engine()


@pytest.fixture()
def db_connection(db_engine: Engine) -> Connection:
    conn = db_engine.connect()
    create_schema(conn)
    yield conn
    conn.close()


def _sample_member(**overrides) -> CrewMember:
    defaults = dict(
        id=1,
        uuid="crew-uuid",
        full_name="Layla Haddad",
        role="Gaffer",
        status="active",
        type="freelance",
    )
    defaults.update(overrides)
    return CrewMember(**defaults)


def _sample_event(**overrides) -> Event:
    defaults = dict(
        id=1,
        uuid="event-uuid",
        title="Desert Shoot",
        job_id="JOB-1001",
        start_date=date(2024, 3, 1),
        end_date=date(2024, 3, 5),
        crew_ids=[1],
    )
    defaults.update(overrides)
    return Event(**defaults)


def _sample_job_order(**overrides) -> JobOrder:
    defaults = dict(id=1, event_id=1, crew_id=1, rate=10000, currency="AED", unit=BillingUnit.DAILY)
    defaults.update(overrides)
    return JobOrder(**defaults)


@pytest.fixture()
def sample_member():
    return _sample_member


@pytest.fixture()
def sample_event():
    return _sample_event


@pytest.fixture()
def sample_job_order():
    return _sample_job_order
