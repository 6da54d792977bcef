"""Web test fixtures: TestClient with shared in-memory SQLite."""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy.pool import StaticPool

from crewdesk.models.crew import CrewMember
from crewdesk.models.event import Event
from crewdesk.models.job_order import JobOrder
from crewdesk.repositories.sqlalchemy import (
    SQLAlchemyCrewRepository,
    SQLAlchemyEventRepository,
    SQLAlchemyJobOrderRepository,
)
from crewdesk.storage.local import LocalStorage
from tests.conftest import _make_engine, create_schema


def _make_test_engine():
    """Create a fresh in-memory SQLite engine with shared connection pool."""
    engine = _make_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    with engine.connect() as conn:
        create_schema(conn)
    return engine


def create_member_in_db(engine, **overrides) -> CrewMember:
    defaults = dict(full_name="Layla Haddad", role="Gaffer")
    defaults.update(overrides)
    with engine.connect() as conn:
        return SQLAlchemyCrewRepository(conn).create(CrewMember(**defaults))


def create_event_in_db(
    engine, crew_ids: list[int], rate: int = 0, unit: str = "daily", currency: str = "AED", **overrides
) -> Event:
    """Create an event with one job order per crew member at the given rate."""
    defaults = dict(title="Desert Shoot", start_date=date(2024, 1, 1), end_date=date(2024, 1, 10), crew_ids=crew_ids)
    defaults.update(overrides)
    with engine.connect() as conn:
        event = SQLAlchemyEventRepository(conn).create(Event(**defaults))
        SQLAlchemyJobOrderRepository(conn).create_many(
            [
                JobOrder(event_id=event.id, crew_id=crew_id, rate=rate, currency=currency, unit=unit)
                for crew_id in crew_ids
            ]
        )
    return event


@pytest.fixture(autouse=True)
def web_test_db(monkeypatch, tmp_path):
    """Set up in-memory DB and local storage, and patch the web app to use them."""
    engine = _make_test_engine()

    import web.deps as deps_module

    monkeypatch.setattr(deps_module, "get_engine", lambda: engine)
    monkeypatch.setattr(deps_module, "get_storage", lambda: LocalStorage(str(tmp_path / "uploads")))

    import web.app as app_module

    monkeypatch.setattr(app_module, "initialize_db", lambda: None)

    yield engine

    engine.dispose()


@pytest.fixture()
def test_engine(web_test_db):
    return web_test_db


@pytest.fixture()
def client():
    from starlette.testclient import TestClient

    from web.app import app

    return TestClient(app)
