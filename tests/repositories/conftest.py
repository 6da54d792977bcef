import pytest
from sqlalchemy import Connection

from crewdesk.repositories.sqlalchemy import (
    SQLAlchemyCrewRepository,
    SQLAlchemyEventRepository,
    SQLAlchemyInvoiceRepository,
    SQLAlchemyJobOrderRepository,
)


@pytest.fixture()
def crew_repo(db_connection: Connection) -> SQLAlchemyCrewRepository:
    return SQLAlchemyCrewRepository(db_connection)


@pytest.fixture()
def event_repo(db_connection: Connection) -> SQLAlchemyEventRepository:
    return SQLAlchemyEventRepository(db_connection)


@pytest.fixture()
def job_order_repo(db_connection: Connection) -> SQLAlchemyJobOrderRepository:
    return SQLAlchemyJobOrderRepository(db_connection)


@pytest.fixture()
def invoice_repo(db_connection: Connection) -> SQLAlchemyInvoiceRepository:
    return SQLAlchemyInvoiceRepository(db_connection)
