from crewdesk.repositories.base import (
    CrewRepository,
    EventRepository,
    InvoiceRepository,
    JobOrderRepository,
)


def get_crew_repository() -> CrewRepository:
    from crewdesk.db import get_connection
    from crewdesk.repositories.sqlalchemy import SQLAlchemyCrewRepository

    return SQLAlchemyCrewRepository(get_connection())


def get_event_repository() -> EventRepository:
    from crewdesk.db import get_connection
    from crewdesk.repositories.sqlalchemy import SQLAlchemyEventRepository

    return SQLAlchemyEventRepository(get_connection())


def get_job_order_repository() -> JobOrderRepository:
    from crewdesk.db import get_connection
    from crewdesk.repositories.sqlalchemy import SQLAlchemyJobOrderRepository

    return SQLAlchemyJobOrderRepository(get_connection())


def get_invoice_repository() -> InvoiceRepository:
    from crewdesk.db import get_connection
    from crewdesk.repositories.sqlalchemy import SQLAlchemyInvoiceRepository

    return SQLAlchemyInvoiceRepository(get_connection())
