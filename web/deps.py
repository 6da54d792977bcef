from __future__ import annotations

import logging

from fastapi import Request
from starlette.types import ASGIApp, Receive, Scope, Send

from crewdesk.db import get_engine
from crewdesk.repositories.sqlalchemy import (
    SQLAlchemyCrewRepository,
    SQLAlchemyEventRepository,
    SQLAlchemyInvoiceRepository,
    SQLAlchemyJobOrderRepository,
)
from crewdesk.services.crew_service import CrewService
from crewdesk.services.event_service import EventService
from crewdesk.services.invoice_service import InvoiceService
from crewdesk.services.job_order_service import JobOrderService
from crewdesk.storage.factory import get_storage

logger = logging.getLogger(__name__)


class DBConnectionMiddleware:
    """Pure ASGI middleware: creates a single DB connection per request."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        request.state.db_conn = None
        try:
            await self.app(scope, receive, send)
        finally:
            conn = getattr(request.state, "db_conn", None)
            if conn is not None:
                conn.close()
                logger.debug("DB connection closed for %s %s", request.method, request.url.path)


def _get_conn(request: Request):
    """Lazy per-request connection, created on first use and closed by the middleware."""
    if request.state.db_conn is None:
        logger.debug("Creating DB connection for %s %s", request.method, request.url.path)
        request.state.db_conn = get_engine().connect()
    return request.state.db_conn


def get_crew_service(request: Request) -> CrewService:
    conn = _get_conn(request)
    return CrewService(
        SQLAlchemyCrewRepository(conn),
        get_storage(),
        SQLAlchemyEventRepository(conn),
    )


def get_event_service(request: Request) -> EventService:
    conn = _get_conn(request)
    return EventService(
        SQLAlchemyEventRepository(conn),
        SQLAlchemyJobOrderRepository(conn),
        SQLAlchemyCrewRepository(conn),
        get_storage(),
    )


def get_job_order_service(request: Request) -> JobOrderService:
    return JobOrderService(SQLAlchemyJobOrderRepository(_get_conn(request)))


def get_invoice_service(request: Request) -> InvoiceService:
    conn = _get_conn(request)
    return InvoiceService(
        SQLAlchemyJobOrderRepository(conn),
        SQLAlchemyEventRepository(conn),
        SQLAlchemyInvoiceRepository(conn),
    )
