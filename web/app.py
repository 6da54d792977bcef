from __future__ import annotations

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from crewdesk.db import initialize_db
from crewdesk.logging import configure_logging, reconfigure
from web.deps import DBConnectionMiddleware
from web.routes.crew import router as crew_router
from web.routes.event import router as event_router

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    initialize_db()
    # Alembic's fileConfig may have overridden the logging config
    reconfigure()
    logger.info("Application started")
    yield


app = FastAPI(title="CrewDesk", lifespan=lifespan)

app.add_middleware(DBConnectionMiddleware)

app.include_router(crew_router)
app.include_router(event_router)


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(
        "Store error on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return JSONResponse({"detail": "The data store is unavailable, try again."}, status_code=503)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s:\n%s",
        request.method,
        request.url.path,
        traceback.format_exc(),
    )
    return JSONResponse({"detail": "Internal Server Error"}, status_code=500)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}
