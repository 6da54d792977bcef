"""Request bodies accepted by the JSON API."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from crewdesk.models.event import DEFAULT_LEVEL
from crewdesk.models.job_order import BillingUnit


class CrewMemberIn(BaseModel):
    full_name: str = Field(min_length=1)
    role: str = ""
    status: str = "active"
    type: str = ""


class EventIn(BaseModel):
    title: str = Field(min_length=1)
    job_id: str = ""
    start_date: date
    end_date: date
    level: str = DEFAULT_LEVEL
    notes: str = ""
    vehicles: list[str] = []
    crew_ids: list[int] = []


class JobOrderChange(BaseModel):
    id: int
    rate: int | None = Field(default=None, ge=0)  # minor units
    currency: str | None = None
    unit: BillingUnit | None = None


class JobOrderBatch(BaseModel):
    job_orders: list[JobOrderChange]


class InvoiceRequest(BaseModel):
    start_date: date | None = None
    end_date: date | None = None
