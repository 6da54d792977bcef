from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel

from crewdesk.models.job_order import BillingUnit


class InvoiceLineItem(BaseModel):
    job_order_id: int
    event_title: str
    rate: int  # minor units
    currency: str
    unit: BillingUnit
    billable_days: int
    total: int  # minor units


class Invoice(BaseModel):
    id: int | None = None
    uuid: str = ""
    crew_id: int
    start_date: date
    end_date: date
    currency: str = ""
    total: int = 0  # minor units
    job_order_ids: list[int] = []
    breakdown: list[InvoiceLineItem] = []
    created_at: datetime | None = None


class InvoiceRun(BaseModel):
    """Outcome of one generation action: the invoice, its document, and whether it was saved."""

    invoice: Invoice
    pdf: bytes
    filename: str
    saved: bool = True
    error: str = ""
