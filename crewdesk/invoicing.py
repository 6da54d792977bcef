"""Invoice breakdown computation.

Pure functions: given a crew member's job orders, the events they point at,
and an invoice window, work out which assignments are billable, for how many
days, and for how much.  Nothing here touches the store.
"""

from __future__ import annotations

import logging
import math
from datetime import date

from crewdesk.models.event import Event
from crewdesk.models.invoice import InvoiceLineItem
from crewdesk.models.job_order import BillingUnit, JobOrder

logger = logging.getLogger(__name__)


def validate_window(start: date | None, end: date | None) -> tuple[date, date]:
    if start is None or end is None:
        raise ValueError("Please select both start and end dates.")
    if start > end:
        raise ValueError("Invoice start date must not be after the end date.")
    return start, end


def billable_days(event: Event, start: date, end: date) -> int:
    """Inclusive day count of the overlap between the event and the window."""
    clip_start = max(start, event.start_date)
    clip_end = min(end, event.end_date)
    return (clip_end - clip_start).days + 1


def line_total(rate: int, unit: BillingUnit, days: int) -> int:
    if unit == BillingUnit.DAILY:
        return rate * days
    return rate * math.ceil(days / unit.days_per_unit)


def compute_breakdown(
    job_orders: list[JobOrder],
    events: list[Event],
    start: date,
    end: date,
) -> list[InvoiceLineItem]:
    events_by_id = {e.id: e for e in events}
    breakdown: list[InvoiceLineItem] = []

    for job in job_orders:
        event = events_by_id.get(job.event_id)
        if event is None:
            logger.debug("Job order %s skipped: event %s not found", job.id, job.event_id)
            continue
        if not event.overlaps(start, end):
            continue
        if job.id is None:
            raise ValueError("Cannot invoice a job order without an id")

        days = billable_days(event, start, end)
        breakdown.append(
            InvoiceLineItem(
                job_order_id=job.id,
                event_title=event.title,
                rate=job.rate,
                currency=job.currency,
                unit=job.unit,
                billable_days=days,
                total=line_total(job.rate, job.unit, days),
            )
        )

    return breakdown


def grand_total(breakdown: list[InvoiceLineItem]) -> int:
    return sum(item.total for item in breakdown)


def resolve_currency(breakdown: list[InvoiceLineItem], default: str) -> str:
    """Return the single currency of the breakdown. Mixed currencies are rejected."""
    currencies = {item.currency or default for item in breakdown}
    if len(currencies) > 1:
        raise ValueError(
            "Job orders in this period use different currencies ({}); "
            "invoice them separately.".format(", ".join(sorted(currencies)))
        )
    if currencies:
        return currencies.pop()
    return default
