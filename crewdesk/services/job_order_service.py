from __future__ import annotations

import logging

from crewdesk.models.job_order import BillingUnit, JobOrder
from crewdesk.repositories.base import JobOrderRepository
from crewdesk.settings import settings

logger = logging.getLogger(__name__)


def stage_change(
    staged: list[JobOrder],
    job_order_id: int,
    rate: int | None = None,
    currency: str | None = None,
    unit: BillingUnit | None = None,
) -> list[JobOrder]:
    """Return a copy of ``staged`` with one job order's rate/currency/unit replaced."""
    changes: dict = {}
    if rate is not None:
        changes["rate"] = rate
    if currency is not None:
        changes["currency"] = currency
    if unit is not None:
        changes["unit"] = unit
    if not any(job.id == job_order_id for job in staged):
        raise ValueError(f"Job order {job_order_id} is not part of this list")
    return [job.model_copy(update=changes) if job.id == job_order_id else job for job in staged]


class JobOrderService:
    def __init__(self, repo: JobOrderRepository) -> None:
        self.repo = repo

    def list_for_crew(self, crew_id: int) -> list[JobOrder]:
        result = self.repo.list_by_crew(crew_id)
        logger.debug("Listed %d job orders for crew=%s", len(result), crew_id)
        return result

    def get_job_order(self, job_order_id: int) -> JobOrder | None:
        return self.repo.get_by_id(job_order_id)

    def save_job_orders(self, job_orders: list[JobOrder]) -> list[JobOrder]:
        """Persist rate/currency/unit for all given job orders in one write.

        Either every job order is updated or none is.
        """
        normalized: list[JobOrder] = []
        for job in job_orders:
            if job.id is None:
                raise ValueError("Cannot save a job order without an id")
            if job.rate < 0:
                raise ValueError(f"Rate for job order {job.id} must not be negative")
            currency = (job.currency or settings.default_currency).strip().upper()
            normalized.append(job.model_copy(update={"currency": currency}))

        self.repo.update_rates(normalized)
        logger.info("Saved %d job orders", len(normalized))
        return normalized
