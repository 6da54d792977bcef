from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, field_validator


class BillingUnit(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def days_per_unit(self) -> int:
        return {BillingUnit.DAILY: 1, BillingUnit.WEEKLY: 7, BillingUnit.MONTHLY: 30}[self]


class JobOrder(BaseModel):
    id: int | None = None
    event_id: int
    crew_id: int
    rate: int = 0  # minor units
    currency: str = ""
    unit: BillingUnit = BillingUnit.DAILY

    @field_validator("unit", mode="before")
    @classmethod
    def _null_unit_is_daily(cls, value):
        if value is None or value == "":
            return BillingUnit.DAILY
        return value
