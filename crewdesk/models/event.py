from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel

from crewdesk.models.crew import CrewMember

DEFAULT_LEVEL = "Primary"


class Event(BaseModel):
    id: int | None = None
    uuid: str = ""
    title: str
    job_id: str = ""
    start_date: date
    end_date: date
    level: str = DEFAULT_LEVEL
    notes: str = ""
    file_url: str = ""
    vehicles: list[str] = []
    crew_ids: list[int] = []
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def overlaps(self, start: date, end: date) -> bool:
        return self.end_date >= start and self.start_date <= end

    def is_active_on(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


class ActiveEvent(BaseModel):
    event: Event
    crew: list[CrewMember] = []
    current_day: str = ""


def ordinal(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return f"{n}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"
