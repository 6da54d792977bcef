from __future__ import annotations

import logging
from datetime import date

from ulid import ULID

from crewdesk.models.event import DEFAULT_LEVEL, ActiveEvent, Event, ordinal
from crewdesk.models.job_order import BillingUnit, JobOrder
from crewdesk.repositories.base import CrewRepository, EventRepository, JobOrderRepository
from crewdesk.settings import settings
from crewdesk.storage.base import StorageBackend

logger = logging.getLogger(__name__)


FILE_EXTENSIONS = {
    "application/pdf": ".pdf",
    "image/jpeg": ".jpg",
    "image/png": ".png",
}
MAX_EVENT_FILE_SIZE = 20 * 1024 * 1024  # 20 MB


def _event_file_storage_key(event_uuid: str, file_uuid: str, content_type: str) -> str:
    ext = FILE_EXTENSIONS.get(content_type, "")
    prefix = settings.storage_prefix
    if prefix:
        return f"{prefix}/events/{event_uuid}/{file_uuid}{ext}"
    return f"events/{event_uuid}/{file_uuid}{ext}"


def _validate_event_fields(title: str, start_date: date | None, end_date: date | None) -> None:
    if not title.strip():
        raise ValueError("Title is required")
    if start_date is None or end_date is None:
        raise ValueError("Start and end dates are required")
    if start_date > end_date:
        raise ValueError("Event start date must not be after the end date")


class EventService:
    def __init__(
        self,
        repo: EventRepository,
        job_order_repo: JobOrderRepository,
        crew_repo: CrewRepository | None = None,
        storage: StorageBackend | None = None,
    ) -> None:
        self.repo = repo
        self.job_order_repo = job_order_repo
        self.crew_repo = crew_repo
        self.storage = storage

    def _open_job_orders(self, event_id: int, crew_ids: list[int]) -> None:
        if not crew_ids:
            return
        self.job_order_repo.create_many(
            [
                JobOrder(
                    event_id=event_id,
                    crew_id=crew_id,
                    rate=0,
                    currency=settings.default_currency,
                    unit=BillingUnit.DAILY,
                )
                for crew_id in crew_ids
            ]
        )
        logger.info("Opened %d job orders for event %s", len(crew_ids), event_id)

    def create_event(
        self,
        title: str,
        start_date: date | None,
        end_date: date | None,
        job_id: str = "",
        level: str = DEFAULT_LEVEL,
        notes: str = "",
        vehicles: list[str] | None = None,
        crew_ids: list[int] | None = None,
    ) -> Event:
        _validate_event_fields(title, start_date, end_date)
        crew_ids = list(dict.fromkeys(crew_ids or []))
        event = Event(
            title=title.strip(),
            job_id=job_id.strip(),
            start_date=start_date,
            end_date=end_date,
            level=level or DEFAULT_LEVEL,
            notes=notes,
            vehicles=[v.strip() for v in vehicles or [] if v.strip()],
            crew_ids=crew_ids,
        )
        result = self.repo.create(event)
        logger.info("Event created: id=%s, title=%s, crew=%d", result.id, result.title, len(crew_ids))
        if result.id is None:
            raise RuntimeError("Event has no id after create")
        self._open_job_orders(result.id, crew_ids)
        return result

    def update_event(self, event: Event) -> Event:
        if event.id is None:
            raise ValueError("Cannot update event without an id")
        _validate_event_fields(event.title, event.start_date, event.end_date)
        previous = self.repo.get_by_id(event.id)
        if previous is None:
            raise ValueError("Event not found")

        result = self.repo.update(event)

        removed = [crew_id for crew_id in previous.crew_ids if crew_id not in result.crew_ids]
        added = [crew_id for crew_id in result.crew_ids if crew_id not in previous.crew_ids]
        self.job_order_repo.delete_for_event_crew(event.id, removed)
        self._open_job_orders(event.id, added)
        logger.info(
            "Event updated: id=%s, title=%s, crew added=%d removed=%d",
            result.id,
            result.title,
            len(added),
            len(removed),
        )
        return result

    def get_event(self, event_id: int) -> Event | None:
        result = self.repo.get_by_id(event_id)
        logger.debug("get_event id=%s found=%s", event_id, result is not None)
        return result

    def get_event_by_uuid(self, uuid: str) -> Event | None:
        result = self.repo.get_by_uuid(uuid)
        logger.debug("get_event_by_uuid uuid=%s found=%s", uuid, result is not None)
        return result

    def list_events(self) -> list[Event]:
        result = self.repo.list_all()
        logger.debug("Listed %d events", len(result))
        return result

    def delete_event(self, event_id: int) -> None:
        self.repo.delete(event_id)
        logger.info("Event %s soft-deleted", event_id)

    def attach_file(self, event: Event, filename: str, data: bytes, content_type: str) -> str:
        if self.storage is None:
            raise RuntimeError("Storage backend not configured")
        if event.id is None:
            raise ValueError("Cannot attach a file to an event without an id")
        if content_type not in FILE_EXTENSIONS:
            raise ValueError(f"Unsupported file type: {content_type}")
        if not data:
            raise ValueError("Empty file")
        if len(data) > MAX_EVENT_FILE_SIZE:
            raise ValueError("File too large")

        key = _event_file_storage_key(event.uuid, str(ULID()), content_type)
        self.storage.save(key, data, content_type=content_type)
        url = self.storage.public_url(key)
        self.repo.update_file_url(event.id, url)
        event.file_url = url
        logger.info("File attached: event=%s file=%s key=%s", event.uuid, filename, key)
        return url

    def list_active(self, today: date) -> list[ActiveEvent]:
        """Events running today, with their crew and which day of the shoot it is."""
        events = self.repo.list_active_on(today)
        crew_ids = list(dict.fromkeys(crew_id for e in events for crew_id in e.crew_ids))
        members = self.crew_repo.list_by_ids(crew_ids) if self.crew_repo is not None else []
        members_by_id = {m.id: m for m in members}

        result: list[ActiveEvent] = []
        for event in events:
            day_number = (today - event.start_date).days + 1
            result.append(
                ActiveEvent(
                    event=event,
                    crew=[members_by_id[c] for c in event.crew_ids if c in members_by_id],
                    current_day=f"{ordinal(day_number)} Day",
                )
            )
        logger.debug("Active events on %s: %d", today, len(result))
        return result
