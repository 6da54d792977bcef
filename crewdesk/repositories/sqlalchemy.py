from __future__ import annotations

import json
from datetime import date, datetime

from sqlalchemy import Connection, text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import SQLAlchemyError
from ulid import ULID

from crewdesk.constants import AGENCY_TZ
from crewdesk.models.crew import CrewMember
from crewdesk.models.event import Event
from crewdesk.models.invoice import Invoice, InvoiceLineItem
from crewdesk.models.job_order import JobOrder
from crewdesk.repositories.base import (
    CrewRepository,
    EventRepository,
    InvoiceRepository,
    JobOrderRepository,
)


def _now() -> datetime:
    return datetime.now(AGENCY_TZ)


def _in_params(ids: list[int]) -> tuple[str, dict[str, int]]:
    placeholders = ", ".join(f":id{i}" for i in range(len(ids)))
    params = {f"id{i}": value for i, value in enumerate(ids)}
    return placeholders, params


class SQLAlchemyCrewRepository(CrewRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, member: CrewMember) -> CrewMember:
        now = _now()
        result = self.conn.execute(
            text(
                "INSERT INTO crew_members (uuid, full_name, role, status, type, avatar_url, created_at, updated_at) "
                "VALUES (:uuid, :full_name, :role, :status, :type, :avatar_url, :created_at, :updated_at)"
            ),
            {
                "uuid": str(ULID()),
                "full_name": member.full_name,
                "role": member.role,
                "status": member.status,
                "type": member.type,
                "avatar_url": member.avatar_url,
                "created_at": now,
                "updated_at": now,
            },
        )
        crew_id = result.lastrowid
        self.conn.commit()
        created = self.get_by_id(crew_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve crew member after create (id={crew_id})")
        return created

    @staticmethod
    def _build_member(row: RowMapping) -> CrewMember:
        return CrewMember(
            id=row["id"],
            uuid=row["uuid"],
            full_name=row["full_name"],
            role=row["role"],
            status=row["status"],
            type=row["type"],
            avatar_url=row["avatar_url"] or "",
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_by_id(self, crew_id: int) -> CrewMember | None:
        row = (
            self.conn.execute(text("SELECT * FROM crew_members WHERE id = :id"), {"id": crew_id})
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build_member(row)

    def get_by_uuid(self, uuid: str) -> CrewMember | None:
        row = (
            self.conn.execute(text("SELECT * FROM crew_members WHERE uuid = :uuid"), {"uuid": uuid})
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build_member(row)

    def list_all(self) -> list[CrewMember]:
        rows = self.conn.execute(text("SELECT * FROM crew_members ORDER BY full_name")).mappings().fetchall()
        return [self._build_member(row) for row in rows]

    def list_by_ids(self, crew_ids: list[int]) -> list[CrewMember]:
        if not crew_ids:
            return []
        placeholders, params = _in_params(crew_ids)
        rows = (
            self.conn.execute(
                text(f"SELECT * FROM crew_members WHERE id IN ({placeholders}) ORDER BY full_name"),
                params,
            )
            .mappings()
            .fetchall()
        )
        return [self._build_member(row) for row in rows]

    def update(self, member: CrewMember) -> CrewMember:
        if member.id is None:
            raise ValueError("Cannot update crew member without an id")
        self.conn.execute(
            text(
                "UPDATE crew_members SET full_name = :full_name, role = :role, status = :status, "
                "type = :type, updated_at = :updated_at WHERE id = :id"
            ),
            {
                "full_name": member.full_name,
                "role": member.role,
                "status": member.status,
                "type": member.type,
                "updated_at": _now(),
                "id": member.id,
            },
        )
        self.conn.commit()
        updated = self.get_by_id(member.id)
        if updated is None:
            raise RuntimeError(f"Failed to retrieve crew member after update (id={member.id})")
        return updated

    def update_avatar_url(self, crew_id: int, avatar_url: str) -> None:
        self.conn.execute(
            text("UPDATE crew_members SET avatar_url = :avatar_url, updated_at = :updated_at WHERE id = :id"),
            {"avatar_url": avatar_url, "updated_at": _now(), "id": crew_id},
        )
        self.conn.commit()


class SQLAlchemyEventRepository(EventRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def _insert_vehicles(self, event_id: int, vehicles: list[str]) -> None:
        for i, name in enumerate(vehicles):
            self.conn.execute(
                text(
                    "INSERT INTO event_vehicles (event_id, vehicle_name, sort_order) "
                    "VALUES (:event_id, :vehicle_name, :sort_order)"
                ),
                {"event_id": event_id, "vehicle_name": name, "sort_order": i},
            )

    def _insert_crew_links(self, event_id: int, crew_ids: list[int]) -> None:
        for crew_id in crew_ids:
            self.conn.execute(
                text("INSERT INTO event_crew (event_id, crew_member_id) VALUES (:event_id, :crew_member_id)"),
                {"event_id": event_id, "crew_member_id": crew_id},
            )

    def create(self, event: Event) -> Event:
        now = _now()
        result = self.conn.execute(
            text(
                "INSERT INTO events (uuid, title, job_id, start_date, end_date, level, notes, file_url, "
                "created_at, updated_at) "
                "VALUES (:uuid, :title, :job_id, :start_date, :end_date, :level, :notes, :file_url, "
                ":created_at, :updated_at)"
            ),
            {
                "uuid": str(ULID()),
                "title": event.title,
                "job_id": event.job_id,
                "start_date": event.start_date.isoformat(),
                "end_date": event.end_date.isoformat(),
                "level": event.level,
                "notes": event.notes,
                "file_url": event.file_url,
                "created_at": now,
                "updated_at": now,
            },
        )
        event_id = result.lastrowid
        self._insert_crew_links(event_id, event.crew_ids)
        self._insert_vehicles(event_id, event.vehicles)
        self.conn.commit()
        created = self.get_by_id(event_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve event after create (id={event_id})")
        return created

    @staticmethod
    def _build_event(row: RowMapping, vehicle_rows: list[RowMapping], crew_rows: list[RowMapping]) -> Event:
        return Event(
            id=row["id"],
            uuid=row["uuid"],
            title=row["title"],
            job_id=row["job_id"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            level=row["level"],
            notes=row["notes"] or "",
            file_url=row["file_url"] or "",
            vehicles=[v["vehicle_name"] for v in vehicle_rows],
            crew_ids=[c["crew_member_id"] for c in crew_rows],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def _build_events_from_rows(self, rows: list[RowMapping]) -> list[Event]:
        if not rows:
            return []
        placeholders, params = _in_params([row["id"] for row in rows])
        vehicles = (
            self.conn.execute(
                text(f"SELECT * FROM event_vehicles WHERE event_id IN ({placeholders}) ORDER BY sort_order"),
                params,
            )
            .mappings()
            .fetchall()
        )
        links = (
            self.conn.execute(
                text(f"SELECT * FROM event_crew WHERE event_id IN ({placeholders}) ORDER BY id"),
                params,
            )
            .mappings()
            .fetchall()
        )
        vehicles_by_event: dict[int, list[RowMapping]] = {}
        for vehicle_row in vehicles:
            vehicles_by_event.setdefault(vehicle_row["event_id"], []).append(vehicle_row)
        links_by_event: dict[int, list[RowMapping]] = {}
        for link_row in links:
            links_by_event.setdefault(link_row["event_id"], []).append(link_row)
        return [
            self._build_event(row, vehicles_by_event.get(row["id"], []), links_by_event.get(row["id"], []))
            for row in rows
        ]

    def _fetch_one(self, where: str, params: dict) -> Event | None:
        row = (
            self.conn.execute(text(f"SELECT * FROM events WHERE {where} AND deleted_at IS NULL"), params)
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build_events_from_rows([row])[0]

    def get_by_id(self, event_id: int) -> Event | None:
        return self._fetch_one("id = :id", {"id": event_id})

    def get_by_uuid(self, uuid: str) -> Event | None:
        return self._fetch_one("uuid = :uuid", {"uuid": uuid})

    def list_all(self) -> list[Event]:
        rows = (
            self.conn.execute(text("SELECT * FROM events WHERE deleted_at IS NULL ORDER BY start_date, id"))
            .mappings()
            .fetchall()
        )
        return self._build_events_from_rows(list(rows))

    def list_by_ids(self, event_ids: list[int]) -> list[Event]:
        if not event_ids:
            return []
        placeholders, params = _in_params(event_ids)
        rows = (
            self.conn.execute(
                text(
                    f"SELECT * FROM events WHERE id IN ({placeholders}) AND deleted_at IS NULL "
                    "ORDER BY start_date, id"
                ),
                params,
            )
            .mappings()
            .fetchall()
        )
        return self._build_events_from_rows(list(rows))

    def list_active_on(self, day: date) -> list[Event]:
        rows = (
            self.conn.execute(
                text(
                    "SELECT * FROM events WHERE start_date <= :day AND end_date >= :day "
                    "AND deleted_at IS NULL ORDER BY start_date, id"
                ),
                {"day": day.isoformat()},
            )
            .mappings()
            .fetchall()
        )
        return self._build_events_from_rows(list(rows))

    def list_ending_on_or_after(self, day: date) -> list[Event]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM events WHERE end_date >= :day AND deleted_at IS NULL ORDER BY start_date, id"),
                {"day": day.isoformat()},
            )
            .mappings()
            .fetchall()
        )
        return self._build_events_from_rows(list(rows))

    def update(self, event: Event) -> Event:
        if event.id is None:
            raise ValueError("Cannot update event without an id")
        self.conn.execute(
            text(
                "UPDATE events SET title = :title, job_id = :job_id, start_date = :start_date, "
                "end_date = :end_date, level = :level, notes = :notes, updated_at = :updated_at "
                "WHERE id = :id"
            ),
            {
                "title": event.title,
                "job_id": event.job_id,
                "start_date": event.start_date.isoformat(),
                "end_date": event.end_date.isoformat(),
                "level": event.level,
                "notes": event.notes,
                "updated_at": _now(),
                "id": event.id,
            },
        )
        self.conn.execute(text("DELETE FROM event_vehicles WHERE event_id = :event_id"), {"event_id": event.id})
        self._insert_vehicles(event.id, event.vehicles)

        current = {
            row["crew_member_id"]
            for row in self.conn.execute(
                text("SELECT crew_member_id FROM event_crew WHERE event_id = :event_id"),
                {"event_id": event.id},
            ).mappings()
        }
        wanted = list(dict.fromkeys(event.crew_ids))
        for crew_id in current - set(wanted):
            self.conn.execute(
                text("DELETE FROM event_crew WHERE event_id = :event_id AND crew_member_id = :crew_member_id"),
                {"event_id": event.id, "crew_member_id": crew_id},
            )
        self._insert_crew_links(event.id, [crew_id for crew_id in wanted if crew_id not in current])
        self.conn.commit()

        updated = self.get_by_id(event.id)
        if updated is None:
            raise RuntimeError(f"Failed to retrieve event after update (id={event.id})")
        return updated

    def update_file_url(self, event_id: int, file_url: str) -> None:
        self.conn.execute(
            text("UPDATE events SET file_url = :file_url, updated_at = :updated_at WHERE id = :id"),
            {"file_url": file_url, "updated_at": _now(), "id": event_id},
        )
        self.conn.commit()

    def delete(self, event_id: int) -> None:
        self.conn.execute(
            text("UPDATE events SET deleted_at = :deleted_at WHERE id = :id"),
            {"deleted_at": _now(), "id": event_id},
        )
        self.conn.commit()


class SQLAlchemyJobOrderRepository(JobOrderRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    @staticmethod
    def _build_job_order(row: RowMapping) -> JobOrder:
        return JobOrder(
            id=row["id"],
            event_id=row["event_id"],
            crew_id=row["crew_id"],
            rate=row["rate"] or 0,
            currency=row["currency"] or "",
            unit=row["unit"],
        )

    def create_many(self, job_orders: list[JobOrder]) -> list[JobOrder]:
        ids: list[int] = []
        for job in job_orders:
            result = self.conn.execute(
                text(
                    "INSERT INTO event_crew_job_orders (event_id, crew_id, rate, currency, unit) "
                    "VALUES (:event_id, :crew_id, :rate, :currency, :unit)"
                ),
                {
                    "event_id": job.event_id,
                    "crew_id": job.crew_id,
                    "rate": job.rate,
                    "currency": job.currency,
                    "unit": job.unit.value,
                },
            )
            ids.append(result.lastrowid)
        self.conn.commit()
        return [job.model_copy(update={"id": job_id}) for job, job_id in zip(job_orders, ids)]

    def get_by_id(self, job_order_id: int) -> JobOrder | None:
        row = (
            self.conn.execute(text("SELECT * FROM event_crew_job_orders WHERE id = :id"), {"id": job_order_id})
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build_job_order(row)

    def list_by_crew(self, crew_id: int) -> list[JobOrder]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM event_crew_job_orders WHERE crew_id = :crew_id ORDER BY id"),
                {"crew_id": crew_id},
            )
            .mappings()
            .fetchall()
        )
        return [self._build_job_order(row) for row in rows]

    def list_by_event(self, event_id: int) -> list[JobOrder]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM event_crew_job_orders WHERE event_id = :event_id ORDER BY id"),
                {"event_id": event_id},
            )
            .mappings()
            .fetchall()
        )
        return [self._build_job_order(row) for row in rows]

    def update_rates(self, job_orders: list[JobOrder]) -> None:
        if not job_orders:
            return
        params = []
        for job in job_orders:
            if job.id is None:
                raise ValueError("Cannot update job order without an id")
            params.append({"rate": job.rate, "currency": job.currency, "unit": job.unit.value, "id": job.id})
        try:
            self.conn.execute(
                text("UPDATE event_crew_job_orders SET rate = :rate, currency = :currency, unit = :unit WHERE id = :id"),
                params,
            )
            self.conn.commit()
        except SQLAlchemyError:
            self.conn.rollback()
            raise

    def delete_for_event_crew(self, event_id: int, crew_ids: list[int]) -> None:
        if not crew_ids:
            return
        placeholders, params = _in_params(crew_ids)
        params["event_id"] = event_id
        self.conn.execute(
            text(f"DELETE FROM event_crew_job_orders WHERE event_id = :event_id AND crew_id IN ({placeholders})"),
            params,
        )
        self.conn.commit()


class SQLAlchemyInvoiceRepository(InvoiceRepository):
    def __init__(self, conn: Connection) -> None:
        self.conn = conn

    def create(self, invoice: Invoice) -> Invoice:
        try:
            result = self.conn.execute(
                text(
                    "INSERT INTO invoices (uuid, crew_id, start_date, end_date, currency, total, "
                    "job_order_ids, breakdown, created_at) "
                    "VALUES (:uuid, :crew_id, :start_date, :end_date, :currency, :total, "
                    ":job_order_ids, :breakdown, :created_at)"
                ),
                {
                    "uuid": str(ULID()),
                    "crew_id": invoice.crew_id,
                    "start_date": invoice.start_date.isoformat(),
                    "end_date": invoice.end_date.isoformat(),
                    "currency": invoice.currency,
                    "total": invoice.total,
                    "job_order_ids": json.dumps(invoice.job_order_ids),
                    "breakdown": json.dumps([item.model_dump(mode="json") for item in invoice.breakdown]),
                    "created_at": _now(),
                },
            )
            invoice_id = result.lastrowid
            self.conn.commit()
        except SQLAlchemyError:
            self.conn.rollback()
            raise
        created = self.get_by_id(invoice_id)
        if created is None:
            raise RuntimeError(f"Failed to retrieve invoice after create (id={invoice_id})")
        return created

    @staticmethod
    def _build_invoice(row: RowMapping) -> Invoice:
        job_order_ids = row["job_order_ids"]
        if isinstance(job_order_ids, str):
            job_order_ids = json.loads(job_order_ids)
        breakdown = row["breakdown"]
        if isinstance(breakdown, str):
            breakdown = json.loads(breakdown)
        return Invoice(
            id=row["id"],
            uuid=row["uuid"],
            crew_id=row["crew_id"],
            start_date=row["start_date"],
            end_date=row["end_date"],
            currency=row["currency"],
            total=row["total"],
            job_order_ids=job_order_ids or [],
            breakdown=[InvoiceLineItem(**item) for item in breakdown or []],
            created_at=row["created_at"],
        )

    def get_by_id(self, invoice_id: int) -> Invoice | None:
        row = self.conn.execute(text("SELECT * FROM invoices WHERE id = :id"), {"id": invoice_id}).mappings().fetchone()
        if row is None:
            return None
        return self._build_invoice(row)

    def get_by_uuid(self, uuid: str) -> Invoice | None:
        row = (
            self.conn.execute(text("SELECT * FROM invoices WHERE uuid = :uuid"), {"uuid": uuid})
            .mappings()
            .fetchone()
        )
        if row is None:
            return None
        return self._build_invoice(row)

    def list_by_crew(self, crew_id: int) -> list[Invoice]:
        rows = (
            self.conn.execute(
                text("SELECT * FROM invoices WHERE crew_id = :crew_id ORDER BY created_at DESC, id DESC"),
                {"crew_id": crew_id},
            )
            .mappings()
            .fetchall()
        )
        return [self._build_invoice(row) for row in rows]
