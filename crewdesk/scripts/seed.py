"""Seed the database with demo data for local development.

Usage:
    python -m crewdesk.scripts.seed
"""

from __future__ import annotations

import random
from datetime import timedelta

from faker import Faker
from rich.console import Console
from rich.table import Table
from sqlalchemy import text

from crewdesk.constants import EVENT_LEVELS, format_date, today
from crewdesk.db import get_connection, initialize_db
from crewdesk.models import format_amount
from crewdesk.models.crew import CrewMember
from crewdesk.models.event import Event
from crewdesk.models.job_order import BillingUnit
from crewdesk.repositories.factory import (
    get_crew_repository,
    get_event_repository,
    get_invoice_repository,
    get_job_order_repository,
)
from crewdesk.services.crew_service import CrewService
from crewdesk.services.event_service import EventService
from crewdesk.services.invoice_service import InvoiceService
from crewdesk.services.job_order_service import JobOrderService

console = Console()
fake = Faker()

NUM_CREW = 12
NUM_EVENTS = 10

TABLES_TO_TRUNCATE = [
    "invoices",
    "event_crew_job_orders",
    "event_vehicles",
    "event_crew",
    "events",
    "crew_members",
]

ROLES = ["Camera Operator", "Gaffer", "Grip", "Sound Recordist", "Producer", "Driver", "Make-up Artist"]
TYPES = ["freelance", "staff"]
EVENT_KINDS = ["Commercial Shoot", "Music Video", "Corporate Film", "Documentary", "Fashion Shoot"]
VEHICLES = ["Grip Truck", "Camera Van", "Generator", "Minibus", "Pickup"]

# Typical rates in minor units per billing unit
RATE_RANGES = {
    BillingUnit.DAILY: (80000, 250000),
    BillingUnit.WEEKLY: (400000, 1200000),
    BillingUnit.MONTHLY: (1500000, 4000000),
}


def _truncate_all(conn) -> None:
    """Truncate all tables, disabling FK checks for MariaDB/MySQL."""
    console.print("\n[yellow]Truncating all tables...[/yellow]")
    conn.execute(text("SET FOREIGN_KEY_CHECKS = 0"))
    for table in TABLES_TO_TRUNCATE:
        conn.execute(text(f"TRUNCATE TABLE {table}"))  # noqa: S608
        console.print(f"  Truncated [dim]{table}[/dim]")
    conn.execute(text("SET FOREIGN_KEY_CHECKS = 1"))
    conn.commit()
    console.print("[green]All tables truncated.[/green]\n")


def _create_crew(crew_service: CrewService) -> list[CrewMember]:
    console.print("[cyan]Creating crew...[/cyan]")
    members = []
    for _ in range(NUM_CREW):
        member = crew_service.create_crew_member(
            fake.name(),
            role=random.choice(ROLES),
            status="active" if random.random() > 0.15 else "inactive",
            type=random.choice(TYPES),
        )
        console.print(f"  {member.full_name} [dim]({member.role})[/dim]")
        members.append(member)
    console.print(f"[green]{len(members)} crew members created.[/green]\n")
    return members


def _create_events(event_service: EventService, members: list[CrewMember]) -> list[Event]:
    """Events spread around today: some finished, some running, some upcoming."""
    console.print("[cyan]Creating events...[/cyan]")
    base = today()
    events = []
    for _ in range(NUM_EVENTS):
        start = base + timedelta(days=random.randint(-45, 30))
        end = start + timedelta(days=random.randint(0, 20))
        crew = random.sample(members, k=random.randint(2, 5))
        event = event_service.create_event(
            f"{fake.company()} {random.choice(EVENT_KINDS)}",
            start,
            end,
            job_id=f"JOB-{random.randint(1000, 9999)}",
            level=random.choice(EVENT_LEVELS),
            notes=fake.sentence() if random.random() > 0.5 else "",
            vehicles=random.sample(VEHICLES, k=random.randint(0, 2)),
            crew_ids=[m.id for m in crew if m.id is not None],
        )
        console.print(
            f"  [bold]{event.title}[/bold] {format_date(event.start_date)} - {format_date(event.end_date)}, "
            f"{len(event.crew_ids)} crew"
        )
        events.append(event)
    console.print(f"[green]{len(events)} events created.[/green]\n")
    return events


def _set_rates(job_order_service: JobOrderService, members: list[CrewMember]) -> int:
    console.print("[cyan]Setting rates...[/cyan]")
    count = 0
    for member in members:
        if member.id is None:
            continue
        staged = []
        for job in job_order_service.list_for_crew(member.id):
            unit = random.choices(list(BillingUnit), weights=[6, 2, 1])[0]
            low, high = RATE_RANGES[unit]
            staged.append(job.model_copy(update={"rate": random.randint(low, high) // 100 * 100, "unit": unit}))
        job_order_service.save_job_orders(staged)
        count += len(staged)
    console.print(f"[green]{count} job orders priced.[/green]\n")
    return count


def _create_invoices(invoice_service: InvoiceService, members: list[CrewMember]) -> int:
    console.print("[cyan]Generating invoices...[/cyan]")
    base = today()
    start = base - timedelta(days=60)

    table = Table(title="Invoices generated")
    table.add_column("Crew", style="bold")
    table.add_column("Period")
    table.add_column("Lines", justify="right")
    table.add_column("Total", justify="right")

    total = 0
    for member in members:
        run = invoice_service.generate_invoice(member, start, base)
        if not run.invoice.breakdown:
            continue
        table.add_row(
            member.full_name,
            f"{format_date(start)} - {format_date(base)}",
            str(len(run.invoice.breakdown)),
            format_amount(run.invoice.total, run.invoice.currency),
        )
        total += 1

    console.print(table)
    console.print(f"\n[green]{total} invoices generated.[/green]\n")
    return total


def main() -> None:
    console.print("[bold magenta]CrewDesk - Database Seeder[/bold magenta]")
    console.print("=" * 40)

    initialize_db()
    conn = get_connection()

    _truncate_all(conn)

    crew_repo = get_crew_repository()
    event_repo = get_event_repository()
    job_order_repo = get_job_order_repository()
    invoice_repo = get_invoice_repository()

    crew_service = CrewService(crew_repo, event_repo=event_repo)
    event_service = EventService(event_repo, job_order_repo, crew_repo)
    job_order_service = JobOrderService(job_order_repo)
    invoice_service = InvoiceService(job_order_repo, event_repo, invoice_repo)

    members = _create_crew(crew_service)
    events = _create_events(event_service, members)
    priced = _set_rates(job_order_service, members)
    invoices = _create_invoices(invoice_service, members)

    console.print("[bold green]Seeding complete![/bold green]")
    console.print(f"  Crew:        {len(members)}")
    console.print(f"  Events:      {len(events)}")
    console.print(f"  Job orders:  {priced}")
    console.print(f"  Invoices:    {invoices}")


if __name__ == "__main__":  # pragma: no cover
    main()
