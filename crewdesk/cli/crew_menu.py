from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table
from sqlalchemy.exc import SQLAlchemyError

from crewdesk.cli.invoice_menu import generate_invoice_menu, list_invoices_menu
from crewdesk.constants import UNIT_LABELS, format_date, today
from crewdesk.models import format_amount, parse_amount
from crewdesk.models.crew import CrewMember
from crewdesk.models.job_order import BillingUnit, JobOrder
from crewdesk.services.crew_service import CrewService
from crewdesk.services.event_service import EventService
from crewdesk.services.invoice_service import InvoiceService
from crewdesk.services.job_order_service import JobOrderService, stage_change

console = Console()

UNIT_CHOICES = {label: unit for unit, label in UNIT_LABELS.items()}


def create_crew_menu(crew_service: CrewService) -> None:
    console.print()
    console.print("[bold]New Crew Member[/bold]", style="cyan")

    full_name = questionary.text("Full name:").ask()
    if not full_name:
        console.print("[yellow]Cancelled.[/yellow]")
        return

    role = questionary.text("Role / position:").ask() or ""
    member_type = questionary.text("Type (e.g. freelance, staff):").ask() or ""
    status = questionary.select("Status:", choices=["active", "inactive"]).ask() or "active"

    member = crew_service.create_crew_member(full_name, role=role, status=status, type=member_type)
    console.print()
    console.print(f"[green bold]Crew member '{member.full_name}' created.[/green bold]")


def list_crew_menu(
    crew_service: CrewService,
    event_service: EventService,
    job_order_service: JobOrderService,
    invoice_service: InvoiceService,
) -> None:
    roster = crew_service.list_roster(today())

    if not roster:
        console.print("[yellow]No crew members yet.[/yellow]")
        return

    table = Table(title="Crew")
    table.add_column("#", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Role")
    table.add_column("Status")
    table.add_column("Upcoming projects")

    for entry in roster:
        m = entry.member
        table.add_row(str(m.id), m.full_name, m.role, m.status, ", ".join(entry.project_names) or "-")

    console.print()
    console.print(table)
    console.print()

    member_choices = {f"{e.member.id} - {e.member.full_name}": e.member for e in roster}
    choice = questionary.select("Select a crew member:", choices=list(member_choices.keys()) + ["Back"]).ask()
    if choice is None or choice == "Back":
        return

    _crew_profile_menu(member_choices[choice], event_service, job_order_service, invoice_service)


def _show_job_orders(job_orders: list[JobOrder], event_service: EventService) -> None:
    table = Table(title="Job Orders")
    table.add_column("#", style="dim")
    table.add_column("Event")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Rate", justify="right")
    table.add_column("Unit", justify="center")

    for job in job_orders:
        event = event_service.get_event(job.event_id)
        table.add_row(
            str(job.id),
            event.title if event else "Unknown Event",
            format_date(event.start_date) if event else "-",
            format_date(event.end_date) if event else "-",
            format_amount(job.rate, job.currency),
            UNIT_LABELS[job.unit],
        )
    console.print(table)


def _crew_profile_menu(
    member: CrewMember,
    event_service: EventService,
    job_order_service: JobOrderService,
    invoice_service: InvoiceService,
) -> None:
    if member.id is None:  # pragma: no cover
        console.print("[red]Invalid crew member.[/red]")
        return

    while True:
        console.print()
        console.print(f"[bold cyan]{member.full_name}[/bold cyan] - {member.role} ({member.status})")

        job_orders = job_order_service.list_for_crew(member.id)
        if job_orders:
            _show_job_orders(job_orders, event_service)
        else:
            console.print("[yellow]No job orders found.[/yellow]")
        console.print()

        choice = questionary.select(
            "Actions:",
            choices=["Edit Rates", "Generate Invoice", "Past Invoices", "Back"],
        ).ask()

        if choice is None or choice == "Back":
            break
        elif choice == "Edit Rates":
            if job_orders:
                edit_rates_menu(job_orders, job_order_service)
        elif choice == "Generate Invoice":
            generate_invoice_menu(member, invoice_service)
        elif choice == "Past Invoices":
            list_invoices_menu(member, invoice_service)


def edit_rates_menu(job_orders: list[JobOrder], job_order_service: JobOrderService) -> None:
    """Stage rate/currency/unit changes locally, then save them together."""
    staged = list(job_orders)

    while True:
        job_choices = {
            f"{j.id} - {format_amount(j.rate, j.currency)} {UNIT_LABELS[j.unit]}": j for j in staged
        }
        choice = questionary.select(
            "Select a job order to edit:",
            choices=list(job_choices.keys()) + ["Save", "Discard"],
        ).ask()

        if choice is None or choice == "Discard":
            console.print("[yellow]Changes discarded.[/yellow]")
            return
        if choice == "Save":
            try:
                job_order_service.save_job_orders(staged)
            except ValueError as exc:
                console.print(f"[red]{exc}[/red]")
                continue
            except SQLAlchemyError:
                console.print("[red]Could not save job orders. Nothing was changed; try again.[/red]")
                return
            console.print("[green]Saved successfully.[/green]")
            return

        job = job_choices[choice]
        if job.id is None:  # pragma: no cover
            continue

        rate_str = questionary.text("  Rate (e.g. 1500.00):", default=f"{job.rate / 100:.2f}").ask()
        rate = parse_amount(rate_str or "")
        if rate is None or rate < 0:
            console.print("[red]Invalid amount.[/red]")
            continue
        currency = questionary.text("  Currency:", default=job.currency).ask() or job.currency
        unit_label = questionary.select("  Unit:", choices=list(UNIT_CHOICES.keys())).ask()
        unit = UNIT_CHOICES.get(unit_label or "", BillingUnit.DAILY)

        staged = stage_change(staged, job.id, rate=rate, currency=currency, unit=unit)
