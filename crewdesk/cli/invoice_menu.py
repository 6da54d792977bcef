from __future__ import annotations

from pathlib import Path

import questionary
from rich.console import Console
from rich.table import Table

from crewdesk.constants import UNIT_LABELS, format_date, parse_date
from crewdesk.models import format_amount
from crewdesk.models.crew import CrewMember
from crewdesk.models.invoice import Invoice
from crewdesk.pdf.invoice import invoice_filename
from crewdesk.services.invoice_service import InvoiceService

console = Console()


def _show_invoice(invoice: Invoice) -> None:
    table = Table(title=f"Invoice {format_date(invoice.start_date)} - {format_date(invoice.end_date)}")
    table.add_column("Job Title")
    table.add_column("Units", justify="center")
    table.add_column("Rate", justify="right")
    table.add_column("Total", justify="right")

    for item in invoice.breakdown:
        table.add_row(
            item.event_title,
            f"{item.billable_days} ({UNIT_LABELS[item.unit]})",
            format_amount(item.rate, item.currency),
            format_amount(item.total),
        )

    console.print(table)
    console.print(f"  [bold]Total: {format_amount(invoice.total, invoice.currency)}[/bold]")


def _write_pdf(filename: str, data: bytes) -> Path:
    path = Path.cwd() / filename
    path.write_bytes(data)
    return path


def generate_invoice_menu(member: CrewMember, invoice_service: InvoiceService) -> None:
    console.print()
    console.print("[bold]Generate Invoice[/bold]", style="cyan")

    start = parse_date(questionary.text("Start date (dd/mm/yyyy):").ask() or "")
    end = parse_date(questionary.text("End date (dd/mm/yyyy):").ask() or "")

    try:
        run = invoice_service.generate_invoice(member, start, end)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        return

    console.print()
    _show_invoice(run.invoice)

    if run.saved:
        console.print("[green bold]Invoice generated and saved.[/green bold]")
    else:
        console.print(f"[red]{run.error}[/red]")

    path = _write_pdf(run.filename, run.pdf)
    console.print(f"  File: {path}")


def list_invoices_menu(member: CrewMember, invoice_service: InvoiceService) -> None:
    if member.id is None:  # pragma: no cover
        return
    invoices = invoice_service.list_invoices(member.id)
    if not invoices:
        console.print("[yellow]No invoices yet.[/yellow]")
        return

    choices = {
        f"{format_date(i.start_date)} - {format_date(i.end_date)}  {format_amount(i.total, i.currency)}": i
        for i in invoices
    }
    choice = questionary.select("Select an invoice:", choices=list(choices.keys()) + ["Back"]).ask()
    if choice is None or choice == "Back":
        return

    invoice = choices[choice]
    _show_invoice(invoice)
    if questionary.confirm("Save PDF?", default=False).ask():
        path = _write_pdf(invoice_filename(member), invoice_service.render_invoice(invoice, member))
        console.print(f"  File: {path}")
