import questionary
from rich.console import Console

from crewdesk.cli.crew_menu import create_crew_menu, list_crew_menu
from crewdesk.cli.event_menu import active_events_menu, create_event_menu, list_events_menu
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
from crewdesk.storage.factory import get_storage

console = Console()


def _build_services() -> tuple[CrewService, EventService, JobOrderService, InvoiceService]:
    crew_repo = get_crew_repository()
    event_repo = get_event_repository()
    job_order_repo = get_job_order_repository()
    invoice_repo = get_invoice_repository()
    storage = get_storage()
    return (
        CrewService(crew_repo, storage, event_repo),
        EventService(event_repo, job_order_repo, crew_repo, storage),
        JobOrderService(job_order_repo),
        InvoiceService(job_order_repo, event_repo, invoice_repo),
    )


def main_menu() -> None:
    crew_service, event_service, job_order_service, invoice_service = _build_services()

    console.print()
    console.print("[bold]CrewDesk[/bold]", style="cyan")
    console.print()

    while True:
        choice = questionary.select(
            "Main Menu",
            choices=[
                "Crew Roster",
                "Add Crew Member",
                "Events",
                "Add Event",
                "Active Today",
                "Exit",
            ],
        ).ask()

        if choice is None or choice == "Exit":
            console.print("[bold]Bye![/bold]")
            break
        elif choice == "Crew Roster":
            list_crew_menu(crew_service, event_service, job_order_service, invoice_service)
        elif choice == "Add Crew Member":
            create_crew_menu(crew_service)
        elif choice == "Events":
            list_events_menu(event_service, crew_service)
        elif choice == "Add Event":
            create_event_menu(event_service, crew_service)
        elif choice == "Active Today":
            active_events_menu(event_service)
