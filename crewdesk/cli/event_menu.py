from __future__ import annotations

import questionary
from rich.console import Console
from rich.table import Table

from crewdesk.constants import EVENT_LEVELS, format_date, parse_date, today
from crewdesk.models.event import Event
from crewdesk.services.crew_service import CrewService
from crewdesk.services.event_service import EventService

console = Console()


def _ask_date(prompt: str, default: str = ""):
    while True:
        value = questionary.text(prompt, default=default).ask()
        if value is None:
            return None
        parsed = parse_date(value)
        if parsed is not None:
            return parsed
        console.print("[red]Invalid date. Use dd/mm/yyyy.[/red]")


def _ask_crew(crew_service: CrewService, selected: list[int]) -> list[int] | None:
    members = crew_service.list_crew_members()
    if not members:
        return []
    choices = [
        questionary.Choice(title=m.full_name, value=m.id, checked=m.id in selected) for m in members
    ]
    return questionary.checkbox("Crew:", choices=choices).ask()


def create_event_menu(event_service: EventService, crew_service: CrewService) -> None:
    console.print()
    console.print("[bold]New Event[/bold]", style="cyan")

    title = questionary.text("Title:").ask()
    if not title:
        console.print("[yellow]Cancelled.[/yellow]")
        return
    job_id = questionary.text("Job ID:").ask() or ""
    start = _ask_date("Start date (dd/mm/yyyy):")
    if start is None:
        return
    end = _ask_date("End date (dd/mm/yyyy):", default=format_date(start))
    if end is None:
        return
    level = questionary.select("Level:", choices=list(EVENT_LEVELS)).ask() or EVENT_LEVELS[0]
    notes = questionary.text("Notes (optional):").ask() or ""
    vehicles = questionary.text("Vehicles (comma separated, optional):").ask() or ""
    crew_ids = _ask_crew(crew_service, []) or []

    try:
        event = event_service.create_event(
            title,
            start,
            end,
            job_id=job_id,
            level=level,
            notes=notes,
            vehicles=vehicles.split(","),
            crew_ids=crew_ids,
        )
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        return

    console.print()
    console.print(f"[green bold]Event '{event.title}' created with {len(event.crew_ids)} crew.[/green bold]")


def list_events_menu(event_service: EventService, crew_service: CrewService) -> None:
    events = event_service.list_events()
    if not events:
        console.print("[yellow]No events scheduled.[/yellow]")
        return

    table = Table(title="Events")
    table.add_column("#", style="dim")
    table.add_column("Title", style="bold")
    table.add_column("Job ID")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Crew", justify="right")

    for e in events:
        table.add_row(str(e.id), e.title, e.job_id, format_date(e.start_date), format_date(e.end_date), str(len(e.crew_ids)))

    console.print()
    console.print(table)
    console.print()

    event_choices = {f"{e.id} - {e.title}": e for e in events}
    choice = questionary.select("Select an event:", choices=list(event_choices.keys()) + ["Back"]).ask()
    if choice is None or choice == "Back":
        return

    _event_detail_menu(event_choices[choice], event_service, crew_service)


def _event_detail_menu(event: Event, event_service: EventService, crew_service: CrewService) -> None:
    while True:
        console.print()
        console.print(f"[bold cyan]{event.title}[/bold cyan] ({format_date(event.start_date)} - {format_date(event.end_date)})")
        if event.notes:
            console.print(f"  {event.notes}")
        if event.vehicles:
            console.print(f"  Vehicles: {', '.join(event.vehicles)}")

        choice = questionary.select("Actions:", choices=["Edit Dates", "Edit Crew", "Delete Event", "Back"]).ask()

        if choice is None or choice == "Back":
            break
        elif choice == "Edit Dates":
            start = _ask_date("Start date (dd/mm/yyyy):", default=format_date(event.start_date))
            end = _ask_date("End date (dd/mm/yyyy):", default=format_date(event.end_date))
            if start is None or end is None:
                continue
            try:
                event = event_service.update_event(event.model_copy(update={"start_date": start, "end_date": end}))
            except ValueError as exc:
                console.print(f"[red]{exc}[/red]")
                continue
            console.print("[green]Event updated.[/green]")
        elif choice == "Edit Crew":
            crew_ids = _ask_crew(crew_service, event.crew_ids)
            if crew_ids is None:
                continue
            event = event_service.update_event(event.model_copy(update={"crew_ids": crew_ids}))
            console.print("[green]Crew updated.[/green]")
        elif choice == "Delete Event":
            confirm = questionary.confirm(f"Delete '{event.title}'?", default=False).ask()
            if confirm and event.id is not None:
                event_service.delete_event(event.id)
                console.print("[green]Event deleted.[/green]")
                break


def active_events_menu(event_service: EventService) -> None:
    active = event_service.list_active(today())
    if not active:
        console.print("[yellow]No events running today.[/yellow]")
        return

    table = Table(title="Active Today")
    table.add_column("Event", style="bold")
    table.add_column("Day")
    table.add_column("Crew")
    for item in active:
        table.add_row(item.event.title, item.current_day, ", ".join(m.full_name for m in item.crew) or "-")
    console.print()
    console.print(table)
