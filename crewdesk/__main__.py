import logging

from rich.console import Console
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError

from crewdesk.cli.app import main_menu
from crewdesk.db import initialize_db
from crewdesk.logging import configure_logging, reconfigure
from crewdesk.settings import settings

logger = logging.getLogger(__name__)
console = Console()


def main() -> None:
    configure_logging()
    try:
        initialize_db()
    except SQLAlchemyError:
        db = make_url(settings.db_url).render_as_string(hide_password=True)
        logger.exception("Migrations failed against %s", db)
        console.print(f"[red]Cannot reach the database at {db}. Check CREWDESK_DB_URL and try again.[/red]")
        raise SystemExit(1)
    reconfigure()
    main_menu()


if __name__ == "__main__":
    main()
