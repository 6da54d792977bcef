from datetime import date, datetime
from zoneinfo import ZoneInfo

from crewdesk.models.job_order import BillingUnit

AGENCY_TZ = ZoneInfo("Asia/Dubai")

DISPLAY_DATE_FORMAT = "%d/%m/%Y"

UNIT_LABELS = {BillingUnit.DAILY: "Per Day", BillingUnit.WEEKLY: "Per Week", BillingUnit.MONTHLY: "Per Month"}

EVENT_LEVELS = ("Primary", "Success", "Warning", "Danger")


def today() -> date:
    return datetime.now(AGENCY_TZ).date()


def format_date(value: date | None) -> str:
    if value is None:
        return "-"
    return value.strftime(DISPLAY_DATE_FORMAT)


def parse_date(value: str) -> date | None:
    """Parse 'dd/mm/yyyy' or ISO 'yyyy-mm-dd'. Returns None on invalid input."""
    value = value.strip()
    for fmt in (DISPLAY_DATE_FORMAT, "%Y-%m-%d"):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None
