import logging
import sys

from crewdesk.settings import settings

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# Chatty at INFO/DEBUG: boto on every S3 call, fontTools while fpdf2 builds invoices.
QUIET_LOGGERS = ("uvicorn.access", "botocore", "boto3", "s3transfer", "urllib3", "fontTools")


def configure_logging() -> None:
    """Configure the root logger based on settings.

    Call once at startup. Alembic's ``fileConfig`` replaces the root handlers,
    so call ``reconfigure()`` again after running migrations.
    """
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)

    if settings.log_json:
        from pythonjsonlogger.json import JsonFormatter

        handler.setFormatter(
            JsonFormatter(
                fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
                rename_fields={"asctime": "timestamp", "levelname": "level"},
                static_fields={"service": "crewdesk"},
            )
        )
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO if settings.log_sql else logging.WARNING)


reconfigure = configure_logging
