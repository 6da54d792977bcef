from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.exc import SQLAlchemyError

from crewdesk.invoicing import compute_breakdown, grand_total, resolve_currency, validate_window
from crewdesk.models.crew import CrewMember
from crewdesk.models.invoice import Invoice, InvoiceRun
from crewdesk.pdf.invoice import InvoicePDF, invoice_filename
from crewdesk.repositories.base import EventRepository, InvoiceRepository, JobOrderRepository
from crewdesk.settings import settings

logger = logging.getLogger(__name__)


class InvoiceService:
    def __init__(
        self,
        job_order_repo: JobOrderRepository,
        event_repo: EventRepository,
        invoice_repo: InvoiceRepository,
    ) -> None:
        self.job_order_repo = job_order_repo
        self.event_repo = event_repo
        self.invoice_repo = invoice_repo
        self.pdf_generator = InvoicePDF()

    def build_invoice(self, member: CrewMember, start: date | None, end: date | None) -> Invoice:
        """Read the crew member's job orders and events and compute the invoice, without saving it."""
        start, end = validate_window(start, end)
        if member.id is None:
            raise ValueError("Cannot invoice a crew member without an id")

        job_orders = self.job_order_repo.list_by_crew(member.id)
        event_ids = list(dict.fromkeys(job.event_id for job in job_orders))
        events = self.event_repo.list_by_ids(event_ids)

        breakdown = compute_breakdown(job_orders, events, start, end)
        currency = resolve_currency(breakdown, settings.default_currency)
        return Invoice(
            crew_id=member.id,
            start_date=start,
            end_date=end,
            currency=currency,
            total=grand_total(breakdown),
            job_order_ids=[item.job_order_id for item in breakdown],
            breakdown=breakdown,
        )

    def generate_invoice(self, member: CrewMember, start: date | None, end: date | None) -> InvoiceRun:
        """Compute, save and render an invoice.

        A failure to save is reported on the returned run and does not stop
        the document from being rendered.
        """
        invoice = self.build_invoice(member, start, end)
        logger.info(
            "Invoice computed: crew=%s window=%s..%s lines=%d total=%d %s",
            member.id,
            invoice.start_date,
            invoice.end_date,
            len(invoice.breakdown),
            invoice.total,
            invoice.currency,
        )

        saved = True
        error = ""
        try:
            invoice = self.invoice_repo.create(invoice)
            logger.info("Invoice saved: uuid=%s crew=%s", invoice.uuid, member.id)
        except SQLAlchemyError as exc:
            logger.exception("Failed to save invoice for crew %s", member.id)
            saved = False
            error = f"Failed to save invoice: {exc.__class__.__name__}"

        pdf = self.pdf_generator.generate(invoice, member)
        return InvoiceRun(invoice=invoice, pdf=pdf, filename=invoice_filename(member), saved=saved, error=error)

    def render_invoice(self, invoice: Invoice, member: CrewMember) -> bytes:
        return self.pdf_generator.generate(invoice, member)

    def list_invoices(self, crew_id: int) -> list[Invoice]:
        result = self.invoice_repo.list_by_crew(crew_id)
        logger.debug("Listed %d invoices for crew=%s", len(result), crew_id)
        return result

    def get_invoice_by_uuid(self, uuid: str) -> Invoice | None:
        result = self.invoice_repo.get_by_uuid(uuid)
        logger.debug("get_invoice_by_uuid uuid=%s found=%s", uuid, result is not None)
        return result
