from __future__ import annotations

import logging
import re

from fpdf import FPDF

from crewdesk.constants import UNIT_LABELS, format_date
from crewdesk.models import format_amount
from crewdesk.models.crew import CrewMember
from crewdesk.models.invoice import Invoice

logger = logging.getLogger(__name__)

FONT = "Helvetica"

# Colour palette
SLATE = (38, 50, 72)
SLATE_LIGHT = (234, 237, 243)
AMBER = (232, 163, 61)
AMBER_DARK = (190, 118, 24)
WHITE = (255, 255, 255)
DARK_TEXT = (33, 37, 41)
MUTED_TEXT = (108, 117, 125)
ROW_ALT = (245, 246, 250)
BORDER_COLOR = (206, 212, 218)

_UNSAFE_FILENAME_CHARS = re.compile(r"[\\/:*?\"<>|\x00-\x1f]")


def _latin1(value: str) -> str:
    # Core PDF fonts only cover Latin-1.
    return value.encode("latin-1", "replace").decode("latin-1")


def invoice_filename(member: CrewMember) -> str:
    # Names become file names on disk and in download headers.
    name = " ".join(_UNSAFE_FILENAME_CHARS.sub(" ", member.full_name).split())
    return f"Invoice-{name or 'Crew'}.pdf"


class InvoicePDF:
    def generate(self, invoice: Invoice, member: CrewMember) -> bytes:
        pdf = FPDF()
        pdf.add_page()
        pdf.set_auto_page_break(auto=True, margin=20)

        page_w = pdf.w - pdf.l_margin - pdf.r_margin

        self._draw_header(pdf, page_w, invoice, member)
        self._draw_table(pdf, page_w, invoice)
        self._draw_total(pdf, page_w, invoice)
        self._draw_footer(pdf, page_w)

        output = bytes(pdf.output())
        logger.debug(
            "PDF generated: crew=%s items=%d size=%d bytes",
            member.id,
            len(invoice.breakdown),
            len(output),
        )
        return output

    def _draw_info_card(self, pdf: FPDF, x: float, y: float, w: float, h: float, label: str, value: str) -> None:
        pdf.set_fill_color(*SLATE_LIGHT)
        pdf.rect(x, y, w, h, "F")
        pdf.set_fill_color(*AMBER_DARK)
        pdf.rect(x, y, 3, h, "F")

        pdf.set_xy(x + 8, y + 2)
        pdf.set_font(FONT, "B", 7)
        pdf.set_text_color(*MUTED_TEXT)
        pdf.cell(w - 12, 5, label, new_x="LEFT", new_y="NEXT")
        pdf.set_x(x + 8)
        pdf.set_font(FONT, "B", 11)
        pdf.set_text_color(*DARK_TEXT)
        pdf.cell(w - 12, 8, _latin1(value))

    def _draw_header(self, pdf: FPDF, page_w: float, invoice: Invoice, member: CrewMember) -> None:
        x = pdf.l_margin
        y = pdf.get_y()

        pdf.set_fill_color(*SLATE)
        pdf.rect(x, y, page_w, 32, "F")

        pdf.set_y(y + 8)
        pdf.set_text_color(*WHITE)
        pdf.set_font(FONT, "B", 24)
        pdf.cell(0, 12, "INVOICE", align="C", new_x="LMARGIN", new_y="NEXT")
        pdf.set_font(FONT, "", 9)
        pdf.cell(0, 6, _latin1(f"Invoice for: {member.full_name}"), align="C", new_x="LMARGIN", new_y="NEXT")

        pdf.ln(10)

        card_h = 20
        gap = 6
        card_w = (page_w - gap) / 2
        row1_y = pdf.get_y()
        self._draw_info_card(pdf, x, row1_y, card_w, card_h, "CREW MEMBER", member.full_name)
        self._draw_info_card(pdf, x + card_w + gap, row1_y, card_w, card_h, "CREW ID", str(member.id))

        row2_y = row1_y + card_h + gap
        self._draw_info_card(pdf, x, row2_y, card_w, card_h, "POSITION", member.role or "-")
        self._draw_info_card(pdf, x + card_w + gap, row2_y, card_w, card_h, "STATUS", member.status or "-")

        row3_y = row2_y + card_h + gap
        date_range = f"{format_date(invoice.start_date)} to {format_date(invoice.end_date)}"
        self._draw_info_card(pdf, x, row3_y, page_w, card_h, "INVOICE DATE RANGE", date_range)

        pdf.set_y(row3_y + card_h + 12)

    def _draw_table(self, pdf: FPDF, page_w: float, invoice: Invoice) -> None:
        col_title = page_w * 0.40
        col_units = page_w * 0.20
        col_rate = page_w * 0.20
        col_total = page_w * 0.20
        line_h = 10

        pdf.set_font(FONT, "B", 11)
        pdf.set_text_color(*SLATE)
        pdf.cell(0, 8, "JOB ORDERS", new_x="LMARGIN", new_y="NEXT")
        pdf.set_draw_color(*AMBER)
        pdf.set_line_width(0.8)
        y = pdf.get_y()
        pdf.line(pdf.l_margin, y, pdf.l_margin + 30, y)
        pdf.ln(5)

        pdf.set_fill_color(*SLATE)
        pdf.set_text_color(*WHITE)
        pdf.set_font(FONT, "B", 9)
        pdf.cell(col_title, line_h, "  Job Title", fill=True)
        pdf.cell(col_units, line_h, "Units", fill=True, align="C")
        pdf.cell(col_rate, line_h, "Rate", fill=True, align="R")
        pdf.cell(col_total, line_h, "Total  ", fill=True, align="R", new_x="LMARGIN", new_y="NEXT")

        pdf.set_text_color(*DARK_TEXT)
        pdf.set_font(FONT, "", 9)

        if not invoice.breakdown:
            pdf.set_fill_color(*ROW_ALT)
            pdf.cell(page_w, line_h, "No job orders in this period.", fill=True, align="C", new_x="LMARGIN", new_y="NEXT")

        for i, item in enumerate(invoice.breakdown):
            pdf.set_fill_color(*(ROW_ALT if i % 2 == 0 else WHITE))
            units = f"{item.billable_days} ({UNIT_LABELS[item.unit]})"
            pdf.cell(col_title, line_h, _latin1(f"  {item.event_title}"), fill=True)
            pdf.cell(col_units, line_h, units, fill=True, align="C")
            pdf.cell(col_rate, line_h, format_amount(item.rate, item.currency), fill=True, align="R")
            pdf.cell(
                col_total,
                line_h,
                f"{format_amount(item.total)}  ",
                fill=True,
                align="R",
                new_x="LMARGIN",
                new_y="NEXT",
            )

        pdf.set_draw_color(*BORDER_COLOR)
        pdf.set_line_width(0.3)
        y = pdf.get_y()
        pdf.line(pdf.l_margin, y, pdf.l_margin + page_w, y)

    def _draw_total(self, pdf: FPDF, page_w: float, invoice: Invoice) -> None:
        pdf.ln(4)
        pdf.set_fill_color(*AMBER_DARK)
        pdf.set_text_color(*WHITE)
        pdf.set_font(FONT, "B", 11)
        pdf.cell(page_w * 0.6, 12, "TOTAL  ", fill=True, align="R")
        pdf.set_font(FONT, "B", 13)
        pdf.cell(
            page_w * 0.4,
            12,
            f"{format_amount(invoice.total, invoice.currency)}  ",
            fill=True,
            align="R",
            new_x="LMARGIN",
            new_y="NEXT",
        )

    def _draw_footer(self, pdf: FPDF, page_w: float) -> None:
        pdf.set_y(-30)
        pdf.set_draw_color(*BORDER_COLOR)
        pdf.set_line_width(0.3)
        y = pdf.get_y()
        pdf.line(pdf.l_margin, y, pdf.l_margin + page_w, y)
        pdf.ln(5)
        pdf.set_font(FONT, "", 7)
        pdf.set_text_color(*MUTED_TEXT)
        pdf.cell(0, 5, "Generated automatically", align="C")
