"""
Band-by-band invoice layout.

Bands are drawn strictly top to bottom: logo, issuer, title, due date, bill-to,
header row, item rows, then the totals, notes and footer bands which sit at fixed
vertical anchors regardless of how many items precede them.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from decimal import Decimal
from typing import Callable, Iterable, Iterator, List, Optional

from reportlab.pdfbase.pdfmetrics import standardFonts

from invoicer.core.currency import fmt_money, format_quantity, money_prefix, to_decimal
from invoicer.core.totals import compute_totals, line_total, totals_lines
from invoicer.data.models import Invoice, LineItem
from invoicer.errors import RenderError
from invoicer.pdf import image_probe
from invoicer.pdf.canvas import Canvas
from invoicer.pdf.image_probe import ProbeResult
from invoicer.pdf.style import (
    DEFAULT_STYLE,
    FOOTER_RULE_RIGHT,
    FOOTER_Y,
    ISSUER_RULE_RIGHT,
    LABEL_CELL_W,
    LOGO_GUTTER,
    LOGO_WIDTH,
    NOTES_Y,
    RGB,
    TOTALS_Y,
    Style,
)

logger = logging.getLogger(__name__)

# Encoding ReportLab uses for the built-in Type 1 fonts
STANDARD_FONT_ENCODING = "cp1252"

BILL_TO_LABEL = "To"
DUE_LABEL = "Due"


def split_lines(text: str) -> List[str]:
    return (text or "").split("\n")


def normalize_notes(notes: str) -> List[str]:
    """Turn literal backslash-n sequences into line breaks and split."""
    return split_lines((notes or "").replace("\\n", "\n"))


class DocumentLayout:
    """Issues the draw calls for one invoice page against a Canvas."""

    def __init__(self, style: Style = DEFAULT_STYLE, probe: Callable[[str], ProbeResult] = image_probe.probe):
        self.style = style
        self._probe = probe

    def render(self, canvas: Canvas, invoice: Invoice) -> None:
        prefix = money_prefix(invoice.currency, self._text_encoding())

        def money(amount: Decimal) -> str:
            return prefix + fmt_money(amount)

        totals = compute_totals(invoice)

        with self._band("logo"):
            self._write_logo(canvas, invoice.logo)
        with self._band("issuer"):
            self._write_issuer(canvas, invoice.issuer)
        with self._band("title"):
            self._write_title(canvas, invoice.title, invoice.id, invoice.date)
        if invoice.due:
            with self._band("due"):
                self._write_due_date(canvas, invoice.due)
        with self._band("bill_to"):
            self._write_bill_to(canvas, invoice.recipient)
        with self._band("header_row"):
            self._write_header_row(canvas)
        with self._band("items"):
            for item in invoice.items:
                self._write_row(canvas, item, money)
        with self._band("totals"):
            self._write_totals(canvas, totals_lines(totals), money)
        if invoice.notes:
            with self._band("notes"):
                self._write_notes(canvas, invoice.notes, invoice.notes_header)
        with self._band("footer"):
            self._write_footer(canvas, invoice.id)

    def _text_encoding(self) -> Optional[str]:
        """Encoding limit of the style fonts, or None for embedded Unicode fonts."""
        s = self.style
        if s.font in standardFonts or s.bold_font in standardFonts:
            return STANDARD_FONT_ENCODING
        return None

    @contextmanager
    def _band(self, name: str) -> Iterator[None]:
        logger.debug("Drawing band %s", name)
        try:
            yield
        except RenderError:
            raise
        except Exception as exc:
            raise RenderError(name, exc) from exc

    def _text_block(self, canvas: Canvas, lines: Iterable[str], font: str, size: float, color: RGB, pitch: float) -> None:
        canvas.set_font(font, size)
        canvas.set_text_color(color)
        for line in lines:
            canvas.cell(line)
            canvas.br(pitch)

    def _write_logo(self, canvas: Canvas, logo: Optional[str]) -> None:
        if not logo:
            return
        result = self._probe(logo)
        if not result.ok:
            logger.warning("Skipping logo %s: %s", logo, result.error)
            return
        width, height = result.size
        scaled_height = height * LOGO_WIDTH / width
        try:
            canvas.image(logo, canvas.get_x(), canvas.get_y(), LOGO_WIDTH, scaled_height)
        except Exception as exc:
            # header was readable but the pixel data is not
            logger.warning("Skipping logo %s: %s", logo, exc)
            return
        canvas.br(scaled_height + LOGO_GUTTER)

    def _write_issuer(self, canvas: Canvas, issuer: str) -> None:
        s = self.style
        first, *rest = split_lines(issuer)
        self._text_block(canvas, [first], s.bold_font, 14, s.text, 16)
        if rest:
            self._text_block(canvas, rest, s.font, 12, s.text, 16)
        canvas.br(36)
        canvas.set_stroke_color(s.border)
        canvas.line(canvas.get_x(), canvas.get_y(), ISSUER_RULE_RIGHT, canvas.get_y())
        canvas.br(36)

    def _write_title(self, canvas: Canvas, title: str, invoice_id: str, date: str) -> None:
        s = self.style
        canvas.set_font(s.bold_font, 24)
        canvas.set_text_color(s.text)
        canvas.cell(title)
        canvas.br(36)
        canvas.set_font(s.font, 12)
        canvas.set_text_color(s.heading)
        canvas.cell("#")
        canvas.cell(invoice_id)
        canvas.cell("  ·  ")
        canvas.cell(date)
        canvas.br(48)

    def _write_label_value(self, canvas: Canvas, label: str, value: str, cell_h: float, value_size: float, value_color: RGB, bold: bool = False) -> None:
        s = self.style
        canvas.set_font(s.font, 10)
        canvas.set_text_color(s.heading)
        canvas.set_x(s.label_x)
        canvas.cell_right(label, LABEL_CELL_W, cell_h)
        canvas.set_text_color(value_color)
        if bold:
            canvas.set_font(s.bold_font, value_size)
        else:
            canvas.set_font_size(value_size)
        canvas.set_x(s.value_x)
        canvas.cell(value)

    def _write_due_date(self, canvas: Canvas, due: str) -> None:
        s = self.style
        self._write_label_value(canvas, DUE_LABEL, due, 12, 10, s.heading)
        canvas.br(12)

    def _write_bill_to(self, canvas: Canvas, recipient: str) -> None:
        s = self.style
        self._text_block(canvas, [BILL_TO_LABEL.upper()], s.font, 9, s.heading, 18)
        self._text_block(canvas, split_lines(recipient), s.font, 12, s.text, 15)
        canvas.br(64)

    def _write_header_row(self, canvas: Canvas) -> None:
        s = self.style
        canvas.set_font(s.font, 9)
        canvas.set_text_color(s.heading)
        canvas.cell("ITEM")
        canvas.set_x(s.quantity_x)
        canvas.cell(s.quantity_label.upper())
        canvas.set_x(s.rate_x)
        canvas.cell("RATE")
        canvas.set_x(s.amount_x)
        canvas.cell("AMOUNT")
        canvas.br(24)

    def _write_row(self, canvas: Canvas, item: LineItem, money: Callable[[Decimal], str]) -> None:
        s = self.style
        canvas.set_font(s.font, 11)
        canvas.set_text_color(s.text)
        canvas.cell(item.description)
        canvas.set_x(s.quantity_x)
        canvas.cell(format_quantity(item.quantity))
        canvas.set_x(s.rate_x)
        canvas.cell(money(to_decimal(item.rate)))
        canvas.set_x(s.amount_x)
        canvas.cell(money(line_total(item)))
        canvas.br(24)

    def _write_totals(self, canvas: Canvas, lines, money: Callable[[Decimal], str]) -> None:
        s = self.style
        canvas.set_y(TOTALS_Y)
        for label, amount, emphasized in lines:
            size = 11.5 if emphasized else 12
            self._write_label_value(canvas, label, money(amount), 14, size, s.text, bold=emphasized)
            canvas.br(24)

    def _write_notes(self, canvas: Canvas, notes: str, header: str) -> None:
        s = self.style
        canvas.set_y(NOTES_Y)
        self._text_block(canvas, [header], s.font, 10, s.heading, 18)
        self._text_block(canvas, normalize_notes(notes), s.font, 10, s.text, 14)

    def _write_footer(self, canvas: Canvas, invoice_id: str) -> None:
        s = self.style
        canvas.set_y(FOOTER_Y)
        canvas.set_font(s.font, 10)
        canvas.set_text_color(s.muted)
        canvas.cell(invoice_id)
        canvas.set_stroke_color(s.border)
        canvas.line(canvas.get_x() + 10, canvas.get_y() + 6, FOOTER_RULE_RIGHT, canvas.get_y() + 6)
