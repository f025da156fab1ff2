from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional, Tuple

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from invoicer.core.paths import resource_path
from invoicer.data.models import Invoice
from invoicer.pdf.canvas import ReportLabCanvas
from invoicer.pdf.layout import DocumentLayout
from invoicer.pdf.style import DEFAULT_STYLE, PAGE_SIZE, Style

logger = logging.getLogger(__name__)


# ===== Helpers =====
def _register_fonts() -> Tuple[str, str]:
    """Return (regular_font_name, bold_font_name)."""
    regular = "Helvetica"
    bold = "Helvetica-Bold"
    try:
        reg = resource_path("assets/fonts/NotoSans-Regular.ttf")
        bld = resource_path("assets/fonts/NotoSans-Bold.ttf")
        if reg.exists():
            pdfmetrics.registerFont(TTFont("NotoSans", str(reg)))
            regular = "NotoSans"
        if bld.exists():
            pdfmetrics.registerFont(TTFont("NotoSans-Bold", str(bld)))
            bold = "NotoSans-Bold"
    except Exception:
        # fall back to Helvetica variants
        logger.warning("Could not register NotoSans fonts; using Helvetica", exc_info=True)
        regular, bold = "Helvetica", "Helvetica-Bold"
    return regular, bold


def resolve_style(**overrides) -> Style:
    """DEFAULT_STYLE with the registered fonts and any field overrides applied."""
    font, bold_font = _register_fonts()
    return replace(DEFAULT_STYLE, font=font, bold_font=bold_font, **overrides)


# ===== Public API =====
def build_invoice_pdf(out_path: Path | str, invoice: Invoice, style: Optional[Style] = None) -> Path:
    """Draw a complete single-page A4 invoice PDF using ReportLab.

    The page is written to a temporary sibling file first and moved over
    ``out_path`` only when the whole render succeeded. Any drawing failure
    raises RenderError and leaves no file behind.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    if style is None:
        style = resolve_style()

    tmp = out.with_name(out.name + ".part")
    logger.info("Building PDF: %s", out)
    try:
        c = ReportLabCanvas(tmp, pagesize=PAGE_SIZE)
        c.set_info(f"Invoice {invoice.id}", author=invoice.issuer.split("\n")[0])
        DocumentLayout(style).render(c, invoice)
        c.save()
    except Exception:
        logger.exception("Rendering invoice %s failed", invoice.id)
        tmp.unlink(missing_ok=True)
        raise
    tmp.replace(out)
    logger.info("PDF built: %s", out)
    return out
