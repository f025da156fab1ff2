from dataclasses import replace

import pytest

from invoicer.data.models import LineItem
from invoicer.errors import RenderError
from invoicer.pdf.image_probe import ProbeResult
from invoicer.pdf.layout import DocumentLayout, normalize_notes
from invoicer.pdf.style import DEFAULT_STYLE, FOOTER_Y, NOTES_Y, TOTALS_Y, Style


def _render(canvas, invoice, style=DEFAULT_STYLE, probe=None):
    layout = DocumentLayout(style) if probe is None else DocumentLayout(style, probe=probe)
    layout.render(canvas, invoice)
    return canvas


def test_item_row_and_totals_without_tax_or_discount(recording_canvas, consulting_invoice):
    c = _render(recording_canvas, consulting_invoice)
    texts = c.texts()

    assert c.text_op("5")[2] == DEFAULT_STYLE.quantity_x
    assert c.text_op("$100.00")[2] == DEFAULT_STYLE.rate_x
    row_amount = [op for op in c.ops if op[0] == "text" and op[1] == "$500.00" and op[2] == DEFAULT_STYLE.amount_x]
    assert len(row_amount) == 1

    assert "Subtotal" in texts and "Total" in texts
    assert "Tax" not in texts and "Discount" not in texts
    # row amount + subtotal + total
    assert texts.count("$500.00") == 3


def test_totals_with_tax_and_discount(recording_canvas, consulting_invoice):
    invoice = replace(consulting_invoice, tax=50.0, discount=25.0)
    c = _render(recording_canvas, invoice)
    texts = c.texts()

    labels = [t for t in texts if t in ("Subtotal", "Tax", "Discount", "Total")]
    assert labels == ["Subtotal", "Tax", "Discount", "Total"]
    start = texts.index("Subtotal")
    assert texts[start:start + 8] == [
        "Subtotal", "$500.00", "Tax", "$50.00", "Discount", "$25.00", "Total", "$525.00",
    ]


def test_fractional_quantity_row(recording_canvas, consulting_invoice):
    invoice = replace(consulting_invoice, items=(LineItem("Design", 2.5, 40.0),))
    texts = _render(recording_canvas, invoice).texts()
    assert "2.5" in texts
    assert "$40.00" in texts
    assert "$100.00" in texts


def test_totals_notes_and_footer_use_fixed_anchors(recording_canvas, consulting_invoice):
    many = tuple(LineItem(f"Item {i}", 1, 10.0) for i in range(3))
    invoice = replace(consulting_invoice, items=many, notes="Pay by wire\\nThank you")
    c = _render(recording_canvas, invoice)

    assert c.text_op("Subtotal")[3] == TOTALS_Y
    assert c.text_op("Notes")[3] == NOTES_Y
    assert c.text_op("Pay by wire")[3] == NOTES_Y + 18
    assert c.text_op("Thank you")[3] == NOTES_Y + 18 + 14
    footer = [op for op in c.ops if op[0] == "text" and op[1] == "INV-001" and op[3] == FOOTER_Y]
    assert footer
    assert ("line", footer[0][2] + len("INV-001") * 5 + 10, FOOTER_Y + 6, 550, FOOTER_Y + 6) in c.ops


def test_labels_are_right_aligned_cells_left_of_values(recording_canvas, consulting_invoice):
    c = _render(recording_canvas, consulting_invoice)
    due = c.text_op("Due")
    assert due[0] == "text_right"
    assert due[2] == DEFAULT_STYLE.rate_x + 5
    assert due[4] == 45
    assert c.text_op("Jan 16, 2024")[2] == DEFAULT_STYLE.amount_x - 15


def test_band_order_is_top_to_bottom(recording_canvas, consulting_invoice):
    texts = _render(recording_canvas, consulting_invoice).texts()
    order = ["Acme Consulting", "INVOICE", "INV-001", "Due", "TO", "Globex Corp", "ITEM", "Consulting", "Subtotal"]
    positions = [texts.index(t) for t in order]
    assert positions == sorted(positions)


def test_issuer_first_line_bold_then_regular(recording_canvas, consulting_invoice):
    c = _render(recording_canvas, consulting_invoice)
    assert c.ops[0] == ("font", DEFAULT_STYLE.bold_font, 14)
    idx = c.ops.index(c.text_op("1 Main St"))
    fonts = [op for op in c.ops[:idx] if op[0] == "font"]
    assert fonts[-1] == ("font", DEFAULT_STYLE.font, 12)
    assert c.text_op("Springfield")[3] == c.text_op("1 Main St")[3] + 16


def test_title_line_reads_hash_id_dot_date(recording_canvas, consulting_invoice):
    texts = _render(recording_canvas, consulting_invoice).texts()
    i = texts.index("#")
    assert texts[i:i + 4] == ["#", "INV-001", "  ·  ", "Jan 02, 2024"]


def test_header_row_uses_style_quantity_label(recording_canvas, consulting_invoice):
    style = replace(DEFAULT_STYLE, quantity_label="Days")
    c = _render(recording_canvas, consulting_invoice, style=style)
    assert c.text_op("DAYS")[2] == style.quantity_x
    assert c.text_op("RATE")[2] == style.rate_x
    assert c.text_op("AMOUNT")[2] == style.amount_x


def test_alternate_style_moves_columns(recording_canvas, consulting_invoice):
    style = Style(quantity_x=300, rate_x=350, amount_x=450)
    c = _render(recording_canvas, consulting_invoice, style=style)
    assert c.text_op("5")[2] == 300
    assert c.text_op("$100.00")[2] == 350


def test_logo_is_scaled_to_fixed_width(recording_canvas, consulting_invoice):
    invoice = replace(consulting_invoice, logo="logo.png")
    c = _render(recording_canvas, invoice, probe=lambda path: ProbeResult(size=(400, 200)))
    assert c.images() == [("image", "logo.png", 40, 40, 100.0, 50.0)]
    # issuer starts below the logo and the gutter
    assert c.text_op("Acme Consulting")[3] == 40 + 50 + 24


def test_failed_logo_probe_skips_logo_band(recording_canvas, consulting_invoice):
    invoice = replace(consulting_invoice, logo="broken.png")
    c = _render(recording_canvas, invoice, probe=lambda path: ProbeResult(error="cannot identify image"))
    assert c.images() == []
    assert c.text_op("Acme Consulting")[3] == 40
    assert "Total" in c.texts()


def test_corrupt_logo_file_still_renders(recording_canvas, consulting_invoice, corrupt_logo):
    invoice = replace(consulting_invoice, logo=str(corrupt_logo))
    c = _render(recording_canvas, invoice)
    assert c.images() == []
    assert "$500.00" in c.texts()


def test_no_due_date_and_no_notes_skip_their_bands(recording_canvas, consulting_invoice):
    invoice = replace(consulting_invoice, due=None, notes="")
    texts = _render(recording_canvas, invoice).texts()
    assert "Due" not in texts
    assert "Notes" not in texts


def test_unknown_currency_uses_code_prefix(recording_canvas, consulting_invoice):
    invoice = replace(consulting_invoice, currency="XYZ")
    texts = _render(recording_canvas, invoice).texts()
    assert "XYZ 100.00" in texts
    assert "XYZ 500.00" in texts


class _FailingCanvas:
    def __init__(self, inner, fail_on):
        self._inner = inner
        self._fail_on = fail_on

    def __getattr__(self, name):
        return getattr(self._inner, name)

    def cell(self, text):
        if text == self._fail_on:
            raise KeyError("font not set")
        self._inner.cell(text)

    def cell_right(self, text, width, height):
        if text == self._fail_on:
            raise KeyError("font not set")
        self._inner.cell_right(text, width, height)


def test_canvas_failure_aborts_with_band_name(recording_canvas, consulting_invoice):
    canvas = _FailingCanvas(recording_canvas, "Subtotal")
    with pytest.raises(RenderError) as exc_info:
        DocumentLayout().render(canvas, consulting_invoice)
    assert exc_info.value.band == "totals"
    assert isinstance(exc_info.value.__cause__, KeyError)
    assert "Total" not in recording_canvas.texts()


def test_normalize_notes_handles_literal_and_real_newlines():
    assert normalize_notes("a\\nb\nc") == ["a", "b", "c"]
    assert normalize_notes("") == [""]


def test_logo_that_fails_to_draw_is_skipped(recording_canvas, consulting_invoice, caplog):
    def broken_image(path, x, y, width, height):
        raise OSError("image file is truncated")

    recording_canvas.image = broken_image
    invoice = replace(consulting_invoice, logo="logo.png")
    c = _render(recording_canvas, invoice, probe=lambda path: ProbeResult(size=(400, 200)))

    assert c.text_op("Acme Consulting")[3] == 40
    assert "Total" in c.texts()
    assert "Skipping logo" in caplog.text


def test_symbol_needs_unicode_font(recording_canvas, consulting_invoice):
    invoice = replace(consulting_invoice, currency="INR")
    texts = _render(recording_canvas, invoice).texts()
    assert "INR 500.00" in texts
    assert not any("₹" in t for t in texts)


def test_embedded_font_keeps_symbol(recording_canvas, consulting_invoice):
    style = Style(font="NotoSans", bold_font="NotoSans-Bold")
    invoice = replace(consulting_invoice, currency="INR")
    texts = _render(recording_canvas, invoice, style=style).texts()
    assert "₹500.00" in texts
