from __future__ import annotations

from datetime import date as _date
from datetime import datetime, timedelta
from pathlib import Path
import sys

# Ensure we can import the invoicer package when running this script directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from invoicer.core.settings import apply_env_overrides, load_settings
from invoicer.data.models import Invoice, LineItem
from invoicer.pdf.pdf_draw import build_invoice_pdf, resolve_style


def _items() -> tuple[LineItem, ...]:
    return (
        LineItem("Discovery workshop", 1, 1200.00),
        LineItem("Design iterations (days)", 3.5, 640.00),
        LineItem("Frontend build (days)", 6, 580.00),
        LineItem("Hosting setup", 1, 149.99),
    )


def main() -> None:
    settings = apply_env_overrides(load_settings())
    today = _date.today()

    invoice = Invoice(
        id="SAMPLE",
        issuer=settings.issuer,
        recipient="Sample Customer\n123 Sample St\nMetropolis",
        date=today.strftime(settings.date_format),
        due=(today + timedelta(days=settings.due_days)).strftime(settings.date_format),
        currency=settings.currency,
        logo=settings.logo,
        items=_items(),
        tax=250.0,
        discount=100.0,
        notes="Payment by bank transfer.\\nThank you for your business!",
    )

    # Write under repository assets/samples to avoid permission or file-lock issues
    out_dir = ROOT / "assets" / "samples"
    out_dir.mkdir(parents=True, exist_ok=True)
    out_pdf = out_dir / "SAMPLE_INVOICE.pdf"
    style = resolve_style(quantity_label=settings.quantity_label)

    try:
        build_invoice_pdf(out_pdf, invoice, style)
        print(f"Wrote sample to: {out_pdf}")
    except PermissionError:
        # If the file is open/locked, write to a timestamped file instead
        ts = datetime.now().strftime("%Y%m%d-%H%M%S")
        alt_pdf = out_dir / f"SAMPLE_INVOICE-{ts}.pdf"
        build_invoice_pdf(alt_pdf, invoice, style)
        print(f"Wrote sample to: {alt_pdf}")


if __name__ == "__main__":
    main()
