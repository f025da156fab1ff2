from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional

from invoicer.core.paths import settings_path
from invoicer.core.settings import Settings, apply_env_overrides, load_settings, save_settings
from invoicer.data.loader import read_invoice_data
from invoicer.data.models import Invoice
from invoicer.errors import InvoiceDataError, RenderError
from invoicer.pdf.pdf_draw import build_invoice_pdf, resolve_style

logger = logging.getLogger(__name__)

# Sample row used when no item is given at all
DEFAULT_ITEM = "Paper Cranes"
DEFAULT_QUANTITY = 2.0
DEFAULT_RATE = 25.0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="invoicer", description="Generate invoice PDFs.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output.")
    parser.add_argument("--settings", type=Path, default=None, help="Settings file (defaults to ~/.invoicer/settings.json).")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Render an invoice to PDF.")
    gen.add_argument("--id", help="Invoice ID (defaults to today as YYYYMMDD).")
    gen.add_argument("--title", help="Document title.")
    gen.add_argument("-l", "--logo", help="Company logo image.")
    gen.add_argument("-f", "--from", dest="sender", help="Issuing company, newline separated.")
    gen.add_argument("-t", "--to", dest="recipient", help="Recipient company, newline separated.")
    gen.add_argument("--date", help="Issue date.")
    gen.add_argument("--due", help="Payment due date.")
    gen.add_argument("-i", "--item", dest="items", action="append", help="Item description (repeatable).")
    gen.add_argument("-q", "--quantity", dest="quantities", action="append", type=float, help="Item quantity (repeatable).")
    gen.add_argument("-r", "--rate", dest="rates", action="append", type=float, help="Item rate (repeatable).")
    gen.add_argument("--tax", type=float, help="Tax amount.")
    gen.add_argument("-d", "--discount", type=float, help="Discount amount.")
    gen.add_argument("-c", "--currency", help="Currency code, e.g. USD.")
    gen.add_argument("-n", "--note", help="Notes text; literal \\n starts a new line.")
    gen.add_argument("-o", "--output", type=Path, help="Output file (.pdf).")
    gen.add_argument("--import", dest="import_path", type=Path, help="Invoice data file (.json).")
    gen.add_argument("--save-defaults", action="store_true", help="Remember --from/--to/--logo/--currency in the settings file.")
    return parser


def build_invoice(args: argparse.Namespace, settings: Settings, today: Optional[date] = None) -> Invoice:
    """Merge settings, an optional import file and explicit flags, in that order."""
    today = today or date.today()
    data: Dict[str, Any] = {
        "title": settings.title,
        "logo": settings.logo,
        "from": settings.issuer,
        "to": settings.recipient,
        "currency": settings.currency,
        "tax": settings.tax,
        "discount": settings.discount,
        "note": settings.notes,
        "notes_header": settings.notes_header,
    }
    if args.import_path is not None:
        data.update(read_invoice_data(args.import_path))

    explicit = {
        "id": args.id,
        "title": args.title,
        "logo": args.logo,
        "from": args.sender,
        "to": args.recipient,
        "date": args.date,
        "due": args.due,
        "tax": args.tax,
        "discount": args.discount,
        "currency": args.currency,
        "note": args.note,
    }
    data.update({k: v for k, v in explicit.items() if v is not None})

    if args.items:
        data["items"] = list(args.items)
    if args.quantities:
        data["quantities"] = list(args.quantities)
    if args.rates:
        data["rates"] = list(args.rates)
    if not data.get("items"):
        data["items"] = [DEFAULT_ITEM]
        data.setdefault("quantities", [DEFAULT_QUANTITY])
        data.setdefault("rates", [DEFAULT_RATE])

    if not data.get("id"):
        data["id"] = today.strftime("%Y%m%d")
    if not data.get("date"):
        data["date"] = today.strftime(settings.date_format)
    if not data.get("due"):
        data["due"] = (today + timedelta(days=settings.due_days)).strftime(settings.date_format)
    return Invoice.from_dict(data)


def _save_defaults(args: argparse.Namespace, file_settings: Settings, path: Path) -> None:
    changes: Dict[str, Any] = {}
    for attr, value in (("issuer", args.sender), ("recipient", args.recipient), ("logo", args.logo), ("currency", args.currency)):
        if value is not None:
            changes[attr] = value
    save_settings(replace(file_settings, **changes), path)
    logger.info("Saved defaults to %s", path)


def _generate(args: argparse.Namespace) -> int:
    path = args.settings or settings_path()
    file_settings = load_settings(path)
    settings = apply_env_overrides(file_settings)

    try:
        invoice = build_invoice(args, settings)
    except InvoiceDataError as exc:
        print(f"invoicer: {exc}", file=sys.stderr)
        return 2

    out = args.output or Path(settings.output)
    try:
        build_invoice_pdf(out, invoice, resolve_style(quantity_label=settings.quantity_label))
    except RenderError as exc:
        print(f"invoicer: {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"invoicer: cannot write {out}: {exc}", file=sys.stderr)
        return 1

    if args.save_defaults:
        _save_defaults(args, file_settings, path)
    print(f"Generated {out}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command == "generate":
        return _generate(args)
    parser.error(f"unknown command {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
