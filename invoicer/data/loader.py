from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Union

from invoicer.data.models import Invoice
from invoicer.errors import InvoiceDataError


def read_invoice_data(path: Union[str, Path]) -> Dict[str, Any]:
	"""Read a JSON import file (UTF-8) into a plain dict."""
	p = Path(path)
	if p.suffix.lower() not in ("", ".json"):
		raise InvoiceDataError(f"{p}: only .json import files are supported")
	try:
		with p.open("r", encoding="utf-8") as f:
			raw = json.load(f)
	except OSError as exc:
		raise InvoiceDataError(f"{p}: {exc.strerror or exc}") from exc
	except json.JSONDecodeError as exc:
		raise InvoiceDataError(f"{p}: invalid JSON ({exc.msg} at line {exc.lineno})") from exc
	if not isinstance(raw, dict):
		raise InvoiceDataError(f"{p}: expected a JSON object at the top level")
	return raw


def load_invoice(path: Union[str, Path]) -> Invoice:
	return Invoice.from_dict(read_invoice_data(path))
