from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, asdict, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from invoicer.core.paths import settings_path

logger = logging.getLogger(__name__)

# Environment variables that override values from settings.json
ENV_OVERRIDES: Dict[str, str] = {
	"INVOICE_FROM": "issuer",
	"INVOICE_TO": "recipient",
	"INVOICE_LOGO": "logo",
	"INVOICE_CURRENCY": "currency",
	"INVOICE_TITLE": "title",
	"INVOICE_TAX": "tax",
	"INVOICE_DISCOUNT": "discount",
	"INVOICE_NOTE": "notes",
}


@dataclass
class Settings:
	issuer: str = "Project Folded, Inc."
	recipient: str = "Untitled Corporation, Inc."
	# Optional absolute/relative path to a logo image
	logo: Optional[str] = None
	currency: str = "USD"
	title: str = "INVOICE"
	tax: float = 0.0
	discount: float = 0.0
	notes: str = ""
	notes_header: str = "Notes"
	quantity_label: str = "Qty"
	# Due date = issue date + due_days when --due is not given
	due_days: int = 14
	# strftime pattern for default issue/due dates
	date_format: str = "%b %d, %Y"
	output: str = "invoice.pdf"

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Settings":
		# Merge provided values over defaults, ignore unknown keys
		defaults = asdict(cls())
		merged: Dict[str, Any] = {**defaults, **{k: v for k, v in data.items() if k in defaults}}
		return cls(**merged)

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)


def _coerce_path(path: Optional[Union[str, Path]]) -> Path:
	return Path(path) if path is not None else settings_path()


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
	"""
	Load settings from JSON (UTF-8). A missing file yields defaults.
	"""
	p = _coerce_path(path)
	if not p.exists():
		return Settings()

	try:
		with p.open("r", encoding="utf-8") as f:
			raw: Dict[str, Any] = json.load(f)
	except (json.JSONDecodeError, OSError) as exc:
		# If unreadable/corrupt, fall back to defaults (do not overwrite automatically)
		logger.warning("Ignoring unreadable settings file %s: %s", p, exc)
		return Settings()

	return Settings.from_dict(raw if isinstance(raw, dict) else {})


def apply_env_overrides(settings: Settings, environ: Optional[Mapping[str, str]] = None) -> Settings:
	"""Return a copy of ``settings`` with INVOICE_* environment values applied."""
	env = os.environ if environ is None else environ
	changes: Dict[str, Any] = {}
	for var, attr in ENV_OVERRIDES.items():
		value = env.get(var)
		if value is None or value == "":
			continue
		if attr in ("tax", "discount"):
			try:
				number = float(value)
			except ValueError:
				logger.warning("Ignoring %s=%r: not a number", var, value)
				continue
			if not math.isfinite(number):
				logger.warning("Ignoring %s=%r: not a finite number", var, value)
				continue
			changes[attr] = number
			continue
		changes[attr] = value
	return replace(settings, **changes) if changes else settings


def save_settings(settings: Settings, path: Optional[Union[str, Path]] = None) -> None:
	"""Save settings to JSON (UTF-8), creating parent dirs if needed."""
	p = _coerce_path(path)
	p.parent.mkdir(parents=True, exist_ok=True)
	# Pretty JSON, keep Unicode
	tmp = p.with_suffix(p.suffix + ".tmp")
	with tmp.open("w", encoding="utf-8", newline="\n") as f:
		json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)
		f.write("\n")
	tmp.replace(p)
