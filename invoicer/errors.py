from __future__ import annotations


class InvoiceError(Exception):
    """Base class for invoicer errors."""


class InvoiceDataError(InvoiceError, ValueError):
    """Invoice input (import file, CLI values) could not be understood."""


class RenderError(InvoiceError):
    """A drawing primitive failed; the whole render is aborted.

    ``band`` names the layout band that was being drawn when the canvas failed.
    """

    def __init__(self, band: str, cause: BaseException | None = None):
        self.band = band
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"rendering failed in band '{band}'{detail}")
