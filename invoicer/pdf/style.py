"""
Page geometry and the immutable style the layout draws with.
Coordinates use a top-left origin in points; y grows downwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from reportlab.lib.pagesizes import A4

RGB = Tuple[int, int, int]

# ===== Page =====
PAGE_SIZE = A4
PAGE_WIDTH, PAGE_HEIGHT = PAGE_SIZE
MARGIN_LEFT = 40
MARGIN_TOP = 40

# ===== Vertical anchors (absolute, not flowed) =====
TOTALS_Y = 650
NOTES_Y = 650
FOOTER_Y = 800
FOOTER_RULE_RIGHT = 550

# ===== Logo =====
LOGO_WIDTH = 100.0
LOGO_GUTTER = 24
ISSUER_RULE_RIGHT = 100

# Label cell (Due, Subtotal, ...) sits just right of the rate column; values start
# a little left of the amount column.
LABEL_INSET = 5
LABEL_CELL_W = 45
VALUE_INSET = 15


@dataclass(frozen=True)
class Style:
    text: RGB = (25, 25, 25)
    border: RGB = (225, 225, 225)
    heading: RGB = (75, 75, 75)
    muted: RGB = (150, 150, 150)
    quantity_x: float = 360
    rate_x: float = 405
    amount_x: float = 480
    font: str = "Helvetica"
    bold_font: str = "Helvetica-Bold"
    quantity_label: str = "Qty"

    @property
    def label_x(self) -> float:
        return self.rate_x + LABEL_INSET

    @property
    def value_x(self) -> float:
        return self.amount_x - VALUE_INSET


DEFAULT_STYLE = Style()
