from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, Protocol, Tuple, Union

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas as _RLCanvas

from invoicer.pdf.style import MARGIN_LEFT, MARGIN_TOP, PAGE_SIZE, RGB

# Approximate ascent fraction of font size above baseline (Helvetica/Inter)
TEXT_ASCENT_RATIO = 0.72


class Canvas(Protocol):
    """Cursor-based drawing surface the layout issues its commands against.

    Coordinates have a top-left origin; ``br`` moves the cursor down and back
    to the left margin, ``cell`` draws at the cursor and advances it to the right.
    """

    def set_font(self, name: str, size: float) -> None: ...

    def set_font_size(self, size: float) -> None: ...

    def set_text_color(self, rgb: RGB) -> None: ...

    def set_stroke_color(self, rgb: RGB) -> None: ...

    def cell(self, text: str) -> None: ...

    def cell_right(self, text: str, width: float, height: float) -> None: ...

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None: ...

    def image(self, path: str, x: float, y: float, width: float, height: float) -> None: ...

    def br(self, height: float) -> None: ...

    def get_x(self) -> float: ...

    def get_y(self) -> float: ...

    def set_x(self, x: float) -> None: ...

    def set_y(self, y: float) -> None: ...


def _unit_rgb(rgb: RGB) -> Tuple[float, float, float]:
    r, g, b = rgb
    return r / 255.0, g / 255.0, b / 255.0


class ReportLabCanvas:
    """Canvas implementation backed by a single-page ReportLab canvas."""

    def __init__(
        self,
        target: Union[str, Path, BinaryIO],
        pagesize: Tuple[float, float] = PAGE_SIZE,
        left: float = MARGIN_LEFT,
        top: float = MARGIN_TOP,
    ):
        filename = str(target) if isinstance(target, (str, Path)) else target
        self._c = _RLCanvas(filename, pagesize=pagesize)
        self.width, self.height = pagesize
        self.left = left
        self._x = left
        self._y = top
        self._font = "Helvetica"
        self._size = 12.0
        self._c.setLineWidth(0.5)

    def set_info(self, title: str, author: str = "") -> None:
        self._c.setTitle(title)
        if author:
            self._c.setAuthor(author)

    def set_font(self, name: str, size: float) -> None:
        self._c.setFont(name, size)
        self._font = name
        self._size = float(size)

    def set_font_size(self, size: float) -> None:
        self.set_font(self._font, size)

    def set_text_color(self, rgb: RGB) -> None:
        self._c.setFillColorRGB(*_unit_rgb(rgb))

    def set_stroke_color(self, rgb: RGB) -> None:
        self._c.setStrokeColorRGB(*_unit_rgb(rgb))

    def _baseline(self, top: float) -> float:
        return self.height - top - self._size * TEXT_ASCENT_RATIO

    def cell(self, text: str) -> None:
        self._c.drawString(self._x, self._baseline(self._y), text)
        self._x += pdfmetrics.stringWidth(text, self._font, self._size)

    def cell_right(self, text: str, width: float, height: float) -> None:
        text_w = pdfmetrics.stringWidth(text, self._font, self._size)
        top = self._y + (height - self._size) / 2
        self._c.drawString(self._x + width - text_w, self._baseline(top), text)
        self._x += width

    def line(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self._c.line(x1, self.height - y1, x2, self.height - y2)

    def image(self, path: str, x: float, y: float, width: float, height: float) -> None:
        self._c.drawImage(str(path), x, self.height - y - height, width=width, height=height, mask="auto")

    def br(self, height: float) -> None:
        self._y += height
        self._x = self.left

    def get_x(self) -> float:
        return self._x

    def get_y(self) -> float:
        return self._y

    def set_x(self, x: float) -> None:
        self._x = x

    def set_y(self, y: float) -> None:
        self._y = y

    def save(self) -> None:
        self._c.showPage()
        self._c.save()
