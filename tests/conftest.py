from __future__ import annotations

from pathlib import Path
from typing import Any, List, Tuple

import pytest

from invoicer.data.models import Invoice, LineItem


class RecordingCanvas:
    """Canvas double that records every call and tracks the cursor like the real one."""

    def __init__(self, left: float = 40, top: float = 40):
        self.left = left
        self.x = left
        self.y = top
        self.ops: List[Tuple[Any, ...]] = []

    def set_font(self, name, size):
        self.ops.append(("font", name, size))

    def set_font_size(self, size):
        self.ops.append(("font_size", size))

    def set_text_color(self, rgb):
        self.ops.append(("text_color", tuple(rgb)))

    def set_stroke_color(self, rgb):
        self.ops.append(("stroke_color", tuple(rgb)))

    def cell(self, text):
        self.ops.append(("text", text, self.x, self.y))
        self.x += len(text) * 5

    def cell_right(self, text, width, height):
        self.ops.append(("text_right", text, self.x, self.y, width, height))
        self.x += width

    def line(self, x1, y1, x2, y2):
        self.ops.append(("line", x1, y1, x2, y2))

    def image(self, path, x, y, width, height):
        self.ops.append(("image", path, x, y, width, height))

    def br(self, height):
        self.y += height
        self.x = self.left

    def get_x(self):
        return self.x

    def get_y(self):
        return self.y

    def set_x(self, x):
        self.x = x

    def set_y(self, y):
        self.y = y

    # Helpers for assertions
    def texts(self) -> List[str]:
        return [op[1] for op in self.ops if op[0] in ("text", "text_right")]

    def text_op(self, text: str) -> Tuple[Any, ...]:
        for op in self.ops:
            if op[0] in ("text", "text_right") and op[1] == text:
                return op
        raise AssertionError(f"{text!r} was not drawn; drawn: {self.texts()}")

    def images(self) -> List[Tuple[Any, ...]]:
        return [op for op in self.ops if op[0] == "image"]


@pytest.fixture
def recording_canvas() -> RecordingCanvas:
    return RecordingCanvas()


@pytest.fixture
def consulting_invoice() -> Invoice:
    return Invoice(
        id="INV-001",
        issuer="Acme Consulting\n1 Main St\nSpringfield",
        recipient="Globex Corp\n42 Side Rd",
        date="Jan 02, 2024",
        due="Jan 16, 2024",
        currency="USD",
        items=(LineItem("Consulting", 5, 100.0),),
    )


@pytest.fixture
def png_logo(tmp_path: Path) -> Path:
    from PIL import Image

    path = tmp_path / "logo.png"
    Image.new("RGB", (200, 50), (200, 30, 30)).save(path)
    return path


@pytest.fixture
def corrupt_logo(tmp_path: Path) -> Path:
    path = tmp_path / "broken.png"
    path.write_bytes(b"\x89PNG\r\n\x1a\nthis is not really a png")
    return path


@pytest.fixture
def truncated_logo(tmp_path: Path) -> Path:
    """A PNG whose header is intact but whose pixel data is cut short."""
    import os

    from PIL import Image

    full = tmp_path / "full.png"
    Image.frombytes("RGB", (300, 300), os.urandom(300 * 300 * 3)).save(full)
    data = full.read_bytes()
    path = tmp_path / "truncated.png"
    path.write_bytes(data[: len(data) // 3])
    return path
