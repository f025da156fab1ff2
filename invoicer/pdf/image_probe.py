from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from reportlab.lib.utils import ImageReader

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeResult:
    """Pixel size of an image, or the reason it could not be read."""

    size: Optional[Tuple[int, int]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.size is not None


def probe(path: Union[str, Path]) -> ProbeResult:
    """Read only the header of the image at ``path`` and return its width/height.

    Missing files and undecodable data are reported as a failed result, never raised.
    """
    try:
        with open(path, "rb") as fh:
            iw, ih = ImageReader(fh).getSize()
    except Exception as exc:
        logger.warning("Could not read image %s: %s", path, exc)
        return ProbeResult(error=str(exc) or exc.__class__.__name__)
    if iw <= 0 or ih <= 0:
        logger.warning("Image %s has no usable size (%sx%s)", path, iw, ih)
        return ProbeResult(error=f"invalid size {iw}x{ih}")
    return ProbeResult(size=(int(iw), int(ih)))
