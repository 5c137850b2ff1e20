"""Font loading for card rendering.

The service draws every card with a single bold face.  The font program is
read and validated once at startup; :class:`FontFace` then hands out Pillow
``FreeTypeFont`` views at whatever point size a render asks for.

Each call to :meth:`FontFace.at_size` builds a fresh view from the in-memory
bytes, so concurrent renders never share a FreeType handle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path

from PIL import ImageFont

logger = logging.getLogger(__name__)

# Point size used only to check that the font parses at load time.
_PROBE_SIZE = 12


class FontLoadError(Exception):
    """Raised when a font file is missing, unreadable, or not a valid font."""


@dataclass(frozen=True)
class FontFace:
    """A parsed font program that can be instantiated at any point size.

    Attributes:
        path: File the font was loaded from.
        data: Raw font program bytes.
        family: Family name reported by the font.
        style: Style name reported by the font (e.g. ``"Bold"``).
    """

    path: Path
    data: bytes = field(repr=False)
    family: str = ""
    style: str = ""

    def at_size(self, size: float) -> ImageFont.FreeTypeFont:
        """Return a Pillow font view of this face at *size* points."""
        if size <= 0:
            raise ValueError(f"font size must be positive, got {size}")
        return ImageFont.truetype(BytesIO(self.data), size=size)


def load_font(path: str | Path) -> FontFace:
    """Read and parse the font file at *path*.

    Args:
        path: TrueType or OpenType font file.

    Returns:
        The loaded :class:`FontFace`.

    Raises:
        FontLoadError: If the file cannot be read or FreeType cannot parse it.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise FontLoadError(f"Failed to read font file {path}: {exc}") from exc

    try:
        probe = ImageFont.truetype(BytesIO(data), size=_PROBE_SIZE)
    except OSError as exc:
        raise FontLoadError(f"Failed to parse font file {path}: {exc}") from exc

    family, style = probe.getname()
    logger.info("Loaded font %s %s from %s", family, style, path)
    return FontFace(path=path, data=data, family=family or "", style=style or "")
