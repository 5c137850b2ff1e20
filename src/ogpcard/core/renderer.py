"""Text-to-image rendering for social cards.

A card is a fixed-size white canvas with a single line of black text centered
on it.  Horizontal centering uses the summed glyph advances of the text;
vertical placement is an approximation that puts the baseline at
``(height + font_size / 2) / 2`` without consulting ascent or descent.

Text wider than the canvas is not an error: the origin goes negative and the
run is clipped on both sides.
"""

from __future__ import annotations

import logging

from PIL import Image, ImageDraw

from ogpcard.core.fonts import FontFace

logger = logging.getLogger(__name__)

BACKGROUND = (255, 255, 255, 255)
FOREGROUND = (0, 0, 0, 255)


def single_line(text: str) -> str:
    """Fold line breaks into spaces so the text draws as one line."""
    return " ".join(text.splitlines())


def measure_text(face: FontFace, font_size: float, text: str) -> float:
    """Return the advance width of *text* in pixels at *font_size*."""
    return face.at_size(font_size).getlength(single_line(text))


def text_origin(width: int, height: int, font_size: float, text_width: float) -> tuple[float, int]:
    """Compute the pen position for a centered run.

    Args:
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        font_size: Point size the text is drawn at.
        text_width: Advance width of the run, from :func:`measure_text`.

    Returns:
        ``(x, baseline_y)``.  ``x`` may be negative.
    """
    x = (width - text_width) / 2
    y = (height + int(font_size) // 2) // 2
    return x, y


def render_text_image(
    width: int,
    height: int,
    font_size: float,
    face: FontFace,
    text: str,
) -> Image.Image:
    """Render *text* centered on a ``width`` x ``height`` white RGBA canvas.

    Args:
        width: Canvas width in pixels, must be positive.
        height: Canvas height in pixels, must be positive.
        font_size: Point size, must be positive.
        face: Font to draw with.
        text: Text to draw.  Line breaks are folded into spaces.

    Returns:
        The rendered image.  Empty text yields the blank canvas.

    Raises:
        ValueError: If a dimension or the font size is not positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"image size must be positive, got {width}x{height}")
    if font_size <= 0:
        raise ValueError(f"font size must be positive, got {font_size}")

    image = Image.new("RGBA", (width, height), BACKGROUND)
    text = single_line(text)
    if not text:
        return image

    font = face.at_size(font_size)
    x, y = text_origin(width, height, font_size, font.getlength(text))
    logger.debug("Drawing %d chars at (%.1f, %d) size=%s", len(text), x, y, font_size)

    draw = ImageDraw.Draw(image)
    # "ls" anchors the pen at the left end of the baseline.
    draw.text((x, y), text, font=font, fill=FOREGROUND, anchor="ls")
    return image
