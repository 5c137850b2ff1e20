"""OGP Card Service - render short text onto social card images."""

__version__ = "0.1.0"

from ogpcard.core.config import OgpCardConfig, load_config
from ogpcard.core.fonts import FontFace, load_font
from ogpcard.core.renderer import render_text_image

__all__ = [
    "FontFace",
    "OgpCardConfig",
    "load_config",
    "load_font",
    "render_text_image",
]
