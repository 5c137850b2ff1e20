"""Core functionality for card rendering.

- **OgpCardConfig**: Configuration management using Pydantic Settings
- **load_font / FontFace**: Font loading, one face held for the process lifetime
- **render_text_image**: Centers a line of text on a white canvas
- **save_image**: PNG persistence under a generated identifier
- **load_pages**: Index page and OGP page template

Usage Example
-------------
    from ogpcard.core import load_config, load_font, render_text_image, save_image

    config = load_config("config.toml")
    face = load_font(config.koruri_bold_font_path)
    image = render_text_image(1200, 630, 64.0, face, "hello")
    save_image(image, config.data_dir / "hello.png")
"""

from ogpcard.core.config import ConfigError, OgpCardConfig, load_config
from ogpcard.core.fonts import FontFace, FontLoadError, load_font
from ogpcard.core.pages import OgpPageContext, PageTemplates, TemplateLoadError, load_pages
from ogpcard.core.renderer import measure_text, render_text_image
from ogpcard.core.storage import ImageSaveError, new_image_id, save_image

__all__ = [
    "ConfigError",
    "FontFace",
    "FontLoadError",
    "ImageSaveError",
    "OgpCardConfig",
    "OgpPageContext",
    "PageTemplates",
    "TemplateLoadError",
    "load_config",
    "load_font",
    "load_pages",
    "measure_text",
    "new_image_id",
    "render_text_image",
    "save_image",
]
