"""HTML pages served by the API.

Two files are read from the templates directory at startup:

``index.html``
    Static landing page, served byte-for-byte.
``ogp.html``
    Jinja2 template for the per-image OGP page.  It receives the fields of
    :class:`OgpPageContext` (``id``, ``file``, ``base_url``).
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, Template, TemplateError, select_autoescape

logger = logging.getLogger(__name__)

INDEX_PAGE = "index.html"
OGP_PAGE = "ogp.html"


class TemplateLoadError(Exception):
    """Raised when a page template is missing or cannot be compiled."""


@dataclass(frozen=True)
class OgpPageContext:
    """Values substituted into ``ogp.html``."""

    id: str
    file: str
    base_url: str


@dataclass(frozen=True)
class PageTemplates:
    """Pages loaded once at startup.

    Attributes:
        index_html: Raw contents of ``index.html``.
        ogp_template: Compiled ``ogp.html`` template.
    """

    index_html: str
    ogp_template: Template

    def render_ogp(self, context: OgpPageContext) -> str:
        """Render ``ogp.html`` with the fields of *context*."""
        return self.ogp_template.render(**asdict(context))


def load_pages(templates_dir: Path) -> PageTemplates:
    """Read ``index.html`` and compile ``ogp.html`` from *templates_dir*.

    Raises:
        TemplateLoadError: If either file is missing, unreadable, or the OGP
            template does not compile.
    """
    index_path = templates_dir / INDEX_PAGE
    try:
        index_html = index_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise TemplateLoadError(f"Failed to read {index_path}: {exc}") from exc

    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html"]),
    )
    try:
        ogp_template = env.get_template(OGP_PAGE)
    except TemplateError as exc:
        raise TemplateLoadError(f"Failed to load {templates_dir / OGP_PAGE}: {exc}") from exc

    logger.info("Loaded page templates from %s", templates_dir)
    return PageTemplates(index_html=index_html, ogp_template=ogp_template)
