"""OGP Card Service — FastAPI Application.

This module defines the application factory, all routes, and the ``main()``
CLI function that launches the uvicorn server.

Architecture
------------
- **Configuration** is loaded from a TOML file (see
  :mod:`ogpcard.core.config`) before the app is built.
- **Startup** builds one immutable :class:`AppContext` holding the config,
  the parsed font and the page templates.  It is stored on ``app.state`` and
  handed to routes through the :func:`get_context` dependency.
- **Image creation** renders the posted words with
  :func:`~ogpcard.core.renderer.render_text_image` and writes
  ``<data_dir>/<id>.png``.
- **Generated images** are served by FastAPI's ``StaticFiles`` at ``/data``.

Endpoints
---------
========  ==================  ==========================================
Method    Path                Purpose
========  ==================  ==========================================
GET       ``/``               Serve the static index page
GET       ``/ogp/{id}``       Serve the OGP page for an image
POST      ``/api/image``      Render and store a new card image
GET       ``/data/{file}``    Serve a stored card image
========  ==================  ==========================================

Usage
-----
CLI (installed entry point)::

    ogpcard

The config file is read from ``OGP_CONFIG_FILE`` (default ``config.toml``).
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Annotated

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from PIL import Image

from ogpcard import __version__
from ogpcard.api.models import CreateImageRequest, CreateImageResponse
from ogpcard.core.config import ConfigError, OgpCardConfig, load_config
from ogpcard.core.fonts import FontFace, load_font
from ogpcard.core.pages import OgpPageContext, PageTemplates, load_pages
from ogpcard.core.renderer import render_text_image
from ogpcard.core.storage import (
    ImageSaveError,
    image_filename,
    image_path,
    new_image_id,
    save_image,
)

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Identifiers are minted as UUID strings; anything outside this alphabet
# (slashes, dots, percent escapes) is rejected before it reaches a page.
IMAGE_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,64}")


# ---------------------------------------------------------------------------
# Application context.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AppContext:
    """Everything a request needs, built once at startup.

    Attributes:
        config: The loaded configuration.
        font: Bold face used for every card.
        pages: Index page contents and compiled OGP template.
    """

    config: OgpCardConfig
    font: FontFace
    pages: PageTemplates


def build_context(config: OgpCardConfig) -> AppContext:
    """Load the font and templates and prepare the data directory.

    Raises:
        FontLoadError: If the configured font cannot be loaded.
        TemplateLoadError: If a page template is missing or invalid.
        OSError: If the data directory cannot be created.
    """
    font = load_font(config.koruri_bold_font_path)
    pages = load_pages(config.templates_dir)
    config.data_dir.mkdir(parents=True, exist_ok=True)
    return AppContext(config=config, font=font, pages=pages)


def get_context(request: Request) -> AppContext:
    """FastAPI dependency returning the context built at startup."""
    return request.app.state.context


Context = Annotated[AppContext, Depends(get_context)]


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
async def index(ctx: Context) -> HTMLResponse:
    """Serve the index page read at startup."""
    return HTMLResponse(content=ctx.pages.index_html)


@router.get("/ogp/{image_id}", response_class=HTMLResponse)
async def ogp_page(image_id: str, ctx: Context) -> HTMLResponse:
    """Serve the OGP page for *image_id*.

    The page is rendered whether or not ``<image_id>.png`` exists; a crawler
    following a stale link gets the page and a broken image.

    Args:
        image_id: Identifier returned by ``POST /api/image``.

    Returns:
        The rendered ``ogp.html`` template.

    Raises:
        HTTPException: 400 if *image_id* is not a plausible identifier.
    """
    if not IMAGE_ID_PATTERN.fullmatch(image_id):
        raise HTTPException(status_code=400, detail=f"Invalid image id: {image_id!r}")

    page = OgpPageContext(
        id=image_id,
        file=image_filename(image_id),
        base_url=ctx.config.base_url,
    )
    return HTMLResponse(content=ctx.pages.render_ogp(page))


@router.post("/api/image", response_model=CreateImageResponse)
def create_image(req: CreateImageRequest, ctx: Context) -> CreateImageResponse:
    """Render ``req.words`` onto a new card and store it.

    This is a plain ``def`` route so rendering and disk I/O run in FastAPI's
    threadpool rather than on the event loop.

    Malformed bodies never reach this function: FastAPI answers them with
    422 and a structured ``detail`` list.

    Args:
        req: Validated :class:`CreateImageRequest` payload.

    Returns:
        The words, stored file name, new identifier and base URL.

    Raises:
        HTTPException: 500 if rendering or saving fails.
    """
    config = ctx.config
    image_id = new_image_id()
    filename = image_filename(image_id)
    logger.info("Creating image %s for words=%r", image_id, req.words)

    try:
        image = render_text_image(
            config.default_image_width,
            config.default_image_height,
            config.default_font_size,
            ctx.font,
            req.words,
        )
        save_image(image, image_path(config.data_dir, image_id), exclusive=True)
    except (ImageSaveError, Image.DecompressionBombError, OSError, ValueError) as exc:
        logger.exception("Create image failed for %s", image_id)
        raise HTTPException(status_code=500, detail="Failed to create image") from exc

    return CreateImageResponse(
        words=req.words,
        file=filename,
        id=image_id,
        base_url=config.base_url,
    )


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(config: OgpCardConfig | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Configuration to serve with.  When omitted it is loaded with
            :func:`~ogpcard.core.config.load_config`.

    Returns:
        The application.  The font and templates are loaded when its lifespan
        starts, so a bad font path aborts server startup.
    """
    if config is None:
        config = load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # --- Startup -------------------------------------------------------
        app.state.context = build_context(config)
        logger.info("Serving %s with images in %s", config.base_url, config.data_dir)

        yield

        # --- Shutdown ------------------------------------------------------
        logger.info("Shutting down.")

    app = FastAPI(
        title="OGP Card Service",
        description="Render short text onto social card images.",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    # The directory is created at startup, so skip the existence check here.
    app.mount(
        "/data",
        StaticFiles(directory=str(config.data_dir), check_dir=False),
        name="data",
    )
    app.include_router(router)
    return app


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn server.

    Reads the config file, configures logging, and serves on
    ``api_server_bind:api_server_port``.  When ``tls`` is enabled the
    configured certificate and key are passed to uvicorn.

    This function is registered as the ``ogpcard`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

    try:
        config = load_config()
    except ConfigError as exc:
        logger.error("%s", exc)
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level)

    ssl_options: dict[str, str] = {}
    if config.tls:
        ssl_options = {
            "ssl_certfile": str(config.server_cert_path),
            "ssl_keyfile": str(config.server_key_path),
        }

    uvicorn.run(
        create_app(config),
        host=config.api_server_bind,
        port=config.api_server_port,
        log_level=config.log_level.lower(),
        **ssl_options,
    )


if __name__ == "__main__":
    main()
