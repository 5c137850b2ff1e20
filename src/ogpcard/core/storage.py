"""Flat-file storage for generated card images.

Every card lives at ``<data_dir>/<id>.png`` where ``id`` is a freshly minted
UUID4 string.  Files are never updated or removed by the service.
"""

from __future__ import annotations

import logging
import uuid
from pathlib import Path

from PIL import Image

logger = logging.getLogger(__name__)

IMAGE_SUFFIX = ".png"


class ImageSaveError(Exception):
    """Raised when an image cannot be written to disk."""


def new_image_id() -> str:
    """Mint a new opaque image identifier."""
    return str(uuid.uuid4())


def image_filename(image_id: str) -> str:
    return f"{image_id}{IMAGE_SUFFIX}"


def image_path(data_dir: Path, image_id: str) -> Path:
    return data_dir / image_filename(image_id)


def save_image(image: Image.Image, path: Path, *, exclusive: bool = False) -> Path:
    """Encode *image* as PNG at *path*.

    Args:
        image: Rendered raster.
        path: Destination file.  Created, or truncated if it exists.
        exclusive: Refuse to overwrite an existing file.

    Returns:
        The path written.

    Raises:
        ImageSaveError: If the file exists and ``exclusive`` is set, or the
            write fails for any other reason (missing directory, permissions,
            full disk).  A file this call opened is removed before raising.
    """
    mode = "xb" if exclusive else "wb"
    opened = False
    try:
        with open(path, mode) as handle:
            opened = True
            image.save(handle, format="PNG")
    except FileExistsError as exc:
        raise ImageSaveError(f"Refusing to overwrite existing image {path}") from exc
    except OSError as exc:
        # A partial file must not outlive a failed write.
        if opened:
            path.unlink(missing_ok=True)
        raise ImageSaveError(f"Failed to write image {path}: {exc}") from exc

    logger.info("Saved image to %s", path)
    return path
