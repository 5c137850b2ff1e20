"""Shared pytest fixtures for ogpcard tests."""

import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from PIL import ImageFont

from ogpcard.api.main import create_app
from ogpcard.core.config import OgpCardConfig
from ogpcard.core.fonts import FontFace, load_font


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(scope="session")
def font_bytes() -> bytes:
    """TrueType program of the font Pillow embeds for ``load_default``.

    Returns:
        Raw font bytes usable as a stand-in for the bold card font
    """
    font = ImageFont.load_default(size=12)
    if not isinstance(font, ImageFont.FreeTypeFont):
        pytest.skip("Pillow was built without FreeType support")
    return font.font_bytes


@pytest.fixture
def font_path(temp_dir: Path, font_bytes: bytes) -> Path:
    """Write the test font to disk.

    Returns:
        Path to a valid ``.ttf`` file
    """
    path = temp_dir / "test-font.ttf"
    path.write_bytes(font_bytes)
    return path


@pytest.fixture
def font_face(font_path: Path) -> FontFace:
    """Load the test font through the real font store."""
    return load_font(font_path)


@pytest.fixture
def test_config(temp_dir: Path, font_path: Path, monkeypatch) -> OgpCardConfig:
    """Create a test configuration backed by temporary directories.

    Uses the 600x315 canvas at 48pt exercised by the end-to-end scenarios.
    """
    for name in ("OGP_BASE_URL", "OGP_DATA_DIR", "OGP_TEMPLATES_DIR"):
        monkeypatch.delenv(name, raising=False)

    return OgpCardConfig(
        base_url="http://testserver",
        koruri_bold_font_path=font_path,
        default_image_width=600,
        default_image_height=315,
        default_font_size=48,
        data_dir=temp_dir / "data",
    )


@pytest.fixture
def test_client(test_config: OgpCardConfig) -> Generator[TestClient, None, None]:
    """FastAPI TestClient with the app lifespan running.

    Entering the client runs startup, which loads the font and templates and
    creates the data directory.
    """
    app = create_app(test_config)
    with TestClient(app) as client:
        yield client
