"""Tests for ogpcard.core.storage — identifiers and PNG persistence."""

from __future__ import annotations

import uuid
from pathlib import Path

import pytest
from PIL import Image

from ogpcard.core.storage import (
    ImageSaveError,
    image_filename,
    image_path,
    new_image_id,
    save_image,
)


@pytest.fixture
def card() -> Image.Image:
    image = Image.new("RGBA", (120, 63), (255, 255, 255, 255))
    image.putpixel((10, 10), (0, 0, 0, 255))
    return image


class TestIdentifiers:
    def test_new_id_is_uuid4(self):
        parsed = uuid.UUID(new_image_id())
        assert parsed.version == 4

    def test_ids_are_unique(self):
        ids = {new_image_id() for _ in range(500)}
        assert len(ids) == 500

    def test_filename_and_path(self, temp_dir: Path):
        assert image_filename("abc123") == "abc123.png"
        assert image_path(temp_dir, "abc123") == temp_dir / "abc123.png"


class TestSaveImage:
    def test_writes_png(self, temp_dir: Path, card: Image.Image):
        path = save_image(card, temp_dir / "card.png")
        assert path == temp_dir / "card.png"
        with Image.open(path) as reopened:
            assert reopened.format == "PNG"
            assert reopened.size == (120, 63)
            assert reopened.getpixel((10, 10)) == (0, 0, 0, 255)

    def test_lossless(self, temp_dir: Path, card: Image.Image):
        path = save_image(card, temp_dir / "card.png")
        with Image.open(path) as reopened:
            assert reopened.convert("RGBA").tobytes() == card.tobytes()

    def test_saving_twice_is_byte_identical(self, temp_dir: Path, card: Image.Image):
        path = temp_dir / "card.png"
        save_image(card, path)
        first = path.read_bytes()
        save_image(card, path)
        assert path.read_bytes() == first

    def test_overwrite_replaces_file(self, temp_dir: Path, card: Image.Image):
        path = temp_dir / "card.png"
        path.write_bytes(b"stale")
        save_image(card, path)
        assert path.read_bytes().startswith(b"\x89PNG")

    def test_exclusive_refuses_existing_file(self, temp_dir: Path, card: Image.Image):
        path = temp_dir / "card.png"
        path.write_bytes(b"existing")
        with pytest.raises(ImageSaveError, match="overwrite"):
            save_image(card, path, exclusive=True)
        assert path.read_bytes() == b"existing"

    def test_exclusive_creates_new_file(self, temp_dir: Path, card: Image.Image):
        path = save_image(card, temp_dir / "new.png", exclusive=True)
        assert path.exists()

    def test_missing_directory(self, temp_dir: Path, card: Image.Image):
        with pytest.raises(ImageSaveError, match="Failed to write"):
            save_image(card, temp_dir / "no-such-dir" / "card.png")

    @pytest.mark.parametrize("exclusive", [True, False])
    def test_failed_write_removes_partial_file(
        self, temp_dir: Path, card: Image.Image, monkeypatch, exclusive
    ):
        def write_then_fail(self, fp, *args, **kwargs):
            fp.write(b"\x89PNG partial")
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(Image.Image, "save", write_then_fail)
        path = temp_dir / "card.png"
        with pytest.raises(ImageSaveError, match="No space left"):
            save_image(card, path, exclusive=exclusive)
        assert not path.exists()
