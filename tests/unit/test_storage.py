"""Local object storage and thumbnail generation."""

import io

import pytest
from PIL import Image

from protoplan.core import storage
from protoplan.core.config import settings
from protoplan.core.storage import (
    InvalidImageError,
    StorageError,
    delete_object,
    delete_prefix,
    object_path,
    public_url,
    save_image,
)
from protoplan.core.thumbnail import generate_thumbnail


def test_save_image_stores_under_project_prefix(png_bytes):
    data = png_bytes(size=(64, 40))
    stored = save_image(901, "login.PNG", data)

    assert stored.key.startswith("901/")
    assert stored.key.endswith(".png")
    assert stored.size == len(data)
    assert stored.format == "png"
    assert (stored.width, stored.height) == (64, 40)
    assert object_path(stored.key).read_bytes() == data


def test_save_image_uses_detected_format_without_extension(png_bytes):
    stored = save_image(902, "screenshot", png_bytes())
    assert stored.key.endswith(".png")


def test_save_image_rejects_non_image(storage_dir):
    with pytest.raises(InvalidImageError):
        save_image(903, "fake.png", b"definitely not an image")
    # no temp files left behind
    assert list((storage_dir / "903").iterdir()) == []


def test_save_image_rejects_decompression_bomb(png_bytes, storage_dir, monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    with pytest.raises(InvalidImageError):
        save_image(911, "huge.png", png_bytes(size=(64, 64)))
    assert list((storage_dir / "911").iterdir()) == []


def test_save_image_extension_follows_decoded_format(png_bytes):
    stored = save_image(912, "evil.html", png_bytes())
    assert stored.key.endswith(".png")

    buf = io.BytesIO()
    Image.new("RGB", (20, 10)).save(buf, format="JPEG")
    stored = save_image(912, "photo.png", buf.getvalue())
    assert stored.key.endswith(".jpg")
    assert stored.format == "jpeg"


def test_save_image_rejects_empty():
    with pytest.raises(StorageError, match="empty"):
        save_image(904, "empty.png", b"")


def test_save_image_rejects_oversized(png_bytes, monkeypatch):
    monkeypatch.setattr(settings, "MAX_UPLOAD_SIZE", 10)
    with pytest.raises(StorageError, match="exceeds maximum"):
        save_image(905, "big.png", png_bytes())


def test_public_url():
    assert public_url("7/abc.png") == "http://testserver/storage/7/abc.png"
    assert public_url(None) is None


def test_object_path_refuses_escaping_keys():
    with pytest.raises(StorageError):
        object_path("../outside.txt")


def test_delete_object(png_bytes):
    stored = save_image(906, "a.png", png_bytes())
    assert delete_object(stored.key)
    assert not object_path(stored.key).exists()
    # deleting again is fine
    assert delete_object(stored.key)
    assert delete_object(None)


def test_delete_prefix(png_bytes, storage_dir):
    save_image(907, "a.png", png_bytes())
    save_image(907, "b.png", png_bytes())
    delete_prefix(907)
    assert not (storage_dir / "907").exists()


def test_thumbnail_fits_bounding_box(png_bytes):
    stored = save_image(908, "wide.png", png_bytes(size=(1200, 600)))
    thumb_key = generate_thumbnail(stored.key, max_size=200)

    assert thumb_key.startswith("908/thumbs/")
    with Image.open(object_path(thumb_key)) as thumb:
        assert thumb.format == "JPEG"
        assert thumb.size == (200, 100)


def test_thumbnail_flattens_alpha(png_bytes):
    stored = save_image(909, "alpha.png", png_bytes(size=(50, 50), mode="RGBA"))
    thumb_key = generate_thumbnail(stored.key)
    with Image.open(object_path(thumb_key)) as thumb:
        assert thumb.mode == "RGB"


def test_thumbnail_missing_source():
    with pytest.raises(FileNotFoundError):
        generate_thumbnail("910/missing.png")


def test_storage_root_is_test_directory(storage_dir):
    assert storage.storage_root() == storage_dir
