from __future__ import annotations

import io

import pytest
from PIL import Image
from werkzeug.datastructures import FileStorage

from src.family_care.family_care.core.exceptions import NotFoundError, ValidationError
from src.family_care.family_care.uploads.service import UploadService, normalize_object_path, verify_image


def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


def storage(data: bytes, filename: str, content_type: str) -> FileStorage:
    return FileStorage(stream=io.BytesIO(data), filename=filename, content_type=content_type)


@pytest.fixture
def uploads(tmp_path):
    return UploadService(str(tmp_path / "uploads"), str(tmp_path / "objects"))


def test_save_image_writes_unique_file(uploads):
    url = uploads.save_image(storage(png_bytes(), "family photo.PNG", "image/png"))

    assert url.startswith("/uploads/") and url.endswith(".png")
    assert (uploads.upload_dir / url.rsplit("/", 1)[1]).read_bytes() == png_bytes()


def test_save_image_rejects_text_disguised_as_png(uploads):
    with pytest.raises(ValidationError):
        uploads.save_image(storage(b"not an image", "x.png", "image/png"))


def test_save_image_rejects_non_image_mimetype(uploads):
    with pytest.raises(ValidationError):
        uploads.save_image(storage(png_bytes(), "x.pdf", "application/pdf"))


def test_verify_image_accepts_png():
    verify_image(png_bytes())


def test_save_image_names_file_by_decoded_format(uploads):
    url = uploads.save_image(storage(png_bytes() + b"<script>alert(1)</script>", "x.html", "image/png"))

    assert url.endswith(".png")
    assert not url.endswith(".html")


def test_object_round_trip_and_traversal_guard(uploads):
    path = uploads.store_object(storage(png_bytes(), "doc.html", "text/html"))

    assert path.startswith("/objects/uploads/")
    file_path, mimetype = uploads.resolve_object(path[len("/objects/"):])
    assert file_path.read_bytes() == png_bytes()
    assert mimetype == "image/png"

    with pytest.raises(NotFoundError):
        uploads.resolve_object("../uploads/whatever")
    with pytest.raises(NotFoundError):
        uploads.resolve_object(path[len("/objects/"):] + ".type")


def test_store_object_rejects_non_images(uploads):
    with pytest.raises(ValidationError):
        uploads.store_object(storage(b"<html><script>alert(1)</script></html>", "x.html", "text/html"))


def test_resolve_object_downgrades_unknown_recorded_types(uploads, tmp_path):
    target = tmp_path / "objects" / "uploads"
    target.mkdir(parents=True)
    (target / "legacy").write_bytes(b"<html></html>")
    (target / "legacy.type").write_text("text/html")

    _, mimetype = uploads.resolve_object("uploads/legacy")

    assert mimetype == "application/octet-stream"


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://storage.example.com/bucket/objects/uploads/abc?sig=1", "/objects/uploads/abc"),
        ("/objects/uploads/abc", "/objects/uploads/abc"),
        ("http://localhost:5000/uploads/a.png", "/uploads/a.png"),
    ],
)
def test_normalize_object_path(url, expected):
    assert normalize_object_path(url) == expected


def test_normalize_object_path_rejects_foreign_urls():
    with pytest.raises(ValidationError):
        normalize_object_path("https://example.com/cat.png")
