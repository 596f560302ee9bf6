from __future__ import annotations

import io
import secrets
import time
import uuid
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from PIL import Image, UnidentifiedImageError
from werkzeug.datastructures import FileStorage

from ..common.app_logger import get_logger
from ..core.constants import ALLOWED_IMAGE_MIMETYPES
from ..core.exceptions import NotFoundError, ValidationError

logger = get_logger(__name__)

# Pillow format -> (mimetype, extension)
IMAGE_FORMATS = {
    "JPEG": ("image/jpeg", ".jpg"),
    "MPO": ("image/jpeg", ".jpg"),
    "PNG": ("image/png", ".png"),
    "GIF": ("image/gif", ".gif"),
    "WEBP": ("image/webp", ".webp"),
}
FALLBACK_MIMETYPE = "application/octet-stream"

OBJECT_PREFIX = "/objects/"
OBJECT_UPLOADS = "uploads"


def verify_image(data: bytes) -> tuple[str, str]:
    """Return (mimetype, extension) of a decodable JPEG/PNG/GIF/WebP image.

    Both come from the decoded format, never from the client's filename or content type.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError):
        raise ValidationError("Only image files are allowed")
    if fmt not in IMAGE_FORMATS:
        raise ValidationError("Only image files are allowed")
    return IMAGE_FORMATS[fmt]


def normalize_object_path(image_url: Optional[str]) -> str:
    """Map an upload URL (absolute or relative) to the path the app serves it from."""
    if not image_url or not image_url.strip():
        raise ValidationError("imageURL is required")

    path = urlparse(image_url.strip()).path or ""
    idx = path.find(OBJECT_PREFIX)
    if idx >= 0:
        return path[idx:]
    if path.startswith("/uploads/"):
        return path
    raise ValidationError("Unrecognized image URL")


class UploadService:
    """Local disk storage for picture uploads and the object store."""

    def __init__(self, upload_dir: str, object_dir: str):
        self._upload_dir = Path(upload_dir)
        self._object_dir = Path(object_dir)

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    def save_image(self, upload: Optional[FileStorage]) -> str:
        if upload is None or not upload.filename:
            raise ValidationError("No file uploaded")
        if upload.mimetype not in ALLOWED_IMAGE_MIMETYPES:
            raise ValidationError("Only image files are allowed")

        data = upload.read()
        _, ext = verify_image(data)
        name = f"{secrets.token_hex(8)}-{int(time.time() * 1000)}{ext}"

        self._upload_dir.mkdir(parents=True, exist_ok=True)
        (self._upload_dir / name).write_bytes(data)
        logger.info("Stored upload %s (%d bytes)", name, len(data))
        return f"/uploads/{name}"

    def store_object(self, upload: Optional[FileStorage]) -> str:
        if upload is None or not upload.filename:
            raise ValidationError("No file uploaded")

        data = upload.read()
        mimetype, _ = verify_image(data)

        object_id = str(uuid.uuid4())
        target = self._object_dir / OBJECT_UPLOADS
        target.mkdir(parents=True, exist_ok=True)
        (target / object_id).write_bytes(data)
        (target / f"{object_id}.type").write_text(mimetype)
        logger.info("Stored object %s (%s, %d bytes)", object_id, mimetype, len(data))
        return f"{OBJECT_PREFIX}{OBJECT_UPLOADS}/{object_id}"

    def resolve_object(self, object_path: str) -> tuple[Path, str]:
        """Return (file, mimetype) for a path below /objects/; never escapes the store.

        Anything whose recorded type is not an accepted image type is reported as
        application/octet-stream.
        """
        root = self._object_dir.resolve()
        candidate = (root / object_path).resolve()
        if root not in candidate.parents or candidate.suffix == ".type" or not candidate.is_file():
            raise NotFoundError("Object not found")

        type_file = candidate.with_name(candidate.name + ".type")
        mimetype = type_file.read_text().strip() if type_file.is_file() else FALLBACK_MIMETYPE
        if mimetype not in ALLOWED_IMAGE_MIMETYPES:
            mimetype = FALLBACK_MIMETYPE
        return candidate, mimetype
