import logging
import random
import time
from pathlib import Path
from typing import Any, Dict, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..common.errors import NotFound, ValidationError

_logger = logging.getLogger(__name__)

IMAGE_URL_PREFIX = "/images/"


class MediaStore:
    """Uploaded product images kept as plain files under ``upload_dir``."""

    def __init__(self, upload_dir: str, max_bytes: int):
        self.upload_dir = Path(upload_dir).resolve()
        self.max_bytes = max_bytes

    def ensure_dir(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def _generate_name(self, original: Optional[str]) -> str:
        ext = Path(original or "").suffix.lower()
        if ext and secure_filename(ext.lstrip(".")) != ext.lstrip("."):
            ext = ""
        return f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}{ext}"

    def _path(self, filename: str) -> Path:
        if not filename or secure_filename(filename) != filename:
            raise ValidationError("Invalid filename")
        return self.upload_dir / filename

    def save(self, upload: Optional[FileStorage]) -> Dict[str, Any]:
        if upload is None or not upload.filename:
            raise ValidationError("No image file provided")
        if not (upload.mimetype or "").startswith("image/"):
            raise ValidationError("Only image files are allowed!")
        data = upload.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            raise ValidationError("File too large")
        self.ensure_dir()
        filename = self._generate_name(upload.filename)
        (self.upload_dir / filename).write_bytes(data)
        _logger.info("Stored image | filename=%s bytes=%s", filename, len(data))
        return {"success": True, "imagePath": f"{IMAGE_URL_PREFIX}{filename}", "filename": filename}

    def delete(self, filename: str) -> None:
        path = self._path(filename)
        try:
            path.unlink()
        except FileNotFoundError:
            raise NotFound("Image not found")
        _logger.info("Deleted image | filename=%s", filename)

    def discard(self, image: Optional[str]) -> None:
        """Remove the local file behind a product's image path, if any.

        Never raises: product deletion goes ahead whatever happens here.
        """
        if not image or not image.startswith(IMAGE_URL_PREFIX):
            return
        filename = image[len(IMAGE_URL_PREFIX):]
        try:
            self._path(filename).unlink()
        except FileNotFoundError:
            pass
        except (OSError, ValidationError) as e:
            _logger.error("Error deleting product image | image=%s err=%s", image, e)
