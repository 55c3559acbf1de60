"""Output directory for generated images: naming, persistence, listing, deletion."""

import os
import re
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel

from mcp_images.errors import NotFoundError, ValidationError
from mcp_images.jobs.models import utcnow

IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9]")


def sanitize_filename(word: str) -> str:
    return _UNSAFE_CHARS.sub("_", word.strip()).lower()


def batch_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp safe for filenames, shared by one batch."""
    now = now or utcnow()
    stamp = now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
    return stamp.replace(":", "-").replace(".", "-")


class ImageInfo(BaseModel):
    filename: str
    filepath: str
    size: int
    created: datetime
    modified: datetime


class ImageStore:
    """Flat directory holding every generated image."""

    def __init__(self, base_dir: str):
        self._base_dir = os.path.abspath(base_dir)

    @property
    def base_dir(self) -> str:
        return self._base_dir

    def ensure_directory(self) -> str:
        os.makedirs(self._base_dir, exist_ok=True)
        return self._base_dir

    def output_path(self, word: str, timestamp: str, job_tag: str, index: int, ext: str = ".png") -> str:
        """Path for one item: sanitized word, batch timestamp, job tag and 1-based position."""
        name = f"{sanitize_filename(word)}_{timestamp}_{job_tag}_{index}{ext}"
        return os.path.join(self._base_dir, name)

    def write(self, path: str, data: bytes) -> str:
        self.ensure_directory()
        with open(path, "wb") as dst:
            dst.write(data)
        return path

    def list_images(self, pattern: Optional[str] = None) -> List[ImageInfo]:
        """Image files in the directory, newest first, optionally regex-filtered."""
        self.ensure_directory()
        regex = None
        if pattern:
            try:
                regex = re.compile(pattern, re.IGNORECASE)
            except re.error as exc:
                raise ValidationError(f"Invalid pattern '{pattern}': {exc}")

        images = []
        for entry in os.scandir(self._base_dir):
            if not entry.is_file() or not entry.name.lower().endswith(IMAGE_EXTENSIONS):
                continue
            if regex and not regex.search(entry.name):
                continue
            stats = entry.stat()
            created = getattr(stats, "st_birthtime", stats.st_ctime)
            images.append(ImageInfo(
                filename=entry.name,
                filepath=f"file://{entry.path}",
                size=stats.st_size,
                created=datetime.fromtimestamp(created, tz=timezone.utc),
                modified=datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc),
            ))

        images.sort(key=lambda info: info.created, reverse=True)
        return images

    def delete(self, filename: str) -> str:
        """Remove one file from the directory. Returns the removed path."""
        if not filename or os.path.basename(filename) != filename or filename in (".", ".."):
            raise ValidationError(f"Invalid image filename: {filename!r}")
        path = os.path.join(self._base_dir, filename)
        try:
            os.remove(path)
        except FileNotFoundError:
            raise NotFoundError(f"Image not found: {filename}")
        except IsADirectoryError:
            raise NotFoundError(f"Image not found: {filename}")
        return path
