"""
Content-based validation of downloaded images.

Extensions in URLs are not trustworthy: blogs routinely serve PNGs named
``.jpg``.  :func:`check_image` opens the file with Pillow and compares the
real format against the file name; :func:`proper_image_extension` offers
the single corrective rename the importer is allowed to make.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Optional

from PIL import Image, UnidentifiedImageError

# Pillow format name -> extensions accepted for it
ACCEPTED_FORMATS = {
    "JPEG": ("jpg", "jpeg"),
    "PNG": ("png",),
    "GIF": ("gif",),
}


class ImageFailure(str, Enum):
    UNREADABLE = "unreadable"
    UNSUPPORTED_FORMAT = "unsupported_format"
    EXTENSION_MISMATCH = "extension_mismatch"


class ImageCheck(NamedTuple):
    filename: str
    detected_format: Optional[str] = None
    failure: Optional[ImageFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def detect_format(path: str) -> Optional[str]:
    """Return Pillow's format name for ``path`` or ``None`` if it is not an image."""
    try:
        with Image.open(path) as im:
            im.verify()
            return im.format
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, EOFError):
        return None


def check_image(path: str, filename: str) -> ImageCheck:
    fmt = detect_format(path)
    if fmt is None:
        return ImageCheck(filename, None, ImageFailure.UNREADABLE)
    extensions = ACCEPTED_FORMATS.get(fmt)
    if extensions is None:
        return ImageCheck(filename, fmt, ImageFailure.UNSUPPORTED_FORMAT)
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext not in extensions:
        return ImageCheck(filename, fmt, ImageFailure.EXTENSION_MISMATCH)
    return ImageCheck(filename, fmt)


def proper_image_extension(check: ImageCheck) -> Optional[str]:
    """File name with the extension matching the detected format, if accepted."""
    if check.detected_format not in ACCEPTED_FORMATS:
        return None
    extension = ACCEPTED_FORMATS[check.detected_format][0]
    stem = check.filename.rsplit(".", 1)[0] if "." in check.filename else check.filename
    return f"{stem}.{extension}"
