from __future__ import annotations

import re
import unicodedata
from urllib.parse import unquote, urlparse

# Characters WordPress strips from uploaded file names.
_SPECIAL_CHARS = set('?[]/\\=<>:;,\'"&$#*()|~`!{}%+') | {"\x00"}

_SUPPORTED_IMAGE_RE = re.compile(r"\.(jpe?g|gif|png)$", re.IGNORECASE)


def _strip_accents(text: str) -> str:
    return "".join(
        c for c in unicodedata.normalize("NFD", text) if unicodedata.category(c) != "Mn"
    )


def sanitize_file_name(name: str) -> str:
    """
    Turn ``name`` into a safe file name.

    - Removes characters that are special in URLs or shells
    - Converts whitespace runs to single dashes
    - Trims leading/trailing dots, dashes and underscores
    """
    text = _strip_accents(name or "")
    text = "".join(c for c in text if c not in _SPECIAL_CHARS)
    text = re.sub(r"[\r\n\t -]+", "-", text)
    return text.strip(".-_")


def filename_from_url(url: str) -> str:
    """Basename of the URL path, without query string, URL-decoded and sanitized."""
    path = urlparse(url).path
    basename = path.rstrip("/").rsplit("/", 1)[-1]
    return sanitize_file_name(unquote(basename))


def has_supported_image_extension(filename: str) -> bool:
    return bool(_SUPPORTED_IMAGE_RE.search(filename or ""))


def is_absolute_url(url: str) -> bool:
    if not url:
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)
