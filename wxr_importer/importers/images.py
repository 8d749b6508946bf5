"""
Localization of remote images found in imported post bodies.

Every ``<img src>`` pointing at the old site is downloaded, checked with
Pillow, handed to the media library and rewritten to the library's URL.
Images that cannot be brought over keep their original address with
:data:`FIXME_MARKER` appended, so they can be found and fixed by hand
after the import instead of aborting it.

An :class:`ImageCache` lives for exactly one commit.  It remembers failures
as well as successes, which means a URL is requested at most once per
commit no matter how many posts reference it.
"""

from __future__ import annotations

import os
from typing import Callable, Dict, Optional, Union

import requests
from bs4 import BeautifulSoup

from wxr_importer.parsers import check_image, load_fragment, proper_image_extension
from wxr_importer.utils import filename_from_url, is_absolute_url, report_error, report_ok
from wxr_importer.utils.filenames import has_supported_image_extension

FIXME_MARKER = "#fixme"

Downloader = Callable[[str], str]


class ImageCache:
    """Remote URL -> local URL, or ``""`` for a URL that already failed."""

    def __init__(self) -> None:
        self._resolved: Dict[str, str] = {}

    def __contains__(self, url: str) -> bool:
        return url in self._resolved

    def __len__(self) -> int:
        return len(self._resolved)

    def get(self, url: str) -> Optional[str]:
        return self._resolved.get(url)

    def remember(self, url: str, local_url: str) -> str:
        self._resolved[url] = local_url
        return local_url


class ImageLocalizer:
    """
    Rewrites image references to copies held by ``media_store``.

    :param cache: The per-commit :class:`ImageCache`.
    :param downloader: Callable taking a URL and returning the path of a
        temporary file holding its body; raises
        ``requests.RequestException`` on failure.
    :param media_store: Object with ``store_uploaded_file(temp_path,
        filename)`` and ``get_public_url(media_id)``.
    """

    def __init__(self, cache: ImageCache, downloader: Downloader, media_store) -> None:
        self.cache = cache
        self.downloader = downloader
        self.media_store = media_store

    def localize(self, doc: Union[str, BeautifulSoup]) -> BeautifulSoup:
        soup = load_fragment(doc) if isinstance(doc, str) else doc
        for image in soup.find_all("img"):
            old_src = image.get("src") or ""
            new_src = self.fetch_and_cache(old_src)
            if new_src:
                image["src"] = new_src
            else:
                image["src"] = f"{old_src}{FIXME_MARKER}"
        return soup

    def fetch_and_cache(self, url: str) -> str:
        """Return the local URL for ``url``, or ``""`` if it cannot be imported."""
        if not is_absolute_url(url):
            report_error("IMAGE_INVALID_URL", {"url": url})
            return ""

        if url in self.cache:
            return self.cache.get(url)

        filename = filename_from_url(url)
        if not has_supported_image_extension(filename):
            report_error("IMAGE_UNSUPPORTED", {"url": url, "filename": filename})
            return self.cache.remember(url, "")

        try:
            tmp_path = self.downloader(url)
        except requests.RequestException as e:
            report_error("IMAGE_DOWNLOAD", {"url": url}, e)
            return self.cache.remember(url, "")

        try:
            check = check_image(tmp_path, filename)
            if not check.ok:
                renamed = proper_image_extension(check)
                check = check_image(tmp_path, renamed) if renamed else check
                if not check.ok:
                    report_error("IMAGE_CORRUPT", {"url": url, "filename": filename, "reason": check.failure.value})
                    return self.cache.remember(url, "")

            media_id = self.media_store.store_uploaded_file(tmp_path, check.filename)
            src = self.media_store.get_public_url(media_id) if media_id else ""
            if src:
                report_ok("IMAGE_STORED", {"url": url}, {"src": src})
            else:
                report_error("MEDIA_STORE", {"url": url, "filename": check.filename})
            return self.cache.remember(url, src or "")
        finally:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
