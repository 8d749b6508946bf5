"""
HTTP helpers used to pull remote images into the media library.

Downloads are sequential and spaced by a :class:`RateLimiter` so that an
import does not hammer the original blog's server.  No retries are done
here: the image cache guarantees that every distinct URL is requested at
most once per commit, and a failed request stays failed.
"""

from __future__ import annotations

import os
import tempfile
import time
from typing import Callable, Dict, Optional

import requests

# Refuse anything bigger than this, the book platform would reject it anyway.
MAX_IMAGE_SIZE = 25 * 1024 * 1024


class RateLimiter:
    """
    Simple time-based rate limiter.  Ensures that no more than ``rpm``
    requests are dispatched per minute.
    """

    def __init__(self, rpm: int = 120) -> None:
        self.rpm = max(1, rpm)
        self.interval = 60.0 / float(self.rpm)
        self._last = 0.0

    def wait(self, time_fn: Callable[[], float] = time.time, sleep_fn: Callable[[float], None] = time.sleep) -> None:
        now = time_fn()
        dt = now - self._last
        if dt < self.interval:
            sleep_fn(self.interval - dt)
        self._last = time_fn()


def download_to_temp(
    url: str,
    *,
    timeout: float = 30,
    headers: Optional[Dict[str, str]] = None,
    limiter: Optional[RateLimiter] = None,
) -> str:
    """
    Download ``url`` into a new temporary file and return its path.

    The caller owns the file and must delete it.

    :param url: Absolute URL of the resource.
    :param timeout: Seconds to wait for the server.
    :param headers: Extra request headers (e.g. ``User-Agent``).
    :param limiter: Optional rate limiter consulted before the request.
    :return: Path of the temporary file.
    :raises requests.RequestException: on transport or HTTP errors, or if
        the body exceeds :data:`MAX_IMAGE_SIZE`.
    """
    if limiter is not None:
        limiter.wait()
    resp = requests.get(url, headers=headers, timeout=timeout, stream=True)
    try:
        resp.raise_for_status()
        fd, tmp_path = tempfile.mkstemp(prefix="wxr-img-")
        received = 0
        try:
            with os.fdopen(fd, "wb") as f:
                for chunk in resp.iter_content(chunk_size=8192):
                    received += len(chunk)
                    if received > MAX_IMAGE_SIZE:
                        raise requests.RequestException(f"Image exceeds size limit: {url}")
                    f.write(chunk)
        except Exception:
            os.unlink(tmp_path)
            raise
        return tmp_path
    finally:
        resp.close()
