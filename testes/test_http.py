import os

import pytest
import requests

from wxr_importer.utils import http
from wxr_importer.utils.http import RateLimiter, download_to_temp


class FakeResponse:
    def __init__(self, status=200, chunks=(b"abc",)):
        self.status_code = status
        self.chunks = chunks
        self.closed = False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def iter_content(self, chunk_size=8192):
        yield from self.chunks

    def close(self):
        self.closed = True


def test_rate_limiter_sleeps_only_when_too_fast():
    clock = [100.0]
    slept = []
    limiter = RateLimiter(rpm=60)

    limiter.wait(time_fn=lambda: clock[0], sleep_fn=slept.append)
    limiter.wait(time_fn=lambda: clock[0], sleep_fn=slept.append)
    clock[0] += 5
    limiter.wait(time_fn=lambda: clock[0], sleep_fn=slept.append)

    assert slept == [1.0]


def test_download_writes_body_to_temp_file(monkeypatch):
    resp = FakeResponse(chunks=(b"he", b"llo"))
    monkeypatch.setattr(http.requests, "get", lambda url, **kw: resp)

    path = download_to_temp("http://old.example/a.png")
    try:
        with open(path, "rb") as f:
            assert f.read() == b"hello"
    finally:
        os.unlink(path)
    assert resp.closed


def test_download_raises_on_http_error(monkeypatch):
    monkeypatch.setattr(http.requests, "get", lambda url, **kw: FakeResponse(status=404))
    with pytest.raises(requests.HTTPError):
        download_to_temp("http://old.example/missing.png")


def test_download_refuses_oversized_body(monkeypatch):
    monkeypatch.setattr(http, "MAX_IMAGE_SIZE", 4)
    monkeypatch.setattr(http.requests, "get", lambda url, **kw: FakeResponse(chunks=(b"abc", b"def")))
    with pytest.raises(requests.RequestException):
        download_to_temp("http://old.example/big.png")
