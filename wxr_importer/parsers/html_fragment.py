from __future__ import annotations

import re
from typing import Union

from bs4 import BeautifulSoup, Doctype

_SCAFFOLD_TAGS_RE = re.compile(r"</?(?:html|body)(?:\s[^>]*)?>", re.IGNORECASE)
_DOCTYPE_RE = re.compile(r"^\s*<!DOCTYPE.+?>", re.IGNORECASE | re.DOTALL)


def tidy(html: str) -> str:
    """
    Light clean-up applied before an imported body is parsed.

    Drops ``<script>`` and ``<style>`` elements and normalizes ``&nbsp;``
    to plain spaces; everything else is passed through untouched.
    """
    soup = BeautifulSoup(html or "", "html.parser")
    for bad in soup.find_all(["script", "style"]):
        bad.decompose()
    return str(soup).replace("\xa0", " ")


def load_fragment(html: Union[str, bytes]) -> BeautifulSoup:
    """Parse an HTML snippet; bytes are decoded as UTF-8 with replacement."""
    if isinstance(html, bytes):
        html = html.decode("utf-8", errors="replace")
    return BeautifulSoup(html or "", "html.parser")


def inner_html(soup: BeautifulSoup) -> str:
    """Serialize ``soup`` without any doctype, ``<html>`` or ``<body>`` wrapper."""
    for node in list(soup.contents):
        if isinstance(node, Doctype):
            node.extract()
    html = str(soup)
    html = _DOCTYPE_RE.sub("", html)
    return _SCAFFOLD_TAGS_RE.sub("", html)


def strip_all_tags(text: str) -> str:
    """Plain-text version of ``text``: tags, scripts and styles removed, trimmed."""
    soup = BeautifulSoup(text or "", "html.parser")
    for bad in soup.find_all(["script", "style"]):
        bad.decompose()
    return re.sub(r"\s+", " ", soup.get_text()).strip()
