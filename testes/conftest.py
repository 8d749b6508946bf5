import io
import os
import sys
from xml.sax.saxutils import escape

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

import pytest
from PIL import Image

from wxr_importer.models import WxrMeta, WxrRecord

WXR_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"
    xmlns:content="http://purl.org/rss/1.0/modules/content/"
    xmlns:wp="http://wordpress.org/export/1.2/">
<channel>
<title>My Book</title>
{items}
</channel>
</rss>
"""

ITEM_TEMPLATE = """<item>
<title>{title}</title>
<content:encoded><![CDATA[{content}]]></content:encoded>
<wp:post_id>{id}</wp:post_id>
<wp:post_parent>{parent}</wp:post_parent>
<wp:menu_order>{order}</wp:menu_order>
<wp:post_type>{type}</wp:post_type>
{meta}
</item>"""

META_TEMPLATE = """<wp:postmeta>
<wp:meta_key>{key}</wp:meta_key>
<wp:meta_value><![CDATA[{value}]]></wp:meta_value>
</wp:postmeta>"""


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    # reports/ and data/ are written relative to the working directory
    monkeypatch.chdir(tmp_path)


def make_record(id, type, order=0, parent=None, title=None, content="<p>Body</p>", meta=None):
    return WxrRecord(
        id=str(id),
        title=title if title is not None else f"Record {id}",
        content=content,
        type=type,
        parent_id=parent,
        order_hint=order,
        metadata=[WxrMeta(key=k, value=v) for k, v in (meta or [])],
    )


def write_wxr(path, items):
    """Write a WXR file; ``items`` are dicts with the ``ITEM_TEMPLATE`` fields."""
    rendered = []
    for item in items:
        meta = "".join(META_TEMPLATE.format(key=k, value=v) for k, v in item.get("meta", []))
        rendered.append(
            ITEM_TEMPLATE.format(
                title=escape(item.get("title", f"Record {item['id']}")),
                content=item.get("content", "<p>Body</p>"),
                id=item["id"],
                parent=item.get("parent", 0),
                order=item.get("order", 0),
                type=item["type"],
                meta=meta,
            )
        )
    path.write_text(WXR_TEMPLATE.format(items="\n".join(rendered)), encoding="utf-8")
    return str(path)


def image_bytes(fmt="PNG"):
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), color="red").save(buf, format=fmt)
    return buf.getvalue()


class FakeDownloader:
    """Serves canned bodies by URL and counts requests."""

    def __init__(self, tmp_path, bodies):
        self.tmp_path = tmp_path
        self.bodies = bodies
        self.calls = []

    def __call__(self, url):
        import requests

        self.calls.append(url)
        body = self.bodies.get(url)
        if body is None:
            raise requests.ConnectionError(f"no route to {url}")
        path = self.tmp_path / f"download-{len(self.calls)}"
        path.write_bytes(body)
        return str(path)
