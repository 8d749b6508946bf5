"""
Detection and reconstruction of the book hierarchy inside a WXR export.

An export produced by the book platform itself carries its part/chapter
tree as flat ``<item>`` records linked by ``post_parent`` and ordered by
``menu_order``.  :func:`is_book_export` recognizes such files and
:func:`nested_sort` puts their records back into reading order:

* all front matter,
* each part immediately followed by its chapters,
* all back matter.

Plain blog exports are left in file order.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

from wxr_importer.models import PostType, WxrExport, WxrRecord


def is_book_export(records: Iterable[WxrRecord]) -> bool:
    """Return ``True`` once two distinct structural post types have been seen."""
    part = chapter = front = back = 0
    for record in records:
        if record.type == PostType.PART.value:
            part = 1
        elif record.type == PostType.CHAPTER.value:
            chapter = 1
        elif record.type == PostType.FRONT_MATTER.value:
            front = 1
        elif record.type == PostType.BACK_MATTER.value:
            back = 1
        if part + chapter + front + back >= 2:
            return True
    return False


def nested_sort(records: Sequence[WxrRecord]) -> List[WxrRecord]:
    """Order ``records`` as front matter, parts with their chapters, back matter.

    ``sorted`` is stable, so records sharing a ``menu_order`` keep their file
    order.  Chapters whose parent is not one of the parts are dropped, as are
    posts and pages.
    """
    by_order = sorted(records, key=lambda r: r.order_hint)
    ordered: List[WxrRecord] = [r for r in by_order if r.type == PostType.FRONT_MATTER.value]
    for part in by_order:
        if part.type != PostType.PART.value:
            continue
        ordered.append(part)
        ordered.extend(
            r for r in by_order if r.type == PostType.CHAPTER.value and r.parent_id == part.id
        )
    ordered.extend(r for r in by_order if r.type == PostType.BACK_MATTER.value)
    return ordered


def ordered_records(export: WxrExport) -> List[WxrRecord]:
    """Classify ``export`` (once) and return its records in import order."""
    if export.is_book is None:
        export.is_book = is_book_export(export.records)
    if export.is_book:
        return nested_sort(export.records)
    return list(export.records)
