"""
Extractors for WordPress WXR export files.

This subpackage parses WXR files into :class:`~wxr_importer.models.WxrRecord`
objects and restores book order for exports that carry a part/chapter
hierarchy.
"""

from .book_structure import is_book_export, nested_sort, ordered_records
from .wxr_extractor import WxrParseError, extract_wxr

__all__ = ["extract_wxr", "WxrParseError", "is_book_export", "nested_sort", "ordered_records"]
